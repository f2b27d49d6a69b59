"""Per-line font and color registry."""

from __future__ import annotations

from .models import MAX_LINES, Color, FontStyle, LineStyle


class StyleRegistry:
    def __init__(self) -> None:
        self._styles: list[LineStyle | None] = [None] * MAX_LINES

    @staticmethod
    def _check(index: int) -> None:
        if not 0 <= index < MAX_LINES:
            raise IndexError(f"line index out of range: {index}")

    def set_line(self, index: int, font: FontStyle, color: Color) -> None:
        self._check(index)
        self._styles[index] = LineStyle(font=font, color=color)

    def clear_line(self, index: int) -> None:
        self._check(index)
        self._styles[index] = None

    def get(self, index: int) -> LineStyle:
        self._check(index)
        return self._styles[index] or LineStyle()
