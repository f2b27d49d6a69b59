"""Per-line template registry owning compiled template handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .host import TemplateEngine
from .logging_setup import get_logger
from .models import MAX_LINES, MAX_TEXT_LEN, StateSnapshot


logger = get_logger("templates")


class CompileError(Exception):
    """The template engine rejected a template string."""


class EvaluationError(Exception):
    """A compiled template failed while rendering against track metadata."""


@dataclass
class _Slot:
    template: str | None = None
    compiled: Any | None = None


class TemplateRegistry:
    """Holds, per line, the raw template and at most one live compiled form.

    Not thread safe on its own; the controller serializes access.
    """

    def __init__(self, engine: TemplateEngine, max_len: int = MAX_TEXT_LEN) -> None:
        if max_len < 1:
            raise ValueError("max_len must be positive")
        self.engine = engine
        self.max_len = max_len
        self._slots = [_Slot() for _ in range(MAX_LINES)]

    def _slot(self, index: int) -> _Slot:
        if not 0 <= index < MAX_LINES:
            raise IndexError(f"line index out of range: {index}")
        return self._slots[index]

    def _release(self, slot: _Slot) -> None:
        compiled, slot.compiled = slot.compiled, None
        if compiled is not None:
            self.engine.release(compiled)

    def set_line(self, index: int, template: str) -> None:
        """Compile ``template`` into line ``index``.

        Raises ``CompileError`` after leaving the line without a compiled
        template, so it renders empty instead of showing the previous one.
        """
        slot = self._slot(index)
        self._release(slot)
        slot.template = template
        slot.compiled = self.engine.compile(template)

    def clear_line(self, index: int) -> None:
        slot = self._slot(index)
        self._release(slot)
        slot.template = None

    def template(self, index: int) -> str | None:
        return self._slot(index).template

    def is_compiled(self, index: int) -> bool:
        return self._slot(index).compiled is not None

    @property
    def live_count(self) -> int:
        return sum(1 for slot in self._slots if slot.compiled is not None)

    def render(self, index: int, snapshot: StateSnapshot) -> str:
        slot = self._slot(index)
        if slot.compiled is None or not snapshot.is_playing:
            return ""
        try:
            text = self.engine.evaluate(slot.compiled, snapshot.metadata, self.max_len)
        except Exception as exc:
            # Engine failures are line scoped.
            logger.debug("line %d evaluation failed: %s", index, exc)
            return ""
        return str(text)[: self.max_len]

    def release_all(self) -> None:
        for slot in self._slots:
            self._release(slot)
