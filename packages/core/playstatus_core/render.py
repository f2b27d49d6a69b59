"""Frame rendering: templates and styles to ordered (text, style) lines."""

from __future__ import annotations

from .models import BLACK, MAX_LINES, LineStyle, RenderedLine, StateSnapshot
from .styles import StyleRegistry
from .templates import TemplateRegistry


STOPPED_TEXT = "-- / -- (stopped)"


class RenderEngine:
    """Produces one frame per pass.

    When nothing is playing only line 0 carries text (the stopped message in
    line 0's font, drawn black); the other active lines stay blank so the layout
    keeps its height.
    """

    def __init__(self, templates: TemplateRegistry, styles: StyleRegistry) -> None:
        self.templates = templates
        self.styles = styles

    def fallback_style(self) -> LineStyle:
        return LineStyle(font=self.styles.get(0).font, color=BLACK)

    def render_frame(self, snapshot: StateSnapshot, active_line_count: int) -> list[RenderedLine]:
        count = max(1, min(MAX_LINES, int(active_line_count)))
        if not snapshot.is_playing:
            frame = [RenderedLine(text=STOPPED_TEXT, style=self.fallback_style())]
            frame.extend(RenderedLine(text="", style=self.styles.get(i)) for i in range(1, count))
            return frame

        return [
            RenderedLine(text=self.templates.render(i, snapshot), style=self.styles.get(i))
            for i in range(count)
        ]
