"""Typed models for line configuration, styles, snapshots, and frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


MAX_LINES = 10
MAX_TEXT_LEN = 1024

_WEIGHTS = {
    "thin": "Thin",
    "ultra-light": "Ultra-Light",
    "light": "Light",
    "book": "Book",
    "normal": "Normal",
    "regular": "Normal",
    "medium": "Medium",
    "semi-bold": "Semi-Bold",
    "bold": "Bold",
    "ultra-bold": "Ultra-Bold",
    "heavy": "Heavy",
}


class TransportEvent(str, Enum):
    STARTED = "started"
    PAUSED = "paused"
    RESUMED = "resumed"
    STOPPED = "stopped"
    SETTINGS_CHANGED = "settings-changed"


class SchedulerState(str, Enum):
    STOPPED = "Stopped"
    RUNNING = "Running"


@dataclass(frozen=True)
class FontStyle:
    family: str = "Sans"
    size: int = 10
    weight: str = "Normal"

    @classmethod
    def from_descriptor(cls, descriptor: str) -> FontStyle:
        """Parse a descriptor such as ``"Sans Bold 14"``.

        A trailing integer is the point size, weight words directly before it
        (or at the end) are the weight, the remainder is the family.
        """
        tokens = (descriptor or "").replace(",", " ").split()
        size = 10
        if tokens and tokens[-1].isdigit():
            size = max(1, int(tokens.pop()))

        weight = "Normal"
        while tokens and tokens[-1].lower() in _WEIGHTS:
            weight = _WEIGHTS[tokens.pop().lower()]

        family = " ".join(tokens) or "Sans"
        return cls(family=family, size=size, weight=weight)

    def to_descriptor(self) -> str:
        parts = [self.family]
        if self.weight != "Normal":
            parts.append(self.weight)
        parts.append(str(self.size))
        return " ".join(parts)

    @property
    def bold(self) -> bool:
        return self.weight in ("Semi-Bold", "Bold", "Ultra-Bold", "Heavy")


@dataclass(frozen=True)
class Color:
    """16-bit per channel RGB, the range the settings store persists."""

    red: int = 0
    green: int = 0
    blue: int = 0

    @classmethod
    def from_string(cls, value: str) -> Color:
        parts = (value or "").split()
        channels = []
        for part in parts[:3]:
            try:
                channels.append(max(0, min(65535, int(part))))
            except ValueError:
                channels.append(0)
        while len(channels) < 3:
            channels.append(0)
        return cls(*channels)

    @classmethod
    def from_rgb8(cls, red: int, green: int, blue: int) -> Color:
        return cls(red * 257, green * 257, blue * 257)

    def to_string(self) -> str:
        return f"{self.red} {self.green} {self.blue}"

    def to_rgb8(self) -> tuple[int, int, int]:
        return (self.red >> 8, self.green >> 8, self.blue >> 8)

    @property
    def hex(self) -> str:
        r, g, b = self.to_rgb8()
        return f"#{r:02X}{g:02X}{b:02X}"


BLACK = Color(0, 0, 0)
DEFAULT_FONT = FontStyle()


@dataclass(frozen=True)
class LineStyle:
    font: FontStyle = DEFAULT_FONT
    color: Color = BLACK


@dataclass(frozen=True)
class LineConfig:
    index: int
    template: str = ""
    font: FontStyle = DEFAULT_FONT
    color: Color = BLACK

    @property
    def style(self) -> LineStyle:
        return LineStyle(font=self.font, color=self.color)


@dataclass
class GlobalConfig:
    refresh_interval_ms: int = 100
    active_line_count: int = 3


@dataclass
class WidgetConfig:
    general: GlobalConfig = field(default_factory=GlobalConfig)
    lines: list[LineConfig] = field(default_factory=list)

    def active_lines(self) -> list[LineConfig]:
        return self.lines[: self.general.active_line_count]


@dataclass(frozen=True)
class StateSnapshot:
    """Playback state visible to one render pass.

    ``metadata`` is borrowed from the host and only valid until the render call
    that obtained it returns.
    """

    metadata: Any | None = None

    @classmethod
    def empty(cls) -> StateSnapshot:
        return cls(metadata=None)

    @classmethod
    def playing(cls, metadata: Any) -> StateSnapshot:
        return cls(metadata=metadata)

    @property
    def is_playing(self) -> bool:
        return self.metadata is not None


@dataclass(frozen=True)
class RenderedLine:
    text: str
    style: LineStyle
