"""Widget settings schema, defaults, and load/save against a settings store."""

from __future__ import annotations

from dataclasses import replace

from .host import SettingsStore
from .models import MAX_LINES, Color, FontStyle, GlobalConfig, LineConfig, WidgetConfig


KEY_REFRESH_INTERVAL = "playback_status.refresh_interval"
KEY_NUM_LINES = "playback_status.num_lines"
KEY_FONT_PREFIX = "playback_status.font."
KEY_FORMAT_PREFIX = "playback_status.format."
KEY_COLOR_PREFIX = "playback_status.color."

DEFAULT_REFRESH_INTERVAL_MS = 100
DEFAULT_NUM_LINES = 3
MIN_REFRESH_INTERVAL_MS = 10
MAX_REFRESH_INTERVAL_MS = 1000

_DEFAULT_LINES = {
    0: ("Sans Bold 14", "{elapsed} / {length}"),
    1: ("Sans 12", "{tracknumber}. {title}"),
    2: ("Sans 10", "{album_artist} - ({year}) {album}"),
}
_DEFAULT_COLOR = "0 0 0"


def line_key(prefix: str, index: int) -> str:
    return f"{prefix}{index:02d}"


def default_line(index: int) -> LineConfig:
    font, template = _DEFAULT_LINES.get(index, ("Sans 10", ""))
    return LineConfig(
        index=index,
        template=template,
        font=FontStyle.from_descriptor(font),
        color=Color.from_string(_DEFAULT_COLOR),
    )


def default_config() -> WidgetConfig:
    return WidgetConfig(
        general=GlobalConfig(
            refresh_interval_ms=DEFAULT_REFRESH_INTERVAL_MS,
            active_line_count=DEFAULT_NUM_LINES,
        ),
        lines=[default_line(i) for i in range(MAX_LINES)],
    )


def clamp_line_count(value: int) -> int:
    return max(1, min(MAX_LINES, int(value)))


def clamp_interval(value: int) -> int:
    return max(MIN_REFRESH_INTERVAL_MS, min(MAX_REFRESH_INTERVAL_MS, int(value)))


def normalize(cfg: WidgetConfig) -> WidgetConfig:
    """Return a copy with bounded values and exactly ``MAX_LINES`` indexed lines."""
    general = GlobalConfig(
        refresh_interval_ms=clamp_interval(cfg.general.refresh_interval_ms),
        active_line_count=clamp_line_count(cfg.general.active_line_count),
    )
    by_index: dict[int, LineConfig] = {}
    for pos, line in enumerate(cfg.lines[:MAX_LINES]):
        index = line.index if 0 <= line.index < MAX_LINES else pos
        by_index.setdefault(index, replace(line, index=index))
    lines = [by_index.get(i, default_line(i)) for i in range(MAX_LINES)]
    return WidgetConfig(general=general, lines=lines)


def load_config(store: SettingsStore) -> WidgetConfig:
    general = GlobalConfig(
        refresh_interval_ms=store.get_int(KEY_REFRESH_INTERVAL, DEFAULT_REFRESH_INTERVAL_MS),
        active_line_count=store.get_int(KEY_NUM_LINES, DEFAULT_NUM_LINES),
    )
    lines: list[LineConfig] = []
    for i in range(MAX_LINES):
        fallback = default_line(i)
        lines.append(
            LineConfig(
                index=i,
                template=store.get_string(line_key(KEY_FORMAT_PREFIX, i), fallback.template),
                font=FontStyle.from_descriptor(
                    store.get_string(line_key(KEY_FONT_PREFIX, i), fallback.font.to_descriptor())
                ),
                color=Color.from_string(store.get_string(line_key(KEY_COLOR_PREFIX, i), fallback.color.to_string())),
            )
        )
    return normalize(WidgetConfig(general=general, lines=lines))


def save_config(store: SettingsStore, cfg: WidgetConfig) -> None:
    """Persist the global values and every active line, then flush the store.

    Hidden lines are left untouched in the store so they come back unchanged when
    the line count is raised again.
    """
    store.set_int(KEY_REFRESH_INTERVAL, cfg.general.refresh_interval_ms)
    store.set_int(KEY_NUM_LINES, cfg.general.active_line_count)
    for line in cfg.active_lines():
        store.set_string(line_key(KEY_FONT_PREFIX, line.index), line.font.to_descriptor())
        store.set_string(line_key(KEY_FORMAT_PREFIX, line.index), line.template)
        store.set_string(line_key(KEY_COLOR_PREFIX, line.index), line.color.to_string())
    store.flush()
