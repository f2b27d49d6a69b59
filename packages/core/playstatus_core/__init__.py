"""Core services: line templates, styles, frame rendering, refresh timer, and settings."""

from .config import default_config, load_config, save_config
from .controller import StatusController
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .format_engine import FormatTemplateEngine
from .host import PlaybackHost, RepaintTarget, SettingsStore, TemplateEngine
from .models import (
    MAX_LINES,
    MAX_TEXT_LEN,
    Color,
    FontStyle,
    GlobalConfig,
    LineConfig,
    LineStyle,
    RenderedLine,
    SchedulerState,
    StateSnapshot,
    TransportEvent,
    WidgetConfig,
)
from .render import STOPPED_TEXT, RenderEngine
from .scheduler import RefreshScheduler
from .settings_store import JsonSettingsStore, MemorySettingsStore
from .styles import StyleRegistry
from .templates import CompileError, EvaluationError, TemplateRegistry

__all__ = [
    "MAX_LINES",
    "MAX_TEXT_LEN",
    "STOPPED_TEXT",
    "Color",
    "CompileError",
    "DiagnosticsExporter",
    "EvaluationError",
    "FontStyle",
    "FormatTemplateEngine",
    "GlobalConfig",
    "JsonSettingsStore",
    "LineConfig",
    "LineStyle",
    "MemorySettingsStore",
    "PlaybackHost",
    "RefreshScheduler",
    "RenderEngine",
    "RenderedLine",
    "RepaintTarget",
    "SchedulerState",
    "SettingsStore",
    "StateSnapshot",
    "StatusController",
    "StyleRegistry",
    "TemplateEngine",
    "TemplateRegistry",
    "TransportEvent",
    "WidgetConfig",
    "build_doctor_payload",
    "default_config",
    "load_config",
    "save_config",
]
