"""Boundary protocols for the host player, template engine, settings store, and display."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .models import StateSnapshot


@runtime_checkable
class PlaybackHost(Protocol):
    def get_playback_state(self) -> StateSnapshot:
        ...

    def release_playback_state(self, snapshot: StateSnapshot) -> None:
        ...


@runtime_checkable
class TemplateEngine(Protocol):
    def compile(self, template: str) -> Any:
        ...

    def evaluate(self, compiled: Any, metadata: Any, max_len: int) -> str:
        ...

    def release(self, compiled: Any) -> None:
        ...


@runtime_checkable
class SettingsStore(Protocol):
    def get_int(self, key: str, default: int) -> int:
        ...

    def get_string(self, key: str, default: str) -> str:
        ...

    def set_int(self, key: str, value: int) -> None:
        ...

    def set_string(self, key: str, value: str) -> None:
        ...

    def flush(self) -> None:
        ...


@runtime_checkable
class RepaintTarget(Protocol):
    def request_repaint(self) -> None:
        ...


class NullRepaintTarget:
    def request_repaint(self) -> None:
        return None
