"""Flat key/value settings stores: in-memory and JSON file backed."""

from __future__ import annotations

import json
import os
import platform
import threading
from pathlib import Path
from typing import Any


def config_root() -> Path:
    override = os.environ.get("PLAYSTATUS_CONFIG_DIR")
    if override:
        return Path(override)
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "PlayStatus"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "PlayStatus"
    return Path.home() / ".config" / "playstatus"


def settings_path() -> Path:
    return config_root() / "settings.json"


class MemorySettingsStore:
    """Dictionary store; the reference implementation of ``SettingsStore``."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self._lock = threading.Lock()

    def get_int(self, key: str, default: int) -> int:
        with self._lock:
            value = self._values.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_string(self, key: str, default: str) -> str:
        with self._lock:
            value = self._values.get(key, default)
        return default if value is None else str(value)

    def set_int(self, key: str, value: int) -> None:
        with self._lock:
            self._values[key] = int(value)

    def set_string(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = str(value)

    def flush(self) -> None:
        return None

    def as_dict(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._values)


class JsonSettingsStore(MemorySettingsStore):
    """Persists the flat map as a sorted JSON object on ``flush``."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings_path()
        super().__init__(self._read(self.path))

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except Exception:
            return {}
        return raw if isinstance(raw, dict) else {}

    def reload(self) -> None:
        values = self._read(self.path)
        with self._lock:
            self._values = values

    def flush(self) -> None:
        data = self.as_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
