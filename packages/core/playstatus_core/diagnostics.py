"""Diagnostics export helpers for local support bundles."""

from __future__ import annotations

import json
import os
import platform
import re
import tempfile
import zipfile
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import psutil

from .logging_setup import log_dir
from .models import WidgetConfig
from .settings_store import settings_path


_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, Path):
        return str(value)
    return str(value)


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(str(k)):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def config_payload(cfg: WidgetConfig) -> dict[str, Any]:
    return {
        "refresh_interval_ms": cfg.general.refresh_interval_ms,
        "active_line_count": cfg.general.active_line_count,
        "lines": [
            {
                "index": line.index,
                "template": line.template,
                "font": line.font.to_descriptor(),
                "color": line.color.to_string(),
                "active": line.index < cfg.general.active_line_count,
            }
            for line in cfg.lines
        ],
    }


def process_stats() -> dict[str, Any]:
    proc = psutil.Process(os.getpid())
    with proc.oneshot():
        return {
            "pid": proc.pid,
            "rss_mb": proc.memory_info().rss / (1024 * 1024),
            "cpu_percent": proc.cpu_percent(interval=None),
            "threads": proc.num_threads(),
        }


def build_doctor_payload(cfg: WidgetConfig, live_templates: int | None = None) -> dict[str, Any]:
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "settings_path": str(settings_path()),
        "config": redact(config_payload(cfg)),
        "live_templates": live_templates,
        "process": process_stats(),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "PlayStatus") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: WidgetConfig,
        doctor_payload: dict[str, Any],
        recent_events: list[dict[str, Any]] | None = None,
        output_dir: Path | None = None,
    ) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"playstatus-diagnostics-{stamp}.zip"

        logs = sorted(log_dir().glob("*.log*"))

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "settings_path": str(settings_path()),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(redact(doctor_payload), indent=2, sort_keys=True, default=_jsonable))
            zf.writestr("config.redacted.json", json.dumps(redact(config_payload(cfg)), indent=2, sort_keys=True))
            zf.writestr(
                "controller_events.json",
                json.dumps(redact(recent_events or []), indent=2, sort_keys=True, default=_jsonable),
            )

            for item in logs:
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path


def export_controller_diagnostics(controller: Any, output_dir: Path | None = None) -> Path:
    """Bundle a running controller's config, live template count and event journal."""
    cfg = controller.config
    payload = build_doctor_payload(cfg, live_templates=controller.templates.live_count)
    payload["scheduler"] = {
        "state": controller.scheduler.state.value,
        "interval_ms": controller.scheduler.interval_ms,
        "tick_count": controller.scheduler.tick_count,
        "skipped_ticks": controller.scheduler.skipped_ticks,
    }
    return DiagnosticsExporter().bundle(
        cfg=cfg,
        doctor_payload=payload,
        recent_events=controller.recent_events(),
        output_dir=output_dir,
    )
