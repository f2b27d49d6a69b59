"""Status controller: config apply, transport events, and tick-driven rendering."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from .config import load_config, normalize, save_config
from .host import NullRepaintTarget, PlaybackHost, RepaintTarget, SettingsStore, TemplateEngine
from .logging_setup import get_logger
from .models import MAX_LINES, MAX_TEXT_LEN, RenderedLine, TransportEvent, WidgetConfig
from .render import RenderEngine
from .scheduler import RefreshScheduler
from .styles import StyleRegistry
from .templates import CompileError, TemplateRegistry


class StatusController:
    """Owns the registries and the refresh timer behind one critical section.

    Render passes and configuration changes both run under ``_lock``; a render
    therefore sees the whole configuration before or after an apply, never a
    mix of the two.

    Pass ``coalesce_repaints=True`` only when the host paints through
    ``take_frame()``; otherwise ticks would stay pending forever.
    """

    def __init__(
        self,
        host: PlaybackHost,
        engine: TemplateEngine,
        store: SettingsStore,
        repaint: RepaintTarget | None = None,
        max_text_len: int = MAX_TEXT_LEN,
        coalesce_repaints: bool = False,
    ) -> None:
        self.host = host
        self.store = store
        self.repaint = repaint or NullRepaintTarget()
        self.logger = get_logger()
        self.persist_error: str | None = None

        self._lock = threading.RLock()
        self._closed = False
        self._config = normalize(WidgetConfig())
        self._frame: list[RenderedLine] = []
        self._events: list[dict[str, Any]] = []

        self.templates = TemplateRegistry(engine, max_len=max_text_len)
        self.styles = StyleRegistry()
        self.renderer = RenderEngine(self.templates, self.styles)
        self.scheduler = RefreshScheduler(self.on_tick, guard=self._lock, coalesce=coalesce_repaints)

    @property
    def config(self) -> WidgetConfig:
        with self._lock:
            return WidgetConfig(general=replace(self._config.general), lines=list(self._config.lines))

    @property
    def closed(self) -> bool:
        return self._closed

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        with self._lock:
            return self._events[-limit:]

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "scheduler": self.scheduler.state.value,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > 1000:
            self._events = self._events[-1000:]

    def start(self) -> None:
        """Load persisted settings, apply them, and start the refresh timer."""
        cfg = load_config(self.store)
        with self._lock:
            if self._closed:
                return
            self.apply_config(cfg, persist=False)
            self.scheduler.start(self._config.general.refresh_interval_ms)
            self._log_event("start", interval_ms=self._config.general.refresh_interval_ms)

    def _clamped(self, cfg: WidgetConfig) -> WidgetConfig:
        requested = cfg.general
        fixed = normalize(cfg)
        if fixed.general.active_line_count != requested.active_line_count:
            self.logger.warning(
                "active line count %s clamped to %d",
                requested.active_line_count,
                fixed.general.active_line_count,
                extra={"event": "config_clamped"},
            )
        if fixed.general.refresh_interval_ms != requested.refresh_interval_ms:
            self.logger.warning(
                "refresh interval %s ms clamped to %d",
                requested.refresh_interval_ms,
                fixed.general.refresh_interval_ms,
                extra={"event": "config_clamped", "interval_ms": fixed.general.refresh_interval_ms},
            )
        return fixed

    def apply_config(self, cfg: WidgetConfig, persist: bool = True) -> list[int]:
        """Swap in ``cfg`` atomically and return the lines whose template was rejected.

        A rejected line renders blank; the rest of the configuration still applies.
        """
        with self._lock:
            if self._closed:
                return []
            cfg = self._clamped(cfg)
            if persist:
                try:
                    save_config(self.store, cfg)
                    self.persist_error = None
                except Exception as exc:
                    self.persist_error = str(exc)
                    self.logger.error("settings not saved: %s", exc, extra={"event": "persist_error"})

            count = cfg.general.active_line_count
            for i in range(count, MAX_LINES):
                self.templates.clear_line(i)
                self.styles.clear_line(i)

            failed: list[int] = []
            for line in cfg.active_lines():
                i = line.index
                if self.templates.template(i) != line.template or not self.templates.is_compiled(i):
                    try:
                        self.templates.set_line(i, line.template)
                    except CompileError as exc:
                        failed.append(i)
                        self.logger.warning(
                            "line %d template rejected: %s", i, exc, extra={"event": "compile_error", "line": i}
                        )
                    except Exception as exc:
                        failed.append(i)
                        self.logger.error(
                            "line %d template compile failed: %s", i, exc, extra={"event": "compile_error", "line": i}
                        )
                self.styles.set_line(i, line.font, line.color)

            old_interval = self._config.general.refresh_interval_ms
            self._config = cfg
            interval = cfg.general.refresh_interval_ms
            # A stopped timer picks up the new interval on its next start.
            if interval != old_interval and self.scheduler.interval_ms is not None:
                self.scheduler.reconfigure(interval)

            self._log_event(
                "config_applied",
                lines=count,
                interval_ms=interval,
                failed_lines=failed,
                persisted=persist and self.persist_error is None,
                live_templates=self.templates.live_count,
            )
            return failed

    def on_settings_apply(self, cfg: WidgetConfig) -> list[int]:
        return self.apply_config(cfg, persist=True)

    def on_settings_changed(self) -> None:
        reload = getattr(self.store, "reload", None)
        if callable(reload):
            reload()
        self.apply_config(load_config(self.store), persist=False)

    def render_now(self) -> list[RenderedLine]:
        """Render one frame against a fresh snapshot and keep it as the latest frame."""
        with self._lock:
            if self._closed:
                return []
            snapshot = self.host.get_playback_state()
            try:
                frame = self.renderer.render_frame(snapshot, self._config.general.active_line_count)
            finally:
                self.host.release_playback_state(snapshot)
            self._frame = frame
            return list(frame)

    def take_frame(self) -> list[RenderedLine]:
        """Latest frame for painting; clears the pending repaint so ticks resume."""
        with self._lock:
            frame = list(self._frame)
        self.scheduler.acknowledge()
        return frame

    def on_tick(self) -> None:
        self.render_now()
        self.repaint.request_repaint()

    def _render_and_repaint(self) -> None:
        try:
            self.render_now()
        except Exception as exc:
            self.logger.error("render failed: %s", exc, extra={"event": "render_error"})
        self.repaint.request_repaint()

    def on_transport_event(self, event: TransportEvent | str) -> None:
        event = TransportEvent(event)
        with self._lock:
            if self._closed:
                return
            interval = self._config.general.refresh_interval_ms
            if event in (TransportEvent.STARTED, TransportEvent.RESUMED):
                self.scheduler.start(interval)
                self._render_and_repaint()
            elif event in (TransportEvent.PAUSED, TransportEvent.STOPPED):
                self.scheduler.stop()
                self._render_and_repaint()
            elif event == TransportEvent.SETTINGS_CHANGED:
                self.on_settings_changed()
            self._log_event("transport", transport=event.value)

    def shutdown(self) -> None:
        """Stop the timer, then release compiled templates, then close."""
        with self._lock:
            if self._closed:
                return
            try:
                self.scheduler.stop()
            finally:
                try:
                    self.templates.release_all()
                finally:
                    self._closed = True
                    self._frame = []
                    self._log_event("shutdown")
        self.logger.info("status controller shut down", extra={"event": "shutdown"})
