"""Single recurring refresh timer with coalesced ticks and race-free reprogramming."""

from __future__ import annotations

import threading
import time
from typing import Callable

from .logging_setup import get_logger
from .models import SchedulerState


logger = get_logger("scheduler")


class RefreshScheduler:
    """Runs ``callback`` every ``interval_ms`` on one worker thread.

    With ``coalesce`` a tick marks a repaint as pending; until ``acknowledge()`` is
    called further ticks are skipped rather than queued. Without it every tick
    runs, for hosts that never acknowledge. When ``guard`` is given, each callback
    runs while holding it, and a tick waiting for it gives up once the scheduler
    is stopped. ``stop()`` may therefore be called while holding ``guard``.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        guard: threading.Lock | threading.RLock | None = None,
        poll_s: float = 0.01,
        name: str = "playstatus-refresh",
        coalesce: bool = True,
    ) -> None:
        self._callback = callback
        self._coalesce = coalesce
        self._guard = guard
        self._poll_s = poll_s
        self._name = name

        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event: threading.Event | None = None
        self._interval_ms: int | None = None
        self._pending = threading.Event()

        self.tick_count = 0
        self.skipped_ticks = 0

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.RUNNING if self._thread is not None else SchedulerState.STOPPED

    @property
    def interval_ms(self) -> int | None:
        return self._interval_ms

    @property
    def pending(self) -> bool:
        return self._pending.is_set()

    def start(self, interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ValueError(f"refresh interval must be positive, got {interval_ms}")
        with self._lock:
            self._stop_locked()
            self._pending.clear()
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(interval_ms / 1000.0, stop_event, time.monotonic()),
                name=self._name,
                daemon=True,
            )
            self._thread = thread
            self._stop_event = stop_event
            self._interval_ms = int(interval_ms)
            thread.start()
        logger.debug("refresh timer started", extra={"event": "timer_started", "interval_ms": int(interval_ms)})

    def stop(self) -> None:
        with self._lock:
            was_running = self._thread is not None
            self._stop_locked()
        if was_running:
            logger.debug("refresh timer stopped")

    def reconfigure(self, interval_ms: int) -> None:
        # start() cancels the running timer under the same lock.
        self.start(interval_ms)

    def acknowledge(self) -> None:
        self._pending.clear()

    def _stop_locked(self) -> None:
        thread, stop_event = self._thread, self._stop_event
        self._thread = None
        self._stop_event = None
        self._interval_ms = None
        if stop_event is None:
            return
        stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(self, interval_s: float, stop_event: threading.Event, origin: float) -> None:
        ticks = 0
        while True:
            ticks += 1
            deadline = origin + ticks * interval_s
            if stop_event.wait(max(0.0, deadline - time.monotonic())):
                return
            behind = time.monotonic() - deadline
            if behind >= interval_s:
                # Drop missed deadlines instead of firing a burst.
                ticks += int(behind / interval_s)
            self._fire(stop_event)
            if stop_event.is_set():
                return

    def _acquire_guard(self, stop_event: threading.Event) -> bool:
        if self._guard is None:
            return True
        while not self._guard.acquire(timeout=self._poll_s):
            if stop_event.is_set():
                return False
        return True

    def _fire(self, stop_event: threading.Event) -> None:
        if self._pending.is_set():
            self.skipped_ticks += 1
            return
        if not self._acquire_guard(stop_event):
            return
        try:
            if stop_event.is_set():
                return
            if self._coalesce:
                self._pending.set()
            self.tick_count += 1
            self._callback()
        except Exception:
            self._pending.clear()
            logger.exception("refresh tick failed")
        finally:
            if self._guard is not None:
                self._guard.release()
