"""Simulated player used as the playback host by the desktop app and the CLI."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from playstatus_core.models import StateSnapshot, TransportEvent


@dataclass(frozen=True)
class Track:
    artist: str
    title: str
    album: str
    year: int
    tracknumber: int
    length_s: float
    album_artist: str | None = None


DEMO_PLAYLIST = [
    Track("Boards of Canada", "Roygbiv", "Music Has the Right to Children", 1998, 6, 151.0),
    Track("Boards of Canada", "Dayvan Cowboy", "The Campfire Headphase", 2005, 3, 300.0),
    Track("Aphex Twin", "Avril 14th", "Drukqs", 2001, 4, 125.0),
    Track("Various", "Windowlicker", "Warp 20 (Recreated)", 2009, 11, 367.0, album_artist="Various Artists"),
]


def format_time(seconds: float) -> str:
    total = max(0, int(seconds))
    return f"{total // 60}:{total % 60:02d}"


class SimulatedPlayer:
    """In-process transport with a playlist and a monotonic playback clock.

    Transport changes are reported to ``listener`` after the player's own lock
    is released, so the listener may query the player.
    """

    def __init__(
        self,
        playlist: list[Track] | None = None,
        clock: Callable[[], float] = time.monotonic,
        listener: Callable[[TransportEvent], None] | None = None,
    ) -> None:
        self.playlist = list(DEMO_PLAYLIST if playlist is None else playlist)
        if not self.playlist:
            raise ValueError("playlist must not be empty")
        self.listener = listener
        self._clock = clock
        self._lock = threading.Lock()
        self._state = "stopped"
        self._index = 0
        self._position = 0.0
        self._resumed_at = 0.0
        self.outstanding = 0

    @property
    def state(self) -> str:
        return self._state

    @property
    def current(self) -> Track:
        return self.playlist[self._index]

    def _elapsed_locked(self) -> float:
        if self._state == "playing":
            return min(self.current.length_s, self._position + self._clock() - self._resumed_at)
        return self._position

    def elapsed(self) -> float:
        with self._lock:
            return self._elapsed_locked()

    def _notify(self, event: TransportEvent) -> None:
        if self.listener is not None:
            self.listener(event)

    def play(self) -> None:
        with self._lock:
            if self._state == "paused":
                event = TransportEvent.RESUMED
            else:
                self._position = 0.0
                event = TransportEvent.STARTED
            self._state = "playing"
            self._resumed_at = self._clock()
        self._notify(event)

    def pause(self) -> None:
        """Toggle between paused and playing; no-op when stopped."""
        with self._lock:
            if self._state == "stopped":
                return
            if self._state == "playing":
                self._position = self._elapsed_locked()
                self._state = "paused"
                event = TransportEvent.PAUSED
            else:
                self._state = "playing"
                self._resumed_at = self._clock()
                event = TransportEvent.RESUMED
        self._notify(event)

    def stop(self) -> None:
        with self._lock:
            if self._state == "stopped":
                return
            self._state = "stopped"
            self._position = 0.0
        self._notify(TransportEvent.STOPPED)

    def next_track(self) -> None:
        with self._lock:
            self._index = (self._index + 1) % len(self.playlist)
            self._position = 0.0
            self._state = "playing"
            self._resumed_at = self._clock()
        self._notify(TransportEvent.STARTED)

    def select(self, index: int) -> None:
        with self._lock:
            self._index = index % len(self.playlist)
            self._position = 0.0

    def _metadata_locked(self) -> dict[str, Any]:
        track = self.current
        return {
            "artist": track.artist,
            "title": track.title,
            "album": track.album,
            "album_artist": track.album_artist or track.artist,
            "year": track.year,
            "tracknumber": track.tracknumber,
            "elapsed": format_time(self._elapsed_locked()),
            "length": format_time(track.length_s),
            "state": self._state,
        }

    def get_playback_state(self) -> StateSnapshot:
        with self._lock:
            if self._state == "stopped":
                return StateSnapshot.empty()
            self.outstanding += 1
            return StateSnapshot.playing(self._metadata_locked())

    def release_playback_state(self, snapshot: StateSnapshot) -> None:
        if not snapshot.is_playing:
            return
        with self._lock:
            self.outstanding -= 1
