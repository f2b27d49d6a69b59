"""Shared fakes for the unit tests."""

import sys
import threading
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))

from playstatus_core.format_engine import FormatTemplateEngine
from playstatus_core.models import StateSnapshot


TRACK = {
    "artist": "Boards of Canada",
    "title": "Roygbiv",
    "album": "Music Has the Right to Children",
    "album_artist": "Boards of Canada",
    "year": 1998,
    "tracknumber": 6,
    "elapsed": "0:42",
    "length": "2:31",
}


class FakeHost:
    """Playback host whose snapshot handles must be released."""

    def __init__(self, metadata=None):
        self.metadata = metadata
        self.outstanding = 0
        self.released = 0
        self.queries = 0

    def get_playback_state(self):
        self.queries += 1
        if self.metadata is None:
            return StateSnapshot.empty()
        self.outstanding += 1
        return StateSnapshot.playing(dict(self.metadata))

    def release_playback_state(self, snapshot):
        if snapshot.is_playing:
            self.outstanding -= 1
            self.released += 1


class RecordingEngine(FormatTemplateEngine):
    """Format engine that keeps a call journal."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self._journal_lock = threading.Lock()

    def _record(self, *row):
        with self._journal_lock:
            self.calls.append(row)

    def compile(self, template):
        self._record("compile", template)
        return super().compile(template)

    def release(self, compiled):
        self._record("release", compiled.template)
        super().release(compiled)


class ExplodingEngine(FormatTemplateEngine):
    """Raises a non-engine error while evaluating templates containing ``boom``."""

    def evaluate(self, compiled, metadata, max_len):
        if "boom" in compiled.template:
            raise RuntimeError("engine crashed")
        return super().evaluate(compiled, metadata, max_len)


class RecordingRepaint:
    def __init__(self):
        self.count = 0
        self.event = threading.Event()

    def request_repaint(self):
        self.count += 1
        self.event.set()
