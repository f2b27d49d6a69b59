import sys
import threading
import unittest
from dataclasses import replace
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from helpers import TRACK, FakeHost
from playstatus_core.config import default_config
from playstatus_core.controller import StatusController
from playstatus_core.format_engine import FormatTemplateEngine
from playstatus_core.models import Color
from playstatus_core.settings_store import MemorySettingsStore


def _config(label, count, color, interval_ms):
    cfg = default_config()
    cfg.general.active_line_count = count
    cfg.general.refresh_interval_ms = interval_ms
    cfg.lines = [replace(line, template=f"{label}:{{title}}", color=color) for line in cfg.lines]
    return cfg


class ConcurrentApplyTests(unittest.TestCase):
    def test_frames_never_mix_configurations(self):
        old = _config("old", 3, Color(65535, 0, 0), 20)
        new = _config("new", 5, Color(0, 0, 65535), 30)
        expected = {
            "old": (3, Color(65535, 0, 0), 20),
            "new": (5, Color(0, 0, 65535), 30),
        }

        host = FakeHost(TRACK)
        engine = FormatTemplateEngine()
        controller = StatusController(host, engine, MemorySettingsStore())
        controller.apply_config(old, persist=False)
        controller.scheduler.start(20)

        samples = []
        errors = []
        done = threading.Event()

        def renderer():
            try:
                while not done.is_set():
                    # Frame, configured interval and timer interval read in one critical section.
                    with controller._lock:
                        frame = controller.render_now()
                        configured = controller.config.general.refresh_interval_ms
                        running = controller.scheduler.interval_ms
                    samples.append((frame, configured, running))
            except Exception as exc:
                errors.append(exc)

        def applier():
            try:
                for i in range(100):
                    controller.apply_config(new if i % 2 == 0 else old, persist=False)
            except Exception as exc:
                errors.append(exc)

        workers = [threading.Thread(target=renderer) for _ in range(2)]
        for worker in workers:
            worker.start()
        applier_thread = threading.Thread(target=applier)
        applier_thread.start()
        applier_thread.join(30)
        done.set()
        for worker in workers:
            worker.join(5)
        controller.shutdown()

        self.assertEqual(errors, [])
        self.assertFalse(applier_thread.is_alive())
        self.assertTrue(samples)
        for frame, configured, running in samples:
            labels = {line.text.split(":", 1)[0] for line in frame}
            self.assertEqual(len(labels), 1, frame)
            count, color, interval = expected[labels.pop()]
            self.assertEqual(len(frame), count)
            self.assertTrue(all(line.style.color == color for line in frame))
            self.assertEqual(configured, interval)
            self.assertEqual(running, interval)
        self.assertEqual(host.outstanding, 0)
        self.assertEqual(engine.live_handles, 0)


if __name__ == "__main__":
    unittest.main()
