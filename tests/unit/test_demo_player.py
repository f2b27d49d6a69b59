import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from playstatus_app.demo import DEMO_PLAYLIST, SimulatedPlayer, format_time
from playstatus_core.models import TransportEvent


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class SimulatedPlayerTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.events = []
        self.player = SimulatedPlayer(clock=self.clock, listener=self.events.append)

    def test_format_time(self):
        self.assertEqual(format_time(0), "0:00")
        self.assertEqual(format_time(151), "2:31")
        self.assertEqual(format_time(-3), "0:00")

    def test_stopped_snapshot_is_empty(self):
        snapshot = self.player.get_playback_state()
        self.assertFalse(snapshot.is_playing)
        self.player.release_playback_state(snapshot)
        self.assertEqual(self.player.outstanding, 0)

    def test_transport_sequence(self):
        self.player.play()
        self.player.pause()
        self.player.pause()
        self.player.stop()
        self.player.next_track()
        self.assertEqual(
            self.events,
            [
                TransportEvent.STARTED,
                TransportEvent.PAUSED,
                TransportEvent.RESUMED,
                TransportEvent.STOPPED,
                TransportEvent.STARTED,
            ],
        )
        self.assertEqual(self.player.current, DEMO_PLAYLIST[1])

    def test_pause_and_stop_are_noops_when_stopped(self):
        self.player.pause()
        self.player.stop()
        self.assertEqual(self.events, [])

    def test_play_after_pause_resumes(self):
        self.player.play()
        self.player.pause()
        self.player.play()
        self.assertEqual(self.events[-1], TransportEvent.RESUMED)

    def test_elapsed_follows_clock_and_pause(self):
        self.player.play()
        self.clock.now += 42
        self.player.pause()
        self.clock.now += 100
        self.assertEqual(self.player.elapsed(), 42)
        self.player.pause()
        self.clock.now += 8
        self.assertEqual(self.player.elapsed(), 50)

    def test_elapsed_capped_at_track_length(self):
        self.player.play()
        self.clock.now += 10_000
        self.assertEqual(self.player.elapsed(), DEMO_PLAYLIST[0].length_s)

    def test_metadata_snapshot(self):
        self.player.select(3)
        self.player.play()
        self.clock.now += 65
        snapshot = self.player.get_playback_state()
        self.assertEqual(self.player.outstanding, 1)
        meta = snapshot.metadata
        self.assertEqual(meta["title"], "Windowlicker")
        self.assertEqual(meta["album_artist"], "Various Artists")
        self.assertEqual(meta["elapsed"], "1:05")
        self.assertEqual(meta["length"], "6:07")
        self.assertEqual(meta["state"], "playing")
        self.player.release_playback_state(snapshot)
        self.assertEqual(self.player.outstanding, 0)

    def test_empty_playlist_rejected(self):
        with self.assertRaises(ValueError):
            SimulatedPlayer(playlist=[])


if __name__ == "__main__":
    unittest.main()
