import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from helpers import TRACK
from playstatus_core.format_engine import FormatTemplateEngine
from playstatus_core.models import BLACK, MAX_LINES, Color, FontStyle, StateSnapshot
from playstatus_core.render import STOPPED_TEXT, RenderEngine
from playstatus_core.styles import StyleRegistry
from playstatus_core.templates import CompileError, TemplateRegistry


RED = Color(65535, 0, 0)


class RenderEngineTests(unittest.TestCase):
    def setUp(self):
        self.templates = TemplateRegistry(FormatTemplateEngine())
        self.styles = StyleRegistry()
        self.engine = RenderEngine(self.templates, self.styles)
        for i in range(MAX_LINES):
            self.templates.set_line(i, f"{i}:{{title}}")
            self.styles.set_line(i, FontStyle("Sans", 10 + i), RED)

    def test_frame_length_matches_active_count(self):
        playing = StateSnapshot.playing(TRACK)
        for count in range(1, MAX_LINES + 1):
            frame = self.engine.render_frame(playing, count)
            self.assertEqual(len(frame), count)
            self.assertEqual([line.text for line in frame], [f"{i}:Roygbiv" for i in range(count)])

    def test_count_is_clamped(self):
        playing = StateSnapshot.playing(TRACK)
        self.assertEqual(len(self.engine.render_frame(playing, 0)), 1)
        self.assertEqual(len(self.engine.render_frame(playing, 99)), MAX_LINES)

    def test_line_styles_follow_registry(self):
        frame = self.engine.render_frame(StateSnapshot.playing(TRACK), 3)
        self.assertEqual(frame[2].style.font, FontStyle("Sans", 12))
        self.assertEqual(frame[2].style.color, RED)

    def test_stopped_view(self):
        frame = self.engine.render_frame(StateSnapshot.empty(), 3)
        self.assertEqual(len(frame), 3)
        self.assertEqual(frame[0].text, STOPPED_TEXT)
        self.assertEqual(frame[0].style.font, FontStyle("Sans", 10))
        self.assertEqual(frame[0].style.color, BLACK)
        self.assertEqual([line.text for line in frame[1:]], ["", ""])
        self.assertEqual(frame[1].style.color, RED)

    def test_stopped_view_single_line(self):
        frame = self.engine.render_frame(StateSnapshot.empty(), 1)
        self.assertEqual([line.text for line in frame], [STOPPED_TEXT])

    def test_compile_failure_blanks_only_that_line(self):
        with self.assertRaises(CompileError):
            self.templates.set_line(1, "{title")
        frame = self.engine.render_frame(StateSnapshot.playing(TRACK), 3)
        self.assertEqual([line.text for line in frame], ["0:Roygbiv", "", "2:Roygbiv"])

    def test_evaluation_failure_blanks_only_that_line(self):
        self.templates.set_line(0, "{composer}")
        frame = self.engine.render_frame(StateSnapshot.playing(TRACK), 2)
        self.assertEqual([line.text for line in frame], ["", "1:Roygbiv"])


if __name__ == "__main__":
    unittest.main()
