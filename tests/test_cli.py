"""
Tests for the terminal front end in main.py.
"""

import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from main import FocusBarCLI


class TestFocusBarCLI(unittest.TestCase):

    def setUp(self):
        self.engine = MagicMock()
        self.cli = FocusBarCLI(self.engine)

    def test_timer_commands(self):
        self.cli.handle("start")
        self.cli.handle("pause")
        self.cli.handle("reset")
        self.cli.handle("skip")
        self.cli.handle("end")
        self.engine.start.assert_called_once()
        self.engine.stop.assert_called_once()
        self.engine.reset.assert_called_once()
        self.engine.toggle_mode.assert_called_once()
        self.engine.end_session.assert_called_once()

    def test_block_on_off(self):
        self.cli.handle("block on")
        self.cli.handle("block OFF")
        self.assertEqual(
            [c.args for c in self.engine.set_blocking_enabled.call_args_list],
            [(True,), (False,)],
        )

    @patch("builtins.print")
    def test_block_without_argument(self, mock_print):
        self.cli.handle("block")
        self.engine.set_blocking_enabled.assert_not_called()

    @patch("builtins.print")
    def test_allow_passes_raw_input(self, mock_print):
        self.cli.handle("allow HTTPS://WWW.Example.com")
        self.engine.add_to_whitelist.assert_called_once_with("HTTPS://WWW.Example.com")

    @patch("builtins.print")
    def test_voice_toggle(self, mock_print):
        self.engine.audio.toggle_audio_mode.return_value = config.AUDIO_SOUND_ONLY
        self.cli.handle("voice")
        mock_print.assert_called_with("Voice cues off")

    @patch("builtins.print")
    def test_unknown_command(self, mock_print):
        self.assertTrue(self.cli.handle("dance"))

    def test_quit(self):
        self.assertFalse(self.cli.handle("quit"))
        self.assertTrue(self.cli.handle("   "))

    @patch("builtins.print")
    @patch("builtins.input", side_effect=["start", EOFError()])
    def test_run_cleans_up_on_eof(self, mock_input, mock_print):
        self.cli.run()
        self.engine.start.assert_called_once()
        self.engine.cleanup.assert_called_once()


if __name__ == "__main__":
    unittest.main()
