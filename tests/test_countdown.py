"""
Tests for core/countdown.py.
"""

import sys
import threading
import time
import unittest
from pathlib import Path

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.countdown import Countdown


class TestCountdown(unittest.TestCase):
    """Real threads with a short interval."""

    def test_ticks_until_cancelled(self):
        ticks = []
        done = threading.Event()

        def on_tick(countdown):
            ticks.append(countdown)
            if len(ticks) == 3:
                countdown.cancel()
                done.set()

        countdown = Countdown(on_tick, interval=0.01)
        countdown.start()
        self.assertTrue(done.wait(2.0))
        time.sleep(0.05)

        self.assertEqual(len(ticks), 3)
        self.assertTrue(all(t is countdown for t in ticks))
        self.assertTrue(countdown.cancelled)

    def test_cancel_before_first_tick(self):
        ticks = []
        countdown = Countdown(ticks.append, interval=0.05)
        countdown.start()
        countdown.cancel()
        time.sleep(0.15)
        self.assertEqual(ticks, [])

    def test_tick_errors_do_not_stop_countdown(self):
        calls = []
        done = threading.Event()

        def on_tick(countdown):
            calls.append(1)
            if len(calls) == 2:
                countdown.cancel()
                done.set()
                return
            raise RuntimeError("listener blew up")

        countdown = Countdown(on_tick, interval=0.01)
        countdown.start()
        self.assertTrue(done.wait(2.0))
        self.assertEqual(len(calls), 2)


if __name__ == "__main__":
    unittest.main()
