"""
Tests for the menu bar front ends in menubar/.

rumps, pystray and Pillow are replaced with small stand-ins in
sys.modules so the app classes can be built without a desktop session.
"""

import importlib
import sys
import types
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from core.engine import TimerEngine


class FakeCountdown:
    """Countdown that only ticks when the test calls fire()."""

    def __init__(self, on_tick):
        self.on_tick = on_tick
        self.cancelled = False

    def start(self):
        pass

    def cancel(self):
        self.cancelled = True

    def fire(self, times=1):
        for _ in range(times):
            self.on_tick(self)


class EngineFactory:
    """Stands in for TimerEngine; builds a real engine with fakes."""

    def __init__(self):
        self.countdowns = []
        self.engine = None

    def __call__(self, notifier=None):
        def countdown_factory(on_tick):
            countdown = FakeCountdown(on_tick)
            self.countdowns.append(countdown)
            return countdown

        blocker = MagicMock(is_authorized=False, is_blocking=False)
        blocker.whitelist.list.return_value = []
        audio = MagicMock(audio_mode=config.AUDIO_SOUND_ONLY, language="en")
        self.engine = TimerEngine(
            audio=audio,
            blocker=blocker,
            notifier=notifier or MagicMock(),
            countdown_factory=countdown_factory,
        )
        return self.engine


# ----------------------------------------------------------------------
# rumps stand-in
# ----------------------------------------------------------------------

class FakeRumpsApp:

    def __init__(self, name, icon=None, template=None, quit_button=None):
        self.name = name
        self.title = None
        self.menu = []


class FakeRumpsMenuItem:

    def __init__(self, title, callback=None):
        self.title = title
        self.callback = callback
        self.state = 0
        self._items = {}

    def set_callback(self, callback):
        self.callback = callback

    def keys(self):
        return self._items.keys()

    def add(self, item):
        self._items[item.title] = item

    def __delitem__(self, key):
        del self._items[key]


def make_fake_rumps():
    module = types.ModuleType("rumps")
    module.App = FakeRumpsApp
    module.MenuItem = FakeRumpsMenuItem
    module.timer = lambda interval: (lambda func: func)
    module.notification = MagicMock()
    module.alert = MagicMock()
    module.Window = MagicMock()
    module.quit_application = MagicMock()
    return module


# ----------------------------------------------------------------------
# pystray / Pillow stand-ins
# ----------------------------------------------------------------------

class FakeTrayMenuItem:

    def __init__(self, text, action=None, **kwargs):
        self.text = text
        self.action = action
        self.enabled = kwargs.get("enabled", True)


class FakeTrayMenu:
    SEPARATOR = object()

    def __init__(self, *items):
        self.items = items


def make_fake_pystray():
    module = types.ModuleType("pystray")
    module.Icon = MagicMock()
    module.Menu = FakeTrayMenu
    module.MenuItem = FakeTrayMenuItem
    return module


def make_fake_pil():
    module = types.ModuleType("PIL")
    module.Image = MagicMock()
    module.ImageDraw = MagicMock()
    return module


class TestMacMenuBar(unittest.TestCase):
    """The rumps app reads the engine on its own run loop timer."""

    def setUp(self):
        modules = patch.dict(sys.modules, {"rumps": make_fake_rumps()})
        modules.start()
        self.addCleanup(modules.stop)
        sys.modules.pop("menubar.macos_app", None)
        macos_app = importlib.import_module("menubar.macos_app")

        self.factory = EngineFactory()
        engine_patch = patch.object(macos_app, "TimerEngine", self.factory)
        engine_patch.start()
        self.addCleanup(engine_patch.stop)

        self.app = macos_app.FocusBarMenuBar()
        self.engine = self.factory.engine

    def test_initial_title(self):
        self.assertEqual(self.app.title, "🍅 25:00")
        self.assertEqual(self.app.start_pause_item.title, "Start")

    def test_countdown_ticks_leave_menu_untouched(self):
        """Ticks arrive on the countdown thread, so only _tick may redraw."""
        self.app._toggle_running(None)
        self.factory.countdowns[0].fire(5)
        self.assertEqual(self.engine.remaining_seconds, 1495)
        self.assertEqual(self.app.title, "🍅 25:00")

        self.app._tick(None)
        self.assertEqual(self.app.title, "🍅 24:55")

    def test_click_refreshes_immediately(self):
        self.app._toggle_running(None)
        self.assertEqual(self.app.start_pause_item.title, "Pause")
        self.app._skip(None)
        self.assertEqual(self.app.title, "☕ 05:00")
        self.assertEqual(self.app.start_pause_item.title, "Start")

    def test_blocking_checkbox(self):
        self.app._toggle_blocking(None)
        self.assertTrue(self.engine.blocking_enabled)
        self.assertEqual(self.app.block_item.state, 1)

    def test_whitelist_submenu_has_add_entry(self):
        self.assertEqual(list(self.app.whitelist_menu.keys()), ["Add Site…"])


class TestTray(unittest.TestCase):
    """The pystray app points users to the CLI for adding sites."""

    def setUp(self):
        fakes = {"pystray": make_fake_pystray(), "PIL": make_fake_pil()}
        modules = patch.dict(sys.modules, fakes)
        modules.start()
        self.addCleanup(modules.stop)
        sys.modules.pop("menubar.tray_app", None)
        self.tray_app = importlib.import_module("menubar.tray_app")

        self.factory = EngineFactory()
        engine_patch = patch.object(self.tray_app, "TimerEngine", self.factory)
        engine_patch.start()
        self.addCleanup(engine_patch.stop)

        self.app = self.tray_app.FocusBarTray()

    def _texts(self, items):
        return [item.text for item in items if item is not FakeTrayMenu.SEPARATOR]

    def test_empty_whitelist_shows_hint(self):
        items = list(self.app._whitelist_items())
        self.assertEqual(
            self._texts(items), ["No allowed sites", self.tray_app.ADD_SITE_HINT]
        )
        self.assertFalse(items[-1].enabled)

    def test_sites_listed_before_hint(self):
        self.app._status = dict(self.app._status, whitelist=["example.com"])
        items = list(self.app._whitelist_items())
        self.assertEqual(self._texts(items), ["example.com", self.tray_app.ADD_SITE_HINT])
        self.assertEqual(items[0].action, self.app._remove_site)

    def test_engine_change_updates_tooltip(self):
        self.app._toggle_running(None, None)
        self.factory.countdowns[0].fire(1)
        self.assertEqual(self.app.icon.title, "FocusBar — Focus 24:59")


if __name__ == "__main__":
    unittest.main()
