"""
FocusBar macOS menu bar application using rumps.

Shows the remaining time in the menu bar and provides timer controls,
website blocking settings, the allowed-sites whitelist and audio
settings in the dropdown menu.
"""

import logging
from typing import Optional

import rumps

import config
from core.engine import TimerEngine
from core.phases import Phase
from core.notifications import CallbackNotifier

logger = logging.getLogger(__name__)

# Resolve icon path
_ASSETS_DIR = config.BASE_DIR / "assets"
_ICON_PATH = _ASSETS_DIR / "menu_icon.png"


def _get_icon_path() -> Optional[str]:
    """Get the menu bar icon path, or None to use text title."""
    if _ICON_PATH.exists():
        return str(_ICON_PATH)
    return None


def _rumps_notify(title: str, body: str) -> None:
    rumps.notification(title="FocusBar", subtitle=title, message=body)


class FocusBarMenuBar(rumps.App):
    """macOS menu bar application for FocusBar."""

    def __init__(self) -> None:
        """Initialise the menu bar app and engine."""
        super().__init__(
            name="FocusBar",
            icon=_get_icon_path(),
            template=True,
            quit_button=None,
        )

        self.engine = TimerEngine(notifier=CallbackNotifier(_rumps_notify))

        # --- Create all menu items (reused across rebuilds) ---

        # Phase display (non-clickable)
        self.phase_item = rumps.MenuItem("")
        self.phase_item.set_callback(None)

        # Timer controls
        self.start_pause_item = rumps.MenuItem("Start", callback=self._toggle_running)
        self.skip_item = rumps.MenuItem("Skip", callback=self._skip)
        self.reset_item = rumps.MenuItem("Reset", callback=self._reset)
        self.end_item = rumps.MenuItem("End Session", callback=self._end_session)

        # Blocking settings
        self.auth_item = rumps.MenuItem("Authorize", callback=self._authorize)
        self.block_item = rumps.MenuItem("Block Sites", callback=self._toggle_blocking)
        self.whitelist_menu = rumps.MenuItem("Allowed Sites")

        # Audio settings
        self.voice_item = rumps.MenuItem("Voice Cues", callback=self._toggle_voice)
        self.language_item = rumps.MenuItem("", callback=self._toggle_language)

        self.quit_item = rumps.MenuItem("Quit FocusBar", callback=self._quit_app)

        self.menu = [
            self.phase_item,
            None,
            self.start_pause_item,
            self.skip_item,
            self.reset_item,
            self.end_item,
            None,
            self.auth_item,
            self.block_item,
            self.whitelist_menu,
            None,
            self.voice_item,
            self.language_item,
            None,
            self.quit_item,
        ]

        self._shown_whitelist = None
        self._refresh()

    # ------------------------------------------------------------------
    # Display (polls engine every second on the main run loop)
    # ------------------------------------------------------------------

    @rumps.timer(1)
    def _tick(self, timer) -> None:
        """Poll engine status every second and update the display."""
        self._refresh()

    def _refresh(self) -> None:
        """Refresh title and menu items from an engine snapshot."""
        status = self.engine.get_status()
        phase: Phase = status["phase"]
        self.title = f"{phase.icon} {status['time_string']}"
        self.phase_item.title = phase.title.upper()
        self.start_pause_item.title = "Pause" if status["is_running"] else "Start"

        self.block_item.state = 1 if status["blocking_enabled"] else 0
        if status["is_authorized"]:
            self.auth_item.title = "Authorized"
            self.auth_item.set_callback(None)
        else:
            self.auth_item.title = "Authorize…"
            self.auth_item.set_callback(self._authorize)

        self.voice_item.state = 1 if self.engine.audio.audio_mode == config.AUDIO_SOUND_AND_VOICE else 0
        self.language_item.title = f"Language: {self.engine.audio.language.upper()}"

        if status["whitelist"] != self._shown_whitelist:
            self._rebuild_whitelist_menu(status["whitelist"])

    def _rebuild_whitelist_menu(self, sites) -> None:
        """Rebuild the Allowed Sites submenu (click a site to remove it)."""
        self._shown_whitelist = list(sites)
        for key in list(self.whitelist_menu.keys()):
            del self.whitelist_menu[key]
        self.whitelist_menu.add(rumps.MenuItem("Add Site…", callback=self._add_site))
        for site in sites:
            self.whitelist_menu.add(rumps.MenuItem(site, callback=self._remove_site))

    # ------------------------------------------------------------------
    # Timer controls
    # ------------------------------------------------------------------

    def _toggle_running(self, sender) -> None:
        """Start or pause the timer."""
        if self.engine.is_running:
            self.engine.stop()
        else:
            self.engine.start()
        self._refresh()

    def _skip(self, sender) -> None:
        self.engine.toggle_mode()
        self._refresh()

    def _reset(self, sender) -> None:
        self.engine.reset()
        self._refresh()

    def _end_session(self, sender) -> None:
        self.engine.end_session()
        self._refresh()

    # ------------------------------------------------------------------
    # Blocking settings
    # ------------------------------------------------------------------

    def _authorize(self, sender) -> None:
        """Ask for the administrator password ahead of time."""
        if not self.engine.request_authorization():
            rumps.alert(
                title="Not Authorized",
                message="Site blocking needs administrator privileges to edit /etc/hosts.",
            )
        self._refresh()

    def _toggle_blocking(self, sender) -> None:
        self.engine.set_blocking_enabled(not self.engine.blocking_enabled)
        self._refresh()

    def _add_site(self, sender) -> None:
        """Prompt for a site to allow during work phases."""
        window = rumps.Window(
            message="Sites on this list are never blocked.",
            title="Add Allowed Site",
            default_text="",
            ok="Add",
            cancel="Cancel",
            dimensions=(240, 24),
        )
        response = window.run()
        if response.clicked and response.text.strip():
            self.engine.add_to_whitelist(response.text)
            self._refresh()

    def _remove_site(self, sender) -> None:
        self.engine.remove_from_whitelist(sender.title)
        self._refresh()

    # ------------------------------------------------------------------
    # Audio settings
    # ------------------------------------------------------------------

    def _toggle_voice(self, sender) -> None:
        self.engine.audio.toggle_audio_mode()
        self._refresh()

    def _toggle_language(self, sender) -> None:
        self.engine.audio.toggle_language()
        self._refresh()

    # ------------------------------------------------------------------
    # Quit
    # ------------------------------------------------------------------

    def _quit_app(self, sender) -> None:
        """Clean up and quit."""
        self.engine.cleanup()
        rumps.quit_application()
