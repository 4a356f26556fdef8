"""
FocusBar system tray application using pystray (Windows and Linux).

The tray icon is a colored dot for the current phase; the remaining
time is shown in the tooltip and as the first (disabled) menu entry.
"""

import logging
from typing import Dict

import pystray
from PIL import Image, ImageDraw

import config
from core.engine import TimerEngine
from core.phases import Phase

logger = logging.getLogger(__name__)

ADD_SITE_HINT = "Add sites with: focusbar --cli, then allow <site>"

_PHASE_COLORS = {
    Phase.WORK: (220, 53, 69, 255),
    Phase.SHORT_BREAK: (40, 167, 69, 255),
}


def _make_icon_image(phase: Phase, running: bool) -> Image.Image:
    """Draw the tray icon: filled dot while running, ring while idle."""
    image = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    color = _PHASE_COLORS[phase]
    if running:
        draw.ellipse((6, 6, 58, 58), fill=color)
    else:
        draw.ellipse((6, 6, 58, 58), outline=color, width=8)
    return image


class FocusBarTray:
    """System tray application for FocusBar."""

    def __init__(self) -> None:
        """Initialise the tray app and engine."""
        self.engine = TimerEngine(notifier=self)

        self._status: Dict = self.engine.get_status()

        self.icon = pystray.Icon(
            name="FocusBar",
            icon=_make_icon_image(self._status["phase"], False),
            title="FocusBar",
            menu=self._build_menu(),
        )

        self.engine.subscribe(self._on_engine_change)

    # ------------------------------------------------------------------
    # Notifier interface (used by the engine)
    # ------------------------------------------------------------------

    def request_permission(self) -> None:
        pass

    def notify(self, title: str, body: str) -> None:
        try:
            self.icon.notify(body, title)
        except Exception as e:
            logger.debug(f"Tray notification failed: {e}")

    # ------------------------------------------------------------------
    # Menu building
    # ------------------------------------------------------------------

    def _build_menu(self) -> pystray.Menu:
        return pystray.Menu(
            # Phase and time (non-clickable)
            pystray.MenuItem(
                lambda item: f"{self._status['phase'].title.upper()}  {self._status['time_string']}",
                None, enabled=False,
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                lambda item: "Pause" if self._status["is_running"] else "Start",
                self._toggle_running,
                default=True,
            ),
            pystray.MenuItem("Skip", self._skip),
            pystray.MenuItem("Reset", self._reset),
            pystray.MenuItem("End Session", self._end_session),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                lambda item: "Authorized" if self._status["is_authorized"] else "Authorize…",
                self._authorize,
                enabled=lambda item: not self._status["is_authorized"],
            ),
            pystray.MenuItem(
                "Block Sites", self._toggle_blocking,
                checked=lambda item: self._status["blocking_enabled"],
            ),
            pystray.MenuItem("Allowed Sites", pystray.Menu(self._whitelist_items)),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                "Voice Cues", self._toggle_voice,
                checked=lambda item: self.engine.audio.audio_mode == config.AUDIO_SOUND_AND_VOICE,
            ),
            pystray.MenuItem(
                lambda item: f"Language: {self.engine.audio.language.upper()}",
                self._toggle_language,
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit FocusBar", self._quit_app),
        )

    def _whitelist_items(self):
        """
        Allowed sites submenu (click a site to remove it).

        Tray menus have no text input, so sites are added from the
        terminal with `focusbar --cli` and `allow <site>`.
        """
        sites = self._status["whitelist"]
        if not sites:
            yield pystray.MenuItem("No allowed sites", None, enabled=False)
        for site in sites:
            yield pystray.MenuItem(site, self._remove_site)
        yield pystray.Menu.SEPARATOR
        yield pystray.MenuItem(ADD_SITE_HINT, None, enabled=False)

    # ------------------------------------------------------------------
    # Engine listener
    # ------------------------------------------------------------------

    def _on_engine_change(self, status: Dict) -> None:
        """Update icon, tooltip and menu from an engine snapshot."""
        previous = self._status
        self._status = status
        self.icon.title = f"FocusBar — {status['phase'].title} {status['time_string']}"
        if previous["phase"] is not status["phase"] or previous["is_running"] != status["is_running"]:
            self.icon.icon = _make_icon_image(status["phase"], status["is_running"])
        self.icon.update_menu()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _toggle_running(self, icon, item) -> None:
        if self.engine.is_running:
            self.engine.stop()
        else:
            self.engine.start()

    def _skip(self, icon, item) -> None:
        self.engine.toggle_mode()

    def _reset(self, icon, item) -> None:
        self.engine.reset()

    def _end_session(self, icon, item) -> None:
        self.engine.end_session()

    def _authorize(self, icon, item) -> None:
        if not self.engine.request_authorization():
            self.notify("Not Authorized", "Site blocking needs administrator privileges.")

    def _toggle_blocking(self, icon, item) -> None:
        self.engine.set_blocking_enabled(not self.engine.blocking_enabled)

    def _remove_site(self, icon, item) -> None:
        self.engine.remove_from_whitelist(str(item))

    def _toggle_voice(self, icon, item) -> None:
        self.engine.audio.toggle_audio_mode()
        self.icon.update_menu()

    def _toggle_language(self, icon, item) -> None:
        self.engine.audio.toggle_language()
        self.icon.update_menu()

    def _quit_app(self, icon, item) -> None:
        """Clean up and quit."""
        self.engine.cleanup()
        self.icon.stop()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Start the tray application."""
        self.icon.run()
