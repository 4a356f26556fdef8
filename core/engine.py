"""
TimerEngine — Core focus timer state machine for FocusBar.

This module has ZERO UI dependencies. The menu bar app (or the CLI)
calls the intent methods and receives updates via subscribed listeners.

State: phase (work / short break) x {idle, running, paused}.
Transitions drive side effects in this order: audio cue first, then the
phase change, then website blocking.

Listeners:
    listener(status: dict)  - called with get_status() after every change
"""

import threading
import logging
from typing import Callable, Dict, List, Optional

import config
from core.phases import Phase
from core.countdown import Countdown
from core.audio import AudioManager
from core.notifications import SystemNotifier
from blocking.blocker import WebsiteBlocker
from blocking.whitelist import WhitelistStore

logger = logging.getLogger(__name__)

Listener = Callable[[Dict], None]


class TimerEngine:
    """
    Work/break interval timer.

    Handles:
    - Countdown lifecycle (start, pause, reset, skip, end session)
    - Phase completion (cue, notification, automatic phase flip)
    - Website blocking on work <-> break transitions
    - Change notification for the presentation layer

    All collaborators are injected so tests can pass fakes.
    """

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------

    def __init__(
        self,
        audio: Optional[AudioManager] = None,
        blocker: Optional[WebsiteBlocker] = None,
        notifier=None,
        countdown_factory: Callable[[Callable[[Countdown], None]], Countdown] = Countdown,
    ) -> None:
        """
        Initialise the engine in the idle work phase.

        Args:
            audio: Cue player (default: AudioManager())
            blocker: Website blocker (default: one backed by config.WHITELIST_FILE)
            notifier: Object with notify(title, body) and request_permission()
            countdown_factory: Builds a Countdown from a tick callback
        """
        self.audio = audio or AudioManager()
        self.blocker = blocker or WebsiteBlocker(WhitelistStore(config.WHITELIST_FILE))
        self.notifier = notifier or SystemNotifier()
        self._countdown_factory = countdown_factory

        # Session state
        self.phase: Phase = Phase.WORK
        self.remaining_seconds: int = self.phase.duration
        self.is_running: bool = False
        self.has_started_once: bool = False
        self.blocking_enabled: bool = False

        self._countdown: Optional[Countdown] = None
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

        self.notifier.request_permission()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a listener for state changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Public API (user intents)
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the timer, or resume it after a pause."""
        with self._lock:
            if self.is_running:
                return

            resuming = self.has_started_once
            self.is_running = True

            if not resuming:
                self.has_started_once = True
                self.audio.play(config.CUE_START)
                if self.blocking_enabled and self.phase is Phase.WORK:
                    self.blocker.enable_blocking()
            else:
                self.audio.play(config.CUE_RESUME)

            self._countdown = self._countdown_factory(self._on_tick)
            self._countdown.start()

            logger.info(f"Timer {'resumed' if resuming else 'started'} ({self.phase.title}, {self.time_string})")
            self._notify_change()

    def stop(self) -> None:
        """Pause the timer. Does nothing if it is not running."""
        with self._lock:
            if not self.is_running:
                return

            self.audio.play(config.CUE_PAUSE)
            self._cancel_countdown()
            self.is_running = False

            logger.info(f"Timer paused at {self.time_string}")
            self._notify_change()

    def reset(self) -> None:
        """Restore the full duration of the current phase."""
        with self._lock:
            self._cancel_countdown()
            self.is_running = False
            self.audio.play(config.CUE_RESET)
            self.remaining_seconds = self.phase.duration
            self.has_started_once = False

            logger.info(f"Timer reset ({self.phase.title})")
            self._notify_change()

    def toggle_mode(self) -> None:
        """Skip to the other phase."""
        with self._lock:
            self._cancel_countdown()
            self.is_running = False
            self.audio.play(config.CUE_SKIP)

            logger.info(f"Skipped {self.phase.title}")
            self._switch_phase()
            self._notify_change()

    def end_session(self) -> None:
        """Stop everything and go back to an idle work phase."""
        with self._lock:
            self._cancel_countdown()
            self.is_running = False
            self.phase = Phase.WORK
            self.remaining_seconds = self.phase.duration
            self.has_started_once = False

            # Always remove blocking when the session ends
            if self.blocker.is_blocking:
                self.blocker.disable_blocking()

            self.audio.play(config.CUE_RESET)

            logger.info("Session ended")
            self._notify_change()

    def set_blocking_enabled(self, enabled: bool) -> None:
        """
        Turn website blocking on or off for future work phases.

        Takes effect at the next start or phase change.
        """
        with self._lock:
            self.blocking_enabled = bool(enabled)
            logger.info(f"Website blocking {'enabled' if enabled else 'disabled'} for work phases")
            self._notify_change()

    def add_to_whitelist(self, site: str) -> bool:
        with self._lock:
            added = self.blocker.whitelist.add(site)
            if added:
                self._notify_change()
            return added

    def remove_from_whitelist(self, site: str) -> bool:
        with self._lock:
            removed = self.blocker.whitelist.remove(site)
            if removed:
                self._notify_change()
            return removed

    def request_authorization(self) -> bool:
        """Ask for administrator privileges ahead of the first blocked phase."""
        with self._lock:
            authorized = self.blocker.request_authorization()
            self._notify_change()
            return authorized

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def progress(self) -> float:
        """Fraction of the current phase still remaining (1.0 = full)."""
        return self.remaining_seconds / self.phase.duration

    @property
    def time_string(self) -> str:
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def get_status(self) -> Dict:
        """
        Get a snapshot of the engine state for the presentation layer.

        Returns:
            dict with keys: phase, remaining_seconds, is_running, progress,
            time_string, blocking_enabled, whitelist, is_authorized,
            is_blocking.
        """
        with self._lock:
            return {
                "phase": self.phase,
                "remaining_seconds": self.remaining_seconds,
                "is_running": self.is_running,
                "progress": self.progress,
                "time_string": self.time_string,
                "blocking_enabled": self.blocking_enabled,
                "whitelist": self.blocker.whitelist.list(),
                "is_authorized": self.blocker.is_authorized,
                "is_blocking": self.blocker.is_blocking,
            }

    def cleanup(self) -> None:
        """Clean up resources. Call before app quit."""
        with self._lock:
            self._cancel_countdown()
            self.is_running = False
            if self.blocker.is_blocking:
                self.blocker.disable_blocking()
        logger.info("Engine cleanup complete")

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------

    def _on_tick(self, countdown: Countdown) -> None:
        """Called once per second by the active countdown."""
        with self._lock:
            # A tick from a cancelled or replaced countdown is stale
            if countdown is not self._countdown or countdown.cancelled or not self.is_running:
                return

            if self.remaining_seconds > 0:
                self.remaining_seconds -= 1

            if self.remaining_seconds == 0:
                self.on_phase_complete()
            else:
                self._notify_change()

    def on_phase_complete(self) -> None:
        """Finish the current phase and move on to the next one."""
        with self._lock:
            self._cancel_countdown()
            self.is_running = False

            finished = self.phase
            if finished is Phase.WORK:
                self.audio.play(config.CUE_WORK_COMPLETE)
                body = config.NOTIFICATION_WORK_DONE
            else:
                self.audio.play(config.CUE_BREAK_COMPLETE)
                body = config.NOTIFICATION_BREAK_DONE

            try:
                self.notifier.notify(config.NOTIFICATION_TITLE, body)
            except Exception as e:
                logger.debug(f"Notification error: {e}")

            logger.info(f"{finished.title} phase complete")
            self._switch_phase()
            self._notify_change()

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _switch_phase(self) -> None:
        """Flip the phase and toggle blocking for the new phase."""
        previous = self.phase
        self.phase = previous.next()
        self.remaining_seconds = self.phase.duration
        self.has_started_once = False

        if self.blocking_enabled:
            if previous is Phase.WORK:
                self.blocker.disable_blocking()
            else:
                self.blocker.enable_blocking()

    # ------------------------------------------------------------------
    # Callback helpers
    # ------------------------------------------------------------------

    def _notify_change(self) -> None:
        status = self.get_status()
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.debug(f"Listener error: {e}")
