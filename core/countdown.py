"""
Repeating one-second countdown timer.

Each Countdown is a single-use handle: start() spawns a daemon thread
that calls on_tick(handle) once per interval until cancel() is called.
A cancelled handle is discarded, never restarted.
"""

import threading
import logging
from typing import Callable, Optional

import config

logger = logging.getLogger(__name__)


class Countdown:
    """Owned timer handle with explicit cancellation."""

    def __init__(
        self,
        on_tick: Callable[["Countdown"], None],
        interval: float = config.TICK_INTERVAL_SECONDS,
    ):
        self.on_tick = on_tick
        self.interval = interval
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        """Start ticking in a background thread."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """
        Stop ticking.

        Does not join the thread: the caller may hold a lock the tick
        callback is waiting on. Ticks that were already in flight see
        cancelled == True and must be ignored by the receiver.
        """
        self._cancelled.set()

    def _run(self) -> None:
        while not self._cancelled.wait(self.interval):
            try:
                self.on_tick(self)
            except Exception as e:
                logger.error(f"Countdown tick failed: {e}", exc_info=True)
