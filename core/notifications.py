"""
Desktop notifications for FocusBar.

The menu bar apps hand the engine a notifier built on their own UI
toolkit. SystemNotifier is the fallback used by the CLI.
"""

import sys
import subprocess
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SystemNotifier:
    """
    Posts notifications with OS command-line tools.

    - macOS: osascript "display notification"
    - Linux: notify-send
    - Other platforms: logged only
    """

    def __init__(self, app_name: str = "FocusBar", platform: Optional[str] = None):
        self.app_name = app_name
        self.platform = platform or sys.platform

    def request_permission(self) -> None:
        """Command-line notifications need no up-front permission."""
        logger.debug("Notification permission not required for system notifier")

    def notify(self, title: str, body: str) -> None:
        """Post a one-shot notification. Failures are logged, never raised."""
        try:
            if self.platform == "darwin":
                script = (
                    f'display notification "{_escape(body)}" '
                    f'with title "{_escape(self.app_name)}" subtitle "{_escape(title)}"'
                )
                subprocess.Popen(
                    ["osascript", "-e", script],
                    stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
                )
            elif self.platform.startswith("linux"):
                subprocess.Popen(
                    ["notify-send", "--app-name", self.app_name, title, body],
                    stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
                )
            else:
                logger.info(f"{title}: {body}")
        except Exception as e:
            logger.debug(f"Notification failed: {e}")


class CallbackNotifier:
    """Adapts a UI toolkit's notify function to the notifier interface."""

    def __init__(self, send: Callable[[str, str], None]):
        self._send = send

    def request_permission(self) -> None:
        pass

    def notify(self, title: str, body: str) -> None:
        try:
            self._send(title, body)
        except Exception as e:
            logger.debug(f"Notification failed: {e}")


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
