"""
Elevated shell command execution for FocusBar.

- macOS: AppleScript "do shell script ... with administrator privileges"
  (macOS caches the credentials for a few minutes)
- Linux: pkexec (polkit prompt)

Calls block until the OS credential prompt is answered or dismissed.
"""

import sys
import subprocess
import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def _applescript_quote(text: str) -> str:
    """Escape text for use inside an AppleScript string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


class ElevatedRunner:
    """
    Runs shell commands with administrator privileges.

    run() never raises: every failure (cancelled prompt, unsupported
    platform, non-zero exit) is reported as (False, "").
    """

    def __init__(self, platform: Optional[str] = None):
        self.platform = platform or sys.platform

    @property
    def is_supported(self) -> bool:
        """Check if elevated execution is available on this platform."""
        return self.platform == "darwin" or self.platform.startswith("linux")

    def _build_argv(self, command: str) -> list:
        if self.platform == "darwin":
            script = f'do shell script "{_applescript_quote(command)}" with administrator privileges'
            return ["osascript", "-e", script]
        return ["pkexec", "sh", "-c", command]

    def run(self, command: str) -> Tuple[bool, str]:
        """
        Run a shell command with elevated privileges and wait for it.

        Args:
            command: Shell command string (interpreted by /bin/sh)

        Returns:
            (success, stdout) - stdout is stripped, empty on failure.
        """
        if not self.is_supported:
            logger.warning(f"Elevated commands are not supported on {self.platform}")
            return False, ""

        try:
            result = subprocess.run(
                self._build_argv(command),
                capture_output=True, text=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Elevated command could not be started: {e}")
            return False, ""

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            # osascript reports a dismissed password dialog as error -128
            if "-128" in stderr or result.returncode == 126:
                logger.info("Administrator authorization was cancelled")
            else:
                logger.warning(f"Elevated command failed (exit {result.returncode}): {stderr}")
            return False, ""

        return True, (result.stdout or "").strip()
