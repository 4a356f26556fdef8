"""
Instance Lock - Prevents two FocusBar instances from editing the hosts file.

Cross-platform implementation using file locking:
- Unix (macOS/Linux): fcntl.flock()
- Windows: msvcrt.locking()

The OS drops the lock when the process terminates, even on crashes.
"""

import os
import sys
import atexit
import logging
from pathlib import Path
from typing import IO, Optional

import config

logger = logging.getLogger(__name__)

LOCK_FILE = config.USER_DATA_DIR / ".focusbar_instance.lock"
_LOCK_BYTES = 32


class InstanceLock:
    """
    Exclusive, non-blocking lock on a file holding the owner's PID.

    Usage:
        lock = InstanceLock()
        if not lock.acquire():
            print("Another instance is already running")
            sys.exit(1)
    """

    def __init__(self, lock_file: Optional[Path] = None):
        """
        Args:
            lock_file: Path to lock file (default: USER_DATA_DIR/.focusbar_instance.lock)
        """
        self.lock_file = lock_file or LOCK_FILE
        self._handle: Optional[IO] = None

    def acquire(self) -> bool:
        """
        Try to acquire the lock.

        Returns:
            True if acquired (no other instance running), False otherwise.
        """
        if self._handle is not None:
            return True

        try:
            self.lock_file.parent.mkdir(parents=True, exist_ok=True)
            handle = open(self.lock_file, "a+b")
        except OSError as e:
            logger.error(f"Could not open instance lock file {self.lock_file}: {e}")
            return False

        try:
            if sys.platform == "win32":
                import msvcrt
                handle.seek(0)
                msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, _LOCK_BYTES)
            else:
                import fcntl
                fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            handle.close()
            logger.debug("Instance lock is held by another process")
            return False

        # Record our PID for "already running" messages
        handle.seek(0)
        handle.truncate()
        handle.write(str(os.getpid()).encode("utf-8"))
        handle.flush()

        self._handle = handle
        logger.debug(f"Instance lock acquired (PID: {os.getpid()})")
        return True

    def release(self) -> None:
        """Release the lock and remove the lock file."""
        if self._handle is None:
            return
        try:
            if sys.platform == "win32":
                import msvcrt
                try:
                    self._handle.seek(0)
                    msvcrt.locking(self._handle.fileno(), msvcrt.LK_UNLCK, _LOCK_BYTES)
                except OSError:
                    pass
            self._handle.close()
            self.lock_file.unlink(missing_ok=True)
            logger.debug("Instance lock released")
        except OSError as e:
            logger.warning(f"Error releasing instance lock: {e}")
        finally:
            self._handle = None

    def is_acquired(self) -> bool:
        """Check if lock is currently held by this instance."""
        return self._handle is not None

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False


# Global instance for module-level functions
_instance_lock: Optional[InstanceLock] = None


def check_single_instance() -> bool:
    """
    Check if this is the only running instance of FocusBar.

    Call this at application startup. The lock is released at exit.

    Returns:
        True if this is the only instance (safe to proceed)
        False if another instance is running (should exit)
    """
    global _instance_lock

    if _instance_lock is not None:
        return _instance_lock.is_acquired()

    _instance_lock = InstanceLock()
    acquired = _instance_lock.acquire()
    if acquired:
        atexit.register(release_instance_lock)
    return acquired


def release_instance_lock() -> None:
    """Release the global instance lock (registered with atexit)."""
    global _instance_lock
    if _instance_lock is not None:
        _instance_lock.release()
        _instance_lock = None


def get_existing_pid(lock_file: Optional[Path] = None) -> Optional[int]:
    """
    Read the PID of a running instance from the lock file.

    Returns:
        PID of existing instance, or None if not readable
    """
    try:
        content = (lock_file or LOCK_FILE).read_text().strip()
        if content.isdigit():
            return int(content)
    except OSError:
        pass
    return None
