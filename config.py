"""Configuration settings for FocusBar."""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv


def is_bundled() -> bool:
    """
    Check if the application is running from a PyInstaller bundle.

    Returns:
        True if running from a bundled executable, False otherwise.
    """
    return getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS')


def get_base_dir() -> Path:
    """
    Get the base directory for the application.

    For development: Returns the directory containing this file.
    For bundled apps: Returns _MEIPASS (for bundled resources).

    Returns:
        Path to the base directory.
    """
    if is_bundled():
        meipass = getattr(sys, '_MEIPASS', None)
        if meipass:
            return Path(meipass)
        return Path(__file__).parent
    else:
        return Path(__file__).parent


def get_user_data_dir() -> Path:
    """
    Get the directory for user-writable data (whitelist, instance lock).

    For development: Same as BASE_DIR/data
    For bundled apps: Uses a dedicated folder in the user's home directory
                      to persist data across updates.

    Returns:
        Path to the user data directory.
    """
    if is_bundled():
        if sys.platform == 'darwin':
            # macOS: ~/Library/Application Support/FocusBar
            data_dir = Path.home() / "Library" / "Application Support" / "FocusBar"
        elif sys.platform == 'win32':
            appdata = os.environ.get('APPDATA')
            if appdata:
                data_dir = Path(appdata) / "FocusBar"
            else:
                data_dir = Path.home() / "AppData" / "Roaming" / "FocusBar"
        else:
            # Linux: ~/.local/share/FocusBar
            data_dir = Path.home() / ".local" / "share" / "FocusBar"

        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except Exception:
            data_dir = Path.home() / ".focusbar"
            data_dir.mkdir(parents=True, exist_ok=True)

        return data_dir
    else:
        # Development mode
        return Path(__file__).parent / "data"


# Load environment variables from .env file (only in development)
if not is_bundled():
    _env_path = Path(__file__).parent / ".env"
    load_dotenv(_env_path)

# Base directory (for bundled resources like the menu bar icon)
BASE_DIR = get_base_dir()

# User data directory (for writable data like the whitelist)
USER_DATA_DIR = get_user_data_dir()

# Timer phases (seconds)
WORK_DURATION_SECONDS = 25 * 60
BREAK_DURATION_SECONDS = 5 * 60
TICK_INTERVAL_SECONDS = 1.0

# Website blocking
if sys.platform == "win32":
    _DEFAULT_HOSTS_PATH = r"C:\Windows\System32\drivers\etc\hosts"
else:
    _DEFAULT_HOSTS_PATH = "/etc/hosts"
HOSTS_PATH = Path(os.getenv("FOCUSBAR_HOSTS_PATH", _DEFAULT_HOSTS_PATH))
HOSTS_MARKER_START = "# FOCUSBAR START"
HOSTS_MARKER_END = "# FOCUSBAR END"
BLOCK_REDIRECT_IP = "127.0.0.1"
WHITELIST_FILE = USER_DATA_DIR / "whitelist.json"  # Allowed sites (persists)

# Audio modes
AUDIO_SOUND_ONLY = "sound_only"
AUDIO_SOUND_AND_VOICE = "sound_and_voice"
DEFAULT_AUDIO_MODE = os.getenv("FOCUSBAR_AUDIO_MODE", AUDIO_SOUND_AND_VOICE)

# Voice languages (code -> speech locale)
LANGUAGE_VOICES = {
    "en": "en-US",
    "es": "es-ES",
}
DEFAULT_LANGUAGE = os.getenv("FOCUSBAR_LANGUAGE", "en")
VOICE_RATE = 0.5    # 0.0 - 1.0, scaled to words per minute by the speech backend
VOICE_VOLUME = 0.8  # 0.0 - 1.0

# Cues (one per timer transition)
CUE_START = "start"
CUE_PAUSE = "pause"
CUE_RESUME = "resume"
CUE_RESET = "reset"
CUE_SKIP = "skip"
CUE_WORK_COMPLETE = "work_complete"
CUE_BREAK_COMPLETE = "break_complete"

# macOS system sound played for each cue (/System/Library/Sounds/<name>.aiff)
CUE_SOUNDS = {
    CUE_START: "Blow",
    CUE_PAUSE: "Pop",
    CUE_RESUME: "Pop",
    CUE_RESET: "Tink",
    CUE_SKIP: "Morse",
    CUE_WORK_COMPLETE: "Glass",
    CUE_BREAK_COMPLETE: "Hero",
}

# Spoken messages for cues that have voice feedback
CUE_MESSAGES = {
    CUE_START: {
        "en": "Focus time started. Let's go!",
        "es": "Tiempo de enfoque iniciado. ¡Vamos!",
    },
    CUE_PAUSE: {
        "en": "Timer paused",
        "es": "Temporizador pausado",
    },
    CUE_RESUME: {
        "en": "Timer resumed",
        "es": "Temporizador reanudado",
    },
    CUE_WORK_COMPLETE: {
        "en": "Great work! Time for a break.",
        "es": "¡Buen trabajo! Es hora de descansar.",
    },
    CUE_BREAK_COMPLETE: {
        "en": "Break is over. Ready to focus?",
        "es": "El descanso terminó. ¿Listo para enfocarte?",
    },
}

# Desktop notification sent when a phase finishes
NOTIFICATION_TITLE = "Timer Finished!"
NOTIFICATION_WORK_DONE = "Time for a break."
NOTIFICATION_BREAK_DONE = "Back to work!"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # Can override in .env: DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
