"""
Audio cues for timer transitions.

Each cue plays a short system sound and, in "Sound + Voice" mode,
speaks a localized message. Playback is fire-and-forget.

Cross-platform: macOS (afplay / say), Windows (winsound, no voice),
Linux (paplay or ffplay / espeak).
"""

import sys
import subprocess
import logging
from pathlib import Path
from typing import Optional

import config

logger = logging.getLogger(__name__)

_MACOS_SOUNDS_DIR = Path("/System/Library/Sounds")
_FREEDESKTOP_SOUNDS_DIR = Path("/usr/share/sounds/freedesktop/stereo")

# Closest freedesktop sound theme entry for each macOS system sound
_FREEDESKTOP_SOUNDS = {
    "Blow": "service-login",
    "Pop": "message",
    "Tink": "dialog-information",
    "Morse": "bell",
    "Glass": "complete",
    "Hero": "alarm-clock-elapsed",
}

# macOS voice used for each speech locale
_MACOS_VOICES = {
    "en-US": "Samantha",
    "es-ES": "Mónica",
}

# Rate 0.5 is the normal speaking speed (~175 words per minute)
_WORDS_PER_MINUTE_AT_FULL_RATE = 350


def _freedesktop_sound_path(name: str) -> Path:
    return _FREEDESKTOP_SOUNDS_DIR / f"{_FREEDESKTOP_SOUNDS.get(name, 'complete')}.oga"


class AudioManager:
    """
    Plays sound and voice cues.

    Attributes:
        audio_mode: config.AUDIO_SOUND_ONLY or config.AUDIO_SOUND_AND_VOICE
        language: Key of config.LANGUAGE_VOICES ("en" or "es")
    """

    def __init__(
        self,
        audio_mode: str = config.DEFAULT_AUDIO_MODE,
        language: str = config.DEFAULT_LANGUAGE,
        platform: Optional[str] = None,
    ) -> None:
        self.platform = platform or sys.platform
        self.audio_mode = config.AUDIO_SOUND_AND_VOICE
        self.language = "en"
        self.set_audio_mode(audio_mode)
        self.set_language(language)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_audio_mode(self, mode: str) -> None:
        """Switch between sound only and sound + voice."""
        if mode in (config.AUDIO_SOUND_ONLY, config.AUDIO_SOUND_AND_VOICE):
            self.audio_mode = mode
            logger.info(f"Audio mode set to: {mode}")
        else:
            logger.warning(f"Invalid audio mode ignored: {mode}")

    def toggle_audio_mode(self) -> str:
        if self.audio_mode == config.AUDIO_SOUND_ONLY:
            self.set_audio_mode(config.AUDIO_SOUND_AND_VOICE)
        else:
            self.set_audio_mode(config.AUDIO_SOUND_ONLY)
        return self.audio_mode

    def set_language(self, language: str) -> None:
        """Set the language of spoken messages."""
        if language in config.LANGUAGE_VOICES:
            self.language = language
            logger.info(f"Voice language set to: {language}")
        else:
            logger.warning(f"Unsupported language ignored: {language}")

    def toggle_language(self) -> str:
        self.set_language("es" if self.language == "en" else "en")
        return self.language

    def message_for(self, cue: str) -> str:
        """Get the spoken message for a cue, or "" if the cue is silent."""
        return config.CUE_MESSAGES.get(cue, {}).get(self.language, "")

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def play(self, cue: str) -> None:
        """
        Play a cue: its sound, then its voice message if voice is on.

        Args:
            cue: One of the config.CUE_* constants
        """
        sound = config.CUE_SOUNDS.get(cue)
        if sound is None:
            logger.warning(f"Unknown cue: {cue}")
            return

        self.play_sound(sound)

        if self.audio_mode == config.AUDIO_SOUND_AND_VOICE:
            message = self.message_for(cue)
            if message:
                self.speak(
                    message,
                    config.LANGUAGE_VOICES[self.language],
                    config.VOICE_RATE,
                    config.VOICE_VOLUME,
                )

    def play_sound(self, name: str) -> None:
        """Play a short system sound by its macOS name (e.g. "Glass")."""
        try:
            if self.platform == "darwin":
                self._spawn(["afplay", str(_MACOS_SOUNDS_DIR / f"{name}.aiff")])
            elif self.platform == "win32":
                import winsound
                winsound.MessageBeep(winsound.MB_OK)
            else:
                sound_file = _freedesktop_sound_path(name)
                try:
                    self._spawn(["paplay", str(sound_file)])
                except FileNotFoundError:
                    self._spawn(["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", str(sound_file)])
        except Exception as e:
            logger.debug(f"Sound playback failed: {e}")

    def speak(self, text: str, voice_locale: str, rate: float, volume: float) -> None:
        """
        Speak text asynchronously.

        Args:
            text: Message to speak
            voice_locale: Speech locale, e.g. "en-US"
            rate: 0.0 - 1.0 (0.5 is normal speed)
            volume: 0.0 - 1.0
        """
        words_per_minute = max(1, int(rate * _WORDS_PER_MINUTE_AT_FULL_RATE))
        try:
            if self.platform == "darwin":
                argv = ["say", "-r", str(words_per_minute)]
                voice = _MACOS_VOICES.get(voice_locale)
                if voice:
                    argv += ["-v", voice]
                # say has no volume flag; the embedded command sets it per utterance
                argv.append(f"[[volm {volume:.2f}]] {text}")
                self._spawn(argv)
            elif self.platform == "win32":
                logger.debug("Voice cues are not available on Windows")
            else:
                self._spawn([
                    "espeak",
                    "-v", voice_locale.split("-")[0].lower(),
                    "-s", str(words_per_minute),
                    "-a", str(int(volume * 200)),
                    text,
                ])
        except Exception as e:
            logger.debug(f"Speech failed: {e}")

    @staticmethod
    def _spawn(argv: list) -> None:
        subprocess.Popen(argv, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
