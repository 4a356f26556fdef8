"""Timer phases: work and short break."""

from enum import Enum

import config


class Phase(Enum):
    """One of the two timer intervals."""

    WORK = "work"
    SHORT_BREAK = "short_break"

    @property
    def duration(self) -> int:
        """Nominal length of the phase in seconds."""
        if self is Phase.WORK:
            return config.WORK_DURATION_SECONDS
        return config.BREAK_DURATION_SECONDS

    @property
    def title(self) -> str:
        return "Focus" if self is Phase.WORK else "Break"

    @property
    def color(self) -> str:
        return "red" if self is Phase.WORK else "green"

    @property
    def icon(self) -> str:
        """Emoji shown next to the time in the menu bar."""
        return "🍅" if self is Phase.WORK else "☕"

    def next(self) -> "Phase":
        """The phase that follows this one."""
        return Phase.SHORT_BREAK if self is Phase.WORK else Phase.WORK
