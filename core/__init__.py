"""
Core business logic package for FocusBar.

Contains the headless TimerEngine, its phases, countdown, audio cues
and notifications. Zero UI dependencies.
"""

from core.engine import TimerEngine
from core.phases import Phase

__all__ = ["TimerEngine", "Phase"]
