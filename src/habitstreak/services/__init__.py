"""Service module exports."""

from . import daily_log, daykey, streaks

__all__ = [
    "daily_log",
    "daykey",
    "streaks",
]
