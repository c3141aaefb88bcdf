"""Current-streak calculation over a habit's logs."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ..models.habit import HabitLog
from .daykey import day_key, today_key


def completed_days(logs: Iterable[HabitLog]) -> set[date]:
    """Day keys that carry a completed log; explicit misses are left out."""

    return {day_key(log.log_date) for log in logs if log.completed}


def compute_streak(logs: Iterable[HabitLog], *, today: date | None = None) -> int:
    """Return the current streak for one habit's logs (any order).

    A streak is alive when today or yesterday is completed. Counting walks back
    from yesterday over consecutive completed days; a completed today adds one.
    A ``completed=False`` log is a gap exactly like a missing day.
    """

    today = day_key(today) if today is not None else today_key()
    done = completed_days(logs)
    if not done:
        return 0

    yesterday = today - timedelta(days=1)
    completed_today = today in done
    if not completed_today and yesterday not in done:
        return 0

    consecutive = 0
    cursor = yesterday
    while cursor in done:
        consecutive += 1
        cursor -= timedelta(days=1)

    return consecutive + 1 if completed_today else consecutive


def is_completed_on(logs: Iterable[HabitLog], day: date) -> bool:
    """True when the log for ``day`` exists and is completed."""

    key = day_key(day)
    return any(log.completed and day_key(log.log_date) == key for log in logs)


__all__ = ["completed_days", "compute_streak", "is_completed_on"]
