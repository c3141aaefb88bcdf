"""Shared constants and builders for the test-suite."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from habitstreak.models import HabitLog
from habitstreak.models.habit import log_document_id

# Friday afternoon, local wall-clock time
FIXED_NOW = datetime(2024, 3, 15, 16, 45, 12)
TODAY = FIXED_NOW.date()


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def make_log(day: date | datetime, completed: bool = True, habit_id: str = "habit-1") -> HabitLog:
    """In-memory log for pure streak tests (never persisted)."""
    key = day.date() if isinstance(day, datetime) else day
    return HabitLog(
        id=log_document_id(habit_id, key),
        habit_id=habit_id,
        log_date=day,
        completed=completed,
    )
