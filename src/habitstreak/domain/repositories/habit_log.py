"""Habit log repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol

from ...models.habit import HabitLog


class HabitLogRepository(Protocol):
    """Repository for daily completion records."""

    def find_by_habit(self, habit_id: str) -> list[HabitLog]:
        """All logs of a habit, newest day first."""
        ...

    def find_by_habit_and_day(self, habit_id: str, day: date) -> Optional[HabitLog]:
        """The log of a habit for one day key, if any."""
        ...

    def create(self, log: HabitLog) -> str:
        """Create (or converge onto) the log for ``(habit_id, log_date)``."""
        ...

    def update(self, log_id: str, **fields: Any) -> None:
        """Partially update a log."""
        ...

    def delete_for_habit(self, habit_id: str) -> int:
        """Delete every log of a habit."""
        ...
