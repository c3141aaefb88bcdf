"""Facade the UI calls: habits with stats, toggling and history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..domain.repositories import HabitLogRepository, HabitRepository
from ..errors import ValidationError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog
from .daily_log import log_habit
from .daykey import Clock, today_key
from .streaks import compute_streak, is_completed_on

logger = get_logger("services.tracker")

NAME_MAX_LENGTH = 80
DESCRIPTION_MAX_LENGTH = 255


@dataclass(frozen=True)
class HabitWithStats:
    """A habit as shown in the habit list."""

    id: str
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime
    streak: int
    completed_today: bool

    @classmethod
    def from_habit(cls, habit: Habit, *, streak: int, completed_today: bool) -> "HabitWithStats":
        return cls(
            id=habit.id,
            name=habit.name,
            description=habit.description,
            created_at=habit.created_at,
            updated_at=habit.updated_at,
            streak=streak,
            completed_today=completed_today,
        )


def clean_name(name: Optional[str]) -> str:
    """Strip and validate a habit name."""

    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Habit name is required.")
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValidationError(f"Habit name must be at most {NAME_MAX_LENGTH} characters.")
    return cleaned


def clean_description(description: Optional[str]) -> Optional[str]:
    """Strip a description; blank becomes None."""

    cleaned = (description or "").strip()
    if len(cleaned) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters."
        )
    return cleaned or None


class HabitTracker:
    """Entry point for the UI layer.

    Every method may raise :class:`~habitstreak.errors.ConnectivityError`; the
    caller decides whether to retry. Unknown habit ids yield ``None``/``False``.
    """

    def __init__(
        self,
        habits: HabitRepository,
        logs: HabitLogRepository,
        clock: Optional[Clock] = None,
    ):
        self.habits = habits
        self.logs = logs
        self.clock = clock

    # Habit definitions
    def add_habit(self, name: str, description: Optional[str] = None) -> Habit:
        habit = Habit(name=clean_name(name), description=clean_description(description))
        return self.habits.create(habit)

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        return self.habits.get_by_id(habit_id)

    def rename_habit(
        self,
        habit_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Habit]:
        """Change name and/or description; ``None`` leaves a field untouched."""
        fields: dict[str, Optional[str]] = {}
        if name is not None:
            fields["name"] = clean_name(name)
        if description is not None:
            fields["description"] = clean_description(description)
        if not fields:
            return self.habits.get_by_id(habit_id)
        return self.habits.update(habit_id, **fields)

    def delete_habit(self, habit_id: str) -> bool:
        """Delete a habit and, with it, its whole log history."""
        return self.habits.delete(habit_id)

    # Completion state
    def list_habits_with_stats(self) -> list[HabitWithStats]:
        today = today_key(self.clock)
        result = []
        for habit in self.habits.list_all():
            logs = self.logs.find_by_habit(habit.id)
            result.append(
                HabitWithStats.from_habit(
                    habit,
                    streak=compute_streak(logs, today=today),
                    completed_today=is_completed_on(logs, today),
                )
            )
        return result

    def get_history(self, habit_id: str) -> list[HabitLog]:
        return self.logs.find_by_habit(habit_id)

    def get_streak(self, habit_id: str) -> int:
        return compute_streak(self.logs.find_by_habit(habit_id), today=today_key(self.clock))

    def log_habit(self, habit_id: str, completed: bool, notes: Optional[str] = None) -> str:
        return log_habit(self.logs, habit_id, completed, notes, clock=self.clock)

    def toggle_completion(self, habit_id: str) -> Optional[bool]:
        """Flip today's completion; returns the new state or None for unknown habits."""
        if self.habits.get_by_id(habit_id) is None:
            logger.info("Toggle requested for unknown habit", extra={"habit_id": habit_id})
            return None

        today = today_key(self.clock)
        current = self.logs.find_by_habit_and_day(habit_id, today)
        completed = not (current is not None and current.completed)
        notes = current.notes if current is not None else None
        log_habit(self.logs, habit_id, completed, notes, clock=self.clock)
        return completed


__all__ = ["HabitTracker", "HabitWithStats", "clean_description", "clean_name"]
