"""SQLModel table exports."""

from .habit import HABIT_LOGS_COLLECTION, HABITS_COLLECTION, Habit, HabitLog

__all__ = [
    "HABITS_COLLECTION",
    "HABIT_LOGS_COLLECTION",
    "Habit",
    "HabitLog",
]
