"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository
from .habit_log import HabitLogRepository

__all__ = [
    "HabitLogRepository",
    "HabitRepository",
]
