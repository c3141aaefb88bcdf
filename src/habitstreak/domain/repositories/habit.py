"""Habit repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Repository for managing habit definitions."""

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self) -> list[Habit]:
        """List all habits, newest first."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit_id: str, **fields: Any) -> Optional[Habit]:
        """Update name/description of an existing habit."""
        ...

    def delete(self, habit_id: str) -> bool:
        """Delete a habit and its logs by ID."""
        ...
