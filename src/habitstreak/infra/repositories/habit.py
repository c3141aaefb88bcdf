"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.habit import Habit
from ..database import store_errors
from .habit_log import delete_logs_for_habit

logger = get_logger("repositories.habit")

_UPDATABLE_FIELDS = frozenset({"name", "description"})


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with store_errors("get habit"), self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[Habit]:
        """List all habits, newest first."""
        with store_errors("list habits"), self.session_factory() as session:
            statement = select(Habit).order_by(
                Habit.created_at.desc(), Habit.id.desc()  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        now = datetime.now(timezone.utc)
        habit.created_at = now
        habit.updated_at = now
        with store_errors("create habit"), self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
        logger.info("Habit created", extra={"habit_id": habit.id})
        return habit

    def update(self, habit_id: str, **fields: Any) -> Optional[Habit]:
        """Update name/description of an existing habit."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update habit fields: {', '.join(sorted(unknown))}")

        with store_errors("update habit"), self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return None
            for name, value in fields.items():
                setattr(habit, name, value)
            habit.updated_at = datetime.now(timezone.utc)
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: str) -> bool:
        """Delete a habit together with all of its logs."""
        with store_errors("delete habit"), self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return False
            removed_logs = delete_logs_for_habit(session, habit_id)
            session.delete(habit)
            session.commit()
        logger.info("Habit deleted", extra={"habit_id": habit_id, "removed_logs": removed_logs})
        return True
