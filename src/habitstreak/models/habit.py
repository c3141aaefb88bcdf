"""Habit and daily habit-log documents."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional
from uuid import uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

HABITS_COLLECTION = "habits"
HABIT_LOGS_COLLECTION = "habit_logs"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_document_id() -> str:
    """Return a fresh opaque document id."""

    return uuid4().hex


def log_document_id(habit_id: str, day: date) -> str:
    """Deterministic id of the single log a habit may have on ``day``."""

    return f"{habit_id}:{day.isoformat()}"


class Habit(SQLModel, table=True):
    """A habit the user wants to perform every day."""

    __tablename__: ClassVar[str] = HABITS_COLLECTION

    id: str = Field(default_factory=new_document_id, primary_key=True, max_length=64)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)


class HabitLog(SQLModel, table=True):
    """Completion record for a habit on one calendar day.

    ``log_date`` is always a day key; ``(habit_id, log_date)`` is unique.
    """

    __tablename__: ClassVar[str] = HABIT_LOGS_COLLECTION
    __table_args__ = (UniqueConstraint("habit_id", "log_date", name="uq_habit_logs_habit_day"),)

    id: Optional[str] = Field(default=None, primary_key=True, max_length=96)
    habit_id: str = Field(nullable=False, index=True, max_length=64)
    log_date: date = Field(nullable=False)
    completed: bool = Field(default=False, nullable=False)
    notes: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
