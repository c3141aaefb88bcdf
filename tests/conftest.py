"""Pytest configuration and shared fixtures for HabitStreak tests.

Every test gets its own temporary SQLite file. The composite history index is
NOT created by default, so repositories start on the fallback query path; use
the ``indexed`` fixture (or ``create_composite_indexes``) for the compound path.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from habitstreak.advisory import IndexAdvisory
from habitstreak.infra.database import create_session_factory
from habitstreak.infra.indexes import create_composite_indexes
from habitstreak.infra.repositories import SQLModelHabitLogRepository, SQLModelHabitRepository
from habitstreak.models import Habit, HabitLog
from habitstreak.models.habit import log_document_id
from habitstreak.services.tracker import HabitTracker
from helpers import FIXED_NOW


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with the habit tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture
def indexed(db_engine):
    """Provision the composite index so the compound query path is used."""
    create_composite_indexes(db_engine)
    return db_engine


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Raw session for arranging rows directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def advisory():
    return IndexAdvisory()


@pytest.fixture
def habit_repo(session_factory):
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def log_repo(session_factory, advisory):
    return SQLModelHabitLogRepository(session_factory, advisory)


@pytest.fixture
def clock():
    """Zero-argument clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def tracker(habit_repo, log_repo, clock):
    return HabitTracker(habit_repo, log_repo, clock=clock)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(habit_repo):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(name: str = "Test Habit", description: str | None = None) -> Habit:
        return habit_repo.create(Habit(name=name, description=description))

    return _create_habit


@pytest.fixture
def log_factory(db_session):
    """Factory for inserting habit logs on arbitrary days.

    Returns:
        Callable: Function that persists a HabitLog for (habit_id, day)
    """

    def _create_log(
        habit_id: str,
        day: date,
        completed: bool = True,
        notes: str | None = None,
    ) -> HabitLog:
        log = HabitLog(
            id=log_document_id(habit_id, day),
            habit_id=habit_id,
            log_date=day,
            completed=completed,
            notes=notes,
        )
        db_session.add(log)
        db_session.commit()
        return log

    return _create_log

