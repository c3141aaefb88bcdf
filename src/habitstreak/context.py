"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .advisory import IndexAdvisory
from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitLogRepository, SQLModelHabitRepository
from .services.daykey import Clock
from .services.tracker import HabitTracker


@dataclass
class AppContext:
    """Wiring shared by the CLI and any UI embedding the tracker."""

    config: BaseConfig
    engine: Engine
    session_factory: Callable[[], Session]

    habit_repo: SQLModelHabitRepository
    log_repo: SQLModelHabitLogRepository
    tracker: HabitTracker

    # Owns the "index warning already shown" state for this process
    index_advisory: IndexAdvisory = field(default_factory=IndexAdvisory)

    def dispose(self) -> None:
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[Clock] = None,
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    advisory = IndexAdvisory()
    habit_repo = SQLModelHabitRepository(session_factory)
    log_repo = SQLModelHabitLogRepository(session_factory, advisory)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        log_repo=log_repo,
        tracker=HabitTracker(habit_repo, log_repo, clock=clock),
        index_advisory=advisory,
    )
