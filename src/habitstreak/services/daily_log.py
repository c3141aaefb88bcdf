"""One log per habit per day: decide between update and create."""

from __future__ import annotations

from typing import Optional

from ..domain.repositories import HabitLogRepository
from ..logging_config import get_logger
from ..models.habit import HabitLog
from .daykey import Clock, today_key

logger = get_logger("services.daily_log")


def log_habit(
    logs: HabitLogRepository,
    habit_id: str,
    completed: bool,
    notes: Optional[str] = None,
    *,
    clock: Optional[Clock] = None,
) -> str:
    """Record today's completion state for ``habit_id`` and return the log id.

    An existing log for today is updated in place; otherwise one is created.
    ``HabitLogRepository.create`` is keyed by ``(habit_id, day)``, so a create
    that lost a race with another toggle still ends on the same record.
    Store errors propagate and leave the completion state unchanged.
    """

    today = today_key(clock)
    existing = logs.find_by_habit_and_day(habit_id, today)

    if existing is not None and existing.id is not None:
        logs.update(existing.id, completed=completed, notes=notes)
        logger.debug("Updated today's log", extra={"habit_id": habit_id, "log_id": existing.id})
        return existing.id

    log_id = logs.create(
        HabitLog(habit_id=habit_id, log_date=today, completed=completed, notes=notes)
    )
    logger.debug("Created today's log", extra={"habit_id": habit_id, "log_id": log_id})
    return log_id


__all__ = ["log_habit"]
