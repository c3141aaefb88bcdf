"""SQLModel implementation of the habit log repository.

``find_by_habit`` has two strategies returning identical results:

* the compound query filters and orders inside the store and needs the
  ``ix_habit_logs_habit_id_log_date`` composite index;
* the fallback scan filters only and sorts in Python with the same key.

The compound query is always attempted first. Only a missing index sends a call
down the fallback path; every other failure propagates as
:class:`~habitstreak.errors.ConnectivityError`.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import delete, insert, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...advisory import IndexAdvisory
from ...errors import MissingIndexError
from ...logging_config import get_logger
from ...models.habit import HabitLog, log_document_id
from ...services.daykey import day_key
from ..database import store_errors
from ..indexes import HABIT_LOGS_BY_DATE_INDEX, require_index

logger = get_logger("repositories.habit_log")

_UPDATABLE_FIELDS = frozenset({"completed", "notes"})

_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _newest_first_key(log: HabitLog) -> tuple[date, str]:
    return day_key(log.log_date), log.id or ""


class SQLModelHabitLogRepository:
    """SQLModel-based habit log repository implementation."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        advisory: Optional[IndexAdvisory] = None,
    ):
        """Initialize with a session factory and the caller's index advisory."""
        self.session_factory = session_factory
        self.advisory = advisory if advisory is not None else IndexAdvisory()

    def find_by_habit(self, habit_id: str) -> list[HabitLog]:
        """All logs of a habit, newest day first."""
        with store_errors("find habit logs"), self.session_factory() as session:
            try:
                rows = self._compound_query(session, habit_id)
            except MissingIndexError as exc:
                self.advisory.notify(exc)
                logger.debug(
                    "Compound query unavailable, using fallback scan",
                    extra={"habit_id": habit_id, "index": exc.index_name},
                )
                rows = self._fallback_scan(session, habit_id)
            session.expunge_all()
            return rows

    def _compound_query(self, session: Session, habit_id: str) -> list[HabitLog]:
        require_index(session.connection(), HABIT_LOGS_BY_DATE_INDEX)
        statement = (
            select(HabitLog)
            .where(HabitLog.habit_id == habit_id)
            .order_by(HabitLog.log_date.desc(), HabitLog.id.desc())  # type: ignore
        )
        return list(session.exec(statement).all())

    def _fallback_scan(self, session: Session, habit_id: str) -> list[HabitLog]:
        rows = session.exec(select(HabitLog).where(HabitLog.habit_id == habit_id)).all()
        return sorted(rows, key=_newest_first_key, reverse=True)

    def find_by_habit_and_day(self, habit_id: str, day: date | datetime) -> Optional[HabitLog]:
        """The log of a habit for one day key, if any."""
        key = day_key(day)
        with store_errors("find habit log"), self.session_factory() as session:
            obj = session.exec(
                select(HabitLog)
                .where(HabitLog.habit_id == habit_id)
                .where(HabitLog.log_date == key)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, log: HabitLog) -> str:
        """Create the log for ``(habit_id, log_date)`` in a single conditional write.

        A second create for the same habit and day (e.g. a racing toggle)
        overwrites ``completed``/``notes`` of the existing row instead of adding
        a duplicate. Returns the id of the stored row.
        """
        key = day_key(log.log_date)
        now = datetime.now(timezone.utc)
        values = {
            "id": log_document_id(log.habit_id, key),
            "habit_id": log.habit_id,
            "log_date": key,
            "completed": bool(log.completed),
            "notes": log.notes,
            "created_at": now,
            "updated_at": now,
        }
        with store_errors("create habit log"), self.session_factory() as session:
            connection = session.connection()
            dialect_insert = _DIALECT_INSERTS.get(connection.dialect.name)
            if dialect_insert is None:
                _insert_or_update(session, values)
            else:
                statement = dialect_insert(HabitLog.__table__).values(**values)
                statement = statement.on_conflict_do_update(
                    index_elements=["habit_id", "log_date"],
                    set_={
                        "completed": statement.excluded.completed,
                        "notes": statement.excluded.notes,
                        "updated_at": statement.excluded.updated_at,
                    },
                )
                connection.execute(statement)
            log_id = session.exec(
                select(HabitLog.id)
                .where(HabitLog.habit_id == log.habit_id)
                .where(HabitLog.log_date == key)
            ).one()
            session.commit()

        logger.info(
            "Habit log written",
            extra={"habit_id": log.habit_id, "log_id": log_id, "completed": values["completed"]},
        )
        return log_id

    def update(self, log_id: str, **fields: Any) -> None:
        """Partially update ``completed``/``notes``; refreshes ``updated_at``."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update habit log fields: {', '.join(sorted(unknown))}")

        with store_errors("update habit log"), self.session_factory() as session:
            log = session.get(HabitLog, log_id)
            if log is None:
                logger.warning("Habit log not found for update", extra={"log_id": log_id})
                return
            for name, value in fields.items():
                setattr(log, name, value)
            log.updated_at = datetime.now(timezone.utc)
            session.add(log)
            session.commit()

        logger.info("Habit log updated", extra={"log_id": log_id, "fields": sorted(fields)})

    def delete_for_habit(self, habit_id: str) -> int:
        """Delete every log of a habit; returns how many were removed."""
        with store_errors("delete habit logs"), self.session_factory() as session:
            removed = delete_logs_for_habit(session, habit_id)
            session.commit()
            return removed


def delete_logs_for_habit(session: Session, habit_id: str) -> int:
    """Delete a habit's logs inside the caller's transaction."""

    result = session.connection().execute(delete(HabitLog).where(HabitLog.habit_id == habit_id))
    return result.rowcount or 0


def _insert_or_update(session: Session, values: dict[str, Any]) -> None:
    """Conditional write for dialects without ``ON CONFLICT DO UPDATE``.

    The insert runs under a savepoint; losing the race on
    ``uq_habit_logs_habit_day`` rolls back to it and updates the winner's row.
    """

    table = HabitLog.__table__
    try:
        with session.begin_nested():
            session.connection().execute(insert(table).values(**values))
    except IntegrityError:
        result = session.connection().execute(
            update(table)
            .where(table.c.habit_id == values["habit_id"])
            .where(table.c.log_date == values["log_date"])
            .values(
                completed=values["completed"],
                notes=values["notes"],
                updated_at=values["updated_at"],
            )
        )
        if not result.rowcount:
            raise
        logger.debug(
            "Habit log already existed, updated in place",
            extra={"habit_id": values["habit_id"], "log_id": values["id"]},
        )
