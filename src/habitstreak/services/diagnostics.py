"""Store health checks used by ``habitstreak doctor``."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Callable

from sqlalchemy.exc import DBAPIError
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog, new_document_id

logger = get_logger("services.diagnostics")


@dataclass
class StorePermissions:
    can_read_habits: bool = False
    can_write_habits: bool = False
    can_read_logs: bool = False
    can_write_logs: bool = False

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)

    @property
    def all_granted(self) -> bool:
        return all(self.as_dict().values())


def _probe_write(session_factory: Callable[[], Session], row) -> None:
    with session_factory() as session:
        session.add(row)
        session.flush()
        session.delete(row)
        session.commit()


def _probe_read(session_factory: Callable[[], Session], model) -> None:
    with session_factory() as session:
        session.exec(select(model).limit(1)).all()


def check_connection(session_factory: Callable[[], Session]) -> bool:
    """Write and remove a throwaway habit; False when the store refuses."""

    try:
        _probe_write(session_factory, Habit(name="connection probe"))
    except DBAPIError:
        logger.exception("Habit store connection test failed")
        return False
    logger.info("Habit store connection test passed")
    return True


def check_permissions(session_factory: Callable[[], Session]) -> StorePermissions:
    """Report read/write access on both collections without raising."""

    result = StorePermissions()
    probes = [
        ("can_read_habits", lambda: _probe_read(session_factory, Habit)),
        ("can_write_habits", lambda: _probe_write(session_factory, Habit(name="permission probe"))),
        ("can_read_logs", lambda: _probe_read(session_factory, HabitLog)),
        (
            "can_write_logs",
            lambda: _probe_write(
                session_factory,
                HabitLog(
                    id=new_document_id(),
                    habit_id="permission-probe",
                    log_date=date.today(),
                    completed=True,
                ),
            ),
        ),
    ]
    for attribute, probe in probes:
        try:
            probe()
        except DBAPIError as exc:
            logger.error("Permission check failed", extra={"check": attribute, "error": str(exc)})
            continue
        setattr(result, attribute, True)

    logger.info("Permission check finished", extra=result.as_dict())
    return result


__all__ = ["StorePermissions", "check_connection", "check_permissions"]
