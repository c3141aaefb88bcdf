"""Composite index provisioning and the capability probe that relies on it."""

from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine

from ..errors import MissingIndexError
from ..logging_config import get_logger
from ..models.habit import HABIT_LOGS_COLLECTION

logger = get_logger("infra.indexes")

HABIT_LOGS_BY_DATE_INDEX = "ix_habit_logs_habit_id_log_date"

# Provisioned separately from create_all(), like a store-side index that may
# not exist yet on a fresh deployment.
COMPOSITE_INDEXES: dict[str, tuple[str, str]] = {
    HABIT_LOGS_BY_DATE_INDEX: (HABIT_LOGS_COLLECTION, "habit_id, log_date DESC"),
}


def _indexed(inspector, table: str, index_name: str) -> bool:
    return any(ix.get("name") == index_name for ix in inspector.get_indexes(table))


def has_index(bind: Engine | Connection, index_name: str) -> bool:
    """Return True when ``index_name`` exists on its table."""

    table, _ = COMPOSITE_INDEXES[index_name]
    inspector = inspect(bind)
    return inspector.has_table(table) and _indexed(inspector, table, index_name)


def require_index(bind: Engine | Connection, index_name: str) -> None:
    """Raise :class:`MissingIndexError` when the table exists without ``index_name``.

    A missing table is left for the query itself to report.
    """

    table, _ = COMPOSITE_INDEXES[index_name]
    inspector = inspect(bind)
    if inspector.has_table(table) and not _indexed(inspector, table, index_name):
        raise MissingIndexError(index_name, table)


def create_composite_indexes(engine: Engine) -> list[str]:
    """Create every missing composite index; return the names created."""

    created: list[str] = []
    with engine.begin() as connection:
        for name, (table, columns) in COMPOSITE_INDEXES.items():
            if has_index(connection, name):
                continue
            connection.exec_driver_sql(f"CREATE INDEX {name} ON {table} ({columns})")
            created.append(name)
            logger.info("Created composite index", extra={"index": name, "table": table})
    return created


def drop_composite_indexes(engine: Engine) -> None:
    """Drop the composite indexes (used to exercise the degraded query path)."""

    with engine.begin() as connection:
        for name in COMPOSITE_INDEXES:
            if has_index(connection, name):
                connection.exec_driver_sql(f"DROP INDEX {name}")
