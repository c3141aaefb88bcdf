"""Database infrastructure: engine, schema and session factory."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Tuple

from sqlalchemy.exc import DBAPIError
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..errors import ConnectivityError
from ..logging_config import get_logger
from .indexes import create_composite_indexes

logger = get_logger("infra.database")


def create_db_engine(config: BaseConfig):
    """Create SQLModel engine from configuration."""
    engine_options = config.sqlalchemy_engine_options()
    return create_engine(config.DATABASE_URL, **engine_options)


def init_database(engine) -> None:
    """Create the habit collections if they do not exist."""
    # Import models so their tables are registered on the metadata
    from .. import models  # noqa: F401

    try:
        SQLModel.metadata.create_all(engine)
    except DBAPIError as exc:
        raise ConnectivityError(f"Could not initialise habit store: {exc}") from exc


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into :class:`ConnectivityError`."""

    try:
        yield
    except DBAPIError as exc:
        logger.error("Store operation failed", extra={"operation": operation, "error": str(exc)})
        raise ConnectivityError(f"{operation} failed: {exc.orig or exc}") from exc


def create_session_factory(engine):
    """Create a session factory function."""

    @contextmanager
    def factory() -> Iterator[Session]:
        """Create a new session wrapped in its own transaction."""
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple:
    """Convenience bootstrap for engine + session_factory with schema init.

    Composite indexes are provisioned only when ``AUTO_CREATE_INDEXES`` is on;
    otherwise log history runs through the fallback query path until they are
    created. Returns (engine, session_factory).
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    if cfg.AUTO_CREATE_INDEXES:
        with store_errors("create indexes"):
            create_composite_indexes(engine)
    return engine, create_session_factory(engine)
