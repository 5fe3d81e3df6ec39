"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine and provides small
helpers used by the application and tests. The default database is a
local SQLite file, `school.db`, next to the `school_api` package. Each
session checks out its own connection from the pool, so concurrent
requests never share a transaction.
"""

import logging
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings

BASE = Path(__file__).resolve().parent.parent
DEFAULT_DB_URL = f"sqlite:///{BASE / 'school.db'}"

logger = logging.getLogger("school_api.database")

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _make_engine(url: str):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        in_memory = url in _MEMORY_URLS
        if in_memory:
            # one connection for the whole process; only safe for single-threaded scripts
            logger.warning("in-memory SQLite shares a single connection; use a file database to serve requests")
            kwargs["poolclass"] = StaticPool
        eng = create_engine(url, echo=False, **kwargs)

        @event.listens_for(eng, "connect")
        def _configure_sqlite(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            # SQLite ignores ON DELETE SET NULL unless this is switched on per connection.
            cursor.execute("PRAGMA foreign_keys=ON")
            if not in_memory:
                # readers keep working while a writer commits
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

        return eng
    return create_engine(url, echo=False, pool_pre_ping=True)


engine = _make_engine(settings.DATABASE_URL or DEFAULT_DB_URL)


def create_db_and_tables():
    """Create database tables using SQLModel metadata."""
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def drop_db_and_tables():
    """Drop every table; used by tests and the demo seeding script."""
    from . import models  # noqa: F401
    SQLModel.metadata.drop_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
