"""Database engine, session factory, and declarative base."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from cityscope.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp used as the default for created/updated columns."""
    return datetime.now(UTC)


def use_immediate_transactions(engine: Engine) -> None:
    """Make every SQLite transaction take the write lock when it begins.

    pysqlite defers ``BEGIN`` until the first write and SQLite ignores
    ``SELECT ... FOR UPDATE``, so a read-then-write sequence such as a
    reaction toggle could interleave with another request. Starting with
    ``BEGIN IMMEDIATE`` makes concurrent transactions wait for each other
    instead (up to the driver's busy timeout).
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# Ensure model modules are imported so that metadata is populated when create_all runs.
import cityscope.models  # noqa: E402,F401

_url = make_url(settings.effective_database_url)
_is_sqlite = _url.get_backend_name() == "sqlite"

engine = create_engine(
    _url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)
if _is_sqlite:
    use_immediate_transactions(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
