"""Database session utilities."""
from contextlib import contextmanager
import logging
import os
import time
from typing import Iterator, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, Session

from ..domain import models  # noqa: F401  registers the tables on SQLModel.metadata

load_dotenv()

logger = logging.getLogger(__name__)

# Read DATABASE_URL from environment; fall back to local SQLite
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./capture_registry.db")


def make_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, future=True)

    engine = create_engine(
        url, echo=False, future=True, connect_args={"check_same_thread": False}
    )

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        # pysqlite defers BEGIN until the first write; take over transaction control
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        # SQLite has no row locks: hold the write lock for the whole transaction
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    class_=Session,
)


def init_db(bind_engine: Optional[Engine] = None, attempts: int = 30) -> None:
    """Create tables if they do not exist.

    Retries on startup to wait for the database service.
    """
    target_engine = bind_engine or engine
    last_err: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            SQLModel.metadata.create_all(target_engine)
            return
        except Exception as exc:  # pragma: no cover
            last_err = exc
            logger.warning("waiting for database... (%d/%d) %s", attempt, attempts, exc)
            time.sleep(1)
    if last_err:
        raise last_err


@contextmanager
def get_session() -> Iterator[Session]:
    """One registry call per scope: commit on success, roll back on error."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
