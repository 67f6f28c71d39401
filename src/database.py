# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database engine, session factory and transaction scope."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.config import get_settings
from src.exceptions import StorageError

logger = logging.getLogger(__name__)


# Execution option marking a connection that opens a write unit
WRITE_UNIT = "vacaytrack_write_unit"


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL.

    SQLite is treated as a single-writer store in WAL mode. Write units open
    with BEGIN IMMEDIATE so concurrent writers queue on the write lock instead
    of reading a balance that another transaction is about to change. Reads
    open with a deferred BEGIN and never block a writer.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    engine = create_engine(
        url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        # Hand transaction control to SQLAlchemy (pysqlite recipe)
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        # Readers keep their snapshot while a writer commits
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        if conn.get_execution_options().get(WRITE_UNIT):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


_settings = get_settings()
engine = create_db_engine(_settings.DATABASE_URL, echo=_settings.SQL_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def storage_errors(db: Session) -> Iterator[Session]:
    """Wrap storage failures of a read-only block in StorageError.

    Reads run in a deferred transaction, which holds no write lock.
    """
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage error: {e}")
        raise StorageError("Storage operation failed") from e


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a block of writes as one unit of work.

    Any read transaction still open on the session is ended first, so the
    unit starts fresh with the write lock held. Commits when the block
    finishes, rolls back on any exception. Storage errors are wrapped in
    StorageError; domain errors propagate unchanged.

    Usage:
        >>> with transaction(db):
        ...     repo_call_one(db)
        ...     repo_call_two(db)
    """
    try:
        if db.in_transaction():
            db.commit()
        db.connection(execution_options={WRITE_UNIT: True})
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back after storage error: {e}")
        raise StorageError("Storage operation failed") from e
    except Exception:
        db.rollback()
        raise
