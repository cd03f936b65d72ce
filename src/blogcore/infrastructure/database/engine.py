"""Database engine setup for the single-file SQLite store.

SQLite is the durable medium: WAL mode lets readers proceed while a writer
holds the lock, and every transaction is ACID. pysqlite's own implicit
BEGIN handling is switched off so that the engine emits the BEGIN itself;
write transactions ask for ``BEGIN IMMEDIATE`` via the ``sqlite_begin``
execution option and take the write lock before reading anything.

SQLAlchemy Core (not ORM) is used: the store reads and writes whole JSON
documents, so there is nothing for an identity map to track.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine

from blogcore.infrastructure.database.schema import metadata

BEGIN_MODES = frozenset({"DEFERRED", "IMMEDIATE", "EXCLUSIVE"})


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and engine-controlled BEGIN."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
        if mode not in BEGIN_MODES:
            msg = f"Unsupported SQLite BEGIN mode: {mode!r}"
            raise ValueError(msg)
        conn.exec_driver_sql(f"BEGIN {mode}")

    return engine


def init_database(db_path: Path) -> Engine:
    """Open (or create) the store database at *db_path*.

    Creates missing parent directories and the ``store_roots`` table.
    Idempotent — safe to call on an existing file.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
