"""SQLite database engine and the single-table store schema via SQLAlchemy Core."""

from blogcore.infrastructure.database.engine import create_db_engine, init_database
from blogcore.infrastructure.database.schema import metadata, store_roots

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "store_roots",
]
