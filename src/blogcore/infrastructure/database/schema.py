"""SQLAlchemy Core table definition for the store file.

The store keeps a handful of named roots, each a whole JSON document in one
row. Posts live under a single root, so a write transaction always replaces
the complete post table and never a single record.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

store_roots = Table(
    "store_roots",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),  # JSON document
)
