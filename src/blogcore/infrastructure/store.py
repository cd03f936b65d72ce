"""Store — transactional keeping of the post table in one SQLite file.

The file holds named roots (see :mod:`blogcore.infrastructure.database.schema`);
posts live under the ``"posts"`` root as one JSON mapping of id → Post.
:meth:`Store.transaction` loads roots into memory on first access and, for
write transactions, flushes every touched root back before commit:

- **Writes** run under ``BEGIN IMMEDIATE``: one writer at a time, and the
  write lock is held from the first read to the commit.
- **Reads** run under ``BEGIN DEFERRED`` and see the last committed snapshot.
  Nothing is written back, and assigning a root raises
  :class:`ReadOnlyTransactionError`.
- An exception inside the block rolls the whole transaction back.

I/O and locking failures from SQLite propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from blogcore.domain.ids import generate_post_id
from blogcore.domain.post import NotFound, Post
from blogcore.infrastructure.database.engine import init_database
from blogcore.infrastructure.database.schema import store_roots

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from blogcore.config.settings import BlogSettings

logger = logging.getLogger(__name__)

POSTS_KEY = "posts"

_POST_TABLE: TypeAdapter[dict[str, Post]] = TypeAdapter(dict[str, Post])


class ReadOnlyTransactionError(RuntimeError):
    """Raised when a read-only transaction tries to replace a root."""


# ---------------------------------------------------------------------------
# StoreTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction with in-memory copies of the roots it touched.

    Roots are mutable dicts while the transaction is open. In a write
    transaction every root that was loaded is flushed back on success, so
    in-place edits (``txn["posts"][post.id] = post``) persist.
    """

    conn: Connection
    read_only: bool = False
    _roots: dict[str, dict[str, Post]] = field(default_factory=dict, repr=False)
    _touched: set[str] = field(default_factory=set, repr=False)
    _discarded: bool = field(default=False, repr=False)

    def get(self, key: str, default: dict[str, Post] | None = None) -> dict[str, Post] | None:
        """Load root *key*, or return *default* if the file has no such root."""
        if key not in self._roots:
            row = self.conn.execute(
                select(store_roots.c.value).where(store_roots.c.key == key)
            ).first()
            if row is None:
                return default
            self._roots[key] = _POST_TABLE.validate_json(row.value)
        if not self.read_only:
            self._touched.add(key)
        return self._roots[key]

    def __getitem__(self, key: str) -> dict[str, Post]:
        table = self.get(key)
        if table is None:
            raise KeyError(key)
        return table

    def __setitem__(self, key: str, table: Mapping[str, Post]) -> None:
        if self.read_only:
            msg = f"Cannot assign root {key!r} in a read-only transaction"
            raise ReadOnlyTransactionError(msg)
        self._roots[key] = dict(table)
        self._touched.add(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def setdefault(self, key: str, default: Mapping[str, Post]) -> dict[str, Post]:
        """Return root *key*, creating it from *default* when absent."""
        table = self.get(key)
        if table is None:
            self[key] = default
            table = self._roots[key]
        return table

    def discard(self) -> None:
        """Drop pending changes; the transaction then ends without writing."""
        self._discarded = True

    def flush(self) -> None:
        """Write every touched root back (full-document replace)."""
        if self._discarded:
            return
        for key in sorted(self._touched):
            raw = _POST_TABLE.dump_json(self._roots[key]).decode("utf-8")
            stmt = sqlite_insert(store_roots).values(key=key, value=raw)
            stmt = stmt.on_conflict_do_update(
                index_elements=[store_roots.c.key],
                set_={"value": stmt.excluded.value},
            )
            self.conn.execute(stmt)
            logger.debug("Flushed root %s (%d records)", key, len(self._roots[key]))


# ---------------------------------------------------------------------------
# Store — the repository
# ---------------------------------------------------------------------------


class Store:
    """Transactional post repository over a single SQLite file.

    Construction runs two transactions: the first makes sure the ``posts``
    root exists, the second (only when *posts* is non-empty) seeds it.
    Seeding an already-populated file adds or replaces the given posts and
    keeps everything else.
    """

    def __init__(self, path: Path | str, posts: Iterable[Post] = ()) -> None:
        self._path = Path(path)
        self._engine: Engine = init_database(self._path)
        self._writer: Engine = self._engine.execution_options(sqlite_begin="IMMEDIATE")

        with self.transaction() as txn:
            txn.setdefault(POSTS_KEY, {})

        seed = list(posts)
        if seed:
            with self.transaction() as txn:
                table = txn[POSTS_KEY]
                for post in seed:
                    table[post.id] = post
            logger.debug("Seeded %d posts into %s", len(seed), self._path)

    @classmethod
    def from_settings(cls, settings: BlogSettings) -> Store:
        """Open the store file configured by *settings*."""
        return cls(settings.store_path)

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    def close(self) -> None:
        """Release pooled connections. The store must not be used afterwards."""
        self._engine.dispose()

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @contextmanager
    def transaction(self, *, read_only: bool = False) -> Iterator[StoreTransaction]:
        """Open a read-only or read-write transaction over the store roots.

        Usage::

            with store.transaction() as txn:
                txn["posts"][post.id] = post
                # Flushed and committed on success, rolled back on failure.
        """
        engine = self._engine if read_only else self._writer
        with engine.begin() as conn:
            txn = StoreTransaction(conn=conn, read_only=read_only)
            yield txn
            if not read_only:
                txn.flush()

    # ------------------------------------------------------------------
    # Post operations
    # ------------------------------------------------------------------

    def all(self) -> list[Post]:
        """Every stored post, in no particular order."""
        with self.transaction(read_only=True) as txn:
            return list(txn[POSTS_KEY].values())

    def find(self, post_id: str) -> Post | NotFound:
        """The post stored under *post_id*, or :class:`NotFound`."""
        with self.transaction(read_only=True) as txn:
            post = txn[POSTS_KEY].get(post_id)
        if post is None:
            return NotFound(id=post_id)
        return post

    def create(self, attrs: Mapping[str, Any]) -> Post:
        """Persist a new post built from *attrs* and a fresh ID."""
        post = Post.model_validate({**attrs, "id": generate_post_id()})
        with self.transaction() as txn:
            txn[POSTS_KEY][post.id] = post
        logger.debug("Created post %s", post.id)
        return post

    def update(self, post_id: str, attrs: Mapping[str, Any]) -> Post | NotFound:
        """Merge *attrs* over the stored post in one read-modify-write transaction.

        ``id`` and ``created_at`` are kept unless *attrs* overrides them.
        Returns :class:`NotFound` without writing when *post_id* is absent.
        """
        with self.transaction() as txn:
            table = txn[POSTS_KEY]
            current = table.get(post_id)
            if current is None:
                txn.discard()
                return NotFound(id=post_id)
            post = current.merge(dict(attrs))
            table[post.id] = post
        logger.debug("Updated post %s", post.id)
        return post

    def destroy(self, post_id: str) -> bool:
        """Remove *post_id*. Returns False (and is a no-op) if it was absent."""
        with self.transaction() as txn:
            removed = txn[POSTS_KEY].pop(post_id, None) is not None
            if not removed:
                txn.discard()
        if removed:
            logger.debug("Destroyed post %s", post_id)
        return removed
