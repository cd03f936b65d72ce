"""BaseService — foundation for blogcore services.

Every service receives a :class:`Store` at construction time and owns its
transaction boundaries through the store's operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blogcore.infrastructure.store import Store


class BaseService:
    """Base for service-layer classes.

    Usage::

        class BlogService(BaseService):
            def get_post(self, post_id: str) -> Post | NotFound:
                return self._store.find(post_id)
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @property
    def store(self) -> Store:
        """The store this service reads and writes."""
        return self._store
