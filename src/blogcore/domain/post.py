"""Post record and the NotFound lookup result.

Posts are frozen pydantic models: the store hands out the same values it
persists, so nothing a caller does to a returned Post can reach stored state.
Changes go through :meth:`Post.merge`, which builds a new record.

Lookups that miss return :class:`NotFound` rather than raising or returning
None, so callers branch on the type::

    post = store.find(post_id)
    if isinstance(post, NotFound):
        ...
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

POST_FIELDS: tuple[str, ...] = ("id", "title", "body", "description", "created_at")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class Post(BaseModel):
    """A persisted blog post.

    Attributes:
        id: Store-generated identifier, immutable once assigned.
        title: Required, non-empty. Whitespace-only titles are allowed.
        description: Optional summary, ``""`` when absent.
        body: Optional post body, ``""`` when absent.
        created_at: Set once at creation and preserved by every update.
            Naive values are taken to be UTC, so every stored timestamp is
            timezone-aware and posts always sort against each other.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    body: str = ""
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def attributes(self) -> dict[str, Any]:
        """Full attribute mapping, keyed by field name."""
        return {key: getattr(self, key) for key in POST_FIELDS}

    def merge(self, attrs: dict[str, Any]) -> Post:
        """Return a new Post with *attrs* laid over this one's attributes."""
        return Post.model_validate({**self.attributes(), **attrs})


class NotFound(BaseModel):
    """Absent-result marker for a post lookup that missed."""

    model_config = {"frozen": True}

    id: str

    def __bool__(self) -> bool:
        return False
