"""PostForm — extracts and validates post attributes from untyped input.

A form accepts either an object exposing ``title``/``description``/``body``
attributes (such as a :class:`~blogcore.domain.post.Post`) or a mapping keyed
by field name, as submitted by a web layer. Attribute access wins; mapping
lookup is the fallback. Missing values extract as ``""``.

Forms are never persisted. The only rule is that ``title`` must not be empty;
whitespace is not stripped, so ``"   "`` is a valid title.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

FORM_FIELDS: tuple[str, ...] = ("title", "description", "body")

BLANK_MESSAGE = "can't be blank"


def _extract(source: Any, key: str) -> str:
    """Read *key* from *source* by attribute, then by string key."""
    if hasattr(source, key):
        value = getattr(source, key)
    elif isinstance(source, Mapping):
        value = source.get(key)
    else:
        value = None

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class PostForm:
    """Transient attribute set for creating or editing a post."""

    def __init__(self, source: Any = None) -> None:
        self.errors: dict[str, list[str]] = {}
        self.title = _extract(source, "title")
        self.description = _extract(source, "description")
        self.body = _extract(source, "body")

    def __repr__(self) -> str:
        return f"PostForm(title={self.title!r}, errors={self.errors!r})"

    @property
    def valid(self) -> bool:
        """True iff the last :meth:`validate` recorded no errors."""
        return not self.errors

    def validate(self) -> None:
        """Rebuild :attr:`errors` in place from the current field values."""
        self.errors.clear()
        if self.title == "":
            self.errors["title"] = [BLANK_MESSAGE]

    def to_dict(self) -> dict[str, str]:
        """Persistable attributes only (no id, timestamps, or errors)."""
        return {key: getattr(self, key) for key in FORM_FIELDS}

    def error_messages(self) -> list[str]:
        """Errors flattened to ``"<field> <message>"`` strings."""
        return [
            f"{name} {message}" for name, messages in self.errors.items() for message in messages
        ]
