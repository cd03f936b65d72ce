"""Shared pytest fixtures and test helpers for blogcore tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from blogcore.domain.post import Post
from blogcore.infrastructure.store import Store
from blogcore.services.blog import BlogService

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Location for a fresh store file inside the test's temp directory."""
    return tmp_path / "blog.db"


@pytest.fixture
def store(store_path: Path) -> Generator[Store]:
    """Empty store backed by a temp file."""
    s = Store(store_path)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def service(store: Store) -> BlogService:
    """BlogService over the empty temp store."""
    return BlogService(store)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_post(post_id: str, title: str = "A title", **kwargs: Any) -> Post:
    """Build a Post with a fixed creation time unless one is given."""
    kwargs.setdefault("created_at", T0)
    return Post(id=post_id, title=title, **kwargs)


def create_post(service: BlogService, title: str, **kwargs: Any) -> str:
    """Create a post via BlogService, asserting success. Returns its id."""
    now = kwargs.pop("now", T0)
    result = service.create_post({"title": title, **kwargs}, now=now)
    assert result.ok, result
    return str(result.data["id"])
