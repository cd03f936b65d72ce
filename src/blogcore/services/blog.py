"""BlogService — post use cases over a Store.

Mutations follow one pipeline (:func:`process_post_form`):

    BUILD FORM → VALIDATE → PERSIST → RESPOND

A form that fails validation short-circuits to an :class:`ErrorStatus`
before the store is touched, so persistence code never sees invalid input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from blogcore.domain.forms import PostForm
from blogcore.domain.post import NotFound, Post, utc_now
from blogcore.infrastructure.store import Store
from blogcore.services.base import BaseService
from blogcore.services.result import ErrorStatus, ResultStatus, ServiceError, SuccessStatus
from blogcore.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from blogcore.config.settings import BlogSettings

logger = logging.getLogger(__name__)

PersistFn = Callable[[PostForm], Post | NotFound | None]


def process_post_form(params: Any, persist: PersistFn, *, op: str) -> ResultStatus:
    """Validate *params* and hand the form to *persist* only if it is valid."""
    with trace_span("validate"):
        form = PostForm(params)
        form.validate()

    if not form.valid:
        logger.debug("%s rejected: %s", op, form.errors)
        return ErrorStatus(
            op=op,
            form=form,
            error=ServiceError(
                code="VALIDATION_FAILED",
                message="; ".join(form.error_messages()),
                detail={"errors": form.errors},
            ),
        )

    with trace_span("persist") as span:
        outcome = persist(form)
        if span is not None and isinstance(outcome, Post | NotFound):
            span.annotate("post_id", outcome.id)

    if isinstance(outcome, NotFound):
        return ErrorStatus(
            op=op,
            form=form,
            error=ServiceError(
                code="NOT_FOUND",
                message=f"No post with id {outcome.id!r}",
                detail={"id": outcome.id},
            ),
        )

    data: dict[str, Any] = {}
    if isinstance(outcome, Post):
        data["id"] = outcome.id
    return SuccessStatus(op=op, data=data)


class BlogService(BaseService):
    """List, read, create, update, and delete posts."""

    @classmethod
    def from_settings(cls, settings: BlogSettings) -> BlogService:
        """Open the configured store.

        Logging and telemetry stay with the embedding application
        (:func:`~blogcore.config.logging.configure_from_settings`,
        :func:`~blogcore.services.telemetry.enable_telemetry`).
        """
        return cls(Store.from_settings(settings))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_posts(self) -> list[Post]:
        """All posts, newest ``created_at`` first.

        The sort is stable, so posts created at the same instant keep the
        store's order, which is itself undefined.
        """
        return sorted(self._store.all(), key=lambda post: post.created_at, reverse=True)

    def get_post(self, post_id: str) -> Post | NotFound:
        """The post for *post_id*, or :class:`NotFound`."""
        return self._store.find(post_id)

    def new_post_form(self) -> PostForm:
        """An empty form for composing a post."""
        return PostForm()

    def edit_post_form(self, post_id: str) -> PostForm | NotFound:
        """A form pre-filled from the stored post."""
        post = self._store.find(post_id)
        if isinstance(post, NotFound):
            return post
        return PostForm(post)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @traced
    def create_post(
        self,
        params: Any,
        *,
        now: datetime | None = None,
    ) -> ResultStatus:
        """Create a post from *params*, stamped with *now* (default: current UTC time)."""
        created_at = now if now is not None else utc_now()

        def persist(form: PostForm) -> Post:
            return self._store.create({**form.to_dict(), "created_at": created_at})

        return process_post_form(params, persist, op="create_post")

    @traced
    def update_post(self, post_id: str, params: Any) -> ResultStatus:
        """Overwrite title/description/body of *post_id*; ``created_at`` is kept."""

        def persist(form: PostForm) -> Post | NotFound:
            return self._store.update(post_id, form.to_dict())

        return process_post_form(params, persist, op="update_post")

    @traced
    def delete_post(self, post_id: str) -> SuccessStatus:
        """Remove *post_id*. Succeeds whether or not the post existed."""
        removed = self._store.destroy(post_id)
        return SuccessStatus(op="delete_post", data={"id": post_id, "removed": removed})
