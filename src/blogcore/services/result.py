"""SuccessStatus, ErrorStatus, and ServiceError — the mutation contract.

INVARIANT: Every mutating service method returns a ResultStatus.
Validation failures are returned as an ErrorStatus, never raised.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from blogcore.domain.forms import PostForm


class ServiceError(BaseModel):
    """Structured error payload within an ErrorStatus."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class SuccessStatus(BaseModel):
    """A mutation that went through.

    Attributes:
        op: Name of the operation (e.g. ``"create_post"``).
        data: Operation-specific payload, such as the affected post ``id``.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True}

    ok: Literal[True] = True
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] | None = None


class ErrorStatus(BaseModel):
    """A mutation that was rejected; the store was not written.

    Attributes:
        op: Name of the operation.
        form: The submitted form, with field errors for re-rendering.
        error: Structured error (``VALIDATION_FAILED`` or ``NOT_FOUND``).
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    ok: Literal[False] = False
    op: str
    form: PostForm
    error: ServiceError
    meta: dict[str, Any] | None = None

    @property
    def errors(self) -> dict[str, list[str]]:
        """Field-keyed messages from the rejected form."""
        return self.form.errors


ResultStatus = SuccessStatus | ErrorStatus
