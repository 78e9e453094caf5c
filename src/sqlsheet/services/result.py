"""ServiceResult and ServiceError — the contract every service returns.

INVARIANT: All service-layer methods return ServiceResult.
The CLI formats it for humans or as JSON; tests inspect it directly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"render"``).
        data: Operation-specific payload.
        warnings: Non-fatal findings.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (source name, timings).
        raw: The artifact bytes behind a verbatim payload, written by the
            CLI as-is. Never serialized.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
    raw: bytes | None = Field(default=None, exclude=True, repr=False)
