"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The CLI renderers and the interactive menu consume this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Error codes
UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
NOTHING_SELECTED = "NOTHING_SELECTED"
CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
HISTORY_DISABLED = "HISTORY_DISABLED"
HISTORY_UNAVAILABLE = "HISTORY_UNAVAILABLE"
NOT_FOUND = "NOT_FOUND"
INVALID_INPUT = "INVALID_INPUT"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"scan"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        warnings: list[str] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Shorthand for an ``ok=False`` result."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
            warnings=warnings or [],
        )
