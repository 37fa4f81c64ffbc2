"""ServiceResult and ServiceError, the envelope every service returns.

INVARIANT: Service methods report expected failures (bad payload, unknown
content type, malformed schema) as ``ok=False`` results, never by raising.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed.

    ``code`` is stable and machine-readable: a validator failure code
    (``WRONG_TYPE``, ``NOT_IN_ENUM``, ...) or a service code such as
    ``CONTENT_TYPE_NOT_FOUND``. ``detail`` carries the field name, path or
    identifier involved.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``"validate"``, ``"list_types"``, ...).
        data: Operation-specific payload on success.
        warnings: Non-fatal problems (skipped documents, failed observers).
        error: Set when ``ok`` is False.
        meta: Optional extra metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build an ``ok=False`` result for *op*."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    def with_warnings(self, warnings: list[str]) -> ServiceResult:
        """Return a copy with *warnings* appended."""
        if not warnings:
            return self
        return self.model_copy(update={"warnings": [*self.warnings, *warnings]})
