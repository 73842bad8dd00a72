"""ServiceResult and ServiceError: the contract between services and the CLI.

The graph façade raises :class:`~kvgraph.domain.errors.GraphError`;
:class:`~kvgraph.services.admin.AdminService` turns each call into a
ServiceResult so the CLI can render success and failure uniformly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kvgraph.domain.errors import GraphError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: GraphError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.detail)


class ServiceResult(BaseModel):
    """Return type for every CLI-facing operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"add_vertex"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, exc: GraphError) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
