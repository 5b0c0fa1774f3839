"""Uniform result envelope for public operations.

Public operations (resolve, migrate, verify) never raise across their
boundary; they return OperationResult with either data or an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from compliancehub.domain.exceptions import ComplianceHubException

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """success + data, or success=False + error message and code."""

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T) -> OperationResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, exc: ComplianceHubException) -> OperationResult[T]:
        """Build a failed result from a domain exception."""
        return cls(
            success=False,
            error=exc.message,
            error_code=exc.error_code,
            details=dict(exc.details),
        )
