"""Domain exceptions for the entitlement engine.

Defines domain-level exceptions that represent business rule violations and
store failures. Public operations convert them to OperationResult; the
presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class ComplianceHubException(Exception):
    """Base exception for all entitlement engine errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ComplianceHubException):
    """Raised when input validation fails (e.g. invalid format or value)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(ComplianceHubException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'entitlementAssignment').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SubjectNotFoundException(ComplianceHubException):
    """Raised when neither a person nor a service account has the given id."""

    def __init__(self, subject_id: str) -> None:
        super().__init__(
            f"Subject not found: {subject_id}",
            "SUBJECT_NOT_FOUND",
            {"subject_id": subject_id},
        )


class StoreReadException(ComplianceHubException):
    """Raised when the record store cannot list or fetch a collection."""

    def __init__(self, collection: str, reason: str) -> None:
        """Initialize with the collection that failed and the backend reason.

        Args:
            collection: Collection name (e.g. 'entitlementAssignments').
            reason: Backend error message.
        """
        super().__init__(
            f"Failed to read collection {collection}: {reason}",
            "STORE_READ_FAILURE",
            {"collection": collection, "reason": reason},
        )


class StoreWriteException(ComplianceHubException):
    """Raised when a single record write fails."""

    def __init__(self, collection: str, record_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to write {collection}/{record_id}: {reason}",
            "STORE_WRITE_FAILURE",
            {"collection": collection, "record_id": record_id, "reason": reason},
        )


class RecordMappingException(ComplianceHubException):
    """Raised when a stored row cannot be mapped to its typed record.

    Callers skip the row and count it as a data-integrity warning.
    """

    def __init__(self, collection: str, record_id: str | None, reason: str) -> None:
        super().__init__(
            f"Malformed {collection} row {record_id or '<no id>'}: {reason}",
            "DATA_INTEGRITY",
            {"collection": collection, "record_id": record_id, "reason": reason},
        )


class InvalidStatusTransitionException(ComplianceHubException):
    """Raised when an assignment status change is not an allowed transition."""

    def __init__(self, assignment_id: str, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot change assignment {assignment_id} from {current} to {requested}",
            "INVALID_STATUS_TRANSITION",
            {
                "assignment_id": assignment_id,
                "current_status": current,
                "requested_status": requested,
            },
        )


class StoreNotConfiguredException(ComplianceHubException):
    """Raised when the configured record store backend could not be initialized."""

    def __init__(self, backend: str) -> None:
        super().__init__(
            message=f"Record store backend '{backend}' is not configured.",
            error_code="SERVICE_UNAVAILABLE",
            details={"backend": backend},
        )
