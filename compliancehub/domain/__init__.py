"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation.
"""

from compliancehub.domain.enums import (
    AssignmentSource,
    AssignmentStatus,
    LegacyAssignmentStatus,
    MembershipStatus,
    RecordStatus,
    SubjectType,
    is_live,
    legacy_statuses_for_migration,
)
from compliancehub.domain.exceptions import (
    ComplianceHubException,
    InvalidStatusTransitionException,
    RecordMappingException,
    ResourceNotFoundException,
    StoreReadException,
    StoreWriteException,
    SubjectNotFoundException,
    ValidationException,
)
from compliancehub.domain.value_objects import AssignmentScope, ValidityWindow

__all__ = [
    # Enums
    "AssignmentSource",
    "AssignmentStatus",
    "LegacyAssignmentStatus",
    "MembershipStatus",
    "RecordStatus",
    "SubjectType",
    "is_live",
    "legacy_statuses_for_migration",
    # Exceptions
    "ComplianceHubException",
    "InvalidStatusTransitionException",
    "RecordMappingException",
    "ResourceNotFoundException",
    "StoreReadException",
    "StoreWriteException",
    "SubjectNotFoundException",
    "ValidationException",
    # Value objects
    "AssignmentScope",
    "ValidityWindow",
]
