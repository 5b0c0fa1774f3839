"""DTOs for assignment operations."""

from dataclasses import dataclass
from datetime import datetime

from compliancehub.domain.enums import AssignmentSource, AssignmentStatus, SubjectType


@dataclass(frozen=True)
class AssignmentInput:
    """Create/update request for an EntitlementAssignment. id None means create."""

    tenant_id: str
    subject_type: SubjectType
    subject_id: str
    entitlement_id: str
    id: str | None = None
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    assignment_source: AssignmentSource = AssignmentSource.MANUAL
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    scope_org_unit_id: str | None = None
    scope_include_children: bool = False
    scope_resource_context: str | None = None
    granted_by: str | None = None
    granted_at: datetime | None = None
    ticket_ref: str | None = None
    notes: str | None = None
    reason: str | None = None
