"""Assignment entities: current multi-source model and the legacy flat model."""

from dataclasses import dataclass, field
from datetime import datetime

from compliancehub.domain.enums import (
    AssignmentSource,
    AssignmentStatus,
    LegacyAssignmentStatus,
    SubjectType,
)
from compliancehub.domain.value_objects.core import AssignmentScope, ValidityWindow


@dataclass(frozen=True)
class EntitlementAssignment:
    """Links a subject (person or inheritance anchor) to an entitlement.

    Rows are created by UI actions or the backfill migration and afterwards
    mutated only through status transitions.
    """

    id: str
    tenant_id: str
    subject_type: SubjectType
    subject_id: str
    entitlement_id: str
    status: AssignmentStatus
    assignment_source: AssignmentSource
    window: ValidityWindow = field(default_factory=ValidityWindow)
    scope: AssignmentScope = field(default_factory=AssignmentScope)
    granted_by: str | None = None
    granted_at: datetime | None = None
    ticket_ref: str | None = None
    notes: str | None = None
    reason: str | None = None

    @property
    def dedup_key(self) -> tuple[str, str, str, str]:
        """(tenant, subject type, subject id, entitlement) uniqueness key among live rows."""
        return (self.tenant_id, self.subject_type.value, self.subject_id, self.entitlement_id)

    def is_effective_at(self, as_of: datetime) -> bool:
        """Live status and inside the validity window."""
        return self.status.is_live() and self.window.contains(as_of)


@dataclass(frozen=True)
class LegacyAssignment:
    """Flat predecessor grant (user → entitlement). Read-only migration input."""

    id: str
    user_id: str
    entitlement_id: str
    status: LegacyAssignmentStatus
    granted_by: str | None = None
    granted_at: datetime | None = None
    window: ValidityWindow = field(default_factory=ValidityWindow)
    ticket_ref: str | None = None
    notes: str | None = None
