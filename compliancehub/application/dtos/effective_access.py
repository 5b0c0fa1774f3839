"""DTOs for effective access resolution."""

from dataclasses import dataclass, field
from datetime import datetime

from compliancehub.domain.enums import SubjectType
from compliancehub.domain.value_objects.core import AssignmentScope


@dataclass(frozen=True)
class GrantSource:
    """One provenance path for an effective grant."""

    assignment_id: str
    subject_type: SubjectType | None
    subject_id: str
    scope: AssignmentScope = field(default_factory=AssignmentScope)


@dataclass(frozen=True)
class EffectiveGrant:
    """An entitlement currently held by a subject, with every contributing source.

    Computed per call, never persisted.
    """

    entitlement_id: str
    resource_id: str
    name: str
    is_admin: bool
    sources: tuple[GrantSource, ...]

    @property
    def contributing_assignment_ids(self) -> list[str]:
        return [source.assignment_id for source in self.sources]


@dataclass(frozen=True)
class ResolutionStats:
    """Observability counters for one resolution (rows skipped and why)."""

    matched_rows: int = 0
    excluded_by_status: int = 0
    excluded_by_window: int = 0
    malformed_rows: int = 0
    dangling_entitlement_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class EffectiveAccessReport:
    """Result of resolve_effective_access for one subject."""

    subject_id: str
    subject_kind: str
    tenant_id: str
    as_of: datetime
    grants: list[EffectiveGrant]
    stats: ResolutionStats = field(default_factory=ResolutionStats)
