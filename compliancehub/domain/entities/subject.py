"""Subject entities: persons and service accounts able to hold entitlements."""

from dataclasses import dataclass, field
from datetime import datetime

from compliancehub.domain.enums import RecordStatus
from compliancehub.domain.value_objects.core import ValidityWindow


@dataclass(frozen=True)
class Person:
    """A human identity. Job title membership is implicit through job_ids."""

    id: str
    tenant_id: str
    display_name: str = ""
    email: str | None = None
    department: str | None = None
    job_ids: tuple[str, ...] = ()
    enabled: bool = True


@dataclass(frozen=True)
class ServiceAccount:
    """Non-human identity carrying a fixed entitlement list."""

    id: str
    tenant_id: str
    name: str
    entitlement_ids: tuple[str, ...] = ()
    status: RecordStatus = RecordStatus.ACTIVE
    window: ValidityWindow = field(default_factory=ValidityWindow)

    def holds_access_at(self, as_of: datetime) -> bool:
        """Archived or expired accounts hold nothing."""
        return self.status is RecordStatus.ACTIVE and self.window.contains(as_of)


@dataclass(frozen=True)
class SubjectMembership:
    """Current membership sets of a person, as consumed by the resolver."""

    subject_id: str
    job_title_ids: frozenset[str] = frozenset()
    position_ids: frozenset[str] = frozenset()
    capability_ids: frozenset[str] = frozenset()
