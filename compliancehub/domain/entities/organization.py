"""Organizational entities: tenants, departments, job titles, positions, org units, memberships."""

from dataclasses import dataclass, field
from datetime import datetime

from compliancehub.domain.enums import MembershipStatus, RecordStatus
from compliancehub.domain.value_objects.core import ValidityWindow


@dataclass(frozen=True)
class Tenant:
    """Isolation boundary; every computation is scoped to one tenant."""

    id: str
    name: str
    slug: str | None = None


@dataclass(frozen=True)
class Department:
    """Legacy department, matched by name against a person's free-text department."""

    id: str
    tenant_id: str
    name: str
    status: RecordStatus = RecordStatus.ACTIVE


@dataclass(frozen=True)
class JobTitle:
    """Named role bundle. Persons reference job titles through Person.job_ids."""

    id: str
    tenant_id: str
    name: str
    department_id: str | None = None
    entitlement_ids: tuple[str, ...] = ()
    description: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE


@dataclass(frozen=True)
class Position:
    """Organizational position; the migration materializes one per job title."""

    id: str
    tenant_id: str
    name: str
    org_unit_id: str | None = None
    job_title_id: str | None = None
    description: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE


@dataclass(frozen=True)
class Capability:
    """Ad-hoc cross-cutting grant anchor."""

    id: str
    tenant_id: str
    name: str
    status: RecordStatus = RecordStatus.ACTIVE


@dataclass(frozen=True)
class OrgUnitType:
    """Kind of org unit per tenant (e.g. company, department)."""

    id: str
    tenant_id: str
    key: str
    name: str
    enabled: bool = True
    sort_order: int = 0


@dataclass(frozen=True)
class OrgUnit:
    """Hierarchical container used for scoping only, not for grant derivation."""

    id: str
    tenant_id: str
    name: str
    type_id: str
    parent_id: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE
    sort_order: int = 0


@dataclass(frozen=True)
class Membership:
    """Person membership in a position or capability (UserPosition / UserCapability).

    anchor_id is the position id or capability id.
    """

    id: str
    tenant_id: str
    user_id: str
    anchor_id: str
    status: MembershipStatus = MembershipStatus.ACTIVE
    window: ValidityWindow = field(default_factory=ValidityWindow)
    is_primary: bool = False

    def is_effective_at(self, as_of: datetime) -> bool:
        return self.status.is_live() and self.window.contains(as_of)


@dataclass(frozen=True)
class UserOrgUnit:
    """Person membership in an org unit (scoping only)."""

    id: str
    tenant_id: str
    user_id: str
    org_unit_id: str
    role_type: str = "member"
    status: MembershipStatus = MembershipStatus.ACTIVE
    window: ValidityWindow = field(default_factory=ValidityWindow)


@dataclass(frozen=True)
class UserPosition(Membership):
    """Person ↔ position membership."""

    @property
    def position_id(self) -> str:
        return self.anchor_id


@dataclass(frozen=True)
class UserCapability(Membership):
    """Person ↔ capability membership."""

    @property
    def capability_id(self) -> str:
        return self.anchor_id
