"""Domain entities: typed records for every store collection the engine reads or writes."""

from compliancehub.domain.entities.assignment import (
    EntitlementAssignment,
    LegacyAssignment,
)
from compliancehub.domain.entities.catalog import Entitlement
from compliancehub.domain.entities.organization import (
    Capability,
    Department,
    JobTitle,
    Membership,
    OrgUnit,
    OrgUnitType,
    Position,
    Tenant,
    UserCapability,
    UserOrgUnit,
    UserPosition,
)
from compliancehub.domain.entities.subject import (
    Person,
    ServiceAccount,
    SubjectMembership,
)

__all__ = [
    "Capability",
    "Department",
    "Entitlement",
    "EntitlementAssignment",
    "JobTitle",
    "LegacyAssignment",
    "Membership",
    "OrgUnit",
    "OrgUnitType",
    "Person",
    "Position",
    "ServiceAccount",
    "SubjectMembership",
    "Tenant",
    "UserCapability",
    "UserOrgUnit",
    "UserPosition",
]
