"""Repository interface (port) for typed access to the entitlement collections.

Implementations map raw store rows to domain entities at the store boundary.
Rows that fail mapping are skipped and counted in integrity_warnings.
All list methods raise StoreReadException when the collection cannot be read.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from compliancehub.domain.entities import (
        Capability,
        Department,
        Entitlement,
        EntitlementAssignment,
        JobTitle,
        LegacyAssignment,
        OrgUnit,
        OrgUnitType,
        Person,
        Position,
        ServiceAccount,
        Tenant,
        UserCapability,
        UserOrgUnit,
        UserPosition,
    )

    WritableRecord = (
        EntitlementAssignment | OrgUnit | OrgUnitType | Position | UserPosition | UserOrgUnit
    )


class IEntitlementRepository(Protocol):
    """Protocol for the entitlement engine's typed data access (DIP)."""

    @property
    def integrity_warnings(self) -> dict[str, int]:
        """Count of skipped or repaired rows per collection since construction."""

    async def list_tenants(self) -> list[Tenant]: ...

    async def list_departments(self) -> list[Department]: ...

    async def list_persons(self) -> list[Person]: ...

    async def get_person(self, person_id: str) -> Person | None: ...

    async def get_service_account(self, account_id: str) -> ServiceAccount | None: ...

    async def list_job_titles(self) -> list[JobTitle]: ...

    async def list_entitlements(self) -> list[Entitlement]: ...

    async def list_assignments(
        self, tenant_id: str | None = None
    ) -> list[EntitlementAssignment]:
        """Return EntitlementAssignment rows, optionally only those of one tenant."""

    async def get_assignment(self, assignment_id: str) -> EntitlementAssignment | None: ...

    async def list_legacy_assignments(self) -> list[LegacyAssignment]: ...

    async def list_org_unit_types(self) -> list[OrgUnitType]: ...

    async def list_org_units(self) -> list[OrgUnit]: ...

    async def list_positions(self) -> list[Position]: ...

    async def list_capabilities(self) -> list[Capability]: ...

    async def list_user_positions(self) -> list[UserPosition]: ...

    async def list_user_capabilities(self) -> list[UserCapability]: ...

    async def list_user_org_units(self) -> list[UserOrgUnit]: ...

    async def create_if_absent(self, record: WritableRecord) -> bool:
        """Create the record under its id unless that id exists. Raises StoreWriteException."""

    async def save(self, record: WritableRecord) -> None:
        """Create or replace the record. Raises StoreWriteException."""
