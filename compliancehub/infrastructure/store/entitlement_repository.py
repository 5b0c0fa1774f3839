"""Typed entitlement repository over any IRecordStore (implements IEntitlementRepository)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from compliancehub.core.constants import (
    COLLECTION_CAPABILITIES,
    COLLECTION_DEPARTMENTS,
    COLLECTION_ENTITLEMENT_ASSIGNMENTS,
    COLLECTION_ENTITLEMENTS,
    COLLECTION_JOB_TITLES,
    COLLECTION_LEGACY_ASSIGNMENTS,
    COLLECTION_ORG_UNIT_TYPES,
    COLLECTION_ORG_UNITS,
    COLLECTION_POSITIONS,
    COLLECTION_SERVICE_ACCOUNTS,
    COLLECTION_TENANTS,
    COLLECTION_USER_CAPABILITIES,
    COLLECTION_USER_ORG_UNITS,
    COLLECTION_USER_POSITIONS,
    COLLECTION_USERS,
)
from compliancehub.domain.exceptions import StoreWriteException
from compliancehub.infrastructure.store.mapping import READERS, RowMapper, to_row

if TYPE_CHECKING:
    from compliancehub.application.interfaces.repositories import WritableRecord
    from compliancehub.application.interfaces.store import IRecordStore
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


class StoreEntitlementRepository:
    """Maps store rows to domain entities at the store boundary.

    Malformed rows are skipped and counted per collection in
    integrity_warnings. Reads propagate StoreReadException from the store.
    """

    def __init__(self, store: IRecordStore) -> None:
        self._store = store
        self._mapper = RowMapper()

    @property
    def store(self) -> IRecordStore:
        return self._store

    @property
    def integrity_warnings(self) -> dict[str, int]:
        return dict(self._mapper.warnings)

    async def _list(self, collection: str) -> list[Any]:
        rows = await self._store.get_all(collection)
        return self._mapper.map_rows(collection, rows, READERS[collection])

    async def _get(self, collection: str, record_id: str) -> Any:
        if not record_id:
            return None
        row = await self._store.get_one(collection, record_id)
        return self._mapper.map_one(collection, row, READERS[collection])

    async def list_tenants(self) -> list[Tenant]:
        return await self._list(COLLECTION_TENANTS)

    async def list_departments(self) -> list[Department]:
        return await self._list(COLLECTION_DEPARTMENTS)

    async def list_persons(self) -> list[Person]:
        return await self._list(COLLECTION_USERS)

    async def get_person(self, person_id: str) -> Person | None:
        return await self._get(COLLECTION_USERS, person_id)

    async def get_service_account(self, account_id: str) -> ServiceAccount | None:
        return await self._get(COLLECTION_SERVICE_ACCOUNTS, account_id)

    async def list_job_titles(self) -> list[JobTitle]:
        return await self._list(COLLECTION_JOB_TITLES)

    async def list_entitlements(self) -> list[Entitlement]:
        return await self._list(COLLECTION_ENTITLEMENTS)

    async def list_assignments(
        self, tenant_id: str | None = None
    ) -> list[EntitlementAssignment]:
        rows: list[EntitlementAssignment] = await self._list(COLLECTION_ENTITLEMENT_ASSIGNMENTS)
        if tenant_id is None:
            return rows
        return [row for row in rows if row.tenant_id == tenant_id]

    async def get_assignment(self, assignment_id: str) -> EntitlementAssignment | None:
        return await self._get(COLLECTION_ENTITLEMENT_ASSIGNMENTS, assignment_id)

    async def list_legacy_assignments(self) -> list[LegacyAssignment]:
        return await self._list(COLLECTION_LEGACY_ASSIGNMENTS)

    async def list_org_unit_types(self) -> list[OrgUnitType]:
        return await self._list(COLLECTION_ORG_UNIT_TYPES)

    async def list_org_units(self) -> list[OrgUnit]:
        return await self._list(COLLECTION_ORG_UNITS)

    async def list_positions(self) -> list[Position]:
        return await self._list(COLLECTION_POSITIONS)

    async def list_capabilities(self) -> list[Capability]:
        return await self._list(COLLECTION_CAPABILITIES)

    async def list_user_positions(self) -> list[UserPosition]:
        return await self._list(COLLECTION_USER_POSITIONS)

    async def list_user_capabilities(self) -> list[UserCapability]:
        return await self._list(COLLECTION_USER_CAPABILITIES)

    async def list_user_org_units(self) -> list[UserOrgUnit]:
        return await self._list(COLLECTION_USER_ORG_UNITS)

    async def create_if_absent(self, record: WritableRecord) -> bool:
        collection, row = to_row(record)
        return await self._store.create_if_absent(collection, record.id, row)

    async def save(self, record: WritableRecord) -> None:
        collection, row = to_row(record)
        result = await self._store.save(collection, record.id, row)
        if not result.success:
            raise StoreWriteException(collection, record.id, result.error or "write failed")
