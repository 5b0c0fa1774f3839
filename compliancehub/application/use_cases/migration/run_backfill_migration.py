"""Backfill migration: upgrade the legacy flat grant model into the multi-source model.

Every record is written under a deterministic composite id through the
repository's create_if_absent, so a second run with the same scope writes
nothing and counts every item as skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from compliancehub.application.dtos.audit import AuditEntry
from compliancehub.application.dtos.migration import (
    BackfillCounters,
    BackfillRunResult,
    BackfillScope,
)
from compliancehub.application.dtos.operation import OperationResult
from compliancehub.core.constants import (
    ALL_TENANTS,
    DEFAULT_ORG_UNIT_TYPES,
    ID_PREFIX_DEPARTMENT_UNIT,
    ID_PREFIX_JOB_ASSIGNMENT,
    ID_PREFIX_JOB_POSITION,
    ID_PREFIX_LEGACY_ASSIGNMENT,
    ID_PREFIX_MIGRATION_RUN,
    ID_PREFIX_ORG_UNIT_TYPE,
    ID_PREFIX_TENANT_ROOT_UNIT,
    ID_PREFIX_USER_ORG_UNIT,
    ID_PREFIX_USER_POSITION,
    ORG_UNIT_TYPE_COMPANY,
    ORG_UNIT_TYPE_DEPARTMENT,
)
from compliancehub.domain.entities import (
    Department,
    EntitlementAssignment,
    JobTitle,
    LegacyAssignment,
    OrgUnit,
    OrgUnitType,
    Person,
    Position,
    Tenant,
    UserOrgUnit,
    UserPosition,
)
from compliancehub.domain.enums import (
    AssignmentSource,
    AssignmentStatus,
    LegacyAssignmentStatus,
    MembershipStatus,
    RecordStatus,
    SubjectType,
    legacy_statuses_for_migration,
)
from compliancehub.domain.exceptions import (
    ComplianceHubException,
    ResourceNotFoundException,
    StoreWriteException,
)
from compliancehub.domain.value_objects import ValidityWindow
from compliancehub.shared.enums import ActorType, AuditAction
from compliancehub.shared.telemetry.logging import get_logger
from compliancehub.shared.utils.datetime import utc_now
from compliancehub.shared.utils.generators import composite_id

if TYPE_CHECKING:
    from datetime import datetime

    from compliancehub.application.interfaces.repositories import (
        IEntitlementRepository,
        WritableRecord,
    )
    from compliancehub.application.interfaces.services import IAuditSink

logger = get_logger(__name__)

JOB_TITLE_BACKFILL_REASON = "Backfill from job title default entitlements"
LEGACY_BACKFILL_REASON = "Backfill from legacy assignment"

_LEGACY_TO_ASSIGNMENT_STATUS = {
    LegacyAssignmentStatus.ACTIVE: AssignmentStatus.ACTIVE,
    LegacyAssignmentStatus.REQUESTED: AssignmentStatus.REQUESTED,
    LegacyAssignmentStatus.PENDING_REMOVAL: AssignmentStatus.PENDING_REMOVAL,
}


@dataclass
class _Snapshot:
    """Every collection the run reads, loaded before the first write."""

    tenants: list[Tenant]
    departments: list[Department]
    persons: list[Person]
    job_titles: list[JobTitle]
    legacy_assignments: list[LegacyAssignment]
    assignments: list[EntitlementAssignment]
    org_unit_types: list[OrgUnitType]
    org_units: list[OrgUnit]
    positions: list[Position]
    user_org_units: list[UserOrgUnit]
    user_positions: list[UserPosition]


@dataclass
class _RunState:
    """Indexes of what exists (read or created during this run)."""

    now: datetime
    counters: BackfillCounters = field(default_factory=BackfillCounters)
    failed_record_ids: list[str] = field(default_factory=list)
    org_unit_type_ids: dict[tuple[str, str], str] = field(default_factory=dict)
    org_unit_ids: set[str] = field(default_factory=set)
    position_ids: set[str] = field(default_factory=set)
    user_org_links: set[tuple[str, str]] = field(default_factory=set)
    user_position_links: set[tuple[str, str]] = field(default_factory=set)
    live_assignment_keys: set[tuple[str, str, str, str]] = field(default_factory=set)
    any_assignment_keys: set[tuple[str, str, str, str]] = field(default_factory=set)


class BackfillMigrationUseCase:
    """Creates org units, positions, memberships and assignment rows from legacy data.

    Steps per run (tenants, job titles and persons in store order):
    1. company/department org unit types and a root org unit per tenant;
    2. one org unit per department;
    3. one position per job title, plus job title assignment rows for its
       bundled entitlements;
    4. org unit and position memberships per person;
    5. person assignment rows for legacy assignments with an allowed status.

    Read failures abort before any write. A failed write is logged and
    counted; earlier writes stay and a re-run fills the gap.
    """

    def __init__(self, repo: IEntitlementRepository, audit_sink: IAuditSink) -> None:
        self._repo = repo
        self._audit_sink = audit_sink

    async def run(self, scope: BackfillScope) -> OperationResult[BackfillRunResult]:
        """Run the backfill for one tenant or all tenants.

        Returns:
            OperationResult with BackfillRunResult, or a failed result when a
            collection cannot be read or the scoped tenant does not exist.
        """
        started_at = utc_now()
        try:
            snapshot = await self._load(scope)
        except ComplianceHubException as exc:
            logger.error("Backfill migration aborted before any write: %s", exc.message)
            return OperationResult.fail(exc)

        state = _RunState(now=started_at)
        self._index_existing(snapshot, state)
        tenants = [t for t in snapshot.tenants if _in_scope(scope, t.id)]

        logger.info(
            "Backfill migration started (tenant=%s, include_requested=%s)",
            scope.tenant_id or ALL_TENANTS,
            scope.include_requested_assignments,
        )
        for tenant in tenants:
            await self._ensure_org_structure(tenant, snapshot.departments, state)
        for job_title in snapshot.job_titles:
            if _in_scope(scope, job_title.tenant_id):
                await self._backfill_job_title(job_title, scope, state)
        for person in snapshot.persons:
            if _in_scope(scope, person.tenant_id):
                await self._backfill_person(person, snapshot.departments, state)
        await self._backfill_legacy_assignments(snapshot, scope, state)

        finished_at = utc_now()
        counters = state.counters
        logger.info(
            "Backfill migration finished: created=%d skipped=%d write_failures=%d",
            counters.total_created,
            counters.skipped_existing,
            counters.write_failures,
        )
        await self._audit_sink.record(
            AuditEntry(
                tenant_id=scope.tenant_id or ALL_TENANTS,
                actor_id=scope.actor_id,
                actor_type=ActorType.SYSTEM,
                action=AuditAction.MIGRATION_RUN,
                entity_type="migration",
                entity_id=composite_id(
                    ID_PREFIX_MIGRATION_RUN, str(int(finished_at.timestamp() * 1000))
                ),
                after=counters.to_dict(),
            )
        )
        return OperationResult.ok(
            BackfillRunResult(
                scope=scope,
                tenant_ids=tuple(t.id for t in tenants),
                counters=counters,
                started_at=started_at,
                finished_at=finished_at,
                failed_record_ids=tuple(state.failed_record_ids),
            )
        )

    async def _load(self, scope: BackfillScope) -> _Snapshot:
        repo = self._repo
        snapshot = _Snapshot(
            tenants=await repo.list_tenants(),
            departments=await repo.list_departments(),
            persons=await repo.list_persons(),
            job_titles=await repo.list_job_titles(),
            legacy_assignments=await repo.list_legacy_assignments(),
            assignments=await repo.list_assignments(),
            org_unit_types=await repo.list_org_unit_types(),
            org_units=await repo.list_org_units(),
            positions=await repo.list_positions(),
            user_org_units=await repo.list_user_org_units(),
            user_positions=await repo.list_user_positions(),
        )
        if scope.tenant_id is not None and not any(
            t.id == scope.tenant_id for t in snapshot.tenants
        ):
            raise ResourceNotFoundException("tenant", scope.tenant_id)
        return snapshot

    @staticmethod
    def _index_existing(snapshot: _Snapshot, state: _RunState) -> None:
        for out in snapshot.org_unit_types:
            state.org_unit_type_ids.setdefault((out.tenant_id, out.key), out.id)
        state.org_unit_ids.update(unit.id for unit in snapshot.org_units)
        state.position_ids.update(position.id for position in snapshot.positions)
        state.user_org_links.update((m.user_id, m.org_unit_id) for m in snapshot.user_org_units)
        state.user_position_links.update(
            (m.user_id, m.position_id) for m in snapshot.user_positions
        )
        for row in snapshot.assignments:
            state.any_assignment_keys.add(row.dedup_key)
            if row.status.is_live():
                state.live_assignment_keys.add(row.dedup_key)

    async def _create(self, record: WritableRecord, counter: str, state: _RunState) -> bool:
        """Create one record; return True if it exists afterwards (created or already there)."""
        try:
            created = await self._repo.create_if_absent(record)
        except StoreWriteException as exc:
            logger.error("Backfill write failed for %s: %s", record.id, exc.message)
            state.counters.write_failures += 1
            state.failed_record_ids.append(record.id)
            return False
        if created:
            setattr(state.counters, counter, getattr(state.counters, counter) + 1)
        else:
            state.counters.skipped_existing += 1
        return True

    async def _ensure_org_unit_type(
        self, tenant_id: str, key: str, state: _RunState
    ) -> str | None:
        existing = state.org_unit_type_ids.get((tenant_id, key))
        if existing is not None:
            state.counters.skipped_existing += 1
            return existing
        name, sort_order = DEFAULT_ORG_UNIT_TYPES[key]
        record = OrgUnitType(
            id=composite_id(ID_PREFIX_ORG_UNIT_TYPE, tenant_id, key),
            tenant_id=tenant_id,
            key=key,
            name=name,
            enabled=True,
            sort_order=sort_order,
        )
        if not await self._create(record, "org_unit_types_created", state):
            return None
        state.org_unit_type_ids[(tenant_id, key)] = record.id
        return record.id

    async def _ensure_org_unit(self, record: OrgUnit, state: _RunState) -> None:
        if record.id in state.org_unit_ids:
            state.counters.skipped_existing += 1
            return
        if await self._create(record, "org_units_created", state):
            state.org_unit_ids.add(record.id)

    async def _ensure_org_structure(
        self, tenant: Tenant, departments: list[Department], state: _RunState
    ) -> None:
        company_type_id = await self._ensure_org_unit_type(
            tenant.id, ORG_UNIT_TYPE_COMPANY, state
        )
        department_type_id = await self._ensure_org_unit_type(
            tenant.id, ORG_UNIT_TYPE_DEPARTMENT, state
        )
        root_id = composite_id(ID_PREFIX_TENANT_ROOT_UNIT, tenant.id)
        if company_type_id is not None:
            await self._ensure_org_unit(
                OrgUnit(id=root_id, tenant_id=tenant.id, name=tenant.name, type_id=company_type_id),
                state,
            )
        if department_type_id is None:
            return
        for department in departments:
            if department.tenant_id != tenant.id:
                continue
            await self._ensure_org_unit(
                OrgUnit(
                    id=composite_id(ID_PREFIX_DEPARTMENT_UNIT, department.id),
                    tenant_id=tenant.id,
                    name=department.name,
                    type_id=department_type_id,
                    parent_id=root_id if root_id in state.org_unit_ids else None,
                    status=(
                        RecordStatus.ARCHIVED
                        if department.status is RecordStatus.ARCHIVED
                        else RecordStatus.ACTIVE
                    ),
                ),
                state,
            )

    async def _backfill_job_title(
        self, job_title: JobTitle, scope: BackfillScope, state: _RunState
    ) -> None:
        position_id = composite_id(ID_PREFIX_JOB_POSITION, job_title.id)
        if position_id in state.position_ids:
            state.counters.skipped_existing += 1
        else:
            dept_unit_id = (
                composite_id(ID_PREFIX_DEPARTMENT_UNIT, job_title.department_id)
                if job_title.department_id
                else None
            )
            position = Position(
                id=position_id,
                tenant_id=job_title.tenant_id,
                name=job_title.name,
                org_unit_id=dept_unit_id if dept_unit_id in state.org_unit_ids else None,
                job_title_id=job_title.id,
                description=job_title.description,
                status=job_title.status,
            )
            if await self._create(position, "positions_created", state):
                state.position_ids.add(position_id)

        for entitlement_id in dict.fromkeys(job_title.entitlement_ids):
            key = (job_title.tenant_id, SubjectType.JOB_TITLE.value, job_title.id, entitlement_id)
            if key in state.live_assignment_keys:
                state.counters.skipped_existing += 1
                continue
            record = EntitlementAssignment(
                id=composite_id(ID_PREFIX_JOB_ASSIGNMENT, job_title.id, entitlement_id),
                tenant_id=job_title.tenant_id,
                subject_type=SubjectType.JOB_TITLE,
                subject_id=job_title.id,
                entitlement_id=entitlement_id,
                status=AssignmentStatus.ACTIVE,
                assignment_source=AssignmentSource.PROFILE,
                window=ValidityWindow(valid_from=state.now),
                granted_by=scope.actor_id,
                granted_at=state.now,
                reason=JOB_TITLE_BACKFILL_REASON,
            )
            if await self._create(record, "entitlement_assignments_created", state):
                state.live_assignment_keys.add(key)
                state.any_assignment_keys.add(key)

    async def _backfill_person(
        self, person: Person, departments: list[Department], state: _RunState
    ) -> None:
        department_name = (person.department or "").strip()
        if department_name:
            match = next(
                (
                    d
                    for d in departments
                    if d.tenant_id == person.tenant_id
                    and d.name.strip().casefold() == department_name.casefold()
                ),
                None,
            )
            if match is None:
                logger.warning(
                    "No department matches %r for user %s (tenant %s)",
                    department_name,
                    person.id,
                    person.tenant_id,
                )
                state.counters.departments_unmatched += 1
            else:
                await self._link_org_unit(person, match, state)

        for index, job_id in enumerate(dict.fromkeys(person.job_ids)):
            position_id = composite_id(ID_PREFIX_JOB_POSITION, job_id)
            if position_id not in state.position_ids:
                continue
            link = (person.id, position_id)
            if link in state.user_position_links:
                state.counters.skipped_existing += 1
                continue
            record = UserPosition(
                id=composite_id(ID_PREFIX_USER_POSITION, person.id, job_id),
                tenant_id=person.tenant_id,
                user_id=person.id,
                anchor_id=position_id,
                status=MembershipStatus.ACTIVE,
                window=ValidityWindow(valid_from=state.now),
                is_primary=index == 0,
            )
            if await self._create(record, "user_positions_created", state):
                state.user_position_links.add(link)

    async def _link_org_unit(
        self, person: Person, department: Department, state: _RunState
    ) -> None:
        org_unit_id = composite_id(ID_PREFIX_DEPARTMENT_UNIT, department.id)
        if org_unit_id not in state.org_unit_ids:
            return
        link = (person.id, org_unit_id)
        if link in state.user_org_links:
            state.counters.skipped_existing += 1
            return
        record = UserOrgUnit(
            id=composite_id(ID_PREFIX_USER_ORG_UNIT, person.id, department.id),
            tenant_id=person.tenant_id,
            user_id=person.id,
            org_unit_id=org_unit_id,
            status=MembershipStatus.ACTIVE,
            window=ValidityWindow(valid_from=state.now),
        )
        if await self._create(record, "user_org_units_created", state):
            state.user_org_links.add(link)

    async def _backfill_legacy_assignments(
        self, snapshot: _Snapshot, scope: BackfillScope, state: _RunState
    ) -> None:
        allowed = legacy_statuses_for_migration(scope.include_requested_assignments)
        persons_by_id = {person.id: person for person in snapshot.persons}
        # Active rows first: a requested duplicate must not claim the key of a live grant
        ordered = sorted(
            snapshot.legacy_assignments,
            key=lambda row: row.status is not LegacyAssignmentStatus.ACTIVE,
        )
        for legacy in ordered:
            person = persons_by_id.get(legacy.user_id)
            if person is None:
                if scope.tenant_id is None:
                    logger.warning(
                        "Legacy assignment %s references unknown user %s",
                        legacy.id,
                        legacy.user_id,
                    )
                    state.counters.legacy_owners_missing += 1
                continue
            if not _in_scope(scope, person.tenant_id):
                continue
            if legacy.status not in allowed:
                state.counters.legacy_status_excluded += 1
                continue

            key = (person.tenant_id, SubjectType.PERSON.value, person.id, legacy.entitlement_id)
            if key in state.any_assignment_keys:
                state.counters.skipped_existing += 1
                continue
            record = EntitlementAssignment(
                id=composite_id(ID_PREFIX_LEGACY_ASSIGNMENT, legacy.id),
                tenant_id=person.tenant_id,
                subject_type=SubjectType.PERSON,
                subject_id=person.id,
                entitlement_id=legacy.entitlement_id,
                status=_LEGACY_TO_ASSIGNMENT_STATUS[legacy.status],
                assignment_source=AssignmentSource.EXCEPTION,
                window=legacy.window,
                granted_by=legacy.granted_by,
                granted_at=legacy.granted_at or state.now,
                ticket_ref=legacy.ticket_ref,
                notes=legacy.notes,
                reason=LEGACY_BACKFILL_REASON,
            )
            if await self._create(record, "entitlement_assignments_created", state):
                state.any_assignment_keys.add(key)
                if record.status.is_live():
                    state.live_assignment_keys.add(key)


def _in_scope(scope: BackfillScope, tenant_id: str) -> bool:
    return scope.tenant_id is None or tenant_id == scope.tenant_id
