"""DTOs for the backfill migration."""

from dataclasses import asdict, dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class BackfillScope:
    """Scope of one backfill run.

    tenant_id None means all tenants. Legacy rows with status requested or
    pending_removal are migrated only when include_requested_assignments is set.
    """

    tenant_id: str | None = None
    include_requested_assignments: bool = False
    actor_id: str = "system"


_CAMEL_KEYS = {
    "org_unit_types_created": "orgUnitTypesCreated",
    "org_units_created": "orgUnitsCreated",
    "positions_created": "positionsCreated",
    "user_org_units_created": "userOrgUnitsCreated",
    "user_positions_created": "userPositionsCreated",
    "entitlement_assignments_created": "entitlementAssignmentsCreated",
    "skipped_existing": "skippedExisting",
    "departments_unmatched": "departmentsUnmatched",
    "legacy_owners_missing": "legacyOwnersMissing",
    "legacy_status_excluded": "legacyStatusExcluded",
    "write_failures": "writeFailures",
}


@dataclass
class BackfillCounters:
    """Aggregate counters of one run; also the payload of the run's audit entry."""

    org_unit_types_created: int = 0
    org_units_created: int = 0
    positions_created: int = 0
    user_org_units_created: int = 0
    user_positions_created: int = 0
    entitlement_assignments_created: int = 0
    skipped_existing: int = 0
    departments_unmatched: int = 0
    legacy_owners_missing: int = 0
    legacy_status_excluded: int = 0
    write_failures: int = 0

    @property
    def total_created(self) -> int:
        return (
            self.org_unit_types_created
            + self.org_units_created
            + self.positions_created
            + self.user_org_units_created
            + self.user_positions_created
            + self.entitlement_assignments_created
        )

    def to_dict(self) -> dict[str, int]:
        """Counters keyed the way the platform's store and UI expect (camelCase)."""
        return {_CAMEL_KEYS[key]: value for key, value in asdict(self).items()}


@dataclass(frozen=True)
class BackfillRunResult:
    """Summary returned by run_backfill_migration."""

    scope: BackfillScope
    tenant_ids: tuple[str, ...]
    counters: BackfillCounters
    started_at: datetime
    finished_at: datetime
    failed_record_ids: tuple[str, ...] = field(default=())
