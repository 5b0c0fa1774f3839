"""Row mapping: schemaless camelCase store rows <-> typed domain entities.

Reading is validating. A row missing a required field or carrying an
unknown enum value raises RecordMappingException (the caller skips and
counts it). Unparseable dates are treated as absent and reported through
the mapper's warning counter. Writing produces JSON-safe rows (ISO-8601
dates, enum values, lists).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

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
from compliancehub.domain.enums import (
    AssignmentSource,
    AssignmentStatus,
    LegacyAssignmentStatus,
    MembershipStatus,
    RecordStatus,
    SubjectType,
)
from compliancehub.domain.exceptions import RecordMappingException
from compliancehub.domain.value_objects import AssignmentScope, ValidityWindow
from compliancehub.shared.telemetry.logging import get_logger
from compliancehub.shared.utils.datetime import parse_datetime, to_iso

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)

_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no", ""})


class _Row:
    """One raw row being mapped; knows its collection and id for error reporting."""

    def __init__(self, mapper: RowMapper, collection: str, data: dict[str, Any]) -> None:
        self._mapper = mapper
        self.collection = collection
        self.data = data
        raw_id = data.get("id")
        self.id = raw_id if isinstance(raw_id, str) and raw_id.strip() else None

    def fail(self, reason: str) -> RecordMappingException:
        return RecordMappingException(self.collection, self.id, reason)

    def required_id(self) -> str:
        if self.id is None:
            raise self.fail("missing id")
        return self.id

    def required(self, key: str) -> str:
        value = self.data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        raise self.fail(f"missing {key}")

    def text(self, key: str, default: str | None = None) -> str | None:
        value = self.data.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value
        return str(value)

    def flag(self, key: str, default: bool = False) -> bool:
        value = self.data.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, int | float):
            return value != 0
        if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS:
            return True
        if isinstance(value, str) and value.strip().lower() in _FALSE_STRINGS:
            return False
        raise self.fail(f"invalid boolean {key}={value!r}")

    def number(self, key: str, default: int = 0) -> int:
        value = self.data.get(key)
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            raise self.fail(f"invalid integer {key}={value!r}") from None

    def ids(self, key: str) -> tuple[str, ...]:
        """List of string ids; non-string and empty entries are dropped."""
        value = self.data.get(key)
        if value is None:
            return ()
        if not isinstance(value, list | tuple):
            raise self.fail(f"{key} is not a list")
        return tuple(item for item in value if isinstance(item, str) and item.strip())

    def enum(self, enum_cls: type[E], key: str, default: E | None = None) -> E:
        value = self.data.get(key)
        if value is None or value == "":
            if default is None:
                raise self.fail(f"missing {key}")
            return default
        try:
            return enum_cls(value)
        except ValueError:
            raise self.fail(f"unknown {key} {value!r}") from None

    def date(self, key: str) -> datetime | None:
        value = self.data.get(key)
        try:
            return parse_datetime(value)
        except ValueError:
            self._mapper.warn(self.collection, f"{self.id}: invalid {key} {value!r}, ignored")
            return None

    def window(self) -> ValidityWindow:
        return ValidityWindow(
            valid_from=self.date("validFrom"), valid_until=self.date("validUntil")
        )


class RowMapper:
    """Validating mapper for every collection the engine reads or writes.

    warnings counts skipped and repaired rows per collection.
    """

    def __init__(self) -> None:
        self.warnings: Counter[str] = Counter()

    def warn(self, collection: str, message: str) -> None:
        self.warnings[collection] += 1
        logger.warning("Data integrity (%s): %s", collection, message)

    def map_rows(
        self,
        collection: str,
        rows: list[dict[str, Any]],
        build: Callable[[_Row], Any],
    ) -> list[Any]:
        """Map every row, skipping and counting the malformed ones."""
        out = []
        for data in rows:
            try:
                out.append(build(_Row(self, collection, data)))
            except RecordMappingException as exc:
                self.warn(collection, f"{exc.message}; row skipped")
        return out

    def map_one(
        self, collection: str, data: dict[str, Any] | None, build: Callable[[_Row], Any]
    ) -> Any:
        """Map a single row; a malformed row is counted and returned as None."""
        if data is None:
            return None
        rows = self.map_rows(collection, [data], build)
        return rows[0] if rows else None


# --- Row -> entity --------------------------------------------------------


def tenant_from_row(row: _Row) -> Tenant:
    tenant_id = row.required_id()
    return Tenant(id=tenant_id, name=row.text("name", tenant_id), slug=row.text("slug"))


def department_from_row(row: _Row) -> Department:
    return Department(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        name=row.required("name"),
        status=row.enum(RecordStatus, "status", RecordStatus.ACTIVE),
    )


def person_from_row(row: _Row) -> Person:
    email = row.text("email")
    return Person(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        display_name=row.text("displayName") or email or "",
        email=email,
        department=row.text("department"),
        job_ids=row.ids("jobIds"),
        enabled=row.flag("enabled", True),
    )


def service_account_from_row(row: _Row) -> ServiceAccount:
    return ServiceAccount(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        name=row.text("name") or row.required_id(),
        entitlement_ids=row.ids("entitlementIds"),
        status=row.enum(RecordStatus, "status", RecordStatus.ACTIVE),
        window=row.window(),
    )


def entitlement_from_row(row: _Row) -> Entitlement:
    return Entitlement(
        id=row.required_id(),
        resource_id=row.required("resourceId"),
        name=row.text("name") or row.required_id(),
        tenant_id=row.text("tenantId") or None,
        is_admin=row.flag("isAdmin"),
        description=row.text("description"),
    )


def _scope_from_row(row: _Row) -> AssignmentScope:
    nested = row.data.get("scope")
    if isinstance(nested, dict):
        scope_row = _Row(row._mapper, row.collection, {"id": row.id, **nested})
        return AssignmentScope(
            org_unit_id=scope_row.text("orgUnitId"),
            include_children=scope_row.flag("includeChildren"),
            resource_context=scope_row.text("resourceContext"),
        )
    return AssignmentScope(
        org_unit_id=row.text("scopeOrgUnitId"),
        include_children=row.flag("scopeIncludeChildren"),
        resource_context=row.text("scopeResourceContext"),
    )


def assignment_from_row(row: _Row) -> EntitlementAssignment:
    return EntitlementAssignment(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        subject_type=row.enum(SubjectType, "subjectType"),
        subject_id=row.required("subjectId"),
        entitlement_id=row.required("entitlementId"),
        status=row.enum(AssignmentStatus, "status"),
        assignment_source=row.enum(
            AssignmentSource, "assignmentSource", AssignmentSource.MANUAL
        ),
        window=row.window(),
        scope=_scope_from_row(row),
        granted_by=row.text("grantedBy"),
        granted_at=row.date("grantedAt"),
        ticket_ref=row.text("ticketRef"),
        notes=row.text("notes"),
        reason=row.text("reason"),
    )


def legacy_assignment_from_row(row: _Row) -> LegacyAssignment:
    return LegacyAssignment(
        id=row.required_id(),
        user_id=row.required("userId"),
        entitlement_id=row.required("entitlementId"),
        status=row.enum(LegacyAssignmentStatus, "status"),
        granted_by=row.text("grantedBy"),
        granted_at=row.date("grantedAt"),
        window=row.window(),
        ticket_ref=row.text("ticketRef"),
        notes=row.text("notes"),
    )


def job_title_from_row(row: _Row) -> JobTitle:
    return JobTitle(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        name=row.text("name") or row.required_id(),
        department_id=row.text("departmentId") or None,
        entitlement_ids=row.ids("entitlementIds"),
        description=row.text("description"),
        status=row.enum(RecordStatus, "status", RecordStatus.ACTIVE),
    )


def position_from_row(row: _Row) -> Position:
    return Position(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        name=row.text("name") or row.required_id(),
        org_unit_id=row.text("orgUnitId") or None,
        job_title_id=row.text("jobTitleId") or None,
        description=row.text("description"),
        status=row.enum(RecordStatus, "status", RecordStatus.ACTIVE),
    )


def capability_from_row(row: _Row) -> Capability:
    return Capability(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        name=row.text("name") or row.required_id(),
        status=row.enum(RecordStatus, "status", RecordStatus.ACTIVE),
    )


def org_unit_type_from_row(row: _Row) -> OrgUnitType:
    return OrgUnitType(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        key=row.required("key"),
        name=row.text("name") or row.required("key"),
        enabled=row.flag("enabled", True),
        sort_order=row.number("sortOrder"),
    )


def org_unit_from_row(row: _Row) -> OrgUnit:
    return OrgUnit(
        id=row.required_id(),
        tenant_id=row.required("tenantId"),
        name=row.text("name") or row.required_id(),
        type_id=row.required("typeId"),
        parent_id=row.text("parentId") or None,
        status=row.enum(RecordStatus, "status", RecordStatus.ACTIVE),
        sort_order=row.number("sortOrder"),
    )


def user_position_from_row(row: _Row) -> UserPosition:
    return UserPosition(
        id=row.required_id(),
        tenant_id=row.text("tenantId") or "",
        user_id=row.required("userId"),
        anchor_id=row.required("positionId"),
        status=row.enum(MembershipStatus, "status", MembershipStatus.ACTIVE),
        window=row.window(),
        is_primary=row.flag("isPrimary"),
    )


def user_capability_from_row(row: _Row) -> UserCapability:
    return UserCapability(
        id=row.required_id(),
        tenant_id=row.text("tenantId") or "",
        user_id=row.required("userId"),
        anchor_id=row.required("capabilityId"),
        status=row.enum(MembershipStatus, "status", MembershipStatus.ACTIVE),
        window=row.window(),
    )


def user_org_unit_from_row(row: _Row) -> UserOrgUnit:
    return UserOrgUnit(
        id=row.required_id(),
        tenant_id=row.text("tenantId") or "",
        user_id=row.required("userId"),
        org_unit_id=row.required("orgUnitId"),
        role_type=row.text("roleType") or "member",
        status=row.enum(MembershipStatus, "status", MembershipStatus.ACTIVE),
        window=row.window(),
    )


READERS: dict[str, Callable[[_Row], Any]] = {
    COLLECTION_TENANTS: tenant_from_row,
    COLLECTION_DEPARTMENTS: department_from_row,
    COLLECTION_USERS: person_from_row,
    COLLECTION_SERVICE_ACCOUNTS: service_account_from_row,
    COLLECTION_ENTITLEMENTS: entitlement_from_row,
    COLLECTION_ENTITLEMENT_ASSIGNMENTS: assignment_from_row,
    COLLECTION_LEGACY_ASSIGNMENTS: legacy_assignment_from_row,
    COLLECTION_JOB_TITLES: job_title_from_row,
    COLLECTION_POSITIONS: position_from_row,
    COLLECTION_CAPABILITIES: capability_from_row,
    COLLECTION_ORG_UNIT_TYPES: org_unit_type_from_row,
    COLLECTION_ORG_UNITS: org_unit_from_row,
    COLLECTION_USER_POSITIONS: user_position_from_row,
    COLLECTION_USER_CAPABILITIES: user_capability_from_row,
    COLLECTION_USER_ORG_UNITS: user_org_unit_from_row,
}


# --- Entity -> row --------------------------------------------------------


def _compact(row: dict[str, Any]) -> dict[str, Any]:
    """Drop None values; the platform omits absent optional fields."""
    return {key: value for key, value in row.items() if value is not None}


def _window_fields(window: ValidityWindow) -> dict[str, Any]:
    return {"validFrom": to_iso(window.valid_from), "validUntil": to_iso(window.valid_until)}


def assignment_to_row(record: EntitlementAssignment) -> dict[str, Any]:
    return _compact(
        {
            "id": record.id,
            "tenantId": record.tenant_id,
            "subjectType": record.subject_type.value,
            "subjectId": record.subject_id,
            "entitlementId": record.entitlement_id,
            "status": record.status.value,
            "assignmentSource": record.assignment_source.value,
            **_window_fields(record.window),
            "scopeOrgUnitId": record.scope.org_unit_id,
            "scopeIncludeChildren": record.scope.include_children or None,
            "scopeResourceContext": record.scope.resource_context,
            "grantedBy": record.granted_by,
            "grantedAt": to_iso(record.granted_at),
            "ticketRef": record.ticket_ref,
            "notes": record.notes,
            "reason": record.reason,
        }
    )


def org_unit_type_to_row(record: OrgUnitType) -> dict[str, Any]:
    return {
        "id": record.id,
        "tenantId": record.tenant_id,
        "key": record.key,
        "name": record.name,
        "enabled": record.enabled,
        "sortOrder": record.sort_order,
    }


def org_unit_to_row(record: OrgUnit) -> dict[str, Any]:
    return _compact(
        {
            "id": record.id,
            "tenantId": record.tenant_id,
            "name": record.name,
            "typeId": record.type_id,
            "parentId": record.parent_id,
            "status": record.status.value,
            "sortOrder": record.sort_order,
        }
    )


def position_to_row(record: Position) -> dict[str, Any]:
    return _compact(
        {
            "id": record.id,
            "tenantId": record.tenant_id,
            "name": record.name,
            "orgUnitId": record.org_unit_id,
            "jobTitleId": record.job_title_id,
            "description": record.description,
            "status": record.status.value,
        }
    )


def user_position_to_row(record: UserPosition) -> dict[str, Any]:
    return _compact(
        {
            "id": record.id,
            "tenantId": record.tenant_id,
            "userId": record.user_id,
            "positionId": record.position_id,
            "isPrimary": record.is_primary,
            "status": record.status.value,
            **_window_fields(record.window),
        }
    )


def user_org_unit_to_row(record: UserOrgUnit) -> dict[str, Any]:
    return _compact(
        {
            "id": record.id,
            "tenantId": record.tenant_id,
            "userId": record.user_id,
            "orgUnitId": record.org_unit_id,
            "roleType": record.role_type,
            "status": record.status.value,
            **_window_fields(record.window),
        }
    )


_WRITERS: dict[type, tuple[str, Callable[[Any], dict[str, Any]]]] = {
    EntitlementAssignment: (COLLECTION_ENTITLEMENT_ASSIGNMENTS, assignment_to_row),
    OrgUnitType: (COLLECTION_ORG_UNIT_TYPES, org_unit_type_to_row),
    OrgUnit: (COLLECTION_ORG_UNITS, org_unit_to_row),
    Position: (COLLECTION_POSITIONS, position_to_row),
    UserPosition: (COLLECTION_USER_POSITIONS, user_position_to_row),
    UserOrgUnit: (COLLECTION_USER_ORG_UNITS, user_org_unit_to_row),
}


def to_row(record: Any) -> tuple[str, dict[str, Any]]:
    """Return (collection, row) for a writable entity.

    Raises:
        TypeError: If the entity type is not writable by the engine.
    """
    try:
        collection, writer = _WRITERS[type(record)]
    except KeyError:
        raise TypeError(f"Not a writable record type: {type(record).__name__}") from None
    return collection, writer(record)
