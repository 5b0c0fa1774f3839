"""Row mapping at the store boundary: validation, tolerant parsing, writers."""

from datetime import UTC, datetime

import pytest

from compliancehub.domain.entities import EntitlementAssignment, Person, UserPosition
from compliancehub.domain.enums import AssignmentSource, AssignmentStatus, SubjectType
from compliancehub.domain.value_objects import AssignmentScope, ValidityWindow
from compliancehub.infrastructure.store.mapping import (
    RowMapper,
    assignment_from_row,
    person_from_row,
    to_row,
)


@pytest.fixture
def mapper() -> RowMapper:
    return RowMapper()


def test_person_defaults_and_flags(mapper: RowMapper) -> None:
    [person] = mapper.map_rows(
        "users",
        [{"id": "U1", "tenantId": "T1", "email": "u1@x.test", "jobIds": ["A", "", 7, "B"],
          "enabled": "false"}],
        person_from_row,
    )
    assert person.display_name == "u1@x.test"
    assert person.job_ids == ("A", "B")
    assert person.enabled is False


def test_nested_and_flat_scope_both_read(mapper: RowMapper) -> None:
    base = {
        "tenantId": "T1",
        "subjectType": "person",
        "subjectId": "U1",
        "entitlementId": "X",
        "status": "active",
    }
    nested, flat = mapper.map_rows(
        "entitlementAssignments",
        [
            {**base, "id": "a", "scope": {"orgUnitId": "ou-1", "includeChildren": True}},
            {**base, "id": "b", "scopeOrgUnitId": "ou-2", "scopeIncludeChildren": 1},
        ],
        assignment_from_row,
    )
    assert nested.scope == AssignmentScope(org_unit_id="ou-1", include_children=True)
    assert flat.scope == AssignmentScope(org_unit_id="ou-2", include_children=True)
    assert nested.assignment_source is AssignmentSource.MANUAL


def test_malformed_rows_skipped_and_counted(mapper: RowMapper) -> None:
    rows = mapper.map_rows(
        "entitlementAssignments",
        [
            {"tenantId": "T1", "subjectType": "person", "subjectId": "U1",
             "entitlementId": "X", "status": "active"},
            {"id": "c", "tenantId": "T1", "subjectType": "group", "subjectId": "U1",
             "entitlementId": "X", "status": "active"},
        ],
        assignment_from_row,
    )
    assert rows == []
    assert mapper.warnings["entitlementAssignments"] == 2


def test_invalid_date_treated_as_absent(mapper: RowMapper) -> None:
    row = mapper.map_one(
        "entitlementAssignments",
        {"id": "a", "tenantId": "T1", "subjectType": "person", "subjectId": "U1",
         "entitlementId": "X", "status": "active", "validFrom": "yesterday",
         "validUntil": "2025-01-31"},
        assignment_from_row,
    )
    assert row.window.valid_from is None
    assert row.window.valid_until == datetime(2025, 1, 31, tzinfo=UTC)
    assert mapper.warnings["entitlementAssignments"] == 1


def test_map_one_none_passes_through(mapper: RowMapper) -> None:
    assert mapper.map_one("users", None, person_from_row) is None


def test_assignment_writer_is_flat_and_compact() -> None:
    record = EntitlementAssignment(
        id="eas-1",
        tenant_id="T1",
        subject_type=SubjectType.JOB_TITLE,
        subject_id="Admin",
        entitlement_id="X",
        status=AssignmentStatus.ACTIVE,
        assignment_source=AssignmentSource.PROFILE,
        window=ValidityWindow(valid_from=datetime(2025, 1, 1, tzinfo=UTC)),
        scope=AssignmentScope(org_unit_id="ou-1"),
    )
    collection, row = to_row(record)
    assert collection == "entitlementAssignments"
    assert row == {
        "id": "eas-1",
        "tenantId": "T1",
        "subjectType": "jobTitle",
        "subjectId": "Admin",
        "entitlementId": "X",
        "status": "active",
        "assignmentSource": "profile",
        "validFrom": "2025-01-01T00:00:00+00:00",
        "scopeOrgUnitId": "ou-1",
    }


def test_user_position_writer() -> None:
    collection, row = to_row(
        UserPosition(id="up-1", tenant_id="T1", user_id="U1", anchor_id="pos-1", is_primary=True)
    )
    assert collection == "userPositions"
    assert row["positionId"] == "pos-1"
    assert row["isPrimary"] is True


def test_read_only_types_are_not_writable() -> None:
    with pytest.raises(TypeError):
        to_row(Person(id="U1", tenant_id="T1"))
