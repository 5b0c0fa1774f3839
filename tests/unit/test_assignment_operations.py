"""AssignmentService: upsert, list by subject, status transitions and their audit entries."""

from datetime import UTC, datetime

import pytest

from compliancehub.application.dtos.assignment import AssignmentInput
from compliancehub.application.use_cases.assignments import AssignmentService
from compliancehub.domain.enums import AssignmentStatus, SubjectType
from compliancehub.domain.exceptions import (
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from compliancehub.infrastructure.services import StoreAuditSink
from compliancehub.infrastructure.store import InMemoryRecordStore, StoreEntitlementRepository


@pytest.fixture
def service(repo: StoreEntitlementRepository, audit_sink: StoreAuditSink) -> AssignmentService:
    return AssignmentService(repo, audit_sink)


def _input(**overrides) -> AssignmentInput:
    data = {
        "tenant_id": "T1",
        "subject_type": SubjectType.PERSON,
        "subject_id": "U2",
        "entitlement_id": "ent-y",
    }
    data.update(overrides)
    return AssignmentInput(**data)


async def _audit_rows(store: InMemoryRecordStore) -> list[dict]:
    return await store.get_all("auditEvents")


async def test_create_assigns_id_and_audits(
    service: AssignmentService, store: InMemoryRecordStore
) -> None:
    record = await service.upsert_assignment(_input(), actor_id="admin-1")
    assert record.id.startswith("eas-")
    assert record.granted_by == "admin-1"
    assert record.granted_at is not None

    row = await store.get_one("entitlementAssignments", record.id)
    assert row["subjectType"] == "person"
    assert row["status"] == "active"

    events = await _audit_rows(store)
    assert len(events) == 1
    assert events[0]["action"] == "created"
    assert events[0]["entityId"] == record.id
    assert events[0]["before"] is None
    assert events[0]["after"]["entitlement_id"] == "ent-y"


async def test_update_records_before_and_after(
    service: AssignmentService, store: InMemoryRecordStore
) -> None:
    created = await service.upsert_assignment(_input(), actor_id="admin-1")
    await service.upsert_assignment(
        _input(id=created.id, notes="quarterly review"), actor_id="admin-2"
    )
    events = await _audit_rows(store)
    assert [e["action"] for e in events] == ["created", "updated"]
    assert events[1]["before"]["notes"] is None
    assert events[1]["after"]["notes"] == "quarterly review"


async def test_update_from_other_tenant_is_not_found(service: AssignmentService) -> None:
    created = await service.upsert_assignment(_input(), actor_id="admin-1")
    with pytest.raises(ResourceNotFoundException):
        await service.upsert_assignment(_input(id=created.id, tenant_id="T2"), "admin-1")


async def test_window_must_be_ordered(service: AssignmentService) -> None:
    with pytest.raises(ValidationException):
        await service.upsert_assignment(
            _input(
                valid_from=datetime(2025, 3, 1, tzinfo=UTC),
                valid_until=datetime(2025, 2, 1),
            ),
            actor_id="admin-1",
        )


async def test_required_fields(service: AssignmentService) -> None:
    with pytest.raises(ValidationException, match="entitlement_id"):
        await service.upsert_assignment(_input(entitlement_id=" "), actor_id="admin-1")


async def test_list_by_subject_includes_every_status(service: AssignmentService) -> None:
    await service.upsert_assignment(_input(), actor_id="admin-1")
    await service.upsert_assignment(
        _input(entitlement_id="ent-x", status=AssignmentStatus.REQUESTED), actor_id="admin-1"
    )
    await service.upsert_assignment(_input(subject_id="U1"), actor_id="admin-1")
    rows = await service.list_assignments_by_subject("T1", SubjectType.PERSON, "U2")
    assert sorted(r.entitlement_id for r in rows) == ["ent-x", "ent-y"]


async def test_allowed_transition_changes_status_only(
    service: AssignmentService, store: InMemoryRecordStore
) -> None:
    created = await service.upsert_assignment(_input(notes="keep"), actor_id="admin-1")
    updated = await service.transition_assignment_status(
        created.id, AssignmentStatus.PENDING_REMOVAL, actor_id="admin-2"
    )
    assert updated.status is AssignmentStatus.PENDING_REMOVAL
    assert updated.notes == "keep"

    events = await _audit_rows(store)
    assert events[-1]["action"] == "status_changed"
    assert events[-1]["before"] == {"status": "active"}
    assert events[-1]["after"] == {"status": "pending_removal"}


async def test_end_states_are_final(service: AssignmentService) -> None:
    created = await service.upsert_assignment(
        _input(status=AssignmentStatus.ARCHIVED), actor_id="admin-1"
    )
    with pytest.raises(InvalidStatusTransitionException):
        await service.transition_assignment_status(
            created.id, AssignmentStatus.ACTIVE, actor_id="admin-1"
        )


async def test_transition_unknown_assignment(service: AssignmentService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.transition_assignment_status(
            "eas-missing", AssignmentStatus.ACTIVE, actor_id="admin-1"
        )
