"""Domain enums, value objects, entities and exceptions."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from compliancehub.domain.entities import EntitlementAssignment, ServiceAccount
from compliancehub.domain.enums import (
    ASSIGNMENT_STATUS_TRANSITIONS,
    AssignmentSource,
    AssignmentStatus,
    LegacyAssignmentStatus,
    RecordStatus,
    SubjectType,
    is_live,
    legacy_statuses_for_migration,
)
from compliancehub.domain.exceptions import (
    ComplianceHubException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    StoreNotConfiguredException,
)
from compliancehub.domain.value_objects import ValidityWindow

NOW = datetime(2025, 6, 1, tzinfo=UTC)


class TestAssignmentStatus:
    def test_only_active_and_approved_are_live(self) -> None:
        assert {s for s in AssignmentStatus if s.is_live()} == {
            AssignmentStatus.ACTIVE,
            AssignmentStatus.APPROVED,
        }

    def test_is_live_accepts_raw_strings(self) -> None:
        assert is_live("approved") is True
        assert is_live("requested") is False
        assert is_live("bogus") is False

    def test_end_states_have_no_transitions(self) -> None:
        for status in AssignmentStatus:
            if status.is_retired():
                assert ASSIGNMENT_STATUS_TRANSITIONS[status] == frozenset()

    def test_values(self) -> None:
        assert "pending_removal" in AssignmentStatus.values()
        assert SubjectType.JOB_TITLE.value == "jobTitle"
        assert AssignmentSource.values() == ["manual", "profile", "exception", "position"]


class TestLegacyStatuses:
    def test_default_migrates_active_only(self) -> None:
        assert legacy_statuses_for_migration(False) == frozenset({LegacyAssignmentStatus.ACTIVE})

    def test_opt_in_adds_requested_and_pending_removal(self) -> None:
        allowed = legacy_statuses_for_migration(True)
        assert LegacyAssignmentStatus.REQUESTED in allowed
        assert LegacyAssignmentStatus.PENDING_REMOVAL in allowed
        assert LegacyAssignmentStatus.REMOVED not in allowed


class TestValidityWindow:
    def test_empty_window_always_valid(self) -> None:
        window = ValidityWindow()
        assert window.is_empty()
        assert window.contains(NOW)

    def test_naive_bounds_are_utc(self) -> None:
        window = ValidityWindow(valid_until=datetime(2025, 6, 1))
        assert window.valid_until.tzinfo is UTC
        assert window.contains(NOW)
        assert window.is_expired(NOW + timedelta(microseconds=1))

    def test_other_timezones_compare_correctly(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        window = ValidityWindow(valid_from=datetime(2025, 6, 1, 13, 0, tzinfo=plus_two))
        assert window.contains(datetime(2025, 6, 1, 11, 0, tzinfo=UTC))
        assert not window.contains(datetime(2025, 6, 1, 10, 59, tzinfo=UTC))


class TestEntities:
    def test_assignment_dedup_key_and_effectiveness(self) -> None:
        row = EntitlementAssignment(
            id="eas-1",
            tenant_id="T1",
            subject_type=SubjectType.PERSON,
            subject_id="U1",
            entitlement_id="X",
            status=AssignmentStatus.ACTIVE,
            assignment_source=AssignmentSource.MANUAL,
            window=ValidityWindow(valid_until=NOW - timedelta(days=1)),
        )
        assert row.dedup_key == ("T1", "person", "U1", "X")
        assert row.is_effective_at(NOW) is False

    def test_service_account_access(self) -> None:
        active = ServiceAccount(id="svc", tenant_id="T1", name="CI")
        expired = ServiceAccount(
            id="svc", tenant_id="T1", name="CI",
            window=ValidityWindow(valid_until=NOW - timedelta(days=1)),
        )
        archived = ServiceAccount(id="svc", tenant_id="T1", name="CI", status=RecordStatus.ARCHIVED)
        assert active.holds_access_at(NOW)
        assert not expired.holds_access_at(NOW)
        assert not archived.holds_access_at(NOW)


class TestExceptions:
    def test_to_dict(self) -> None:
        exc = ResourceNotFoundException("tenant", "T9")
        assert exc.to_dict() == {
            "error": "RESOURCE_NOT_FOUND",
            "message": "tenant not found: T9",
            "details": {"resource_type": "tenant", "resource_id": "T9"},
        }

    def test_error_code_defaults_to_class_name(self) -> None:
        assert ComplianceHubException("boom").error_code == "ComplianceHubException"

    def test_transition_details(self) -> None:
        exc = InvalidStatusTransitionException("eas-1", "archived", "active")
        assert exc.error_code == "INVALID_STATUS_TRANSITION"
        assert exc.details["requested_status"] == "active"

    def test_store_not_configured_is_service_unavailable(self) -> None:
        with pytest.raises(ComplianceHubException) as info:
            raise StoreNotConfiguredException("firestore")
        assert info.value.error_code == "SERVICE_UNAVAILABLE"
