"""Domain enumerations for the entitlement engine.

Enums represent fixed sets of domain values. Status sets that decide what
counts as "held" access are defined here and nowhere else.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class SubjectType(_ValuesMixin, str, Enum):
    """Who an EntitlementAssignment is attached to.

    PERSON rows are direct grants; the other three are inheritance anchors
    whose members receive the grant.
    """

    PERSON = "person"
    JOB_TITLE = "jobTitle"
    POSITION = "position"
    CAPABILITY = "capability"


class AssignmentSource(_ValuesMixin, str, Enum):
    """Provenance of an EntitlementAssignment row."""

    MANUAL = "manual"
    PROFILE = "profile"
    EXCEPTION = "exception"
    POSITION = "position"


class AssignmentStatus(_ValuesMixin, str, Enum):
    """EntitlementAssignment lifecycle status.

    Only live statuses contribute to effective access; the rest stay visible
    for audit.
    """

    ACTIVE = "active"
    APPROVED = "approved"
    REQUESTED = "requested"
    PENDING_REMOVAL = "pending_removal"
    ARCHIVED = "archived"
    REMOVED = "removed"

    def is_live(self) -> bool:
        """Return True when rows with this status grant access."""
        return self in LIVE_ASSIGNMENT_STATUSES

    def is_retired(self) -> bool:
        """Return True for end states (archived, removed)."""
        return self in (AssignmentStatus.ARCHIVED, AssignmentStatus.REMOVED)


LIVE_ASSIGNMENT_STATUSES = frozenset({AssignmentStatus.ACTIVE, AssignmentStatus.APPROVED})

# Allowed status transitions (status-only mutation of assignment rows).
ASSIGNMENT_STATUS_TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    AssignmentStatus.REQUESTED: frozenset(
        {AssignmentStatus.APPROVED, AssignmentStatus.ACTIVE, AssignmentStatus.REMOVED}
    ),
    AssignmentStatus.APPROVED: frozenset(
        {AssignmentStatus.ACTIVE, AssignmentStatus.PENDING_REMOVAL, AssignmentStatus.REMOVED}
    ),
    AssignmentStatus.ACTIVE: frozenset(
        {AssignmentStatus.PENDING_REMOVAL, AssignmentStatus.ARCHIVED, AssignmentStatus.REMOVED}
    ),
    AssignmentStatus.PENDING_REMOVAL: frozenset(
        {AssignmentStatus.ACTIVE, AssignmentStatus.ARCHIVED, AssignmentStatus.REMOVED}
    ),
    AssignmentStatus.ARCHIVED: frozenset(),
    AssignmentStatus.REMOVED: frozenset(),
}


def is_live(status: AssignmentStatus | str) -> bool:
    """Return True if the status (enum or raw string) grants access.

    Unknown strings are not live.
    """
    try:
        return AssignmentStatus(status).is_live()
    except ValueError:
        return False


class LegacyAssignmentStatus(_ValuesMixin, str, Enum):
    """Status of a legacy flat assignment (predecessor model, read-only)."""

    ACTIVE = "active"
    REQUESTED = "requested"
    PENDING_REMOVAL = "pending_removal"
    REMOVED = "removed"


def legacy_statuses_for_migration(
    include_requested: bool,
) -> frozenset[LegacyAssignmentStatus]:
    """Legacy statuses the backfill migration copies into the new model.

    Kept apart from LIVE_ASSIGNMENT_STATUSES: opting in copies requested and
    pending_removal rows for audit visibility, and neither status is live.
    """
    if include_requested:
        return frozenset(
            {
                LegacyAssignmentStatus.ACTIVE,
                LegacyAssignmentStatus.REQUESTED,
                LegacyAssignmentStatus.PENDING_REMOVAL,
            }
        )
    return frozenset({LegacyAssignmentStatus.ACTIVE})


class MembershipStatus(_ValuesMixin, str, Enum):
    """Status of a person's membership in a position, capability, or org unit."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"

    def is_live(self) -> bool:
        """Return True when the membership currently confers inherited grants."""
        return self is MembershipStatus.ACTIVE


class RecordStatus(_ValuesMixin, str, Enum):
    """Status for reference records (departments, job titles, org units, service accounts)."""

    ACTIVE = "active"
    ARCHIVED = "archived"
