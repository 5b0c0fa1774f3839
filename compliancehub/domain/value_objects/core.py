"""Domain value objects for the entitlement engine.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass
from datetime import datetime

from compliancehub.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class ValidityWindow:
    """Optional [valid_from, valid_until] interval of an assignment or membership.

    Both bounds are inclusive. A missing bound is open, so an empty window
    is valid at every instant.
    """

    valid_from: datetime | None = None
    valid_until: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "valid_from", ensure_utc(self.valid_from))
        object.__setattr__(self, "valid_until", ensure_utc(self.valid_until))

    def contains(self, as_of: datetime) -> bool:
        """Return True if as_of lies inside the window."""
        moment = ensure_utc(as_of)
        if self.valid_from is not None and moment < self.valid_from:
            return False
        if self.valid_until is not None and moment > self.valid_until:
            return False
        return True

    def is_expired(self, as_of: datetime) -> bool:
        """Return True if valid_until lies before as_of."""
        return self.valid_until is not None and ensure_utc(as_of) > self.valid_until

    def is_empty(self) -> bool:
        """Return True when neither bound is set."""
        return self.valid_from is None and self.valid_until is None


@dataclass(frozen=True)
class AssignmentScope:
    """Organizational scope of an assignment. Used for reporting, never for derivation."""

    org_unit_id: str | None = None
    include_children: bool = False
    resource_context: str | None = None
