"""DTOs for migration verification (before/after comparison)."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class AccessDiff:
    """Per-person difference between legacy ("before") and resolved ("after") access.

    missing_after lists regressions; gained_after lists expansions.
    uncatalogued lists entitlements lost only because they left the catalog.
    """

    user_id: str
    display_name: str
    missing_after: tuple[str, ...]
    gained_after: tuple[str, ...]
    before_count: int
    after_count: int
    uncatalogued: tuple[str, ...] = ()


@dataclass(frozen=True)
class VerificationSummary:
    """Aggregate counts over all checked persons."""

    users_checked: int
    users_with_diff: int
    users_without_diff: int
    total_missing_after: int
    total_gained_after: int
    total_uncatalogued: int = 0


@dataclass(frozen=True)
class VerificationReport:
    """Result of compare_before_after."""

    tenant_id: str | None
    verified_at: datetime
    summary: VerificationSummary
    diffs: list[AccessDiff] = field(default_factory=list)
