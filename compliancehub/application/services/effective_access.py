"""Effective access resolver: merges every grant path into one deduplicated grant set.

Pure functions only. Nothing here reads or writes the store or emits audit
entries, so callers (including the migration verifier) may run it
speculatively. Output is recomputed from current rows on every call.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from compliancehub.application.dtos.effective_access import (
    EffectiveGrant,
    GrantSource,
    ResolutionStats,
)
from compliancehub.domain.entities import (
    Entitlement,
    EntitlementAssignment,
    Person,
    ServiceAccount,
    SubjectMembership,
    UserCapability,
    UserPosition,
)
from compliancehub.domain.enums import SubjectType
from compliancehub.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_INHERITED_TYPES = (SubjectType.JOB_TITLE, SubjectType.POSITION, SubjectType.CAPABILITY)


def build_membership(
    person: Person,
    user_positions: Iterable[UserPosition],
    user_capabilities: Iterable[UserCapability],
    as_of: datetime,
) -> SubjectMembership:
    """Collect a person's current job title, position and capability ids.

    Job titles come from person.job_ids; positions and capabilities only from
    memberships that are active and inside their validity window.
    """
    return SubjectMembership(
        subject_id=person.id,
        job_title_ids=frozenset(person.job_ids),
        position_ids=frozenset(
            m.position_id
            for m in user_positions
            if m.user_id == person.id and m.is_effective_at(as_of)
        ),
        capability_ids=frozenset(
            m.capability_id
            for m in user_capabilities
            if m.user_id == person.id and m.is_effective_at(as_of)
        ),
    )


def partition_assignments(
    subject_id: str, assignments: Iterable[EntitlementAssignment]
) -> tuple[list[EntitlementAssignment], list[EntitlementAssignment]]:
    """Split rows into (direct rows of this person, inherited-anchor rows)."""
    direct: list[EntitlementAssignment] = []
    inherited: list[EntitlementAssignment] = []
    for row in assignments:
        if row.subject_type is SubjectType.PERSON:
            if row.subject_id == subject_id:
                direct.append(row)
        elif row.subject_type in _INHERITED_TYPES:
            inherited.append(row)
    return direct, inherited


def _anchor_ids(membership: SubjectMembership, subject_type: SubjectType) -> frozenset[str]:
    if subject_type is SubjectType.JOB_TITLE:
        return membership.job_title_ids
    if subject_type is SubjectType.POSITION:
        return membership.position_ids
    if subject_type is SubjectType.CAPABILITY:
        return membership.capability_ids
    return frozenset()


def compute_effective_access(
    membership: SubjectMembership,
    assignments: Iterable[EntitlementAssignment],
    catalog: Mapping[str, Entitlement],
    as_of: datetime,
    *,
    malformed_rows: int = 0,
) -> tuple[list[EffectiveGrant], ResolutionStats]:
    """Resolve the entitlements a person currently holds.

    Steps: keep the person's own rows and inherited rows whose anchor id is in
    the person's membership sets (exact match, no hierarchy walk); drop
    non-live statuses and rows outside their validity window; union the rest
    per entitlement id, keeping every contributing assignment id; attach
    catalog metadata, dropping ids the catalog does not know.

    Args:
        membership: The person's current membership sets.
        assignments: Tenant-scoped EntitlementAssignment rows (duplicates allowed).
        catalog: Entitlements by id.
        as_of: Instant at which validity windows are evaluated.
        malformed_rows: Rows already skipped by the mapping layer, carried into stats.

    Returns:
        (grants sorted by entitlement id, resolution stats)
    """
    direct, inherited = partition_assignments(membership.subject_id, assignments)
    relevant = direct + [
        row for row in inherited if row.subject_id in _anchor_ids(membership, row.subject_type)
    ]

    sources: dict[str, list[GrantSource]] = {}
    excluded_by_status = 0
    excluded_by_window = 0
    dangling: set[str] = set()

    for row in relevant:
        if not row.status.is_live():
            excluded_by_status += 1
            continue
        if not row.window.contains(as_of):
            excluded_by_window += 1
            continue
        if row.entitlement_id not in catalog:
            dangling.add(row.entitlement_id)
            continue
        bucket = sources.setdefault(row.entitlement_id, [])
        if any(existing.assignment_id == row.id for existing in bucket):
            continue
        bucket.append(
            GrantSource(
                assignment_id=row.id,
                subject_type=row.subject_type,
                subject_id=row.subject_id,
                scope=row.scope,
            )
        )

    if dangling:
        logger.warning(
            "Dropped %d dangling entitlement id(s) for subject %s: %s",
            len(dangling),
            membership.subject_id,
            ", ".join(sorted(dangling)),
        )

    grants = [
        _to_grant(catalog[entitlement_id], tuple(grant_sources))
        for entitlement_id, grant_sources in sorted(sources.items())
    ]
    stats = ResolutionStats(
        matched_rows=len(relevant),
        excluded_by_status=excluded_by_status,
        excluded_by_window=excluded_by_window,
        malformed_rows=malformed_rows,
        dangling_entitlement_ids=tuple(sorted(dangling)),
    )
    return grants, stats


def compute_service_account_access(
    account: ServiceAccount,
    catalog: Mapping[str, Entitlement],
    as_of: datetime,
) -> tuple[list[EffectiveGrant], ResolutionStats]:
    """Resolve a service account's fixed entitlement list.

    The account itself is the single contributing source. Archived or
    expired accounts hold nothing.
    """
    if not account.holds_access_at(as_of):
        return [], ResolutionStats()
    source = GrantSource(assignment_id=account.id, subject_type=None, subject_id=account.id)
    grants: list[EffectiveGrant] = []
    dangling: list[str] = []
    for entitlement_id in sorted(set(account.entitlement_ids)):
        entitlement = catalog.get(entitlement_id)
        if entitlement is None:
            dangling.append(entitlement_id)
            continue
        grants.append(_to_grant(entitlement, (source,)))
    return grants, ResolutionStats(
        matched_rows=len(set(account.entitlement_ids)),
        dangling_entitlement_ids=tuple(dangling),
    )


def _to_grant(entitlement: Entitlement, sources: tuple[GrantSource, ...]) -> EffectiveGrant:
    return EffectiveGrant(
        entitlement_id=entitlement.id,
        resource_id=entitlement.resource_id,
        name=entitlement.name,
        is_admin=entitlement.is_admin,
        sources=sources,
    )
