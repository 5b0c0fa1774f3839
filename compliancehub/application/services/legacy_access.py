"""Access as the legacy flat model granted it, computed without the resolver."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from compliancehub.domain.entities import JobTitle, LegacyAssignment, Person
from compliancehub.domain.enums import LegacyAssignmentStatus


def compute_legacy_access(
    person: Person,
    legacy_assignments: Iterable[LegacyAssignment],
    job_titles_by_id: Mapping[str, JobTitle],
) -> frozenset[str]:
    """Entitlement ids the person held before migration.

    Every active legacy row, whatever its validity window (the legacy model
    never evaluated windows), plus the bundled entitlement ids of every job
    title in person.job_ids. Unknown job title ids contribute nothing.
    """
    held: set[str] = {
        row.entitlement_id
        for row in legacy_assignments
        if row.user_id == person.id and row.status is LegacyAssignmentStatus.ACTIVE
    }
    for job_id in person.job_ids:
        job_title = job_titles_by_id.get(job_id)
        if job_title is not None:
            held.update(job_title.entitlement_ids)
    return frozenset(held)
