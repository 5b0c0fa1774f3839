"""Migration verifier: compare legacy ("before") and resolved ("after") access per person."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from compliancehub.application.dtos.operation import OperationResult
from compliancehub.application.dtos.verification import (
    AccessDiff,
    VerificationReport,
    VerificationSummary,
)
from compliancehub.application.services.effective_access import (
    build_membership,
    compute_effective_access,
)
from compliancehub.application.services.legacy_access import compute_legacy_access
from compliancehub.domain.exceptions import ComplianceHubException
from compliancehub.shared.telemetry.logging import get_logger
from compliancehub.shared.utils.datetime import ensure_utc, utc_now

if TYPE_CHECKING:
    from compliancehub.application.interfaces.repositories import IEntitlementRepository

logger = get_logger(__name__)


class CompareBeforeAfterUseCase:
    """Diffs each person's legacy access against the resolver's result. Never writes.

    "Before" comes from compute_legacy_access, an implementation separate
    from the resolver, so a resolver defect shows up as a diff instead of
    cancelling out.

    "After" is evaluated at as_of. Backfilled job title assignments and
    memberships are valid from the migration run onward, so only an as_of
    at or after the run is meaningful.
    """

    def __init__(self, repo: IEntitlementRepository) -> None:
        self._repo = repo

    async def run(
        self, tenant_id: str | None = None, as_of: datetime | None = None
    ) -> OperationResult[VerificationReport]:
        """Verify every person of the tenant (or of all tenants when tenant_id is None)."""
        try:
            report = await self._verify(tenant_id, ensure_utc(as_of) if as_of else utc_now())
        except ComplianceHubException as exc:
            logger.error("Migration verification failed: %s", exc.message)
            return OperationResult.fail(exc)
        return OperationResult.ok(report)

    async def _verify(self, tenant_id: str | None, as_of: datetime) -> VerificationReport:
        persons = await self._repo.list_persons()
        job_titles = await self._repo.list_job_titles()
        legacy_assignments = await self._repo.list_legacy_assignments()
        assignments = await self._repo.list_assignments()
        entitlements = await self._repo.list_entitlements()
        user_positions = await self._repo.list_user_positions()
        user_capabilities = await self._repo.list_user_capabilities()

        job_titles_by_id = {job_title.id: job_title for job_title in job_titles}
        scoped = [p for p in persons if tenant_id is None or p.tenant_id == tenant_id]
        diffs: list[AccessDiff] = []

        for person in scoped:
            before = compute_legacy_access(person, legacy_assignments, job_titles_by_id)
            catalog = {
                e.id: e for e in entitlements if e.tenant_id in (None, person.tenant_id)
            }
            membership = build_membership(person, user_positions, user_capabilities, as_of)
            grants, _ = compute_effective_access(
                membership,
                [row for row in assignments if row.tenant_id == person.tenant_id],
                catalog,
                as_of,
            )
            after = frozenset(grant.entitlement_id for grant in grants)

            lost = before - after
            uncatalogued = tuple(sorted(e for e in lost if e not in catalog))
            missing = tuple(sorted(e for e in lost if e in catalog))
            gained = tuple(sorted(after - before))
            if missing or gained or uncatalogued:
                diffs.append(
                    AccessDiff(
                        user_id=person.id,
                        display_name=person.display_name,
                        missing_after=missing,
                        gained_after=gained,
                        before_count=len(before),
                        after_count=len(after),
                        uncatalogued=uncatalogued,
                    )
                )

        summary = VerificationSummary(
            users_checked=len(scoped),
            users_with_diff=len(diffs),
            users_without_diff=len(scoped) - len(diffs),
            total_missing_after=sum(len(d.missing_after) for d in diffs),
            total_gained_after=sum(len(d.gained_after) for d in diffs),
            total_uncatalogued=sum(len(d.uncatalogued) for d in diffs),
        )
        if summary.total_missing_after:
            logger.warning(
                "Verification found %d missing grant(s) across %d user(s)",
                summary.total_missing_after,
                sum(1 for d in diffs if d.missing_after),
            )
        return VerificationReport(
            tenant_id=tenant_id,
            verified_at=as_of,
            summary=summary,
            diffs=diffs,
        )
