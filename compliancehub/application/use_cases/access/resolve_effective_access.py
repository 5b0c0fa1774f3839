"""Resolve effective access for one subject (person or service account)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from compliancehub.application.dtos.effective_access import EffectiveAccessReport
from compliancehub.application.dtos.operation import OperationResult
from compliancehub.application.services.effective_access import (
    build_membership,
    compute_effective_access,
    compute_service_account_access,
)
from compliancehub.core.constants import COLLECTION_ENTITLEMENT_ASSIGNMENTS
from compliancehub.domain.exceptions import (
    ComplianceHubException,
    SubjectNotFoundException,
    ValidationException,
)
from compliancehub.shared.telemetry.logging import get_logger
from compliancehub.shared.utils.datetime import ensure_utc, utc_now

if TYPE_CHECKING:
    from compliancehub.application.interfaces.repositories import IEntitlementRepository
    from compliancehub.domain.entities import Entitlement

logger = get_logger(__name__)


class ResolveEffectiveAccessUseCase:
    """Loads a subject's rows through the repository and runs the pure resolver.

    Read-only: never writes and never records audit entries.
    """

    def __init__(self, repo: IEntitlementRepository) -> None:
        self._repo = repo

    async def execute(
        self, subject_id: str, as_of: datetime | None = None
    ) -> OperationResult[EffectiveAccessReport]:
        """Return the subject's effective grants, or a failed result.

        A subject that is neither a person nor a service account yields
        SUBJECT_NOT_FOUND, never an empty grant list.
        """
        try:
            report = await self.resolve(subject_id, as_of)
        except ComplianceHubException as exc:
            logger.info("Effective access for %s failed: %s", subject_id, exc.message)
            return OperationResult.fail(exc)
        return OperationResult.ok(report)

    async def resolve(
        self, subject_id: str, as_of: datetime | None = None
    ) -> EffectiveAccessReport:
        """Same as execute but raises domain exceptions instead of wrapping them."""
        if not subject_id or not subject_id.strip():
            raise ValidationException("subject_id is required", field="subject_id")
        moment = ensure_utc(as_of) if as_of is not None else utc_now()

        person = await self._repo.get_person(subject_id)
        if person is not None:
            catalog = await self.load_catalog(person.tenant_id)
            user_positions = await self._repo.list_user_positions()
            user_capabilities = await self._repo.list_user_capabilities()
            malformed_before = self._repo.integrity_warnings.get(
                COLLECTION_ENTITLEMENT_ASSIGNMENTS, 0
            )
            assignments = await self._repo.list_assignments(tenant_id=person.tenant_id)
            malformed = (
                self._repo.integrity_warnings.get(COLLECTION_ENTITLEMENT_ASSIGNMENTS, 0)
                - malformed_before
            )
            membership = build_membership(person, user_positions, user_capabilities, moment)
            grants, stats = compute_effective_access(
                membership, assignments, catalog, moment, malformed_rows=malformed
            )
            return EffectiveAccessReport(
                subject_id=person.id,
                subject_kind="person",
                tenant_id=person.tenant_id,
                as_of=moment,
                grants=grants,
                stats=stats,
            )

        account = await self._repo.get_service_account(subject_id)
        if account is not None:
            catalog = await self.load_catalog(account.tenant_id)
            grants, stats = compute_service_account_access(account, catalog, moment)
            return EffectiveAccessReport(
                subject_id=account.id,
                subject_kind="serviceAccount",
                tenant_id=account.tenant_id,
                as_of=moment,
                grants=grants,
                stats=stats,
            )

        raise SubjectNotFoundException(subject_id)

    async def load_catalog(self, tenant_id: str) -> dict[str, Entitlement]:
        """Entitlements of the tenant plus global (tenant-less) ones, by id."""
        return {
            entitlement.id: entitlement
            for entitlement in await self._repo.list_entitlements()
            if entitlement.tenant_id in (None, tenant_id)
        }
