"""Backfill migration endpoints: run the backfill and verify its outcome."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from compliancehub.api.v1.dependencies import (
    get_actor_id,
    get_backfill_migration_use_case,
    get_compare_before_after_use_case,
)
from compliancehub.application.dtos.migration import BackfillScope
from compliancehub.application.use_cases.migration import (
    BackfillMigrationUseCase,
    CompareBeforeAfterUseCase,
)
from compliancehub.core.config import get_settings
from compliancehub.core.exception_handlers import operation_error_response
from compliancehub.schemas.migration import (
    BackfillRequest,
    BackfillRunResponse,
    VerificationResponse,
)

router = APIRouter()


@router.post("/backfill", response_model=BackfillRunResponse)
async def run_backfill(
    body: BackfillRequest,
    use_case: Annotated[BackfillMigrationUseCase, Depends(get_backfill_migration_use_case)],
    actor_id: Annotated[str, Depends(get_actor_id)],
) -> BackfillRunResponse | JSONResponse:
    """Run the idempotent backfill for one tenant (tenant_id) or all tenants."""
    include_requested = body.include_requested_assignments
    if include_requested is None:
        include_requested = get_settings().migration_include_requested_assignments
    scope = BackfillScope(
        tenant_id=body.tenant_id,
        include_requested_assignments=include_requested,
        actor_id=actor_id,
    )
    result = await use_case.run(scope)
    if not result.success or result.data is None:
        return operation_error_response(result)
    return BackfillRunResponse.from_result(result.data)


@router.get("/verification", response_model=VerificationResponse)
async def verify_migration(
    use_case: Annotated[
        CompareBeforeAfterUseCase, Depends(get_compare_before_after_use_case)
    ],
    tenant_id: Annotated[str | None, Query(min_length=1)] = None,
    as_of: Annotated[datetime | None, Query()] = None,
) -> VerificationResponse | JSONResponse:
    """Compare legacy access with resolved access per person. Read-only.

    as_of defaults to now. Rows created by the backfill start at the time of
    the run, so an as_of before the migration reports job title bundles as
    missing after.
    """
    result = await use_case.run(tenant_id=tenant_id, as_of=as_of)
    if not result.success or result.data is None:
        return operation_error_response(result)
    return VerificationResponse.from_report(result.data)
