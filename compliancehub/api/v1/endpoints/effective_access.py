"""Effective access endpoint: what a person or service account can access right now."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from compliancehub.api.v1.dependencies import get_resolve_effective_access_use_case
from compliancehub.application.use_cases.access import ResolveEffectiveAccessUseCase
from compliancehub.core.exception_handlers import operation_error_response
from compliancehub.schemas.effective_access import EffectiveAccessResponse

router = APIRouter()


@router.get(
    "/{subject_id}/effective-access",
    response_model=EffectiveAccessResponse,
)
async def get_effective_access(
    subject_id: str,
    use_case: Annotated[
        ResolveEffectiveAccessUseCase, Depends(get_resolve_effective_access_use_case)
    ],
    as_of: Annotated[
        datetime | None,
        Query(description="Evaluate validity windows at this instant (default: now)"),
    ] = None,
) -> EffectiveAccessResponse | JSONResponse:
    """Resolve effective grants with their contributing assignments. 404 for unknown subjects."""
    result = await use_case.execute(subject_id, as_of)
    if not result.success or result.data is None:
        return operation_error_response(result)
    return EffectiveAccessResponse.from_report(result.data)
