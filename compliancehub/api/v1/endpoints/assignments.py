"""Entitlement assignment endpoints. Writes are audited by AssignmentService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from compliancehub.api.v1.dependencies import get_actor_id, get_assignment_service
from compliancehub.application.use_cases.assignments import AssignmentService
from compliancehub.domain.enums import SubjectType
from compliancehub.schemas.assignment import (
    AssignmentResponse,
    AssignmentStatusRequest,
    AssignmentUpsertRequest,
)

router = APIRouter()


@router.get("", response_model=list[AssignmentResponse])
async def list_assignments(
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
    tenant_id: Annotated[str, Query(min_length=1)],
    subject_type: Annotated[SubjectType, Query()],
    subject_id: Annotated[str, Query(min_length=1)],
) -> list[AssignmentResponse]:
    """List every assignment of a subject, whatever its status."""
    rows = await service.list_assignments_by_subject(tenant_id, subject_type, subject_id)
    return [AssignmentResponse.from_entity(row) for row in rows]


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def upsert_assignment(
    body: AssignmentUpsertRequest,
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
    actor_id: Annotated[str, Depends(get_actor_id)],
) -> AssignmentResponse:
    """Create an assignment, or replace it when body.id names an existing one."""
    record = await service.upsert_assignment(body.to_input(), actor_id)
    return AssignmentResponse.from_entity(record)


@router.post("/{assignment_id}/status", response_model=AssignmentResponse)
async def transition_assignment_status(
    assignment_id: str,
    body: AssignmentStatusRequest,
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
    actor_id: Annotated[str, Depends(get_actor_id)],
) -> AssignmentResponse:
    """Move an assignment to a new status. 409 when the transition is not allowed."""
    record = await service.transition_assignment_status(
        assignment_id, body.status, actor_id, tenant_id=body.tenant_id
    )
    return AssignmentResponse.from_entity(record)
