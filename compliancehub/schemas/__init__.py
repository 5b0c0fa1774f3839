"""Pydantic request/response schemas for the API."""

from compliancehub.schemas.assignment import (
    AssignmentResponse,
    AssignmentStatusRequest,
    AssignmentUpsertRequest,
)
from compliancehub.schemas.effective_access import EffectiveAccessResponse
from compliancehub.schemas.health import HealthResponse
from compliancehub.schemas.migration import (
    BackfillRequest,
    BackfillRunResponse,
    VerificationResponse,
)

__all__ = [
    "AssignmentResponse",
    "AssignmentStatusRequest",
    "AssignmentUpsertRequest",
    "BackfillRequest",
    "BackfillRunResponse",
    "EffectiveAccessResponse",
    "HealthResponse",
    "VerificationResponse",
]
