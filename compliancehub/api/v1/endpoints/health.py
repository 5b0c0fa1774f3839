"""Health check endpoint."""

from fastapi import APIRouter, Request

from compliancehub.core.config import get_settings
from compliancehub.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Return service health and whether the record store is ready."""
    ready = getattr(request.app.state, "record_store", None) is not None
    return HealthResponse(
        status="ok" if ready else "degraded",
        store_backend=get_settings().store_backend,
        store_ready=ready,
    )
