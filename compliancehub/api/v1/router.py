"""API v1 router: includes all endpoint routers."""

from fastapi import APIRouter

from compliancehub.api.v1.endpoints import (
    assignments,
    effective_access,
    health,
    migrations,
)

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    effective_access.router, prefix="/subjects", tags=["effective-access"]
)
api_router.include_router(assignments.router, prefix="/assignments", tags=["assignments"])
api_router.include_router(migrations.router, prefix="/migrations", tags=["migrations"])
