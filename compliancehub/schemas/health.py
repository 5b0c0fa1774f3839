"""Health check schema."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="ok", description="Service status")
    store_backend: str = Field(description="Configured record store backend")
    store_ready: bool = Field(description="Whether the record store was opened")
