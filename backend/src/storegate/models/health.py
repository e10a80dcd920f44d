"""Health check models for the storegate API."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Backend health as reported by the proxy."""

    status: Literal["healthy", "unhealthy", "error"]
    message: str
    response_time: float | None = Field(default=None, serialization_alias="responseTime")


class LivenessResponse(BaseModel):
    """Liveness of the proxy process itself."""

    status: str = "alive"
