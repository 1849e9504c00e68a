"""Health check response models."""

from typing import Literal

from pydantic import BaseModel


class ComponentHealth(BaseModel):
    """Health of one backing component."""

    name: str
    status: Literal["healthy", "unhealthy"]
    latency_ms: float | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Overall service health."""

    status: Literal["healthy", "degraded"]
    version: str
    timestamp: str
    components: list[ComponentHealth]
