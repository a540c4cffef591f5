"""API request/response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from ..core.types import AuditReport


class AuditSuccessResponse(BaseModel):
    """Envelope returned for a completed audit."""

    success: Literal[True] = True
    data: AuditReport


class AuditFailureResponse(BaseModel):
    """Envelope returned for a rejected or failed audit."""

    success: Literal[False] = False
    error: str = Field(description="Human-readable failure message")


# Health check schemas


class ComponentHealth(BaseModel):
    """Individual component health."""

    status: str
    latency_ms: float | None
    message: str | None


class HealthStatus(BaseModel):
    """Health check status."""

    status: str = Field(description="Overall status: healthy, degraded, unhealthy")
    version: str
    timestamp: datetime
    checks: dict[str, ComponentHealth]
