"""Health check schemas."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import Field

from safescan.schemas.base import APIResponse


class ScorerState(StrEnum):
    """Availability of a scorer as reported by the health endpoint."""

    LOADED = "loaded"
    UNAVAILABLE = "unavailable"
    CONFIGURED = "configured"
    UNCONFIGURED = "unconfigured"


class HealthResponse(APIResponse):
    """Liveness plus scorer availability."""

    status: str = Field(..., description="Health status", examples=["healthy"])
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    local_scorer: ScorerState = Field(..., description="Local model state")
    remote_scorer: ScorerState = Field(..., description="Remote scorer state")
    queue_running: bool = Field(..., description="Whether workers are running")
