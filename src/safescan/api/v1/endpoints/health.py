"""Health check endpoint.

Liveness only: reports scorer availability without calling the remote
service.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from safescan.api.dependencies import get_app_settings
from safescan.core.config import Settings
from safescan.schemas.health import HealthResponse, ScorerState
from safescan.scoring.remote import UnconfiguredRemoteScorer


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def health_check(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """Report that the service is up and which scorers it can use."""
    state = request.app.state
    local = getattr(state, "local_scorer", None)
    remote = getattr(state, "remote_scorer", None)
    queue = getattr(state, "job_queue", None)

    local_loaded = local is not None and local.is_available()
    remote_configured = remote is not None and not isinstance(
        remote, UnconfiguredRemoteScorer
    )

    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
        local_scorer=ScorerState.LOADED if local_loaded else ScorerState.UNAVAILABLE,
        remote_scorer=(
            ScorerState.CONFIGURED if remote_configured else ScorerState.UNCONFIGURED
        ),
        queue_running=queue is not None and queue.is_running,
    )
