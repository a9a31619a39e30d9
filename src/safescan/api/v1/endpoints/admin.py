"""Operational endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from safescan.api.dependencies import CurrentUserId, get_job_queue
from safescan.schemas.scans import QueueStatsResponse
from safescan.workers.queue import JobQueue


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/queue-stats",
    response_model=QueueStatsResponse,
    summary="Job queue statistics",
)
async def queue_stats(
    _user_id: CurrentUserId,
    queue: Annotated[JobQueue, Depends(get_job_queue)],
) -> QueueStatsResponse:
    """Current job counts per status."""
    return QueueStatsResponse.from_stats(queue.stats(), datetime.now(UTC))
