"""Job polling and cancellation endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from safescan.api.dependencies import CurrentUserId, get_job_queue
from safescan.core.exceptions import ForbiddenException, NotFoundException
from safescan.schemas.scans import JobStatusResponse
from safescan.workers.exceptions import JobAccessDeniedError, JobNotFoundError
from safescan.workers.models import Job
from safescan.workers.queue import JobQueue


router = APIRouter(prefix="/jobs", tags=["Jobs"])

_JOB_RESPONSES: dict[int | str, dict[str, str]] = {
    401: {"description": "Missing user identity"},
    403: {"description": "Job belongs to another user"},
    404: {"description": "Unknown or expired job"},
}


def _owned_job(queue: JobQueue, job_id: str, user_id: str) -> Job:
    try:
        return queue.get_owned(job_id, user_id)
    except JobNotFoundError as e:
        raise NotFoundException("Job", job_id) from e
    except JobAccessDeniedError as e:
        raise ForbiddenException() from e


@router.get(
    "/{job_id}",
    name="get_job",
    response_model=JobStatusResponse,
    response_model_exclude_none=True,
    summary="Get analysis job status",
    responses=_JOB_RESPONSES,
)
async def get_job(
    job_id: str,
    user_id: CurrentUserId,
    queue: Annotated[JobQueue, Depends(get_job_queue)],
) -> JobStatusResponse:
    """Poll a job. Results and errors are only shown to the job's owner."""
    return JobStatusResponse.from_job(_owned_job(queue, job_id, user_id))


@router.delete(
    "/{job_id}",
    response_model=JobStatusResponse,
    response_model_exclude_none=True,
    summary="Cancel an analysis job",
    responses=_JOB_RESPONSES,
)
async def cancel_job(
    job_id: str,
    user_id: CurrentUserId,
    queue: Annotated[JobQueue, Depends(get_job_queue)],
) -> JobStatusResponse:
    """Cancel a pending or running job; finished jobs are returned unchanged."""
    _owned_job(queue, job_id, user_id)
    try:
        job = await queue.cancel(job_id)
    except JobNotFoundError as e:
        raise NotFoundException("Job", job_id) from e
    return JobStatusResponse.from_job(job)
