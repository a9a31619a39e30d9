"""Background analysis job queue."""

from safescan.workers.exceptions import (
    InvalidJobTransitionError,
    JobAccessDeniedError,
    JobError,
    JobNotFoundError,
    JobQueueFullError,
)
from safescan.workers.models import CANCELLED_ERROR, Job, QueueStats
from safescan.workers.queue import JobQueue
from safescan.workers.store import JobStore


__all__ = [
    "CANCELLED_ERROR",
    "InvalidJobTransitionError",
    "Job",
    "JobAccessDeniedError",
    "JobError",
    "JobNotFoundError",
    "JobQueue",
    "JobQueueFullError",
    "JobStore",
    "QueueStats",
]
