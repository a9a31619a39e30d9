"""Job queue exceptions."""

from __future__ import annotations


class JobError(Exception):
    """Base exception for job queue errors."""


class JobNotFoundError(JobError):
    """Raised when a job id is unknown or has been evicted."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class JobAccessDeniedError(JobError):
    """Raised when a caller asks for a job it does not own."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Access denied to job: {job_id}")


class JobQueueFullError(JobError):
    """Raised when the intake buffer cannot accept another job."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Job queue is full ({capacity} jobs waiting)")


class InvalidJobTransitionError(JobError):
    """Raised when a status change would violate the job state machine."""
