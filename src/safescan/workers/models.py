"""Job and queue statistics models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from safescan.schemas.analysis import AnalysisRequest, AnalysisResult
from safescan.schemas.enums import AnalysisKind, JobStatus
from safescan.workers.exceptions import InvalidJobTransitionError


CANCELLED_ERROR = "Cancelled"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_job_id() -> str:
    """Generate an opaque, unique job identifier."""
    return str(uuid.uuid4())


class Job(BaseModel):
    """One submitted analysis and its lifecycle.

    State machine: PENDING -> PROCESSING -> COMPLETED | FAILED. Exactly one
    of ``result``/``error`` is set once terminal, and ``completed_at`` is set
    iff the status is terminal. Only the job store mutates a job; callers
    always receive deep copies.
    """

    id: str = Field(default_factory=new_job_id)
    owner_id: str
    kind: AnalysisKind
    request: AnalysisRequest
    status: JobStatus = JobStatus.PENDING
    result: AnalysisResult | None = None
    error: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None
    claimed: bool = Field(default=False, exclude=True)

    @classmethod
    def from_request(cls, request: AnalysisRequest) -> Job:
        """Create a pending job for a request."""
        return cls(
            owner_id=request.requester_id,
            kind=request.kind,
            request=request,
        )

    def mark_processing(self) -> None:
        """Move PENDING -> PROCESSING."""
        self._require(JobStatus.PENDING, JobStatus.PROCESSING)
        self.status = JobStatus.PROCESSING

    def mark_completed(self, result: AnalysisResult, at: datetime) -> None:
        """Move PROCESSING -> COMPLETED, capturing the result."""
        self._require(JobStatus.PROCESSING, JobStatus.COMPLETED)
        self.status = JobStatus.COMPLETED
        self.result = result
        self.completed_at = at

    def mark_failed(self, error: str, at: datetime) -> None:
        """Move PROCESSING -> FAILED, capturing the error message."""
        self._require(JobStatus.PROCESSING, JobStatus.FAILED)
        self.status = JobStatus.FAILED
        self.error = error or "Analysis failed"
        self.completed_at = at

    def _require(self, expected: JobStatus, target: JobStatus) -> None:
        if self.status is not expected:
            msg = (
                f"Job {self.id} cannot move from {self.status.value} "
                f"to {target.value}"
            )
            raise InvalidJobTransitionError(msg)


class QueueStats(BaseModel):
    """Aggregate job counts, for observability only."""

    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        """Number of jobs currently held in memory."""
        return self.pending + self.processing + self.completed + self.failed
