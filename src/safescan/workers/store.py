"""In-memory job store.

Holds every job the queue knows about behind a single re-entrant lock, so
readers only ever see whole transitions. Lookups hand out deep copies; the
stored instances never leave this module.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from safescan.observability.logging import get_logger
from safescan.schemas.analysis import AnalysisResult
from safescan.schemas.enums import JobStatus
from safescan.workers.exceptions import JobNotFoundError
from safescan.workers.models import Job, QueueStats, utcnow


logger = get_logger(__name__)


class JobStore:
    """Thread-safe map of job id to job.

    Safe for concurrent read/insert/update from the event loop and from
    FastAPI's threadpool. Constructed explicitly so tests and processes can
    hold isolated stores.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        """Initialize an empty store.

        Args:
            clock: Source of "now" for completion timestamps and eviction.
        """
        self._jobs: dict[str, Job] = {}
        self._lock = threading.RLock()
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        with self._lock:
            return job_id in self._jobs

    def add(self, job: Job) -> None:
        """Insert a new job."""
        with self._lock:
            if job.id in self._jobs:
                msg = f"Duplicate job id: {job.id}"
                raise ValueError(msg)
            self._jobs[job.id] = job.model_copy(deep=True)

    def get(self, job_id: str) -> Job:
        """Return a snapshot of a job.

        Raises:
            JobNotFoundError: If the id is unknown or was evicted.
        """
        with self._lock:
            return self._require(job_id).model_copy(deep=True)

    def remove(self, job_id: str) -> None:
        """Drop a job without regard to its state."""
        with self._lock:
            self._jobs.pop(job_id, None)

    def claim(self, job_id: str) -> bool:
        """Claim a pending job for execution (PENDING -> PROCESSING).

        Returns:
            True for the first claim; False for duplicate claims, unknown
            ids and jobs that already left PENDING.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.claimed or job.status is not JobStatus.PENDING:
                return False
            job.claimed = True
            job.mark_processing()
            return True

    def complete(self, job_id: str, result: AnalysisResult) -> Job:
        """Record a successful result (PROCESSING -> COMPLETED)."""
        with self._lock:
            job = self._require(job_id)
            job.mark_completed(result, self._clock())
            return job.model_copy(deep=True)

    def fail(self, job_id: str, error: str) -> Job:
        """Record a failure (PROCESSING -> FAILED)."""
        with self._lock:
            job = self._require(job_id)
            job.mark_failed(error, self._clock())
            return job.model_copy(deep=True)

    def claim_and_fail(self, job_id: str, error: str) -> bool:
        """Terminate a job that never started executing.

        Walks PENDING -> PROCESSING -> FAILED in one critical section so the
        failure still carries ``completed_at``.

        Returns:
            False if the job was already claimed by a worker.
        """
        with self._lock:
            if not self.claim(job_id):
                return False
            self.fail(job_id, error)
            return True

    def fail_if_processing(self, job_id: str, error: str) -> bool:
        """Fail a job only if it is still PROCESSING.

        Returns:
            True if this call moved the job to FAILED.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.status is not JobStatus.PROCESSING:
                return False
            job.mark_failed(error, self._clock())
            return True

    def counts(self) -> QueueStats:
        """Count jobs per status."""
        stats = QueueStats()
        with self._lock:
            for job in self._jobs.values():
                field = job.status.value
                setattr(stats, field, getattr(stats, field) + 1)
        return stats

    def evict_expired(self, retention: timedelta) -> list[str]:
        """Remove terminal jobs that completed before ``now - retention``.

        Non-terminal jobs are never evicted.

        Returns:
            Ids of the evicted jobs.
        """
        cutoff = self._clock() - retention
        with self._lock:
            expired = [
                job.id
                for job in self._jobs.values()
                if job.status.is_terminal
                and job.completed_at is not None
                and job.completed_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        if expired:
            logger.debug("Evicted expired jobs", count=len(expired))
        return expired

    def _require(self, job_id: str) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job
