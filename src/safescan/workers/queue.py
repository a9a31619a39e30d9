"""In-process analysis job queue.

A bounded asyncio worker pool fed from a bounded intake queue. ``submit``
only records the job and enqueues its id; workers claim jobs, run them
through the analyzer and record the outcome. Each execution runs as its
own task so a single job can be cancelled without touching the worker.

Every execution failure ends up on the job as FAILED; nothing raised by an
analysis escapes a worker. Failed jobs are never retried automatically.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import TYPE_CHECKING, Protocol

from safescan.observability.logging import get_logger
from safescan.services.analysis.exceptions import AnalysisValidationError
from safescan.workers.exceptions import JobAccessDeniedError, JobQueueFullError
from safescan.workers.models import CANCELLED_ERROR, Job, QueueStats
from safescan.workers.store import JobStore


if TYPE_CHECKING:
    from safescan.schemas.analysis import AnalysisRequest, AnalysisResult

logger = get_logger(__name__)

BeforeExecuteHook = Callable[[Job], Awaitable[None]]


class Analyzer(Protocol):
    """Anything that turns a request into a result (the hybrid router)."""

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult: ...


class JobQueue:
    """Owns job lifecycle, execution and retention.

    Attributes:
        max_workers: Number of concurrent executions.
        retention: How long terminal jobs stay retrievable.
        cleanup_interval: Seconds between retention sweeps.
    """

    def __init__(
        self,
        analyzer: Analyzer,
        store: JobStore | None = None,
        *,
        max_workers: int = 4,
        max_pending: int = 1000,
        retention: timedelta = timedelta(hours=1),
        cleanup_interval: float = 600.0,
        before_execute: BeforeExecuteHook | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            analyzer: Produces the result for each job.
            store: Job store; a fresh one is created when omitted.
            max_workers: Size of the worker pool.
            max_pending: Capacity of the intake buffer.
            retention: Age after completion at which jobs are evicted.
            cleanup_interval: Seconds between retention sweeps.
            before_execute: Extension point for embedders, not set by the
                service itself. An optional coroutine run after a job is
                claimed and before analysis; raising from it fails the job.
        """
        if max_workers < 1:
            msg = "max_workers must be at least 1"
            raise ValueError(msg)

        self._analyzer = analyzer
        self._store = store if store is not None else JobStore()
        self._intake: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)
        self._before_execute = before_execute
        self._workers: list[asyncio.Task[None]] = []
        self._cleanup_task: asyncio.Task[None] | None = None
        self._running: dict[str, asyncio.Task[None]] = {}

        self.max_workers = max_workers
        self.retention = retention
        self.cleanup_interval = cleanup_interval

    @property
    def store(self) -> JobStore:
        """The backing job store."""
        return self._store

    @property
    def is_running(self) -> bool:
        """Whether the worker pool has been started."""
        return bool(self._workers)

    @property
    def capacity(self) -> int:
        """Maximum number of jobs waiting for a worker."""
        return self._intake.maxsize

    # =========================================================================
    # Public operations
    # =========================================================================

    def submit(self, request: AnalysisRequest) -> str:
        """Accept a request and schedule it for execution.

        Returns immediately; analysis happens on a worker.

        Returns:
            The new job's id.

        Raises:
            AnalysisValidationError: If the request has no ingredients. No
                job is created.
            JobQueueFullError: If the intake buffer is full. No job is kept.
        """
        if not request.ingredients:
            msg = "No ingredients provided for analysis"
            raise AnalysisValidationError(msg)

        job = Job.from_request(request)
        self._store.add(job)
        try:
            self._intake.put_nowait(job.id)
        except asyncio.QueueFull:
            self._store.remove(job.id)
            logger.warning("Job queue full, rejecting submission", capacity=self.capacity)
            raise JobQueueFullError(self.capacity) from None

        logger.info(
            "Job submitted",
            job_id=job.id,
            kind=job.kind.value,
            ingredients=len(request.ingredients),
        )
        return job.id

    def get(self, job_id: str) -> Job:
        """Return a snapshot of a job.

        Raises:
            JobNotFoundError: If the id is unknown or was evicted.
        """
        return self._store.get(job_id)

    def get_owned(self, job_id: str, owner_id: str) -> Job:
        """Return a snapshot of a job owned by ``owner_id``.

        Raises:
            JobNotFoundError: If the id is unknown or was evicted.
            JobAccessDeniedError: If the job belongs to someone else.
        """
        job = self._store.get(job_id)
        if job.owner_id != owner_id:
            raise JobAccessDeniedError(job_id)
        return job

    def stats(self) -> QueueStats:
        """Current job counts per status."""
        return self._store.counts()

    def cleanup(self) -> int:
        """Evict terminal jobs older than the retention window.

        Returns:
            Number of jobs evicted.
        """
        evicted = self._store.evict_expired(self.retention)
        if evicted:
            logger.info("Cleaned up expired jobs", count=len(evicted))
        return len(evicted)

    async def cancel(self, job_id: str) -> Job:
        """Cancel a pending or processing job.

        The job always ends FAILED with ``"Cancelled"``; cancelling a job
        that is already terminal changes nothing.

        Returns:
            Snapshot of the job after cancellation.

        Raises:
            JobNotFoundError: If the id is unknown or was evicted.
        """
        job = self._store.get(job_id)
        if job.status.is_terminal:
            return job

        if self._store.claim_and_fail(job_id, CANCELLED_ERROR):
            logger.info("Cancelled pending job", job_id=job_id)
            return self._store.get(job_id)

        task = self._running.get(job_id)
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
            # The worker may not have resumed yet to record the outcome.
            if task.cancelled():
                self._store.fail_if_processing(job_id, CANCELLED_ERROR)
            logger.info("Cancelled running job", job_id=job_id)
        return self._store.get(job_id)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Spawn the worker pool and the recurring cleanup task."""
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(), name=f"analysis-worker-{index}")
            for index in range(self.max_workers)
        ]
        self._cleanup_task = asyncio.create_task(
            self._cleanup_loop(), name="analysis-job-cleanup"
        )
        logger.info(
            "Job queue started",
            workers=self.max_workers,
            capacity=self.capacity,
            retention_seconds=int(self.retention.total_seconds()),
        )

    async def stop(self) -> None:
        """Stop the pool.

        In-flight and still-queued jobs end FAILED with ``"Cancelled"``.
        """
        tasks = list(self._workers)
        if self._cleanup_task is not None:
            tasks.append(self._cleanup_task)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._workers = []
        self._cleanup_task = None

        drained = 0
        while True:
            try:
                job_id = self._intake.get_nowait()
            except asyncio.QueueEmpty:
                break
            if self._store.claim_and_fail(job_id, CANCELLED_ERROR):
                drained += 1
            self._intake.task_done()

        logger.info("Job queue stopped", cancelled_pending=drained)

    async def join(self) -> None:
        """Wait until every queued job has been processed."""
        await self._intake.join()

    # =========================================================================
    # Execution
    # =========================================================================

    async def _worker(self) -> None:
        while True:
            job_id = await self._intake.get()
            try:
                await self._execute(job_id)
            finally:
                self._intake.task_done()

    async def _execute(self, job_id: str) -> None:
        """Claim a job and run it in a cancellable child task."""
        if not self._store.claim(job_id):
            logger.debug("Job already claimed, skipping", job_id=job_id)
            return

        task = asyncio.create_task(self._run(job_id), name=f"analysis-job-{job_id}")
        self._running[job_id] = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            # The worker itself is being stopped: take the job down with it.
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await asyncio.wait({task})
            raise
        finally:
            self._running.pop(job_id, None)
            if task.done():
                self._settle(job_id, task)

    async def _run(self, job_id: str) -> None:
        job = self._store.get(job_id)
        logger.info("Job processing", job_id=job_id, kind=job.kind.value)
        try:
            if self._before_execute is not None:
                await self._before_execute(job)
            result = await self._analyzer.analyze(job.request)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                "Job failed",
                job_id=job_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            self._store.fail(job_id, str(e) or type(e).__name__)
            return

        self._store.complete(job_id, result)
        logger.info(
            "Job completed",
            job_id=job_id,
            method=result.analysis_method.value,
            risk_level=result.risk_level.value,
            analysis_time_ms=result.analysis_time_ms,
        )

    def _settle(self, job_id: str, task: asyncio.Task[None]) -> None:
        """Make sure a finished execution left its job terminal."""
        if task.cancelled():
            if self._store.fail_if_processing(job_id, CANCELLED_ERROR):
                logger.info("Job cancelled", job_id=job_id)
            return

        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error("Job execution crashed", job_id=job_id)
            self._store.fail_if_processing(job_id, str(error) or type(error).__name__)

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval)
            try:
                self.cleanup()
            except Exception:
                logger.exception("Job cleanup sweep failed")
