"""Unit tests for the in-memory job store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from safescan.schemas.enums import JobStatus
from safescan.workers.exceptions import InvalidJobTransitionError, JobNotFoundError
from safescan.workers.models import Job
from safescan.workers.store import JobStore
from tests.fixtures.analysis import make_request, make_result


pytestmark = pytest.mark.unit

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Settable clock for deterministic timestamps."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> JobStore:
    return JobStore(clock=clock)


def _add(store: JobStore) -> Job:
    job = Job.from_request(make_request())
    store.add(job)
    return job


class TestClaim:
    """Tests for claiming jobs."""

    def test_first_claim_wins(self, store: JobStore) -> None:
        """Should let exactly one caller claim a pending job."""
        job = _add(store)

        assert store.claim(job.id) is True
        assert store.claim(job.id) is False
        assert store.get(job.id).status is JobStatus.PROCESSING

    def test_unknown_id_cannot_be_claimed(self, store: JobStore) -> None:
        """Should return False for ids it does not hold."""
        assert store.claim("missing") is False

    def test_claim_and_fail_skips_claimed_jobs(self, store: JobStore) -> None:
        """Should leave a job alone once a worker has claimed it."""
        job = _add(store)
        store.claim(job.id)

        assert store.claim_and_fail(job.id, "Cancelled") is False
        assert store.get(job.id).status is JobStatus.PROCESSING


class TestTransitions:
    """Tests for terminal transitions."""

    def test_complete_sets_result_and_timestamp(
        self, store: JobStore, clock: FakeClock
    ) -> None:
        """Should record the result and completion time."""
        job = _add(store)
        store.claim(job.id)
        clock.now = T0 + timedelta(seconds=3)

        done = store.complete(job.id, make_result())

        assert done.status is JobStatus.COMPLETED
        assert done.result is not None
        assert done.error is None
        assert done.completed_at == T0 + timedelta(seconds=3)

    def test_cannot_complete_pending_job(self, store: JobStore) -> None:
        """Should refuse to skip PROCESSING."""
        job = _add(store)

        with pytest.raises(InvalidJobTransitionError):
            store.complete(job.id, make_result())

    def test_terminal_jobs_stay_terminal(self, store: JobStore) -> None:
        """Should refuse to move a failed job anywhere else."""
        job = _add(store)
        store.claim(job.id)
        store.fail(job.id, "boom")

        with pytest.raises(InvalidJobTransitionError):
            store.complete(job.id, make_result())
        assert store.fail_if_processing(job.id, "Cancelled") is False
        assert store.get(job.id).error == "boom"

    def test_snapshots_are_copies(self, store: JobStore) -> None:
        """Should not let callers mutate stored jobs."""
        job = _add(store)
        snapshot = store.get(job.id)
        snapshot.status = JobStatus.FAILED

        assert store.get(job.id).status is JobStatus.PENDING


class TestEviction:
    """Tests for retention-based eviction."""

    def test_evicts_only_expired_terminal_jobs(
        self, store: JobStore, clock: FakeClock
    ) -> None:
        """Should drop terminal jobs past retention and keep everything else."""
        finished = _add(store)
        store.claim(finished.id)
        store.complete(finished.id, make_result())
        pending = _add(store)

        clock.now = T0 + timedelta(hours=2)
        evicted = store.evict_expired(timedelta(hours=1))

        assert evicted == [finished.id]
        assert pending.id in store
        with pytest.raises(JobNotFoundError):
            store.get(finished.id)

    def test_counts_by_status(self, store: JobStore) -> None:
        """Should count each job under its current status."""
        _add(store)
        running = _add(store)
        store.claim(running.id)

        stats = store.counts()

        assert stats.pending == 1
        assert stats.processing == 1
        assert stats.total == 2
