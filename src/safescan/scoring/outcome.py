"""Scorer call outcomes.

Wraps a scorer call so the router can branch on success or failure as a
value instead of threading try/except through its decision policy.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from safescan.schemas.analysis import AnalysisResult
from safescan.scoring.exceptions import (
    ScorerError,
    ScorerResponseError,
    ScorerTimeoutError,
)


@dataclass(frozen=True, slots=True)
class ScoreOutcome:
    """Either a result or the error that prevented one."""

    result: AnalysisResult | None = None
    error: ScorerError | None = None

    @property
    def ok(self) -> bool:
        """Whether the scorer produced a result."""
        return self.result is not None

    def unwrap(self) -> AnalysisResult:
        """Return the result or re-raise the captured error."""
        if self.result is not None:
            return self.result
        raise self.error or ScorerError("Scorer produced no result")

    @classmethod
    def success(cls, result: AnalysisResult) -> ScoreOutcome:
        return cls(result=result)

    @classmethod
    def failure(cls, error: ScorerError) -> ScoreOutcome:
        return cls(error=error)


def run_local(call: Callable[[], AnalysisResult]) -> ScoreOutcome:
    """Run a synchronous scorer call and capture its outcome.

    Anything other than a ``ScorerError`` is treated as a malformed
    response from the scorer.
    """
    try:
        return ScoreOutcome.success(call())
    except ScorerError as e:
        return ScoreOutcome.failure(e)
    except Exception as e:  # noqa: BLE001
        return ScoreOutcome.failure(ScorerResponseError(f"Local scorer crashed: {e}"))


async def run_remote(
    call: Callable[[], Awaitable[AnalysisResult]],
    timeout: float,
) -> ScoreOutcome:
    """Await an async scorer call under a deadline and capture its outcome.

    Expiry of the deadline becomes a ``ScorerTimeoutError``. Cancellation of
    the surrounding task is never captured.
    """
    try:
        async with asyncio.timeout(timeout):
            return ScoreOutcome.success(await call())
    except TimeoutError:
        return ScoreOutcome.failure(
            ScorerTimeoutError(f"Remote scorer timed out after {timeout:g}s")
        )
    except ScorerError as e:
        return ScoreOutcome.failure(e)
    except Exception as e:  # noqa: BLE001
        return ScoreOutcome.failure(ScorerResponseError(f"Remote scorer crashed: {e}"))
