"""Fake scorers and analyzers for router and queue tests."""

from __future__ import annotations

import asyncio
from collections.abc import Collection, Sequence
from typing import TYPE_CHECKING

from safescan.scoring.exceptions import ScorerError, ScorerUnavailableError
from tests.fixtures.analysis import make_result


if TYPE_CHECKING:
    from safescan.schemas.analysis import AnalysisRequest, AnalysisResult


class FakeLocalScorer:
    """Local scorer returning a canned result or raising a canned error."""

    def __init__(
        self,
        result: AnalysisResult | None = None,
        error: Exception | None = None,
        *,
        available: bool = True,
    ) -> None:
        self.result = result
        self.error = error
        self.available = available
        self.calls: list[tuple[tuple[str, ...], frozenset[str], frozenset[str]]] = []

    def is_available(self) -> bool:
        return self.available

    def score(
        self,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> AnalysisResult:
        self.calls.append((tuple(ingredients), frozenset(allergies), frozenset(medications)))
        if not self.available:
            msg = "Local model not loaded"
            raise ScorerUnavailableError(msg)
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


class FakeRemoteScorer:
    """Remote scorer with an optional delay before answering."""

    def __init__(
        self,
        result: AnalysisResult | None = None,
        error: Exception | None = None,
        *,
        delay: float = 0.0,
    ) -> None:
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = 0

    async def score(
        self,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> AnalysisResult:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.result is None:
            msg = "No canned remote result"
            raise ScorerError(msg)
        return self.result


class BlockingAnalyzer:
    """Analyzer that waits for ``release`` before answering.

    Lets tests hold jobs in PROCESSING.
    """

    def __init__(self, result: AnalysisResult | None = None) -> None:
        self.result = result or make_result()
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.requests: list[AnalysisRequest] = []

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        self.requests.append(request)
        self.started.set()
        await self.release.wait()
        return self.result


class ImmediateAnalyzer:
    """Analyzer that answers right away, or raises ``error``."""

    def __init__(
        self,
        result: AnalysisResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.result = result or make_result()
        self.error = error
        self.requests: list[AnalysisRequest] = []

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result
