"""Scorer protocol definitions.

Both scorers share one capability: turn ingredients plus the user's
allergy and medication lists into an ``AnalysisResult``. The router only
ever talks to scorers through these protocols.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from safescan.schemas.analysis import AnalysisResult


@runtime_checkable
class LocalScorerProtocol(Protocol):
    """In-process classifier with a self-reported confidence.

    ``score`` must be side-effect free and bounded in time; it runs on the
    event loop and must not wait on I/O.
    """

    def is_available(self) -> bool:
        """Whether a model is loaded and ready to score."""
        ...

    def score(
        self,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> AnalysisResult:
        """Score a request.

        Raises:
            ScorerUnavailableError: If no model is loaded.
        """
        ...


@runtime_checkable
class RemoteScorerProtocol(Protocol):
    """Externally hosted classifier, treated as authoritative.

    Has no availability probe: an unusable remote shows up only as a
    ``ScorerError`` raised from ``score``.
    """

    async def score(
        self,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> AnalysisResult:
        """Score a request.

        Raises:
            ScorerError: On any failure to produce a verdict.
        """
        ...
