"""Hybrid router: the confidence-threshold policy over the two scorers.

Branches, first match wins:

1. Local unavailable or no ingredients -> remote only.
2. Local fails -> remote only.
3. Local confidence > high -> local result, method ML; remote never called.
   Local confidence > medium -> remote too, merged, method HYBRID.
   Otherwise -> remote only.
4. Remote only, method LLM. No further fallback.
"""

from __future__ import annotations

import time
from functools import partial
from typing import TYPE_CHECKING

from safescan.core.config.settings import AnalysisThresholds, HybridRemoteFailurePolicy
from safescan.observability.logging import get_logger
from safescan.schemas.enums import AnalysisMethod
from safescan.scoring.outcome import ScoreOutcome, run_local, run_remote
from safescan.services.analysis.constants import DEFAULT_REMOTE_TIMEOUT_SECONDS
from safescan.services.analysis.exceptions import AnalysisFailedError
from safescan.services.analysis.merge import merge_hybrid


if TYPE_CHECKING:
    from safescan.schemas.analysis import AnalysisRequest, AnalysisResult
    from safescan.scoring.protocol import LocalScorerProtocol, RemoteScorerProtocol

logger = get_logger(__name__)


class HybridRouter:
    """Produces exactly one ``AnalysisResult`` per request.

    Holds no per-request state, so one instance serves every worker.
    """

    def __init__(
        self,
        local: LocalScorerProtocol,
        remote: RemoteScorerProtocol,
        thresholds: AnalysisThresholds | None = None,
        remote_timeout: float = DEFAULT_REMOTE_TIMEOUT_SECONDS,
        hybrid_remote_failure: HybridRemoteFailurePolicy = HybridRemoteFailurePolicy.FAIL,
    ) -> None:
        """Initialize the router.

        Args:
            local: In-process scorer.
            remote: Remote (LLM) scorer.
            thresholds: Confidence cut-offs; defaults to 0.8 / 0.6.
            remote_timeout: Deadline in seconds for each remote call.
            hybrid_remote_failure: Whether a remote failure on the hybrid
                branch fails the analysis or degrades to the local result.
        """
        self._local = local
        self._remote = remote
        self.thresholds = thresholds or AnalysisThresholds()
        self.remote_timeout = remote_timeout
        self.hybrid_remote_failure = hybrid_remote_failure

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Route a request through the scorers.

        Raises:
            AnalysisFailedError: When no branch could produce a verdict.
        """
        start = time.perf_counter()

        local = self._score_locally(request)
        if local is not None and local.ok:
            result = local.unwrap()
            confidence = result.confidence or 0.0

            if confidence > self.thresholds.high_confidence:
                return result.tagged(AnalysisMethod.ML, _elapsed_ms(start))

            if confidence > self.thresholds.medium_confidence:
                return await self._hybrid(request, result, start)

            logger.debug(
                "Local confidence too low, using remote scorer",
                confidence=confidence,
            )

        remote = await self._score_remotely(request)
        if not remote.ok:
            assert remote.error is not None
            msg = f"Analysis failed: {remote.error}"
            raise AnalysisFailedError(msg, cause=remote.error)
        return remote.unwrap().tagged(AnalysisMethod.LLM, _elapsed_ms(start))

    def _score_locally(self, request: AnalysisRequest) -> ScoreOutcome | None:
        """Run the local scorer, or return None when it should be skipped."""
        if not request.ingredients:
            return None
        if not self._local.is_available():
            logger.debug("Local scorer unavailable, using remote scorer")
            return None

        outcome = run_local(
            partial(
                self._local.score,
                request.ingredients,
                request.user_allergies,
                request.user_medications,
            )
        )
        if not outcome.ok:
            logger.warning(
                "Local scorer failed, falling back to remote scorer",
                error=str(outcome.error),
            )
        return outcome

    async def _score_remotely(self, request: AnalysisRequest) -> ScoreOutcome:
        outcome = await run_remote(
            partial(
                self._remote.score,
                request.ingredients,
                request.user_allergies,
                request.user_medications,
            ),
            timeout=self.remote_timeout,
        )
        if not outcome.ok:
            logger.error("Remote scorer failed", error=str(outcome.error))
        return outcome

    async def _hybrid(
        self,
        request: AnalysisRequest,
        local: AnalysisResult,
        start: float,
    ) -> AnalysisResult:
        remote = await self._score_remotely(request)
        if remote.ok:
            return merge_hybrid(local, remote.unwrap(), _elapsed_ms(start))

        if self.hybrid_remote_failure is HybridRemoteFailurePolicy.DEGRADE:
            logger.warning(
                "Remote scorer failed on hybrid branch, degrading to local result",
                error=str(remote.error),
            )
            return local.tagged(AnalysisMethod.ML, _elapsed_ms(start))

        msg = f"Hybrid analysis failed: {remote.error}"
        raise AnalysisFailedError(msg, cause=remote.error)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
