"""Unit tests for the hybrid router decision policy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from safescan.core.config import AnalysisThresholds, HybridRemoteFailurePolicy
from safescan.schemas.enums import AnalysisMethod, RiskLevel, Severity
from safescan.scoring.exceptions import (
    ScorerResponseError,
    ScorerTimeoutError,
    ScorerUnavailableError,
)
from safescan.services.analysis.exceptions import AnalysisFailedError
from safescan.services.analysis.router import HybridRouter
from tests.fixtures.analysis import alert, interaction, make_request, make_result
from tests.fixtures.fakes import FakeLocalScorer, FakeRemoteScorer


if TYPE_CHECKING:
    from safescan.schemas.analysis import AnalysisRequest


pytestmark = pytest.mark.unit


def _remote_verdict() -> FakeRemoteScorer:
    return FakeRemoteScorer(
        make_result(
            risk_level=RiskLevel.CAUTION,
            confidence=1.0,
            method=AnalysisMethod.LLM,
            alerts=[alert("milk", Severity.MEDIUM)],
        )
    )


class TestConfidenceThresholds:
    """Tests for branch selection by local confidence."""

    @pytest.mark.parametrize(
        ("confidence", "expected"),
        [
            (0.95, AnalysisMethod.ML),
            (0.80001, AnalysisMethod.ML),
            (0.8, AnalysisMethod.HYBRID),
            (0.7, AnalysisMethod.HYBRID),
            (0.60001, AnalysisMethod.HYBRID),
            (0.6, AnalysisMethod.LLM),
            (0.2, AnalysisMethod.LLM),
        ],
    )
    async def test_branch_by_confidence(
        self,
        confidence: float,
        expected: AnalysisMethod,
    ) -> None:
        """Should compare strictly against the high and medium cut-offs."""
        local = FakeLocalScorer(make_result(confidence=confidence))
        router = HybridRouter(local, _remote_verdict())

        result = await router.analyze(make_request())

        assert result.analysis_method is expected

    async def test_missing_confidence_counts_as_zero(self) -> None:
        """Should send a result without confidence to the remote scorer."""
        local = FakeLocalScorer(make_result(confidence=None))
        remote = _remote_verdict()
        router = HybridRouter(local, remote)

        result = await router.analyze(make_request())

        assert result.analysis_method is AnalysisMethod.LLM
        assert remote.calls == 1

    async def test_custom_thresholds(self) -> None:
        """Should honour configured cut-offs."""
        local = FakeLocalScorer(make_result(confidence=0.7))
        router = HybridRouter(
            local,
            _remote_verdict(),
            thresholds=AnalysisThresholds(high_confidence=0.65, medium_confidence=0.3),
        )

        result = await router.analyze(make_request())

        assert result.analysis_method is AnalysisMethod.ML


class TestFastPath:
    """Tests for the high-confidence local path."""

    async def test_peanut_allergy_never_calls_remote(
        self,
        peanut_request: AnalysisRequest,
    ) -> None:
        """Should answer from the local scorer alone when it is confident."""
        local = FakeLocalScorer(
            make_result(
                risk_level=RiskLevel.DANGER,
                confidence=0.92,
                alerts=[alert("peanuts")],
            )
        )
        remote = _remote_verdict()
        router = HybridRouter(local, remote)

        result = await router.analyze(peanut_request)

        assert result.analysis_method is AnalysisMethod.ML
        assert result.risk_level is RiskLevel.DANGER
        assert result.safe is False
        assert remote.calls == 0
        assert local.calls == [(("peanuts", "sugar"), frozenset({"peanuts"}), frozenset())]


class TestLocalFallbacks:
    """Tests for routing around an unusable local scorer."""

    async def test_unavailable_local_goes_remote(self) -> None:
        """Should skip the local scorer entirely when no model is loaded."""
        local = FakeLocalScorer(available=False)
        remote = _remote_verdict()
        router = HybridRouter(local, remote)

        result = await router.analyze(make_request())

        assert result.analysis_method is AnalysisMethod.LLM
        assert local.calls == []

    async def test_local_failure_goes_remote(self) -> None:
        """Should fall back to the remote scorer when the local one raises."""
        local = FakeLocalScorer(error=ScorerResponseError("corrupt model"))
        router = HybridRouter(local, _remote_verdict())

        result = await router.analyze(make_request())

        assert result.analysis_method is AnalysisMethod.LLM
        assert result.confidence == 1.0

    async def test_remote_only_failure_fails_analysis(self) -> None:
        """Should not fall back any further when the remote scorer fails."""
        local = FakeLocalScorer(available=False)
        error = ScorerUnavailableError("down")
        router = HybridRouter(local, FakeRemoteScorer(error=error))

        with pytest.raises(AnalysisFailedError) as exc_info:
            await router.analyze(make_request())

        assert exc_info.value.cause is error

    async def test_remote_only_timeout_fails_analysis(self) -> None:
        """Should fail with a timeout error when the remote scorer is too slow."""
        local = FakeLocalScorer(available=False)
        remote = FakeRemoteScorer(_remote_verdict().result, delay=1.0)
        router = HybridRouter(local, remote, remote_timeout=0.01)

        with pytest.raises(AnalysisFailedError, match="timed out") as exc_info:
            await router.analyze(make_request())

        assert isinstance(exc_info.value.cause, ScorerTimeoutError)
        assert remote.calls == 1


class TestHybridBranch:
    """Tests for the medium-confidence hybrid branch."""

    async def test_merge_prefers_local_findings(self) -> None:
        """Should take each non-empty list from local and the rest from remote."""
        local = FakeLocalScorer(
            make_result(
                risk_level=RiskLevel.DANGER,
                confidence=0.7,
                alerts=[alert("peanuts")],
            )
        )
        remote = FakeRemoteScorer(
            make_result(
                risk_level=RiskLevel.DANGER,
                confidence=1.0,
                method=AnalysisMethod.LLM,
                alerts=[alert("milk")],
                interactions=[interaction("warfarin", "spinach")],
            )
        )
        router = HybridRouter(local, remote)

        result = await router.analyze(make_request())

        assert result.analysis_method is AnalysisMethod.HYBRID
        assert [a.allergen for a in result.allergen_alerts] == ["peanuts"]
        assert [i.medication for i in result.drug_interactions] == ["warfarin"]
        assert result.risk_level is RiskLevel.DANGER
        assert result.confidence == 0.7

    async def test_remote_timeout_fails_analysis(self) -> None:
        """Should fail with the timeout as cause by default."""
        local = FakeLocalScorer(make_result(confidence=0.7))
        remote = FakeRemoteScorer(make_result(), delay=1.0)
        router = HybridRouter(local, remote, remote_timeout=0.01)

        with pytest.raises(AnalysisFailedError) as exc_info:
            await router.analyze(make_request())

        assert isinstance(exc_info.value.cause, ScorerTimeoutError)

    async def test_degrade_policy_returns_local(self) -> None:
        """Should return the local result tagged ML when configured to degrade."""
        local_result = make_result(
            risk_level=RiskLevel.CAUTION,
            confidence=0.7,
            alerts=[alert("nuts", Severity.MEDIUM)],
        )
        router = HybridRouter(
            FakeLocalScorer(local_result),
            FakeRemoteScorer(error=ScorerUnavailableError("down")),
            hybrid_remote_failure=HybridRemoteFailurePolicy.DEGRADE,
        )

        result = await router.analyze(make_request())

        assert result.analysis_method is AnalysisMethod.ML
        assert result.risk_level is RiskLevel.CAUTION
        assert result.allergen_alerts == local_result.allergen_alerts
