"""Unit tests for the remote (LLM) scorer."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from safescan.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from safescan.llm.prompts.ingredient_analysis import RemoteAnalysisOutput
from safescan.schemas.enums import AnalysisMethod, RiskLevel, Severity
from safescan.scoring.exceptions import (
    ScorerConfigurationError,
    ScorerError,
    ScorerResponseError,
    ScorerTimeoutError,
    ScorerUnavailableError,
)
from safescan.scoring.remote import (
    REMOTE_CONFIDENCE,
    RemoteScorer,
    UnconfiguredRemoteScorer,
    to_analysis_result,
)
from tests.fixtures.llm_responses import PEANUT_DANGER_OUTPUT


pytestmark = pytest.mark.unit


@pytest.fixture
def llm_client() -> AsyncMock:
    """LLM client returning the peanut verdict."""
    client = AsyncMock()
    client.generate_structured.return_value = RemoteAnalysisOutput.model_validate(
        PEANUT_DANGER_OUTPUT
    )
    return client


class TestRemoteScorer:
    """Tests for RemoteScorer.score."""

    async def test_returns_llm_result(self, llm_client: AsyncMock) -> None:
        """Should convert the structured output into an LLM result."""
        scorer = RemoteScorer(llm_client)

        result = await scorer.score(["peanuts", "sugar"], {"peanuts"}, set())

        assert result.analysis_method is AnalysisMethod.LLM
        assert result.risk_level is RiskLevel.DANGER
        assert result.safe is False
        assert result.confidence == REMOTE_CONFIDENCE
        assert result.allergen_alerts[0].allergen == "peanuts"
        assert result.allergen_alerts[0].severity is Severity.HIGH

    async def test_prompt_includes_profile(self, llm_client: AsyncMock) -> None:
        """Should send ingredients, allergies and medications to the model."""
        scorer = RemoteScorer(llm_client)

        await scorer.score(["peanuts", "sugar"], {"peanuts"}, {"warfarin"})

        kwargs = llm_client.generate_structured.call_args.kwargs
        assert "peanuts, sugar" in kwargs["prompt"]
        assert "User Allergies: peanuts" in kwargs["prompt"]
        assert "User Medications: warfarin" in kwargs["prompt"]
        assert kwargs["schema"] is RemoteAnalysisOutput
        assert kwargs["system"]

    @pytest.mark.parametrize(
        ("llm_error", "expected"),
        [
            (LLMTimeoutError("slow"), ScorerTimeoutError),
            (LLMRateLimitError("429"), ScorerUnavailableError),
            (LLMUnavailableError("down"), ScorerUnavailableError),
            (LLMConfigurationError("no key"), ScorerConfigurationError),
            (LLMValidationError("bad json"), ScorerResponseError),
            (LLMResponseError("500"), ScorerResponseError),
            (LLMError("other"), ScorerError),
        ],
    )
    async def test_translates_llm_errors(
        self,
        llm_client: AsyncMock,
        llm_error: LLMError,
        expected: type[ScorerError],
    ) -> None:
        """Should surface provider failures as scorer errors."""
        llm_client.generate_structured.side_effect = llm_error
        scorer = RemoteScorer(llm_client)

        with pytest.raises(expected) as exc_info:
            await scorer.score(["sugar"], set(), set())

        assert exc_info.value.__cause__ is llm_error

    async def test_empty_ingredients_is_response_error(self, llm_client: AsyncMock) -> None:
        """Should refuse to build a prompt without ingredients."""
        scorer = RemoteScorer(llm_client)

        with pytest.raises(ScorerResponseError):
            await scorer.score([], set(), set())

        llm_client.generate_structured.assert_not_called()


class TestToAnalysisResult:
    """Tests for converting model output into a result."""

    def test_safe_is_derived_from_risk_level(self) -> None:
        """Should ignore a contradictory safe flag from the model."""
        output = RemoteAnalysisOutput(safe=True, risk_level=RiskLevel.CAUTION)

        result = to_analysis_result(output, elapsed_ms=12)

        assert result.safe is False
        assert result.risk_level is RiskLevel.CAUTION
        assert result.analysis_time_ms == 12

    def test_missing_safe_flag_is_fine(self) -> None:
        """Should accept output without a safe flag."""
        output = RemoteAnalysisOutput.model_validate({"riskLevel": "safe"})

        assert to_analysis_result(output).safe is True


class TestUnconfiguredRemoteScorer:
    """Tests for the stand-in used without credentials."""

    async def test_always_raises_configuration_error(self) -> None:
        """Should raise the configured reason on every call."""
        scorer = UnconfiguredRemoteScorer("GROQ_API_KEY is not configured")

        with pytest.raises(ScorerConfigurationError, match="GROQ_API_KEY"):
            await scorer.score(["sugar"], set(), set())
