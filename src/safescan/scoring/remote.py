"""Remote LLM-backed scorer.

Authoritative but slow and metered. Every failure from the LLM client is
translated into a ``ScorerError`` so the router never handles provider
exceptions directly.
"""

from __future__ import annotations

import time
from collections.abc import Collection, Sequence
from typing import TYPE_CHECKING

from safescan.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from safescan.llm.prompts.ingredient_analysis import (
    IngredientAnalysisPrompt,
    RemoteAnalysisOutput,
)
from safescan.observability.logging import get_logger
from safescan.schemas.analysis import AllergenAlert, AnalysisResult, DrugInteraction
from safescan.schemas.enums import AnalysisMethod, RiskLevel
from safescan.scoring.exceptions import (
    ScorerConfigurationError,
    ScorerError,
    ScorerResponseError,
    ScorerTimeoutError,
    ScorerUnavailableError,
)


if TYPE_CHECKING:
    from safescan.llm.client.protocol import LLMClientProtocol

logger = get_logger(__name__)

# The remote verdict is treated as authoritative.
REMOTE_CONFIDENCE = 1.0


class RemoteScorer:
    """Scores ingredients by asking an LLM for a structured verdict."""

    def __init__(
        self,
        client: LLMClientProtocol,
        prompt: IngredientAnalysisPrompt | None = None,
    ) -> None:
        self._client = client
        self._prompt = prompt or IngredientAnalysisPrompt()

    async def score(
        self,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> AnalysisResult:
        """Ask the LLM for a verdict.

        Raises:
            ScorerTimeoutError: The provider timed out.
            ScorerUnavailableError: The provider was unreachable or rate limited.
            ScorerResponseError: The provider answered with an error or bad JSON.
            ScorerConfigurationError: The client is missing credentials.
        """
        try:
            prompt = self._prompt.format(
                ingredients=list(ingredients),
                allergies=allergies,
                medications=medications,
            )
        except ValueError as e:
            raise ScorerResponseError(str(e)) from e

        start = time.perf_counter()
        try:
            output = await self._client.generate_structured(
                prompt=prompt,
                schema=RemoteAnalysisOutput,
                system=self._prompt.system_prompt,
                options=self._prompt.get_options(),
            )
        except LLMError as e:
            raise _translate(e) from e

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        result = to_analysis_result(output, elapsed_ms)
        logger.debug(
            "Remote prediction",
            risk_level=result.risk_level.value,
            alerts=len(result.allergen_alerts),
            interactions=len(result.drug_interactions),
            elapsed_ms=elapsed_ms,
        )
        return result


def to_analysis_result(output: RemoteAnalysisOutput, elapsed_ms: int = 0) -> AnalysisResult:
    """Convert the LLM's structured output into an ``AnalysisResult``.

    The reported risk level is kept as-is; ``safe`` is always derived from
    it, whatever the model put in its own ``safe`` field.
    """
    risk_level = output.risk_level
    if output.safe is not None and output.safe != (risk_level is RiskLevel.SAFE):
        logger.warning(
            "Remote verdict inconsistent, deriving safe from risk level",
            reported_safe=output.safe,
            risk_level=risk_level.value,
        )

    return AnalysisResult(
        safe=risk_level is RiskLevel.SAFE,
        risk_level=risk_level,
        allergen_alerts=tuple(
            AllergenAlert(
                allergen=alert.allergen,
                severity=alert.severity,
                message=alert.message,
            )
            for alert in output.allergen_alerts
        ),
        drug_interactions=tuple(
            DrugInteraction(
                medication=item.medication,
                ingredient=item.ingredient,
                severity=item.severity,
                message=item.message,
            )
            for item in output.drug_interactions
        ),
        confidence=REMOTE_CONFIDENCE,
        analysis_method=AnalysisMethod.LLM,
        analysis_time_ms=max(elapsed_ms, 0),
    )


def _translate(error: LLMError) -> ScorerError:
    # Subclasses before their bases
    if isinstance(error, LLMTimeoutError):
        return ScorerTimeoutError(f"Remote scorer timed out: {error}")
    if isinstance(error, LLMRateLimitError):
        return ScorerUnavailableError(f"Remote scorer rate limited: {error}")
    if isinstance(error, LLMUnavailableError):
        return ScorerUnavailableError(f"Remote scorer unavailable: {error}")
    if isinstance(error, LLMConfigurationError):
        return ScorerConfigurationError(f"Remote scorer misconfigured: {error}")
    if isinstance(error, (LLMValidationError, LLMResponseError)):
        return ScorerResponseError(f"Remote scorer response invalid: {error}")
    return ScorerError(f"Remote scorer failed: {error}")


class UnconfiguredRemoteScorer:
    """Stand-in used when no remote credentials are configured."""

    def __init__(self, reason: str = "Remote scorer is not configured") -> None:
        self.reason = reason

    async def score(
        self,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> AnalysisResult:
        """Always raises ``ScorerConfigurationError``."""
        raise ScorerConfigurationError(self.reason)
