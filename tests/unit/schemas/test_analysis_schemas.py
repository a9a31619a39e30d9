"""Unit tests for analysis request/result schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from safescan.schemas.analysis import AnalysisResult, implied_risk_level
from safescan.schemas.enums import AnalysisMethod, RiskLevel, Severity
from tests.fixtures.analysis import alert, interaction, make_request, make_result


pytestmark = pytest.mark.unit


class TestRiskLevel:
    """Tests for risk level ordering."""

    def test_levels_are_totally_ordered(self) -> None:
        """Should rank SAFE < CAUTION < DANGER."""
        assert RiskLevel.SAFE.rank < RiskLevel.CAUTION.rank < RiskLevel.DANGER.rank

    def test_highest_picks_most_severe(self) -> None:
        """Should return the most severe level given."""
        assert RiskLevel.highest(RiskLevel.CAUTION, RiskLevel.DANGER) is RiskLevel.DANGER
        assert RiskLevel.highest(RiskLevel.SAFE, RiskLevel.CAUTION) is RiskLevel.CAUTION

    def test_highest_of_nothing_is_safe(self) -> None:
        """Should default to SAFE when no levels are given."""
        assert RiskLevel.highest() is RiskLevel.SAFE


class TestImpliedRiskLevel:
    """Tests for deriving a risk level from findings."""

    def test_no_findings_is_safe(self) -> None:
        """Should be SAFE without findings."""
        assert implied_risk_level([], []) is RiskLevel.SAFE

    @pytest.mark.parametrize(
        ("severity", "expected"),
        [
            (Severity.LOW, RiskLevel.CAUTION),
            (Severity.MEDIUM, RiskLevel.CAUTION),
            (Severity.HIGH, RiskLevel.DANGER),
        ],
    )
    def test_severity_maps_to_risk(self, severity: Severity, expected: RiskLevel) -> None:
        """Should map HIGH to DANGER and anything lower to CAUTION."""
        assert implied_risk_level([alert("milk", severity)], []) is expected

    def test_interactions_count(self) -> None:
        """Should consider drug interactions as well as allergen alerts."""
        level = implied_risk_level(
            [alert("milk", Severity.LOW)],
            [interaction("warfarin", "spinach")],
        )
        assert level is RiskLevel.DANGER


class TestAnalysisRequest:
    """Tests for request normalization."""

    def test_strips_and_drops_blank_ingredients(self) -> None:
        """Should trim ingredients, drop blanks and keep order."""
        request = make_request(ingredients=["  sugar ", "", "   ", "flour"])
        assert request.ingredients == ("sugar", "flour")

    def test_lowercases_profile_terms(self) -> None:
        """Should lower-case allergies and medications into sets."""
        request = make_request(allergies=["Peanuts", " MILK "], medications=["Warfarin"])
        assert request.user_allergies == frozenset({"peanuts", "milk"})
        assert request.user_medications == frozenset({"warfarin"})

    def test_all_blank_ingredients_normalize_to_empty(self) -> None:
        """Should allow constructing an empty request so submission can reject it."""
        assert make_request(ingredients=["", " "]).ingredients == ()

    def test_is_immutable(self) -> None:
        """Should reject mutation after creation."""
        request = make_request()
        with pytest.raises(ValidationError):
            request.requester_id = "someone-else"  # type: ignore[misc]


class TestAnalysisResult:
    """Tests for the result invariant."""

    def test_safe_must_match_risk_level(self) -> None:
        """Should reject safe=True with a non-SAFE risk level."""
        with pytest.raises(ValidationError, match="inconsistent"):
            AnalysisResult(
                safe=True,
                risk_level=RiskLevel.DANGER,
                analysis_method=AnalysisMethod.ML,
            )

    def test_confidence_bounds(self) -> None:
        """Should reject confidence outside [0, 1]."""
        with pytest.raises(ValidationError):
            make_result(confidence=1.5)

    def test_tagged_replaces_method_and_timing(self) -> None:
        """Should return a copy with the router's method and timing."""
        result = make_result(method=AnalysisMethod.ML)
        tagged = result.tagged(AnalysisMethod.LLM, 42)

        assert tagged.analysis_method is AnalysisMethod.LLM
        assert tagged.analysis_time_ms == 42
        assert result.analysis_method is AnalysisMethod.ML

    def test_serializes_camel_case(self) -> None:
        """Should serialize with camelCase keys and enum values."""
        data = make_result(
            risk_level=RiskLevel.DANGER,
            alerts=[alert("peanuts")],
        ).model_dump(mode="json")

        assert data["riskLevel"] == "danger"
        assert data["analysisMethod"] == "ML"
        assert data["allergenAlerts"][0]["severity"] == "high"
