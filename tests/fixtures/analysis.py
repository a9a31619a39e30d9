"""Factories for analysis requests and results used across tests."""

from __future__ import annotations

from collections.abc import Iterable

from safescan.schemas.analysis import (
    AllergenAlert,
    AnalysisRequest,
    AnalysisResult,
    DrugInteraction,
)
from safescan.schemas.enums import AnalysisKind, AnalysisMethod, RiskLevel, Severity


def make_request(
    ingredients: Iterable[str] = ("peanuts", "sugar"),
    allergies: Iterable[str] = (),
    medications: Iterable[str] = (),
    requester_id: str = "user-a",
    kind: AnalysisKind = AnalysisKind.MANUAL_ENTRY,
) -> AnalysisRequest:
    """Build an analysis request with sensible defaults."""
    return AnalysisRequest(
        requester_id=requester_id,
        kind=kind,
        ingredients=list(ingredients),
        user_allergies=list(allergies),
        user_medications=list(medications),
    )


def alert(allergen: str, severity: Severity = Severity.HIGH, message: str = "") -> AllergenAlert:
    """Build an allergen alert."""
    return AllergenAlert(allergen=allergen, severity=severity, message=message)


def interaction(
    medication: str,
    ingredient: str,
    severity: Severity = Severity.HIGH,
) -> DrugInteraction:
    """Build a drug interaction."""
    return DrugInteraction(medication=medication, ingredient=ingredient, severity=severity)


def make_result(
    risk_level: RiskLevel = RiskLevel.SAFE,
    confidence: float | None = 0.9,
    method: AnalysisMethod = AnalysisMethod.ML,
    alerts: Iterable[AllergenAlert] = (),
    interactions: Iterable[DrugInteraction] = (),
) -> AnalysisResult:
    """Build a result whose ``safe`` flag agrees with its risk level."""
    return AnalysisResult(
        safe=risk_level is RiskLevel.SAFE,
        risk_level=risk_level,
        allergen_alerts=tuple(alerts),
        drug_interactions=tuple(interactions),
        confidence=confidence,
        analysis_method=method,
    )
