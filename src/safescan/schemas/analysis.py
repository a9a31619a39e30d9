"""Analysis request and result schemas.

These are the immutable values that flow through the engine: the queue
accepts an ``AnalysisRequest``, the router produces an ``AnalysisResult``.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field, field_validator, model_validator

from safescan.schemas.base import DomainModel
from safescan.schemas.enums import AnalysisKind, AnalysisMethod, RiskLevel, Severity


class AllergenAlert(DomainModel):
    """A single allergen finding for the requesting user."""

    allergen: str = Field(..., min_length=1, description="Allergen that matched")
    severity: Severity = Field(..., description="How severe the match is")
    message: str = Field(default="", description="Human-readable explanation")


class DrugInteraction(DomainModel):
    """A single food-drug interaction finding."""

    medication: str = Field(..., min_length=1, description="User medication")
    ingredient: str = Field(..., min_length=1, description="Conflicting ingredient")
    severity: Severity = Field(..., description="How severe the interaction is")
    message: str = Field(default="", description="Human-readable explanation")


def implied_risk_level(
    allergen_alerts: Iterable[AllergenAlert],
    drug_interactions: Iterable[DrugInteraction],
) -> RiskLevel:
    """Return the most severe risk level implied by a set of findings.

    HIGH findings imply DANGER, LOW and MEDIUM imply CAUTION and no
    findings at all imply SAFE.
    """
    levels = [alert.severity.implied_risk for alert in allergen_alerts]
    levels.extend(item.severity.implied_risk for item in drug_interactions)
    return RiskLevel.highest(*levels)


class AnalysisRequest(DomainModel):
    """Immutable input to one analysis.

    Ingredients keep their order; allergies and medications are lower-cased
    sets. Blank entries are dropped everywhere, so an all-blank ingredient
    list normalizes to empty and is rejected at submission.
    """

    requester_id: str = Field(..., min_length=1)
    kind: AnalysisKind
    ingredients: tuple[str, ...] = ()
    user_allergies: frozenset[str] = frozenset()
    user_medications: frozenset[str] = frozenset()
    product_name: str | None = None
    barcode: str | None = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def _normalize_ingredients(cls, value: Iterable[str] | None) -> tuple[str, ...]:
        if value is None:
            return ()
        return tuple(item.strip() for item in value if item and item.strip())

    @field_validator("user_allergies", "user_medications", mode="before")
    @classmethod
    def _normalize_profile_terms(cls, value: Iterable[str] | None) -> frozenset[str]:
        if value is None:
            return frozenset()
        return frozenset(item.strip().lower() for item in value if item and item.strip())


class AnalysisResult(DomainModel):
    """Normalized risk verdict produced by the hybrid router."""

    safe: bool
    risk_level: RiskLevel
    allergen_alerts: tuple[AllergenAlert, ...] = ()
    drug_interactions: tuple[DrugInteraction, ...] = ()
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    analysis_method: AnalysisMethod
    analysis_time_ms: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_safe_flag(self) -> AnalysisResult:
        if self.safe != (self.risk_level is RiskLevel.SAFE):
            msg = (
                f"safe={self.safe} is inconsistent with "
                f"risk_level={self.risk_level.value}"
            )
            raise ValueError(msg)
        return self

    @property
    def implied_risk_level(self) -> RiskLevel:
        """Risk level implied by this result's own findings."""
        return implied_risk_level(self.allergen_alerts, self.drug_interactions)

    def tagged(self, method: AnalysisMethod, elapsed_ms: int) -> AnalysisResult:
        """Return a copy carrying the router's method tag and timing."""
        return self.model_copy(
            update={"analysis_method": method, "analysis_time_ms": max(elapsed_ms, 0)}
        )
