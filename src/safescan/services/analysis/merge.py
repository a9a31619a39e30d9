"""Combining a local and a remote verdict into one hybrid result."""

from __future__ import annotations

from safescan.schemas.analysis import AnalysisResult, implied_risk_level
from safescan.schemas.enums import AnalysisMethod, RiskLevel


def merge_hybrid(
    local: AnalysisResult,
    remote: AnalysisResult,
    elapsed_ms: int = 0,
) -> AnalysisResult:
    """Merge a medium-confidence local result with the remote verdict.

    Each finding list comes from the local result when it has any entries,
    otherwise from the remote one. The risk level is the local level,
    raised to whatever the merged findings imply so ``safe`` always agrees
    with the findings it is shipped with. Confidence is the local one.
    """
    alerts = local.allergen_alerts or remote.allergen_alerts
    interactions = local.drug_interactions or remote.drug_interactions
    risk_level = RiskLevel.highest(
        local.risk_level,
        implied_risk_level(alerts, interactions),
    )

    return AnalysisResult(
        safe=risk_level is RiskLevel.SAFE,
        risk_level=risk_level,
        allergen_alerts=alerts,
        drug_interactions=interactions,
        confidence=local.confidence,
        analysis_method=AnalysisMethod.HYBRID,
        analysis_time_ms=max(elapsed_ms, 0),
    )
