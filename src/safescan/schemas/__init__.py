"""Pydantic schemas for the analysis engine and its HTTP API."""

from safescan.schemas.analysis import (
    AllergenAlert,
    AnalysisRequest,
    AnalysisResult,
    DrugInteraction,
    implied_risk_level,
)
from safescan.schemas.base import APIRequest, APIResponse, DomainModel
from safescan.schemas.enums import (
    AnalysisKind,
    AnalysisMethod,
    JobStatus,
    RiskLevel,
    Severity,
)


__all__ = [
    "APIRequest",
    "APIResponse",
    "AllergenAlert",
    "AnalysisKind",
    "AnalysisMethod",
    "AnalysisRequest",
    "AnalysisResult",
    "DomainModel",
    "DrugInteraction",
    "JobStatus",
    "RiskLevel",
    "Severity",
    "implied_risk_level",
]
