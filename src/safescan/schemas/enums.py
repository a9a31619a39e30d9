"""Enumeration types for analysis schemas.

This module contains all enum definitions used across the engine and API.
Values match the wire format clients already consume ("safe", "ML", ...).
"""

from __future__ import annotations

from enum import StrEnum


class RiskLevel(StrEnum):
    """Overall product safety for a given user profile.

    Totally ordered: SAFE < CAUTION < DANGER. String comparison of the
    values does not follow that order, use ``rank`` instead.
    """

    SAFE = "safe"
    CAUTION = "caution"
    DANGER = "danger"

    @property
    def rank(self) -> int:
        """Position of this level in the SAFE < CAUTION < DANGER order."""
        return _RISK_RANK[self]

    @classmethod
    def highest(cls, *levels: RiskLevel) -> RiskLevel:
        """Return the most severe of the given levels (SAFE when empty)."""
        return max(levels, key=lambda level: level.rank, default=cls.SAFE)


_RISK_RANK: dict[RiskLevel, int] = {
    RiskLevel.SAFE: 0,
    RiskLevel.CAUTION: 1,
    RiskLevel.DANGER: 2,
}


class Severity(StrEnum):
    """Severity of a single allergen alert or drug interaction."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def implied_risk(self) -> RiskLevel:
        """Risk level a finding of this severity implies on its own."""
        if self is Severity.HIGH:
            return RiskLevel.DANGER
        return RiskLevel.CAUTION


class AnalysisMethod(StrEnum):
    """Which scorer(s) produced the final verdict."""

    ML = "ML"
    LLM = "LLM"
    HYBRID = "Hybrid"


class AnalysisKind(StrEnum):
    """How the analysis request entered the system."""

    BARCODE_LOOKUP = "barcode"
    MANUAL_ENTRY = "manual"


class JobStatus(StrEnum):
    """Lifecycle state of an analysis job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can leave this state."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)
