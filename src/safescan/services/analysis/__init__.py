"""Hybrid analysis: routing requests across the local and remote scorers."""

from safescan.services.analysis.exceptions import (
    AnalysisError,
    AnalysisFailedError,
    AnalysisValidationError,
)
from safescan.services.analysis.merge import merge_hybrid
from safescan.services.analysis.router import HybridRouter


__all__ = [
    "AnalysisError",
    "AnalysisFailedError",
    "AnalysisValidationError",
    "HybridRouter",
    "merge_hybrid",
]
