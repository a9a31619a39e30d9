"""Configuration module with YAML and environment variable support."""

from .settings import (
    AnalysisThresholds,
    HybridRemoteFailurePolicy,
    Settings,
    get_settings,
)


__all__ = [
    "AnalysisThresholds",
    "HybridRemoteFailurePolicy",
    "Settings",
    "get_settings",
]
