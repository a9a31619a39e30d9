"""Analysis service exceptions."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base exception for analysis errors."""


class AnalysisValidationError(AnalysisError):
    """Raised when a request cannot be analyzed as submitted."""


class AnalysisFailedError(AnalysisError):
    """Raised when no scorer could produce a verdict.

    Attributes:
        cause: The scorer error behind the failure, if any.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
