"""Scorer exceptions.

These are the failures the hybrid router expects from a scorer. The router
recovers from them where the decision policy has a fallback and surfaces
them as a failed analysis where it does not.
"""

from __future__ import annotations


class ScorerError(Exception):
    """Base exception for scorer failures."""


class ScorerUnavailableError(ScorerError):
    """Raised when a scorer cannot produce a verdict right now.

    For the local scorer this means no model is loaded; for the remote
    scorer it covers connection errors and service unavailability.
    """


class ScorerTimeoutError(ScorerUnavailableError):
    """Raised when a scorer call exceeds its time budget."""


class ScorerResponseError(ScorerError):
    """Raised when a scorer answered with something unusable.

    Includes HTTP error responses and output that fails schema validation.
    """


class ScorerConfigurationError(ScorerError):
    """Raised when a scorer is not configured (e.g. missing credentials)."""
