"""LLM client exceptions.

Raised by the chat clients and translated into scorer errors by
``safescan.scoring.remote.RemoteScorer``.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM client errors."""


class LLMUnavailableError(LLMError):
    """Raised when the LLM service cannot be reached."""


class LLMTimeoutError(LLMUnavailableError):
    """Raised when the LLM service did not answer in time."""


class LLMRateLimitError(LLMUnavailableError):
    """Raised when the provider rejects the call with HTTP 429."""


class LLMResponseError(LLMError):
    """Raised when the LLM service answers with an HTTP error status."""


class LLMValidationError(LLMError):
    """Raised when the completion does not match the requested schema."""


class LLMConfigurationError(LLMError):
    """Raised when the client lacks required configuration (API key)."""
