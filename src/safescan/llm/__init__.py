"""LLM integration module.

Provides the Groq chat client and the prompt that back the remote
ingredient scorer.
"""

from safescan.llm.client.groq import GroqClient
from safescan.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from safescan.llm.models import LLMCompletionResult
from safescan.llm.prompts.base import BasePrompt


__all__ = [
    "BasePrompt",
    "GroqClient",
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "LLMValidationError",
]
