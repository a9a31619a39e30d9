"""LLM client implementations."""

from safescan.llm.client.groq import GroqClient
from safescan.llm.client.protocol import LLMClientProtocol


__all__ = ["GroqClient", "LLMClientProtocol"]
