"""LLM client data models.

Request/response bodies for the OpenAI-compatible chat completions API
served by Groq, plus the provider-neutral completion result.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LLMCompletionResult(BaseModel):
    """Internal result from an LLM completion.

    Wraps the raw response with its parsed structured output.
    """

    raw_response: str = Field(..., description="Raw text response from LLM")
    parsed: Any | None = Field(
        default=None,
        description="Parsed structured output if schema was provided",
    )
    model: str = Field(..., description="Model that generated response")
    prompt_tokens: int | None = Field(default=None, description="Input token count")
    completion_tokens: int | None = Field(
        default=None, description="Output token count"
    )

    model_config = {"frozen": True}


class ChatMessage(BaseModel):
    """Single message in chat format."""

    role: str = Field(..., description="Message role: system, user, or assistant")
    content: str = Field(..., description="Message content")


class ChatCompletionRequest(BaseModel):
    """Request body for the /chat/completions endpoint."""

    model: str = Field(..., description="Model name (e.g., 'llama-3.1-8b-instant')")
    messages: list[ChatMessage] = Field(..., description="Chat messages")
    response_format: dict[str, str] | None = Field(
        default=None,
        description="Response format: {'type': 'json_object'} for JSON mode",
    )
    temperature: float = Field(default=0.1, description="Sampling temperature")
    max_tokens: int | None = Field(
        default=None,
        description="Maximum tokens to generate",
    )


class ChatUsage(BaseModel):
    """Token usage reported by the provider."""

    prompt_tokens: int = Field(..., description="Input token count")
    completion_tokens: int = Field(..., description="Output token count")
    total_tokens: int = Field(..., description="Total token count")


class ChatChoice(BaseModel):
    """Single choice in a chat completion response."""

    index: int = Field(..., description="Choice index")
    message: ChatMessage = Field(..., description="Generated message")
    finish_reason: str | None = Field(default=None, description="Reason for completion")


class ChatCompletionResponse(BaseModel):
    """Response from the /chat/completions endpoint."""

    id: str = Field(..., description="Unique response ID")
    model: str = Field(..., description="Model that generated response")
    choices: list[ChatChoice] = Field(..., min_length=1, description="Completions")
    usage: ChatUsage | None = Field(default=None, description="Token usage")
    created: int = Field(..., description="Unix timestamp of creation")
