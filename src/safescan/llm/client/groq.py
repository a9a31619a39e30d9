"""HTTP client for the Groq LLM service.

Groq provides fast cloud inference with an OpenAI-compatible API. It backs
the remote scorer, which is the slow, metered path of the analysis engine.
"""

from __future__ import annotations

import re
from typing import Any, TypeVar, cast

import httpx
from aiolimiter import AsyncLimiter
from pydantic import BaseModel

from safescan.llm.exceptions import (
    LLMConfigurationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from safescan.llm.models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    LLMCompletionResult,
)
from safescan.observability.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence from a model response."""
    return _CODE_FENCE.sub("", text.strip()).strip()


class GroqClient:
    """Async HTTP client for the Groq chat completions API.

    Supports JSON mode for structured output via ``response_format``.

    Attributes:
        base_url: Groq API base URL.
        model: Default model (e.g., llama-3.1-8b-instant).
        timeout: HTTP request timeout in seconds.
        max_retries: Maximum retry attempts for timeouts and connection errors.
    """

    DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "llama-3.1-8b-instant",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 2,
        requests_per_minute: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Groq client.

        Args:
            api_key: Groq API key for authentication.
            model: Default model name.
            base_url: Groq API base URL.
            timeout: HTTP request timeout in seconds (default: 30).
            max_retries: Maximum retries for transient failures (default: 2).
            requests_per_minute: Rate limit for API requests (default: 30).
            http_client: Optional preconfigured HTTP client (not closed by us).
        """
        if not api_key:
            msg = "Groq API key is required"
            raise LLMConfigurationError(msg)

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._http_client = http_client
        self._owns_http_client = http_client is None
        # Spread requests evenly: 1 request per (60/rpm) seconds, no burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    @property
    def chat_url(self) -> str:
        """Get the chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"

    async def initialize(self) -> None:
        """Initialize the HTTP client with auth headers."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
            ),
        )
        logger.info("GroqClient initialized", model=self.model, timeout=self.timeout)

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("GroqClient shutdown")

    async def _execute_with_retry(
        self,
        request: ChatCompletionRequest,
    ) -> ChatCompletionResponse:
        """Execute request with retry logic for transient failures."""
        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            await self._rate_limiter.acquire()

            try:
                response = await self._http_client.post(
                    self.chat_url,
                    json=request.model_dump(exclude_none=True),
                )

                if response.status_code == 429:
                    retry_after = response.headers.get("retry-after", "60")
                    msg = f"Groq rate limit exceeded, retry after {retry_after}s"
                    raise LLMRateLimitError(msg)

                response.raise_for_status()
                return ChatCompletionResponse.model_validate(response.json())

            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    "Groq request timeout",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    timeout=self.timeout,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Groq timeout after {self.timeout}s"
                raise LLMTimeoutError(msg) from e

            except httpx.HTTPStatusError as e:
                logger.error(
                    "Groq request failed",
                    status_code=e.response.status_code,
                    url=self.chat_url,
                )
                msg = f"Groq returned {e.response.status_code}"
                raise LLMResponseError(msg) from e

            except httpx.RequestError as e:
                last_exception = e
                logger.warning(
                    "Groq connection error",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(e),
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Cannot connect to Groq: {e}"
                raise LLMUnavailableError(msg) from e

            except ValueError as e:
                msg = f"Malformed Groq response: {e}"
                raise LLMResponseError(msg) from e

        msg = "Max retries exceeded"
        raise LLMUnavailableError(msg) from last_exception

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        schema: type[T] | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a completion from Groq.

        Args:
            prompt: Input prompt text.
            system: Optional system prompt for context.
            schema: Optional Pydantic model for structured JSON output.
            options: Model options (``temperature``, ``num_predict``).

        Returns:
            LLMCompletionResult with raw response and optionally parsed output.

        Raises:
            LLMUnavailableError: If Groq cannot be reached.
            LLMTimeoutError: If request times out.
            LLMResponseError: If Groq returns an error.
            LLMValidationError: If response doesn't match schema.
        """
        messages: list[ChatMessage] = []

        system_content = system or ""
        if schema is not None:
            schema_instruction = (
                "You must respond with valid JSON matching this schema: "
                f"{schema.model_json_schema()}"
            )
            system_content = (
                f"{system_content}\n\n{schema_instruction}"
                if system_content
                else schema_instruction
            )

        if system_content:
            messages.append(ChatMessage(role="system", content=system_content))
        messages.append(ChatMessage(role="user", content=prompt))

        options = options or {}
        request = ChatCompletionRequest(
            model=self.model,
            messages=messages,
            response_format={"type": "json_object"} if schema is not None else None,
            temperature=options.get("temperature", 0.1),
            max_tokens=options.get("num_predict"),
        )

        response = await self._execute_with_retry(request)
        raw_response = response.choices[0].message.content

        parsed: Any = None
        if schema is not None:
            try:
                parsed = schema.model_validate_json(strip_code_fences(raw_response))
            except ValueError as e:
                logger.warning(
                    "Failed to parse structured Groq output",
                    schema=schema.__name__,
                    error=str(e),
                    raw_response=raw_response[:500],
                )
                msg = f"Response does not match {schema.__name__} schema: {e}"
                raise LLMValidationError(msg) from e

        return LLMCompletionResult(
            raw_response=raw_response,
            parsed=parsed,
            model=response.model,
            prompt_tokens=response.usage.prompt_tokens if response.usage else None,
            completion_tokens=(
                response.usage.completion_tokens if response.usage else None
            ),
        )

    async def generate_structured(
        self,
        prompt: str,
        schema: type[T],
        *,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> T:
        """Generate structured output matching a Pydantic schema.

        Raises:
            LLMValidationError: If response doesn't match schema.
        """
        result = await self.generate(
            prompt=prompt,
            system=system,
            schema=schema,
            options=options,
        )

        if result.parsed is None:
            msg = "Structured generation returned no parsed result"
            raise LLMValidationError(msg)

        return cast("T", result.parsed)
