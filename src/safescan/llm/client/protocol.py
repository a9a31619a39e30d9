"""LLM client protocol definition.

The remote scorer depends on this interface rather than a concrete
provider, so tests and alternative providers can be swapped in.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel


T = TypeVar("T", bound=BaseModel)


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Protocol for LLM client implementations."""

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def generate_structured(
        self,
        prompt: str,
        schema: type[T],
        *,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> T:
        """Generate output parsed into ``schema``.

        Raises:
            LLMUnavailableError: Service unreachable or timed out.
            LLMResponseError: HTTP error from the service.
            LLMValidationError: Response doesn't match schema.
        """
        ...
