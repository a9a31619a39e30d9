"""Base class for LLM prompts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class BasePrompt(ABC, Generic[T]):
    """Base class for all LLM prompts.

    Keeps the prompt text, its output schema and its generation options
    together so they can be versioned and tested as one unit.
    """

    output_schema: ClassVar[type[BaseModel]]
    """Pydantic model for structured output validation."""

    system_prompt: ClassVar[str | None] = None
    """Optional system prompt to set context for the LLM."""

    temperature: ClassVar[float] = 0.1
    """Temperature for generation (low = more deterministic)."""

    max_tokens: ClassVar[int | None] = None
    """Maximum tokens to generate (None = model default)."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with input variables."""
        ...

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__

    def get_options(self) -> dict[str, Any]:
        """Get model options for this prompt."""
        options: dict[str, Any] = {"temperature": self.temperature}
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens
        return options
