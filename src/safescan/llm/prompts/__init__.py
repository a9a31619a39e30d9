"""LLM prompt templates."""

from safescan.llm.prompts.base import BasePrompt
from safescan.llm.prompts.ingredient_analysis import (
    IngredientAnalysisPrompt,
    RemoteAllergenAlert,
    RemoteAnalysisOutput,
    RemoteDrugInteraction,
)


__all__ = [
    "BasePrompt",
    "IngredientAnalysisPrompt",
    "RemoteAllergenAlert",
    "RemoteAnalysisOutput",
    "RemoteDrugInteraction",
]
