"""Ingredient risk analysis prompt.

Asks the model for allergen matches, food-drug interactions and an overall
risk level for one user's profile.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from safescan.schemas.enums import RiskLevel, Severity

from .base import BasePrompt


class RemoteAllergenAlert(BaseModel):
    """Allergen alert as returned by the model."""

    allergen: str = Field(..., min_length=1)
    severity: Severity
    message: str = ""


class RemoteDrugInteraction(BaseModel):
    """Drug interaction as returned by the model."""

    medication: str = Field(..., min_length=1)
    ingredient: str = Field(..., min_length=1)
    severity: Severity
    message: str = ""


class RemoteAnalysisOutput(BaseModel):
    """Output schema for ingredient risk analysis.

    Uses camelCase keys to match the JSON shape the prompt asks for.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    safe: bool | None = None
    allergen_alerts: list[RemoteAllergenAlert] = Field(default_factory=list)
    drug_interactions: list[RemoteDrugInteraction] = Field(default_factory=list)
    risk_level: RiskLevel


def _join(values: Collection[str]) -> str:
    return ", ".join(sorted(values)) if values else "none"


class IngredientAnalysisPrompt(BasePrompt[RemoteAnalysisOutput]):
    """Prompt for a full ingredient safety assessment."""

    output_schema: ClassVar[type[BaseModel]] = RemoteAnalysisOutput

    system_prompt: ClassVar[str] = (
        "You are a food safety assistant. You check ingredient lists against a "
        "person's allergies and medications and report every risk you find. "
        "Be thorough about hidden allergens and cross-contamination."
    )

    temperature: ClassVar[float] = 0.1
    max_tokens: ClassVar[int] = 1024

    def format(self, **kwargs: Any) -> str:
        """Format the analysis prompt.

        Args:
            **kwargs: Must include ``ingredients``; ``allergies`` and
                ``medications`` default to empty.

        Returns:
            Formatted prompt string.

        Raises:
            ValueError: If ingredients are missing.
        """
        ingredients: Sequence[str] = kwargs.get("ingredients") or ()
        if not ingredients:
            msg = "ingredients is required"
            raise ValueError(msg)
        allergies: Collection[str] = kwargs.get("allergies") or ()
        medications: Collection[str] = kwargs.get("medications") or ()

        return (
            "Analyze the following food ingredients for potential health risks.\n\n"
            f"Ingredients: {', '.join(ingredients)}\n"
            f"User Allergies: {_join(allergies)}\n"
            f"User Medications: {_join(medications)}\n\n"
            "Check for:\n"
            "1. Allergen matches and cross-contamination risks\n"
            "2. Food-drug interactions with current medications\n"
            "3. Overall safety assessment\n\n"
            "Respond with a JSON object:\n"
            "{\n"
            '  "safe": boolean,\n'
            '  "allergenAlerts": [{"allergen": string, "severity": "low|medium|high", '
            '"message": string}],\n'
            '  "drugInteractions": [{"medication": string, "ingredient": string, '
            '"severity": "low|medium|high", "message": string}],\n'
            '  "riskLevel": "safe|caution|danger"\n'
            "}\n"
            "Respond ONLY with valid JSON, no additional text or formatting."
        )
