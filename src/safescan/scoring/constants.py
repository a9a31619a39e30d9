"""Constants for the local scorer."""

from __future__ import annotations

from typing import Final

from safescan.schemas.enums import RiskLevel


# Output classes of the local model, in weight-matrix row order
OUTPUT_CLASSES: Final[tuple[RiskLevel, ...]] = (
    RiskLevel.SAFE,
    RiskLevel.CAUTION,
    RiskLevel.DANGER,
)

DEFAULT_INPUT_SIZE: Final[int] = 1000

# Feature layout: ingredients from 0, allergies from 60%, medications from 80%
ALLERGY_OFFSET_RATIO: Final[float] = 0.6
MEDICATION_OFFSET_RATIO: Final[float] = 0.8

# Allergen families and the ingredient terms that suggest them
ALLERGEN_PATTERNS: Final[dict[str, tuple[str, ...]]] = {
    "nuts": ("almond", "walnut", "pecan", "cashew", "pistachio", "hazelnut"),
    "dairy": ("milk", "cheese", "butter", "cream", "yogurt", "whey"),
    "gluten": ("wheat", "barley", "rye", "oats"),
    "soy": ("soybean", "tofu", "tempeh", "miso"),
    "eggs": ("egg", "albumin", "lecithin"),
    "fish": ("salmon", "tuna", "cod", "anchovy"),
    "shellfish": ("shrimp", "crab", "lobster", "scallop"),
}

# Medication classes and the ingredients known to interact with them
KNOWN_DRUG_INTERACTIONS: Final[dict[str, tuple[str, ...]]] = {
    "warfarin": ("vitamin k", "green leafy vegetables", "broccoli", "spinach"),
    "digoxin": ("licorice", "st johns wort", "grapefruit"),
    "statins": ("grapefruit", "pomegranate"),
    "blood pressure medication": ("licorice", "grapefruit", "salt"),
    "diabetes medication": ("alcohol", "grapefruit"),
}
