"""Ingredient text parsing."""

from safescan.parsing.ingredients import (
    normalize_ingredients,
    parse_ingredients_text,
    parse_label_ingredients,
)


__all__ = [
    "normalize_ingredients",
    "parse_ingredients_text",
    "parse_label_ingredients",
]
