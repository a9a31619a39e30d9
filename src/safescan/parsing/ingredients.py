"""Ingredient list parsing for manually entered and label text."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final


# Free-text entry: one ingredient per line or comma separated
MANUAL_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"[,\n]")

# Product label text (Open Food Facts ``ingredients_text``)
LABEL_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"[,;]")


def _split(text: str, separators: re.Pattern[str]) -> list[str]:
    return [part.strip() for part in separators.split(text) if part.strip()]


def parse_ingredients_text(text: str) -> list[str]:
    """Split manually entered ingredients on commas and newlines.

    Example:
        >>> parse_ingredients_text("peanuts, sugar\\nsalt")
        ['peanuts', 'sugar', 'salt']
    """
    return _split(text, MANUAL_SEPARATORS)


def parse_label_ingredients(text: str) -> list[str]:
    """Split a product label's ingredient text on commas and semicolons."""
    return _split(text, LABEL_SEPARATORS)


def normalize_ingredients(value: str | Iterable[str]) -> list[str]:
    """Accept either free text or a list and return clean ingredient names."""
    if isinstance(value, str):
        return parse_ingredients_text(value)
    return [item.strip() for item in value if item and item.strip()]
