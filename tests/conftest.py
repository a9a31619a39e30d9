"""Shared test configuration for the SafeScan service tests."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest


# Select the test YAML overrides before any settings are loaded
os.environ.setdefault("APP_ENV", "test")

from safescan.core.config import get_settings  # noqa: E402


if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Reload settings for every test so env overrides do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
