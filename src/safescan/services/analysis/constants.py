"""Analysis service constants."""

from __future__ import annotations

from typing import Final


DEFAULT_REMOTE_TIMEOUT_SECONDS: Final[float] = 30.0
