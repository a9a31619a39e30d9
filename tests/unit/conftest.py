"""Unit test configuration.

Unit tests are fast and isolated: scorers are fakes, HTTP is mocked with
respx, and the job queue runs in-process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.fixtures.analysis import make_request


if TYPE_CHECKING:
    from safescan.schemas.analysis import AnalysisRequest


pytestmark = pytest.mark.unit


@pytest.fixture
def peanut_request() -> AnalysisRequest:
    """Manual request for peanuts and sugar from a peanut-allergic user."""
    return make_request(ingredients=["peanuts", "sugar"], allergies=["peanuts"])
