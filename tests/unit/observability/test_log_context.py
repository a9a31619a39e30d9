"""Unit tests for logging setup and bound log context."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import orjson
import pytest
from loguru import logger

from safescan.observability.logging import (
    bind_context,
    clear_context,
    get_context,
    get_logger,
    setup_logging,
    unbind_context,
)


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_context() -> Iterator[None]:
    clear_context()
    yield
    clear_context()
    logger.remove()


class TestLogContext:
    """Tests for the bound logging context."""

    def test_bind_and_unbind(self) -> None:
        """Should add and remove context values."""
        bind_context(request_id="req-1", user_id="user-a")
        unbind_context("user_id", "missing")

        assert get_context() == {"request_id": "req-1"}

    def test_get_context_returns_copy(self) -> None:
        """Should not let callers mutate the bound context."""
        bind_context(job_id="j1")
        get_context()["job_id"] = "other"

        assert get_context() == {"job_id": "j1"}

    def test_clear(self) -> None:
        """Should drop every bound value."""
        bind_context(job_id="j1")
        clear_context()

        assert get_context() == {}


class TestJsonOutput:
    """Tests for structured JSON log lines."""

    def test_json_lines_include_context_and_fields(self, tmp_path: Path) -> None:
        """Should write one JSON object per record with context and extras."""
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(log_level="INFO", log_format="json", log_file=log_file)
        bind_context(request_id="req-1")

        get_logger("safescan.test").info("Job submitted", job_id="j1")
        logger.complete()

        line = log_file.read_text().strip().splitlines()[-1]
        record = orjson.loads(line)
        assert record["message"] == "Job submitted"
        assert record["level"] == "INFO"
        assert record["logger"] == "safescan.test"
        assert record["request_id"] == "req-1"
        assert record["job_id"] == "j1"
