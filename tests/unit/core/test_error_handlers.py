"""Unit tests for the exception handlers and error envelope."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from safescan.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ServiceUnavailableException,
    UnauthorizedException,
    UnprocessableEntityException,
    setup_exception_handlers,
)
from safescan.core.middleware.request_id import RequestIDMiddleware


pytestmark = pytest.mark.unit


class _Body(BaseModel):
    count: int


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    setup_exception_handlers(app)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/missing")
    async def missing() -> None:
        raise NotFoundException("Job", "abc")

    @app.get("/unauthorized")
    async def unauthorized() -> None:
        raise UnauthorizedException()

    @app.get("/forbidden")
    async def forbidden() -> None:
        raise ForbiddenException()

    @app.get("/unprocessable")
    async def unprocessable() -> None:
        raise UnprocessableEntityException("No ingredients provided for analysis")

    @app.get("/unavailable")
    async def unavailable() -> None:
        raise ServiceUnavailableException()

    @app.post("/validate")
    async def validate(body: _Body) -> dict[str, int]:
        return {"count": body.count}

    @app.get("/crash")
    async def crash() -> None:
        msg = "boom"
        raise RuntimeError(msg)

    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:
    """Tests for setup_exception_handlers."""

    @pytest.mark.parametrize(
        ("path", "status_code", "error"),
        [
            ("/missing", 404, "NOT_FOUND"),
            ("/unauthorized", 401, "UNAUTHORIZED"),
            ("/forbidden", 403, "FORBIDDEN"),
            ("/unprocessable", 422, "VALIDATION_ERROR"),
            ("/unavailable", 503, "SERVICE_UNAVAILABLE"),
        ],
    )
    def test_app_exceptions(
        self,
        client: TestClient,
        path: str,
        status_code: int,
        error: str,
    ) -> None:
        """Should render application exceptions with their status and code."""
        response = client.get(path, headers={"X-Request-ID": "req-1"})

        assert response.status_code == status_code
        body = response.json()
        assert body["error"] == error
        assert body["requestId"] == "req-1"
        assert "details" not in body

    def test_not_found_message(self, client: TestClient) -> None:
        """Should name the resource and identifier."""
        body = client.get("/missing").json()

        assert body["message"] == "Job with identifier 'abc' not found"

    def test_request_validation(self, client: TestClient) -> None:
        """Should list field errors for invalid bodies."""
        response = client.post("/validate", json={"count": "many"})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.count"

    def test_unknown_route(self, client: TestClient) -> None:
        """Should wrap framework HTTP errors in the same envelope."""
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["error"] == "HTTP_ERROR"

    def test_unhandled_exception(self, client: TestClient) -> None:
        """Should hide internal errors behind a generic 500."""
        response = client.get("/crash")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "INTERNAL_SERVER_ERROR"
        assert "boom" not in body["message"]
