"""Application factory for creating FastAPI instances."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from safescan.api.v1.router import router as v1_router
from safescan.core.config import Settings, get_settings
from safescan.core.events import lifespan
from safescan.core.exceptions import setup_exception_handlers
from safescan.core.middleware.logging import LoggingMiddleware
from safescan.core.middleware.request_id import RequestIDMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    docs_enabled = settings.is_non_production
    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Ingredient safety analysis against a user's allergies and medications",
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        debug=settings.app.debug,
    )
    app.state.settings = settings

    setup_exception_handlers(app)
    _setup_middleware(app, settings)
    app.include_router(v1_router, prefix=settings.api.v1_prefix)

    return app


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Last added runs first on request: RequestID, then Logging, then CORS.
    """
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    app.add_middleware(
        LoggingMiddleware,
        exclude_paths={f"{settings.api.v1_prefix}/health", "/favicon.ico"},
    )
    app.add_middleware(RequestIDMiddleware)
