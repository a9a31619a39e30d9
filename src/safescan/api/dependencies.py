"""FastAPI dependencies for service access.

Services are created during application startup and stored in
``app.state``; these dependencies hand them to route handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

from safescan.core.config import Settings, get_settings
from safescan.core.exceptions import ServiceUnavailableException, UnauthorizedException
from safescan.observability.logging import bind_context


if TYPE_CHECKING:
    from safescan.clients.open_food_facts.client import ProductLookupClient
    from safescan.workers.queue import JobQueue


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


async def get_job_queue(request: Request) -> JobQueue:
    """Get the job queue from app state.

    Raises:
        ServiceUnavailableException: If the queue is not initialized.
    """
    queue: JobQueue | None = getattr(request.app.state, "job_queue", None)
    if queue is None:
        msg = "Analysis queue not available"
        raise ServiceUnavailableException(msg)
    return queue


async def get_product_lookup_client(request: Request) -> ProductLookupClient:
    """Get the barcode lookup client from app state.

    Raises:
        ServiceUnavailableException: If the client is not initialized.
    """
    client: ProductLookupClient | None = getattr(
        request.app.state, "product_lookup_client", None
    )
    if client is None:
        msg = "Product lookup service not available"
        raise ServiceUnavailableException(msg)
    return client


async def get_current_user_id(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> str:
    """Identify the caller from the user id header.

    Authentication happens upstream (gateway); this service only trusts the
    forwarded identity.

    Raises:
        UnauthorizedException: If the header is missing or blank.
    """
    user_id = request.headers.get(settings.api.user_id_header, "").strip()
    if not user_id:
        msg = f"Missing {settings.api.user_id_header} header"
        raise UnauthorizedException(msg)
    bind_context(user_id=user_id)
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
