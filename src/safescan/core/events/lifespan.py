"""Application lifespan event handlers.

Startup wires the analysis engine together and stores its parts on
``app.state``: local scorer, remote scorer, hybrid router, job queue and
the barcode lookup client. Shutdown stops the queue first so no job is
left PROCESSING, then closes the HTTP clients.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING

from safescan.clients.open_food_facts.client import ProductLookupClient
from safescan.core.config import Settings, get_settings
from safescan.llm.client.groq import GroqClient
from safescan.observability.logging import get_logger, setup_logging
from safescan.scoring.local import LocalScorer
from safescan.scoring.remote import RemoteScorer, UnconfiguredRemoteScorer
from safescan.services.analysis.router import HybridRouter
from safescan.workers.queue import JobQueue


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

    from safescan.scoring.protocol import RemoteScorerProtocol

logger = get_logger(__name__)


def _init_local_scorer(settings: Settings) -> LocalScorer:
    """Load the local model; a missing model only disables the fast path."""
    scorer = LocalScorer()
    if scorer.load(settings.local_model.path):
        status = scorer.status()
        logger.info(
            "Local scorer ready",
            path=settings.local_model.path,
            vocabulary_size=status.vocabulary_size,
        )
    return scorer


async def _init_remote_scorer(
    settings: Settings,
) -> tuple[RemoteScorerProtocol, GroqClient | None]:
    """Build the remote scorer, or a stand-in that always fails if unconfigured."""
    if not settings.llm.enabled:
        logger.warning("Remote scorer disabled by configuration")
        return UnconfiguredRemoteScorer("Remote scorer is disabled"), None
    if not settings.GROQ_API_KEY:
        logger.warning("GROQ_API_KEY not set - remote scorer unavailable")
        return UnconfiguredRemoteScorer("GROQ_API_KEY is not configured"), None

    groq = settings.llm.groq
    client = GroqClient(
        api_key=settings.GROQ_API_KEY,
        model=groq.model,
        base_url=groq.url,
        timeout=groq.timeout,
        max_retries=groq.max_retries,
        requests_per_minute=groq.requests_per_minute,
    )
    await client.initialize()
    return RemoteScorer(client), client


async def _startup(app: FastAPI, settings: Settings) -> None:
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
        log_file=settings.logging.file,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
    )

    local_scorer = _init_local_scorer(settings)
    remote_scorer, llm_client = await _init_remote_scorer(settings)

    analysis = settings.analysis
    router = HybridRouter(
        local=local_scorer,
        remote=remote_scorer,
        thresholds=analysis.thresholds,
        remote_timeout=analysis.remote_timeout,
        hybrid_remote_failure=analysis.hybrid_remote_failure,
    )

    queue_settings = settings.queue
    job_queue = JobQueue(
        router,
        max_workers=queue_settings.max_workers,
        max_pending=queue_settings.max_pending,
        retention=timedelta(seconds=queue_settings.retention_seconds),
        cleanup_interval=queue_settings.cleanup_interval_seconds,
    )
    await job_queue.start()

    lookup = settings.product_lookup
    product_lookup_client = ProductLookupClient(
        base_url=lookup.base_url,
        timeout=lookup.timeout,
        user_agent=lookup.user_agent,
    )
    await product_lookup_client.initialize()

    app.state.local_scorer = local_scorer
    app.state.remote_scorer = remote_scorer
    app.state.llm_client = llm_client
    app.state.analysis_router = router
    app.state.job_queue = job_queue
    app.state.product_lookup_client = product_lookup_client

    logger.info(
        "Application startup complete",
        local_scorer=local_scorer.is_available(),
        remote_scorer=llm_client is not None,
    )


async def _shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")

    job_queue: JobQueue | None = getattr(app.state, "job_queue", None)
    if job_queue is not None:
        await job_queue.stop()

    product_lookup_client = getattr(app.state, "product_lookup_client", None)
    if product_lookup_client is not None:
        await product_lookup_client.shutdown()

    llm_client = getattr(app.state, "llm_client", None)
    if llm_client is not None:
        await llm_client.shutdown()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Start the analysis engine before serving and stop it afterwards."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
