"""Scan submission endpoints.

Both endpoints return 202 as soon as the job is queued; clients poll
``GET /jobs/{jobId}`` for the outcome.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from safescan.api.dependencies import (
    CurrentUserId,
    get_job_queue,
    get_product_lookup_client,
)
from safescan.clients.open_food_facts.client import ProductLookupClient
from safescan.clients.open_food_facts.exceptions import (
    ProductLookupError,
    ProductNotFoundError,
)
from safescan.core.exceptions import (
    NotFoundException,
    ServiceUnavailableException,
    UnprocessableEntityException,
)
from safescan.observability.logging import get_logger
from safescan.schemas.analysis import AnalysisRequest
from safescan.schemas.enums import AnalysisKind
from safescan.schemas.scans import (
    BarcodeScanRequest,
    ManualScanRequest,
    ScanAcceptedResponse,
)
from safescan.services.analysis.exceptions import AnalysisValidationError
from safescan.workers.exceptions import JobQueueFullError
from safescan.workers.queue import JobQueue


logger = get_logger(__name__)

router = APIRouter(prefix="/scans", tags=["Scans"])

_SUBMIT_RESPONSES: dict[int | str, dict[str, str]] = {
    401: {"description": "Missing user identity"},
    422: {"description": "No ingredients to analyze"},
    503: {"description": "Analysis queue is full"},
}


def _submit(
    queue: JobQueue,
    request: Request,
    analysis_request: AnalysisRequest,
) -> ScanAcceptedResponse:
    try:
        job_id = queue.submit(analysis_request)
    except AnalysisValidationError as e:
        raise UnprocessableEntityException(str(e)) from e
    except JobQueueFullError as e:
        msg = "Analysis queue is full, try again later"
        raise ServiceUnavailableException(msg) from e

    return ScanAcceptedResponse(
        job_id=job_id,
        poll_url=str(request.url_for("get_job", job_id=job_id).path),
    )


@router.post(
    "/manual",
    response_model=ScanAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Analyze manually entered ingredients",
    responses=_SUBMIT_RESPONSES,
)
async def submit_manual_scan(
    body: ManualScanRequest,
    request: Request,
    user_id: CurrentUserId,
    queue: Annotated[JobQueue, Depends(get_job_queue)],
) -> ScanAcceptedResponse:
    """Queue an analysis of ingredients typed in by the user."""
    analysis_request = AnalysisRequest(
        requester_id=user_id,
        kind=AnalysisKind.MANUAL_ENTRY,
        ingredients=body.ingredients,
        user_allergies=body.allergies,
        user_medications=body.medications,
        product_name=body.product_name or "Manual Entry",
    )
    return _submit(queue, request, analysis_request)


@router.post(
    "/barcode",
    response_model=ScanAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Analyze a product by barcode",
    responses={
        **_SUBMIT_RESPONSES,
        404: {"description": "No product for this barcode"},
        503: {"description": "Analysis queue full or product database unavailable"},
    },
)
async def submit_barcode_scan(
    body: BarcodeScanRequest,
    request: Request,
    user_id: CurrentUserId,
    queue: Annotated[JobQueue, Depends(get_job_queue)],
    products: Annotated[ProductLookupClient, Depends(get_product_lookup_client)],
) -> ScanAcceptedResponse:
    """Resolve a barcode to its ingredient list and queue an analysis."""
    try:
        product = await products.get_product(body.barcode)
    except ProductNotFoundError as e:
        raise NotFoundException("Product", body.barcode) from e
    except ProductLookupError as e:
        raise ServiceUnavailableException(str(e)) from e

    if not product.ingredients:
        msg = f"No ingredient information available for product {body.barcode}"
        raise UnprocessableEntityException(msg)

    analysis_request = AnalysisRequest(
        requester_id=user_id,
        kind=AnalysisKind.BARCODE_LOOKUP,
        ingredients=product.ingredients,
        user_allergies=body.allergies,
        user_medications=body.medications,
        product_name=product.product_name,
        barcode=body.barcode,
    )
    return _submit(queue, request, analysis_request)
