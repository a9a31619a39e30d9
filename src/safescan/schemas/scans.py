"""Scan submission and job polling schemas."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field, field_validator

from safescan.parsing.ingredients import normalize_ingredients
from safescan.schemas.analysis import AnalysisResult
from safescan.schemas.base import APIRequest, APIResponse
from safescan.schemas.enums import JobStatus


if TYPE_CHECKING:
    from safescan.workers.models import Job, QueueStats


PROCESSING_MESSAGE = "Job is currently being processed. Please check again in a moment."


class _ProfileFields(APIRequest):
    """The requesting user's allergy and medication profile."""

    allergies: list[str] = Field(
        default_factory=list,
        description="User allergies (case-insensitive)",
        examples=[["peanuts", "milk"]],
    )
    medications: list[str] = Field(
        default_factory=list,
        description="Medications the user is currently taking",
        examples=[["warfarin"]],
    )


class ManualScanRequest(_ProfileFields):
    """Manually entered ingredients.

    ``ingredients`` may be a list or a single string separated by commas or
    newlines.
    """

    ingredients: list[str] = Field(
        ...,
        description="Ingredients as a list or comma/newline separated text",
        examples=[["peanuts", "sugar"]],
    )
    product_name: str | None = Field(default=None, max_length=255)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _split_ingredients(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_ingredients(value)
        return value


class BarcodeScanRequest(_ProfileFields):
    """A scanned product barcode."""

    barcode: str = Field(
        ...,
        min_length=1,
        max_length=32,
        pattern=r"^\d+$",
        description="EAN/UPC barcode digits",
        examples=["737628064502"],
    )

    @field_validator("barcode", mode="before")
    @classmethod
    def _strip_barcode(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class ScanAcceptedResponse(APIResponse):
    """Returned as soon as a scan has been queued."""

    job_id: str
    status: str = "processing"
    message: str = "Analysis started. Use the job ID to check status."
    poll_url: str


class JobStatusResponse(APIResponse):
    """Current state of an analysis job."""

    job_id: str
    status: JobStatus
    created_at: datetime
    completed_at: datetime | None = None
    result: AnalysisResult | None = None
    error: str | None = None
    message: str | None = None

    @classmethod
    def from_job(cls, job: Job) -> JobStatusResponse:
        """Build the poll response for a job snapshot."""
        return cls(
            job_id=job.id,
            status=job.status,
            created_at=job.created_at,
            completed_at=job.completed_at,
            result=job.result if job.status is JobStatus.COMPLETED else None,
            error=job.error if job.status is JobStatus.FAILED else None,
            message=PROCESSING_MESSAGE if job.status is JobStatus.PROCESSING else None,
        )


class QueueStatsResponse(APIResponse):
    """Aggregate job counts for monitoring."""

    pending: int
    processing: int
    completed: int
    failed: int
    total: int
    timestamp: datetime

    @classmethod
    def from_stats(cls, stats: QueueStats, timestamp: datetime) -> QueueStatsResponse:
        return cls(
            pending=stats.pending,
            processing=stats.processing,
            completed=stats.completed,
            failed=stats.failed,
            total=stats.total,
            timestamp=timestamp,
        )
