"""API v1 router aggregating all endpoint routers.

Mounted under the configured ``api.v1_prefix`` (``/api/v1/safescan``).
"""

from __future__ import annotations

from fastapi import APIRouter

from safescan.api.v1.endpoints import admin, health, jobs, scans


router = APIRouter()

router.include_router(health.router)
router.include_router(scans.router)
router.include_router(jobs.router)
router.include_router(admin.router)
