"""
PackTrack Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and container probes.
How:   Reads the record document and checks the upload directory is writable.

Status levels:
    - healthy:   document readable (or not yet created), uploads writable
    - degraded:  uploads not writable; reads still work
    - unhealthy: document unreadable (HTTP 503)
"""

import logging
import os
import time

from fastapi import APIRouter, Depends, Response

from packtrack import __version__
from packtrack.dependencies import get_package_service
from packtrack.schemas.package import HealthResponse
from packtrack.services.package_service import PackageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    service: PackageService = Depends(get_package_service),
) -> HealthResponse:
    overall = "healthy"

    snapshot = await service.list_packages()
    if snapshot.degraded:
        store_status = "unreadable"
        overall = "unhealthy"
    elif not service.record_store.exists():
        store_status = "missing"
    else:
        store_status = "ok"

    uploads_dir = service.image_store.uploads_dir
    if uploads_dir.is_dir() and os.access(uploads_dir, os.W_OK):
        uploads_status = "writable"
    else:
        uploads_status = "unavailable"
        overall = "degraded" if overall != "unhealthy" else overall
        logger.warning("Health check: uploads directory not writable: %s", uploads_dir)

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        uploads=uploads_status,
        package_count=len(snapshot.records),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
