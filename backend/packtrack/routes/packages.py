"""
PackTrack Backend — Package Route Handlers
============================================

What:  REST endpoints for package records.
How:   Each handler pulls a PackageService (and, for writes, a decoded
       PackageSubmission) from the dependencies and returns its result.
       Failures are exceptions and are mapped to status codes by the
       global handlers in main.py.

Records are returned exactly as stored. PackageRecord only documents the
usual shape in OpenAPI; it is never used to validate a response, since
the record schema is open and a stored record may not match it.

Route Inventory:
    GET    /api/packages                    → 200 record array
    POST   /api/packages                    → 201 created record | 409
    PUT    /api/packages/{trackingNumber}   → 200 updated record | 404
    DELETE /api/packages/{trackingNumber}   → 200 message | 404 | 403
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from packtrack.dependencies import get_package_service, read_submission
from packtrack.schemas.package import (
    ErrorResponse,
    MessageResponse,
    PackageRecord,
    PackageSubmission,
)
from packtrack.services.package_service import PackageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Packages"])

DEGRADED_HEADER = "X-Store-Degraded"


@router.get(
    "/packages",
    response_model=None,
    responses={200: {"description": "Every stored package", "model": List[PackageRecord]}},
    summary="List every package",
    description="Returns the full package list in store order. No pagination or filtering.",
)
async def list_packages(
    response: Response,
    service: PackageService = Depends(get_package_service),
):
    snapshot = await service.list_packages()
    if snapshot.degraded:
        # The record document exists but could not be read
        response.headers[DEGRADED_HEADER] = "true"
    return snapshot.records


@router.post(
    "/packages",
    status_code=201,
    response_model=None,
    responses={
        201: {"description": "Package created", "model": PackageRecord},
        400: {"description": "Malformed request body", "model": ErrorResponse},
        409: {"description": "Tracking number already exists", "model": ErrorResponse},
    },
    summary="Create a package",
    description=(
        "Accepts JSON or multipart form data. A `packageImage` file part is stored "
        "under /uploads; a `packageImage` text field is kept as an image URL. "
        "Missing tracking numbers are generated."
    ),
)
async def create_package(
    submission: PackageSubmission = Depends(read_submission),
    service: PackageService = Depends(get_package_service),
):
    return await service.create_package(submission)


@router.put(
    "/packages/{tracking_number}",
    response_model=None,
    responses={
        200: {"description": "Package updated", "model": PackageRecord},
        400: {"description": "Malformed request body", "model": ErrorResponse},
        404: {"description": "Package not found", "model": ErrorResponse},
    },
    summary="Update a package",
    description=(
        "Shallow-merges the supplied fields over the stored package. "
        "trackingNumber, createdAt and isGlobal cannot be changed."
    ),
)
async def update_package(
    tracking_number: str,
    submission: PackageSubmission = Depends(read_submission),
    service: PackageService = Depends(get_package_service),
):
    return await service.update_package(tracking_number, submission)


@router.delete(
    "/packages/{tracking_number}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Package deleted", "model": MessageResponse},
        403: {"description": "Global packages cannot be deleted", "model": ErrorResponse},
        404: {"description": "Package not found", "model": ErrorResponse},
    },
    summary="Delete a package",
)
async def delete_package(
    tracking_number: str,
    service: PackageService = Depends(get_package_service),
) -> MessageResponse:
    await service.delete_package(tracking_number)
    return MessageResponse(message="Package deleted successfully.")
