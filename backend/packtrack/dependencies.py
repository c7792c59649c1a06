"""
PackTrack Backend — FastAPI Dependencies
==========================================

What:  Dependency providers for route handlers.
How:   create_app() attaches one PackageService to `app.state`. The request
       body of a create/update is decoded once here into a typed
       PackageSubmission, so the service never inspects raw HTTP data.
"""

import logging

from fastapi import Request
from starlette.datastructures import UploadFile

from packtrack.exceptions import ValidationError
from packtrack.schemas.package import ImageUpload, PackageSubmission
from packtrack.services.package_service import PackageService

logger = logging.getLogger(__name__)

IMAGE_FIELD = "packageImage"

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def get_package_service(request: Request) -> PackageService:
    return request.app.state.package_service


async def read_submission(request: Request) -> PackageSubmission:
    """
    Decode a create/update body into a PackageSubmission.

    application/json        → fields = the JSON object
    multipart / urlencoded  → fields = form fields; the `packageImage` file
                              part (when a file was chosen) becomes the image
    no body                 → empty JSON submission

    Raises:
        ValidationError if a JSON body is malformed or not an object.
    """
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()

    if content_type in FORM_CONTENT_TYPES:
        return await _read_form(request)

    body = await request.body()
    if not body.strip():
        return PackageSubmission(kind="json")

    try:
        fields = await request.json()
    except ValueError:
        raise ValidationError(message="Request body is not valid JSON.", field="body")

    if not isinstance(fields, dict):
        raise ValidationError(
            message="Request body must be a JSON object.",
            field="body",
            context={"received": type(fields).__name__},
        )
    return PackageSubmission(kind="json", fields=fields)


async def _read_form(request: Request) -> PackageSubmission:
    form = await request.form()
    submission = PackageSubmission(kind="form")

    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                # Browsers send an empty, unnamed part when no file was chosen
                if key == IMAGE_FIELD and value.filename:
                    submission.image = ImageUpload(
                        filename=value.filename,
                        content=await value.read(),
                        content_type=value.content_type,
                    )
                continue
            submission.fields[key] = value
    finally:
        await form.close()

    if submission.image is not None:
        logger.info(
            "Received image upload: filename=%s, content_type=%s, size=%d bytes",
            submission.image.filename,
            submission.image.content_type,
            len(submission.image.content),
        )
    return submission
