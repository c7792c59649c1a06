"""
PackTrack Backend — Pydantic Request/Response Schemas
=======================================================

What:  The API contract for package records plus the typed request variant
       the routes hand to PackageService.
How:   Records have an open schema and travel as plain dicts. PackageRecord
       describes the core fields for the OpenAPI docs only; extra="allow"
       shows that any other attribute is kept. Wire names are camelCase
       aliases.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Record Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class PackageEvent(BaseModel):
    """One step in a package's history. Order in the list is display order."""

    description: str = Field(description="What happened, e.g. 'Package created'")
    timestamp: str = Field(description="When it happened (ISO 8601)")
    location: str = Field(description="Where it happened")
    completed: bool = Field(description="Whether the step has been reached")

    model_config = ConfigDict(extra="allow")


class PackageRecord(BaseModel):
    """
    A package as stored and returned by the API.

    `events` stays loosely typed: a client may send an event payload that is
    not valid JSON, and that raw value is stored and returned unchanged.
    """

    tracking_number: str = Field(alias="trackingNumber", description="Unique tracking number")
    package_image: str = Field(
        alias="packageImage",
        description="Managed upload path, external URL, or the placeholder image",
    )
    events: Any = Field(default_factory=list, description="Ordered list of PackageEvent")
    is_global: bool = Field(
        default=False,
        alias="isGlobal",
        description="Seeded package; cannot be deleted",
    )
    created_at: Optional[str] = Field(
        default=None,
        alias="createdAt",
        description="Creation timestamp (UTC ISO 8601)",
    )

    model_config = ConfigDict(extra="allow")


class MessageResponse(BaseModel):
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "Tracking number already exists.",
            "request_id": "1f0c2a9b"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Record document: ok, missing, unreadable")
    uploads: str = Field(description="Upload directory: writable, unavailable")
    package_count: int = Field(description="Number of stored packages")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Request Variant — resolved once by the routes, consumed by PackageService
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class ImageUpload:
    """An uploaded `packageImage` file part."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass
class PackageSubmission:
    """
    Decoded create/update request body.

    kind:   "json" for application/json bodies, "form" for multipart or
            urlencoded bodies (only these can carry an image).
    fields: Every non-file field, verbatim.
    image:  The uploaded file, if one was attached.
    """

    kind: Literal["json", "form"] = "json"
    fields: Dict[str, Any] = field(default_factory=dict)
    image: Optional[ImageUpload] = None
