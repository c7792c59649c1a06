"""
PackTrack Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for each expected failure outcome.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON
       error responses with the matching HTTP status code.
Who:   Raised by services and stores; caught by the global handlers only.

Exception Hierarchy:
    PackTrackError (base)
    ├── ValidationError   → 400 Bad Request (malformed request body)
    ├── NotFoundError     → 404 Not Found (unknown tracking number)
    ├── ForbiddenError    → 403 Forbidden (delete of a global package)
    ├── ConflictError     → 409 Conflict (duplicate tracking number)
    ├── PersistenceError  → 500 Internal Server Error (record document)
    └── FileStorageError  → 500 Internal Server Error (upload directory)
"""

from typing import Any, Dict, Optional


class PackTrackError(Exception):
    """
    Base exception for all PackTrack application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PackTrackError):
    """Raised when the request body cannot be decoded into a submission."""

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(PackTrackError):
    """Raised when no package carries the requested tracking number."""

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        message: str = "Package not found.",
        tracking_number: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if tracking_number:
            ctx["tracking_number"] = tracking_number
        super().__init__(message=message, context=ctx)
        self.tracking_number = tracking_number


class ForbiddenError(PackTrackError):
    """Raised when a client tries to delete a global (seeded) package."""

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Cannot delete global packages.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConflictError(PackTrackError):
    """
    Raised when a create would duplicate an existing tracking number.

    The store is left untouched and no image is written.
    """

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Tracking number already exists.",
        tracking_number: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if tracking_number:
            ctx["tracking_number"] = tracking_number
        super().__init__(message=message, context=ctx)
        self.tracking_number = tracking_number


class PersistenceError(PackTrackError):
    """
    Raised when the record document cannot be written, or when a mutation
    is attempted while the document is unreadable.

    The message returned to the client is generic; file paths and OS errors
    stay in the context and the server log.
    """

    error_code = "persistence_error"

    def __init__(
        self,
        message: str = "Could not save packages. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(PackTrackError):
    """Raised when an uploaded image cannot be written to the upload directory."""

    error_code = "file_storage_error"

    def __init__(
        self,
        message: str = "Failed to save uploaded image. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
