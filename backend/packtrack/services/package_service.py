"""
PackTrack Backend — Package Service (Business Logic)
======================================================

What:  CRUD rules for package records: default values, tracking-number
       uniqueness, shallow-merge updates, event normalization, and the
       image lifecycle tied to each record.
How:   Each operation is one load → apply rule → save cycle against the
       RecordStore. Mutations hold a single asyncio.Lock, so overlapping
       requests cannot interleave their load/save pairs and drop writes.
Who:   Called by the package routes; calls RecordStore and ImageStore.

Outcomes are raised as PackTrack exceptions (NotFoundError, ConflictError,
ForbiddenError, PersistenceError); main.py maps them to status codes.

Request Flow (POST /api/packages):
    ┌──────────┐   ┌──────────────┐   ┌────────────┐   ┌──────────────┐
    │  Route   │──▶│ load records │──▶│ apply rule │──▶│ save records │
    └──────────┘   └──────────────┘   └─────┬──────┘   └──────────────┘
                                            │
                                            ▼
                                     ImageStore save/delete
"""

import asyncio
import json
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional

from packtrack.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
)
from packtrack.schemas.package import PackageEvent, PackageSubmission
from packtrack.services.image_store import ImageStore
from packtrack.services.record_store import PackageDict, RecordStore, StoreSnapshot

logger = logging.getLogger(__name__)

TRACKING_NUMBER_LENGTH = 10

# Image values a client sends to mean "no image"
EMPTY_IMAGE_VALUES = ("", "null")

# Keys an update may not overwrite
PROTECTED_FIELDS = ("trackingNumber", "createdAt", "isGlobal")


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with millisecond precision, e.g. 2024-01-15T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_tracking_number() -> str:
    return "".join(secrets.choice(string.digits) for _ in range(TRACKING_NUMBER_LENGTH))


def default_events() -> List[Dict[str, Any]]:
    event = PackageEvent(
        description="Package created",
        timestamp=utc_now_iso(),
        location="Origin facility",
        completed=True,
    )
    return [event.model_dump()]


class EventsResult(NamedTuple):
    """Normalized events value; `malformed` is set when a string failed to parse."""

    events: Any
    malformed: bool = False


def parse_events(value: Any) -> EventsResult:
    """
    Deserialize events sent as a JSON string (multipart forms always do).

    Non-string values pass through untouched. A string that is not valid
    JSON is kept as the raw value and flagged as malformed, never raised.
    """
    if not isinstance(value, str):
        return EventsResult(value)
    try:
        return EventsResult(json.loads(value))
    except ValueError:
        return EventsResult(value, malformed=True)


def _is_missing_tracking_number(value: Any) -> bool:
    # Whitespace-only numbers count as supplied and are stored as given
    return value is None or value == ""


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _is_empty_image(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() in EMPTY_IMAGE_VALUES)


def _find_index(records: List[PackageDict], tracking_number: str) -> Optional[int]:
    for index, record in enumerate(records):
        if str(record.get("trackingNumber")) == tracking_number:
            return index
    return None


class PackageService:
    """
    Business logic layer for package operations.

    Responsibilities:
        - list_packages():  full record set, in store order
        - create_package(): defaults, uniqueness, image + events resolution
        - update_package(): shallow merge, image replacement, events normalization
        - delete_package(): global protection, managed image cleanup
        - seed_if_missing(): first-run sample data
    """

    def __init__(
        self,
        record_store: RecordStore,
        image_store: ImageStore,
        placeholder_image: str,
    ):
        self.record_store = record_store
        self.image_store = image_store
        self.placeholder_image = placeholder_image
        self._write_lock = asyncio.Lock()

    async def _load_for_write(self) -> List[PackageDict]:
        snapshot = await self.record_store.load()
        if snapshot.degraded:
            # Saving now would replace the unreadable document with a near-empty one
            raise PersistenceError(
                message="Package data is currently unreadable. Please try again later.",
                context={"store_error": snapshot.error},
            )
        return snapshot.records

    async def _save_or_discard(self, records: List[PackageDict], new_image: Optional[str]) -> None:
        try:
            await self.record_store.save(records)
        except PersistenceError:
            if new_image:
                self.image_store.delete(new_image)
            raise

    @staticmethod
    def _normalize_events(tracking_number: str, value: Any) -> Any:
        result = parse_events(value)
        if result.malformed:
            logger.warning(
                "Events for %s are not valid JSON; storing raw value (%d chars)",
                tracking_number,
                len(result.events),
            )
        return result.events

    async def list_packages(self) -> StoreSnapshot:
        snapshot = await self.record_store.load()
        if snapshot.degraded:
            logger.warning("Listing packages from a degraded store: %s", snapshot.error)
        return snapshot

    async def create_package(self, submission: PackageSubmission) -> PackageDict:
        async with self._write_lock:
            records = await self._load_for_write()
            package: PackageDict = dict(submission.fields)

            tracking_number = package.get("trackingNumber")
            if _is_missing_tracking_number(tracking_number):
                tracking_number = generate_tracking_number()
            tracking_number = str(tracking_number)
            package["trackingNumber"] = tracking_number

            if _find_index(records, tracking_number) is not None:
                raise ConflictError(tracking_number=tracking_number)

            new_image: Optional[str] = None
            if submission.image is not None:
                new_image = await self.image_store.save(
                    submission.image.content, submission.image.filename
                )
                package["packageImage"] = new_image
            elif _is_empty_image(package.get("packageImage")):
                package["packageImage"] = self.placeholder_image

            events = package.get("events")
            if not _is_blank(events):
                events = self._normalize_events(tracking_number, events)
            package["events"] = default_events() if _is_blank(events) else events

            package["createdAt"] = utc_now_iso()
            package["isGlobal"] = False

            records.append(package)
            await self._save_or_discard(records, new_image)

        logger.info("Package created: %s (%s body)", tracking_number, submission.kind)
        return package

    async def update_package(
        self, tracking_number: str, submission: PackageSubmission
    ) -> PackageDict:
        async with self._write_lock:
            records = await self._load_for_write()
            index = _find_index(records, tracking_number)
            if index is None:
                raise NotFoundError(tracking_number=tracking_number)

            existing = records[index]
            previous_image = existing.get("packageImage")
            changes = {k: v for k, v in submission.fields.items() if k not in PROTECTED_FIELDS}
            ignored = sorted(set(submission.fields) & set(PROTECTED_FIELDS))
            if ignored:
                logger.debug("Ignoring protected fields on update of %s: %s", tracking_number, ignored)

            updated: PackageDict = {**existing, **changes}

            new_image: Optional[str] = None
            replaces_image = False
            if submission.image is not None:
                new_image = await self.image_store.save(
                    submission.image.content, submission.image.filename
                )
                updated["packageImage"] = new_image
                replaces_image = True
            elif _is_empty_image(updated.get("packageImage")):
                updated["packageImage"] = self.placeholder_image
                replaces_image = True

            if "events" in updated:
                updated["events"] = self._normalize_events(tracking_number, updated["events"])

            records[index] = updated
            await self._save_or_discard(records, new_image)

        # Any other packageImage value is kept as given and may still reference the old file
        if (
            replaces_image
            and previous_image != updated["packageImage"]
            and self.image_store.is_managed(previous_image)
        ):
            self.image_store.delete(previous_image)

        logger.info("Package updated: %s (%s body)", tracking_number, submission.kind)
        return updated

    async def delete_package(self, tracking_number: str) -> None:
        async with self._write_lock:
            records = await self._load_for_write()
            index = _find_index(records, tracking_number)
            if index is None:
                raise NotFoundError(tracking_number=tracking_number)

            package = records[index]
            if package.get("isGlobal"):
                raise ForbiddenError(context={"tracking_number": tracking_number})

            remaining = [r for r in records if str(r.get("trackingNumber")) != tracking_number]
            if len(remaining) >= len(records):
                raise PersistenceError(
                    message="Failed to delete package.",
                    context={"tracking_number": tracking_number},
                )
            await self.record_store.save(remaining)

        image = package.get("packageImage")
        if self.image_store.is_managed(image):
            self.image_store.delete(image)

        logger.info("Package deleted: %s", tracking_number)

    async def seed_if_missing(self, packages: List[PackageDict]) -> int:
        """Write `packages` as the initial document unless one already exists."""
        async with self._write_lock:
            if self.record_store.exists():
                return 0
            await self.record_store.save(packages)
        logger.info("Seeded %d sample packages", len(packages))
        return len(packages)
