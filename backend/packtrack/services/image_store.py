"""
PackTrack Backend — Image Store
=================================

What:  Saves uploaded package images, and deletes them when they are replaced
       or when their package is deleted.
How:   Files live flat in the upload directory as `{epoch_millis}-{name}`.
       Clients reference them as `/uploads/{file_name}`, which is also the
       URL the static mount serves them under.
Who:   Used by PackageService during create, update and delete.

Deletion is best-effort: a missing file or an OS error is logged and
swallowed, so it never fails the enclosing request.
"""

import logging
import os
import time
from pathlib import Path, PurePosixPath
from typing import Optional

import aiofiles

from packtrack.exceptions import FileStorageError

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_NAME = "upload"


class ImageStore:
    """
    Manages the upload directory.

    Directory Structure:
        public/
        └── uploads/
            ├── 1718000000000-parcel.jpg
            └── 1718000004211-label.png
    """

    def __init__(self, uploads_dir: Path, url_prefix: str = "/uploads"):
        self.uploads_dir = Path(uploads_dir).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        logger.info("ImageStore initialized with uploads_dir=%s", self.uploads_dir)

    @staticmethod
    def _safe_name(original_name: Optional[str]) -> str:
        # Browsers on Windows may send a full client-side path
        name = (original_name or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
        if name in ("", ".", ".."):
            return DEFAULT_UPLOAD_NAME
        return name

    def _unique_file_name(self, original_name: Optional[str]) -> str:
        name = self._safe_name(original_name)
        prefix = time.time_ns() // 1_000_000
        candidate = f"{prefix}-{name}"
        while (self.uploads_dir / candidate).exists():
            prefix += 1
            candidate = f"{prefix}-{name}"
        return candidate

    async def save(self, content: bytes, original_name: Optional[str]) -> str:
        """
        Persist an uploaded file.

        Returns:
            The reference clients store as `packageImage`, e.g. "/uploads/1718000000000-box.jpg".

        Raises:
            FileStorageError if the file cannot be written.
        """
        file_name = self._unique_file_name(original_name)
        absolute_path = self.uploads_dir / file_name

        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", absolute_path, e)
            raise FileStorageError(
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("Image stored: %s (%d bytes)", file_name, len(content))
        return f"{self.url_prefix}/{file_name}"

    def resolve(self, reference: Optional[str]) -> Optional[Path]:
        """Map a managed reference to its file path, or None when it is not managed."""
        if not isinstance(reference, str) or not reference.startswith(self.url_prefix + "/"):
            return None

        relative = PurePosixPath(reference[len(self.url_prefix) + 1:].split("?", 1)[0])
        if not relative.parts or ".." in relative.parts:
            return None

        candidate = (self.uploads_dir / relative).resolve()
        if candidate == self.uploads_dir or self.uploads_dir not in candidate.parents:
            return None
        return candidate

    def is_managed(self, reference: Optional[str]) -> bool:
        return self.resolve(reference) is not None

    def delete(self, reference: Optional[str]) -> bool:
        """
        Remove a managed image. Returns True when a file was actually removed.

        Unmanaged references (external URLs, the placeholder) are ignored.
        """
        path = self.resolve(reference)
        if path is None:
            return False

        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("Could not delete image file %s: file not found", path)
            return False
        except OSError as e:
            logger.warning("Could not delete image file %s: %s", path, e)
            return False

        logger.info("Deleted image file: %s", path.name)
        return True
