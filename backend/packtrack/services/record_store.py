"""
PackTrack Backend — Record Store
==================================

What:  Reads and writes the full list of package records as one JSON document.
How:   Every call goes to disk; there is no in-memory cache. Writes go to a
       temporary file in the same directory and are moved into place with
       os.replace, so readers never observe a half-written document.
Who:   Used exclusively by PackageService.

Read outcomes:
    document missing            → empty snapshot, healthy
    unreadable / bad JSON / not
    a JSON array                → empty snapshot, `error` set, logged
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from packtrack.exceptions import PersistenceError

logger = logging.getLogger(__name__)

PackageDict = Dict[str, Any]


@dataclass
class StoreSnapshot:
    """Result of a load: the records plus the read fault, if any."""

    records: List[PackageDict] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


class RecordStore:
    """Durable holder of the full package array."""

    def __init__(self, data_file: Path):
        self.data_file = Path(data_file)

    def exists(self) -> bool:
        return self.data_file.exists()

    async def load(self) -> StoreSnapshot:
        try:
            async with aiofiles.open(self.data_file, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return StoreSnapshot()
        except OSError as e:
            logger.error("Error reading packages file %s: %s", self.data_file, e)
            return StoreSnapshot(error=f"read failed: {e}")

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("Packages file %s is not valid JSON: %s", self.data_file, e)
            return StoreSnapshot(error=f"invalid JSON: {e}")

        if not isinstance(data, list):
            logger.error(
                "Packages file %s holds %s, expected an array",
                self.data_file,
                type(data).__name__,
            )
            return StoreSnapshot(error="document is not an array")

        return StoreSnapshot(records=data)

    async def save(self, records: List[PackageDict]) -> None:
        """
        Overwrite the document with the full record sequence.

        Raises:
            PersistenceError if the directory or file cannot be written.
        """
        payload = json.dumps(records, indent=2, ensure_ascii=False)
        directory = self.data_file.parent
        tmp_path: Optional[str] = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", suffix=".json", dir=directory)
            os.close(fd)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            os.replace(tmp_path, self.data_file)
            tmp_path = None
        except OSError as e:
            logger.error("Error writing packages file %s: %s", self.data_file, e)
            raise PersistenceError(
                context={"path": str(self.data_file), "os_error": str(e)},
            )
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.debug("Saved %d packages to %s", len(records), self.data_file)
