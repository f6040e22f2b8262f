"""File-backed job storage.

The whole ledger is read once and written back once per invocation. Saving
serializes every record before touching the disk and then atomically
replaces the job file, so a failed save leaves the previous file intact.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from filelock import FileLock, Timeout

from jobber.errors import StorageReadError, StorageWriteError
from jobber.ledger.models import Job
from jobber.storage.records import read_records, write_records

logger = logging.getLogger(__name__)


class LedgerStore:
    """Load and save the job file."""

    def __init__(self, path: Path, lock_timeout: float = 10):
        self.path = Path(path).expanduser()
        self._lock_timeout = lock_timeout

    def _lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    def _tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def _lock(self) -> FileLock:
        return FileLock(str(self._lock_path()), timeout=self._lock_timeout)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Job]:
        """Read all jobs; a missing file is an empty ledger.

        Raises:
            StorageReadError: if the file cannot be read
            RecordFormatError: if a record is malformed
        """
        if not self.path.exists():
            logger.debug(f"no job file at {self.path}, starting empty")
            return []

        try:
            with self._lock():
                with open(self.path, "r", encoding="utf-8", newline="") as f:
                    jobs = read_records(f)
        except Timeout as exc:
            raise StorageReadError(
                f"Job file {self.path} is locked by another process",
                details={"path": str(self.path)},
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(f"Failed to read {self.path}: {exc}")
            raise StorageReadError(
                f"Cannot read job file {self.path}: {exc}",
                details={"path": str(self.path)},
            ) from exc

        logger.debug(f"read {len(jobs)} jobs from {self.path}")
        return jobs

    def save(self, jobs: Iterable[Job]) -> None:
        """Replace the job file with ``jobs``.

        Raises:
            StorageWriteError: if the file cannot be written; the previous
                file is left untouched in that case
        """
        jobs = list(jobs)
        payload = "".join(write_records(jobs))
        tmp_path = self._tmp_path()

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock():
                with open(tmp_path, "w", encoding="utf-8", newline="") as f:
                    f.write(payload)
                os.replace(tmp_path, self.path)
        except (OSError, Timeout) as exc:
            logger.error(f"Failed to write {self.path}: {exc}")
            self._discard(tmp_path)
            raise StorageWriteError(
                f"Cannot write job file {self.path}: {exc}",
                details={"path": str(self.path)},
            ) from exc

        logger.debug(f"wrote {len(jobs)} jobs to {self.path}")

    @staticmethod
    def _discard(path: Optional[Path]) -> None:
        if path is None:
            return
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning(f"Could not remove temporary file {path}: {exc}")
