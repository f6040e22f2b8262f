"""Job file persistence."""

from jobber.storage.records import (
    OPEN_MARKER,
    deserialize_job,
    read_records,
    serialize_job,
)
from jobber.storage.store import LedgerStore

__all__ = [
    "OPEN_MARKER",
    "LedgerStore",
    "deserialize_job",
    "read_records",
    "serialize_job",
]
