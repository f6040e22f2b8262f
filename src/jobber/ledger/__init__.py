"""Jobs, the job ledger and its editing operations."""

from jobber.ledger.jobs import JoinPreview, Ledger, QueryFilter, QueryResult, parse_filter
from jobber.ledger.models import DEFAULT_RESOLUTION, Interval, Job, round_to_resolution
from jobber.ledger.overlap import find_overlaps, intersect

__all__ = [
    "DEFAULT_RESOLUTION",
    "Interval",
    "Job",
    "JoinPreview",
    "Ledger",
    "QueryFilter",
    "QueryResult",
    "find_overlaps",
    "intersect",
    "parse_filter",
    "round_to_resolution",
]
