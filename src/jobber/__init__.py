"""jobber: a personal work-time ledger."""

from jobber.ledger import Interval, Job, Ledger, find_overlaps, intersect
from jobber.reports import build_calendar_report
from jobber.temporal import TimeExpressionParser, parse_time

__version__ = "0.1.0"

__all__ = [
    "Interval",
    "Job",
    "Ledger",
    "TimeExpressionParser",
    "build_calendar_report",
    "find_overlaps",
    "intersect",
    "parse_time",
]
