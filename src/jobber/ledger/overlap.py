"""Overlap detection between recorded jobs.

Overlaps are informational only: they are reported to the user but never
block or correct an edit.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from jobber.ledger.models import Interval, Job


def intersect(a: Job, b: Job, now: Optional[datetime] = None) -> Optional[Interval]:
    """Intersection of two jobs as closed intervals ``[start, end or now]``.

    Returns:
        The common interval, or None when the jobs do not meet at all
    """
    if now is None:
        now = datetime.now()
    first = a.interval(now)
    second = b.interval(now)
    lower = max(first.start, second.start)
    upper = min(first.end, second.end)
    if lower > upper:
        return None
    return Interval(lower, upper)


def find_overlaps(
    jobs: Iterable[Job],
    job: Job,
    now: Optional[datetime] = None,
) -> List[Tuple[int, Interval]]:
    """List ``(position, interval)`` of jobs sharing actual time with ``job``.

    Jobs that merely touch (one ends when the other starts) are not
    reported. ``job`` itself is skipped by identity.
    """
    overlaps = []
    for position, other in enumerate(jobs, start=1):
        if other is job or not other.is_valid:
            continue
        common = intersect(job, other, now)
        if common is not None and common.duration > timedelta(0):
            overlaps.append((position, common))
    return overlaps
