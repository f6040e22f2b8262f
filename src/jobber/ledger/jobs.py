"""The job ledger and its editing operations.

Positions are 1-based everywhere, as presented to the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from jobber.errors import (
    EndBeforeStartError,
    InvalidFilterError,
    JoinUsageError,
    NoOpenJobError,
    OpenJobError,
    PositionError,
)
from jobber.ledger.models import DEFAULT_RESOLUTION, Job
from jobber.temporal import TimeExpressionParser, lenient_int

logger = logging.getLogger(__name__)

# A start-time filter, a count of most recent jobs, or no filter
QueryFilter = Union[datetime, int, None]


@dataclass
class JoinPreview:
    """Outcome of joining jobs, computed before anything is changed."""

    positions: List[int]
    jobs: List[Job]
    merged: Job
    hours_before: float
    hours_after: float
    applied: bool = False

    @property
    def hours_delta(self) -> float:
        """Hours gained (positive) or lost (negative) by rounding the merged job."""
        return round(self.hours_after - self.hours_before, 10)


@dataclass
class QueryResult:
    """Jobs matching a list filter, with their positions and summed hours."""

    entries: List[Tuple[int, Job]] = field(default_factory=list)
    hours: float = 0.0

    @property
    def count(self) -> int:
        return len(self.entries)

    def cost(self, rate: Optional[float]) -> Optional[float]:
        if rate is None:
            return None
        return self.hours * rate


class Ledger:
    """Ordered collection of jobs as loaded from the job file."""

    def __init__(
        self,
        jobs: Optional[Iterable[Job]] = None,
        resolution: float = DEFAULT_RESOLUTION,
    ) -> None:
        self._jobs: List[Job] = list(jobs or [])
        self.resolution = resolution

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(self._jobs)

    @property
    def jobs(self) -> List[Job]:
        return list(self._jobs)

    @property
    def last_job(self) -> Optional[Job]:
        return self._jobs[-1] if self._jobs else None

    def running_job(self) -> Optional[Job]:
        """The last job if it is still open."""
        last = self.last_job
        if last is not None and last.is_open:
            return last
        return None

    def job_at(self, position: int) -> Job:
        self._check_position(position)
        return self._jobs[position - 1]

    def _check_position(self, position: int) -> None:
        if not 1 <= position <= len(self._jobs):
            raise PositionError(position, len(self._jobs))

    # -----------------------------------------------------------------------
    # Job creation
    # -----------------------------------------------------------------------

    def start(self, start: datetime, message: str = "") -> Job:
        """Append a new running job.

        Raises:
            OpenJobError: if the last job is still running; end it first
        """
        if self.running_job() is not None:
            raise OpenJobError(len(self._jobs))
        job = Job(start=start, message=message)
        self._jobs.append(job)
        logger.debug(f"started job #{len(self._jobs)} at {start}")
        return job

    def end(self, end: datetime) -> Job:
        """End the running job.

        Raises:
            NoOpenJobError: if no job is running
            EndBeforeStartError: if ``end`` is not after the job's start
        """
        job = self.running_job()
        if job is None:
            raise NoOpenJobError()
        if not job.set_end(end):
            raise EndBeforeStartError(
                details={"start": job.start.isoformat(), "end": end.isoformat()}
            )
        logger.debug(f"ended job #{len(self._jobs)} at {end}")
        return job

    def add(self, start: datetime, end: datetime, message: str = "") -> Job:
        """Append a finished job in one step."""
        if self.running_job() is not None:
            raise OpenJobError(len(self._jobs))
        if not Job.check(start, end):
            raise EndBeforeStartError(
                details={"start": start.isoformat(), "end": end.isoformat()}
            )
        job = Job(start=start, end=end, message=message)
        self._jobs.append(job)
        return job

    def append_message(self, text: str) -> Job:
        """Append ``text`` to the running job's message on a new line."""
        job = self.running_job()
        if job is None:
            raise NoOpenJobError()
        if job.message:
            job.message += "\n" + text
        else:
            job.message = text
        return job

    # -----------------------------------------------------------------------
    # Editing
    # -----------------------------------------------------------------------

    def drop(self, position: int, confirmed: bool) -> Optional[Job]:
        """Remove the job at ``position`` if the caller confirmed it.

        Returns:
            The removed job, or None when not confirmed
        """
        self._check_position(position)
        if not confirmed:
            return None
        logger.debug(f"dropping job #{position}")
        return self._jobs.pop(position - 1)

    def preview_join(
        self,
        positions: Sequence[int],
        now: Optional[datetime] = None,
    ) -> JoinPreview:
        """Compute the job that joining ``positions`` would produce.

        The job at the smallest position survives. Messages are joined in
        position order, the start is the earliest start and the end is the
        latest end of the finished jobs (open if none is finished).
        """
        ordered = sorted(set(positions))
        if len(ordered) < 2:
            raise JoinUsageError(details={"positions": list(positions)})
        for position in ordered:
            self._check_position(position)

        selected = [self._jobs[position - 1] for position in ordered]
        ends = [job.end for job in selected if job.end is not None]
        merged = Job(
            start=min(job.start for job in selected),
            end=max(ends) if ends else None,
            message="\n".join(job.message for job in selected),
        )
        return JoinPreview(
            positions=ordered,
            jobs=selected,
            merged=merged,
            hours_before=sum(job.hours(self.resolution, now) for job in selected),
            hours_after=merged.hours(self.resolution, now),
        )

    def join(
        self,
        positions: Sequence[int],
        confirmed: bool,
        now: Optional[datetime] = None,
    ) -> JoinPreview:
        """Merge the jobs at ``positions`` into the first of them.

        Nothing changes unless ``confirmed``; the preview is returned either
        way with ``applied`` set accordingly.
        """
        preview = self.preview_join(positions, now)
        if not confirmed:
            return preview

        first, *rest = preview.positions
        self._jobs[first - 1] = preview.merged
        # highest first so the remaining positions stay valid
        for position in reversed(rest):
            del self._jobs[position - 1]
        preview.applied = True
        logger.debug(f"joined jobs {preview.positions} into #{first}")
        return preview

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def query(self, filter: QueryFilter = None, now: Optional[datetime] = None) -> QueryResult:
        """Select jobs by start time or by count.

        Args:
            filter: datetime to list jobs starting at or after it, int to list
                the last N jobs, None for all jobs
        """
        if isinstance(filter, int) and not isinstance(filter, bool) and filter < 0:
            raise InvalidFilterError(details={"filter": filter})

        result = QueryResult()
        size = len(self._jobs)
        for position, job in enumerate(self._jobs, start=1):
            if isinstance(filter, datetime) and job.start < filter:
                continue
            if isinstance(filter, int) and position <= size - filter:
                continue
            result.entries.append((position, job))
            result.hours += job.hours(self.resolution, now)
        return result


def parse_filter(
    text: Optional[str],
    parser: Optional[TimeExpressionParser] = None,
    now: Optional[datetime] = None,
) -> QueryFilter:
    """Interpret a list filter as a time expression or else a job count."""
    if text is None:
        return None
    parser = parser or TimeExpressionParser()
    parsed = parser.parse(text, allow_date_only=True, reference_time=now)
    if parsed is not None:
        return parsed.timestamp
    count = lenient_int(text)
    if count < 0:
        raise InvalidFilterError(f"Invalid list filter: {text!r}", details={"filter": text})
    return count
