"""Job and interval data models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

DEFAULT_RESOLUTION = 0.25


def round_to_resolution(hours: float, resolution: float) -> float:
    """Round ``hours`` to the nearest multiple of ``resolution``.

    Halves round away from zero (1.125h at 0.25 gives 1.25h).
    """
    steps = math.floor(abs(hours) / resolution + 0.5)
    # strip float noise such as 11 * 0.1 == 1.1000000000000001
    return round(math.copysign(steps * resolution, hours), 10)


@dataclass(frozen=True)
class Interval:
    """Closed time interval ``[start, end]``."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class Job:
    """A single recorded work interval.

    ``start`` is None until the job is started and ``end`` is None while the
    job is running. When both are set ``start < end`` always holds: the
    setters refuse values that would break this and keep the previous value.
    """

    def __init__(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        message: str = "",
    ) -> None:
        if start is not None and end is not None and not start < end:
            raise ValueError(f"Job start {start} must be before end {end}")
        self._start = start
        self._end = end
        self.message = message or ""

    def __repr__(self) -> str:
        return f"Job(start={self._start!r}, end={self._end!r}, message={self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Job):
            return NotImplemented
        return (self._start, self._end, self.message) == (other._start, other._end, other.message)

    __hash__ = None  # mutable

    @staticmethod
    def check(start: Optional[datetime], end: Optional[datetime]) -> bool:
        """True if ``start``/``end`` form a valid timespan (or one is unset)."""
        if start is None or end is None:
            return True
        return start < end

    @property
    def start(self) -> Optional[datetime]:
        return self._start

    @property
    def end(self) -> Optional[datetime]:
        return self._end

    def set_start(self, start: datetime) -> bool:
        """Set the start time unless it is not before the end time.

        Returns:
            True if the value was applied, False if it was rejected
        """
        if not Job.check(start, self._end):
            return False
        self._start = start
        return True

    def set_end(self, end: datetime) -> bool:
        """Set the end time unless it is not after the start time.

        Returns:
            True if the value was applied, False if it was rejected
        """
        if not Job.check(self._start, end):
            return False
        self._end = end
        return True

    @property
    def is_valid(self) -> bool:
        """True once a start time has been set."""
        return self._start is not None

    @property
    def is_open(self) -> bool:
        return self._end is None

    @property
    def is_finished(self) -> bool:
        return self._end is not None

    @property
    def year(self) -> int:
        return self._start.year

    @property
    def month(self) -> int:
        return self._start.month

    @property
    def mday(self) -> int:
        return self._start.day

    def effective_end(self, now: Optional[datetime] = None) -> datetime:
        """End time, or ``now`` for a running job."""
        if self._end is not None:
            return self._end
        return now or datetime.now()

    def interval(self, now: Optional[datetime] = None) -> Interval:
        if self._start is None:
            raise ValueError("Job has no start time")
        return Interval(self._start, self.effective_end(now))

    def hours_exact(self, now: Optional[datetime] = None) -> float:
        """Worked hours without rounding (running jobs count up to now)."""
        return self.interval(now).duration.total_seconds() / 3600

    def hours(self, resolution: float = DEFAULT_RESOLUTION, now: Optional[datetime] = None) -> float:
        """Worked hours rounded to ``resolution``."""
        return round_to_resolution(self.hours_exact(now), resolution)
