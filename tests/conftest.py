"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

import pytest

from jobber.ledger import Job, Ledger
from jobber.temporal import TimeExpressionParser

# Wednesday
REFERENCE_TIME = datetime(2024, 1, 10, 15, 30, 45)

JobFactory = Callable[..., Job]


def _make_job(
    day: int,
    start_hour: float,
    end_hour: Optional[float],
    message: str = "",
    month: int = 1,
) -> Job:
    midnight = datetime(2024, month, day)
    end = midnight + timedelta(hours=end_hour) if end_hour is not None else None
    return Job(start=midnight + timedelta(hours=start_hour), end=end, message=message)


@pytest.fixture
def now() -> datetime:
    return REFERENCE_TIME


@pytest.fixture
def parser() -> TimeExpressionParser:
    """Parser with a frozen clock."""
    return TimeExpressionParser(clock=lambda: REFERENCE_TIME)


@pytest.fixture
def make_job() -> JobFactory:
    """Build a job in 2024 from day and fractional start/end hours."""
    return _make_job


@pytest.fixture
def five_jobs() -> Ledger:
    """Five finished one-hour jobs on Jan 1..5, messages m1..m5."""
    return Ledger([_make_job(day, 9, 10, f"m{day}") for day in range(1, 6)])


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "jobber.dat"
