"""Monthly calendar report.

Job hours are bucketed by the start date of each job (a job running past
midnight counts entirely for the day it started) and laid out per month as
a Sunday-first week grid with a weekly subtotal column.
"""

from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from jobber.ledger.models import DEFAULT_RESOLUTION, Job

logger = logging.getLogger(__name__)

WEEKDAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
WEEK_COLUMN = "Week"
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# year -> month -> day of month -> hours
HoursTable = Dict[int, Dict[int, Dict[int, float]]]


@dataclass(frozen=True)
class DayCell:
    """One calendar day; ``hours`` is None when nothing was recorded."""

    day: int
    hours: Optional[float] = None


@dataclass
class WeekRow:
    """Seven Sunday-first cells plus the hours worked in them.

    Cells outside the month are None.
    """

    cells: List[Optional[DayCell]]
    subtotal: float = 0.0


@dataclass
class MonthReport:
    year: int
    month: int
    weeks: List[WeekRow] = field(default_factory=list)
    hours: float = 0.0
    cost: Optional[float] = None

    @property
    def title(self) -> str:
        return f"{self.month}/{self.year}"

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month - 1]


@dataclass
class CalendarReport:
    months: List[MonthReport] = field(default_factory=list)
    job_count: int = 0
    hours: float = 0.0
    cost: Optional[float] = None


def aggregate_hours(
    jobs: Iterable[Job],
    resolution: float = DEFAULT_RESOLUTION,
    now: Optional[datetime] = None,
) -> HoursTable:
    """Sum rounded job hours per start day."""
    table: HoursTable = defaultdict(lambda: defaultdict(lambda: defaultdict(float)))
    for job in jobs:
        table[job.year][job.month][job.mday] += job.hours(resolution, now)
    return table


def build_calendar_report(
    jobs: Iterable[Job],
    resolution: float = DEFAULT_RESOLUTION,
    rate: Optional[float] = None,
    now: Optional[datetime] = None,
) -> CalendarReport:
    """Build the calendar grid for every month that has jobs.

    Args:
        jobs: Jobs to report (a Ledger works as well as a list)
        resolution: Rounding granularity in hours
        rate: Optional hourly rate; enables cost figures
        now: End time used for running jobs

    Returns:
        CalendarReport with months in chronological order
    """
    jobs = list(jobs)
    table = aggregate_hours(jobs, resolution, now)

    report = CalendarReport(job_count=len(jobs))
    for year in sorted(table):
        for month in sorted(table[year]):
            month_report = _build_month(year, month, table[year][month])
            if rate is not None:
                month_report.cost = month_report.hours * rate
            report.months.append(month_report)
            report.hours += month_report.hours

    if rate is not None:
        report.cost = report.hours * rate
    logger.debug(f"calendar report: {len(report.months)} month(s), {report.hours} hrs")
    return report


def _build_month(year: int, month: int, days: Dict[int, float]) -> MonthReport:
    month_report = MonthReport(year=year, month=month)
    _, days_in_month = calendar.monthrange(year, month)

    cells: List[Optional[DayCell]] = [None] * len(WEEKDAYS)
    week_hours = 0.0
    weekday = 0
    for day in range(1, days_in_month + 1):
        weekday = (date(year, month, day).weekday() + 1) % 7
        hours = days.get(day)
        cells[weekday] = DayCell(day, hours)
        if hours is not None:
            month_report.hours += hours
            week_hours += hours
        if weekday == 6:
            month_report.weeks.append(WeekRow(cells, week_hours))
            cells = [None] * len(WEEKDAYS)
            week_hours = 0.0

    if weekday != 6:
        month_report.weeks.append(WeekRow(cells, week_hours))
    return month_report
