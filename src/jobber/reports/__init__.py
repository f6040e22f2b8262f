"""Aggregate reports over the job ledger."""

from jobber.reports.calendar import (
    MONTH_NAMES,
    WEEK_COLUMN,
    WEEKDAYS,
    CalendarReport,
    DayCell,
    MonthReport,
    WeekRow,
    aggregate_hours,
    build_calendar_report,
)
from jobber.reports.export import CSV_COLUMNS, DEFAULT_CSV_COLUMNS, export_csv, parse_columns

__all__ = [
    "CSV_COLUMNS",
    "DEFAULT_CSV_COLUMNS",
    "MONTH_NAMES",
    "WEEK_COLUMN",
    "WEEKDAYS",
    "CalendarReport",
    "DayCell",
    "MonthReport",
    "WeekRow",
    "aggregate_hours",
    "build_calendar_report",
    "export_csv",
    "parse_columns",
]
