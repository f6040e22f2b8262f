"""Terminal rendering of jobs, listings and reports.

All colors and layout live here; the ledger and report modules only hand
over plain data.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jobber.errors import format_error_for_cli
from jobber.ledger import Interval, Job, JoinPreview, QueryResult
from jobber.reports import WEEK_COLUMN, WEEKDAYS, CalendarReport, MonthReport


def format_timestamp(timestamp: datetime) -> str:
    """Humanized timestamp, e.g. ``Fri Jan 05 2024, 09:00``."""
    return timestamp.strftime("%a %b %d %Y, %H:%M")


def format_hours(hours: float) -> str:
    """Hours as a short decimal (``3.5``, ``2``, ``1.25``)."""
    return f"{hours:g}"


def format_clock_hours(hours: float) -> str:
    """Hours as ``H:MM``."""
    minutes = int(round(hours * 60))
    sign = "-" if minutes < 0 else ""
    minutes = abs(minutes)
    return f"{sign}{minutes // 60}:{minutes % 60:02d}"


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


class Presenter:
    """Print ledger data to a rich console."""

    def __init__(
        self,
        console: Console,
        resolution: float,
        rate: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.console = console
        self.resolution = resolution
        self.rate = rate
        self.now = now

    # -----------------------------------------------------------------------
    # Jobs
    # -----------------------------------------------------------------------

    def job_lines(self, job: Job, position: Optional[int] = None) -> List[str]:
        lines = []
        if position is not None:
            lines.append(f"    Pos: {position}")
        lines.append(f"  Start: [green]{format_timestamp(job.start)}[/green]")
        if job.is_finished:
            hours = job.hours(self.resolution, self.now)
            lines.append(f"    End: [red]{format_timestamp(job.end)}[/red]")
            lines.append(f"  Hours: {format_hours(hours)}")
            if self.rate is not None:
                lines.append(f"  Costs: {format_money(hours * self.rate)}")
        for index, line in enumerate(job.message.splitlines()):
            label = "Message: " if index == 0 else "         "
            lines.append(f"{label}[bold]{escape(line)}[/bold]")
        return lines

    def show_job(self, job: Job, position: Optional[int] = None, title: Optional[str] = None) -> None:
        if title:
            self.console.print(f"[yellow]{escape(title)}[/yellow]")
        for line in self.job_lines(job, position):
            self.console.print(line, highlight=False)
        self.console.print()

    def show_query(self, result: QueryResult, running: Optional[Job], totals_only: bool = False) -> None:
        if not totals_only:
            for position, job in result.entries:
                self.show_job(job, position)
        text = f"Total: {result.count} job(s), [bold]{format_hours(result.hours)}[/bold] hrs."
        cost = result.cost(self.rate)
        if cost is not None:
            text += f" / [bold]{format_money(cost)}[/bold]"
        self.console.print(text, highlight=False)
        if running is not None:
            since = format_clock_hours(running.hours_exact(self.now))
            self.console.print(f"Job running since [green]{since}[/green] hour(s)!", highlight=False)

    def show_join(self, preview: JoinPreview) -> None:
        self.console.print(f"Join {len(preview.positions)} jobs:")
        for position, job in zip(preview.positions, preview.jobs):
            self.show_job(job, position)
        self.console.print("Into this job:")
        self.show_job(preview.merged, preview.positions[0])
        delta = preview.hours_delta
        if delta > 0:
            self.console.print(f"You will add {format_hours(delta)} hours!", highlight=False)
        elif delta < 0:
            self.console.print(f"You will lose {format_hours(-delta)} hours!", highlight=False)

    def show_overlaps(self, position: int, overlaps: Sequence[Tuple[int, Interval]]) -> None:
        for other, interval in overlaps:
            self.console.print(
                f"[yellow]Warning: job #{position} overlaps job #{other} "
                f"from {format_timestamp(interval.start)} to {format_timestamp(interval.end)}[/yellow]",
                highlight=False,
            )

    # -----------------------------------------------------------------------
    # Reports
    # -----------------------------------------------------------------------

    def month_table(self, month: MonthReport) -> Table:
        table = Table(title=month.title, show_header=True, header_style="bold")
        for name in WEEKDAYS + (WEEK_COLUMN,):
            table.add_column(name.lower(), justify="right")
        for week in month.weeks:
            cells = []
            for cell in week.cells:
                if cell is None:
                    cells.append("")
                elif cell.hours is None:
                    cells.append("-")
                else:
                    cells.append(f"[bold]{format_hours(cell.hours)}[/bold]")
            cells.append(format_hours(week.subtotal))
            table.add_row(*cells)
        caption = f"{month.name} {month.year}: {format_hours(month.hours)} hrs."
        if month.cost is not None:
            caption += f" / {format_money(month.cost)}"
        table.caption = caption
        return table

    def show_report(self, report: CalendarReport) -> None:
        self.console.print()
        for month in report.months:
            self.console.print(self.month_table(month))
        self.console.print()
        text = f"Total: {report.job_count} jobs, [bold]{format_hours(report.hours)}[/bold] hrs."
        if report.cost is not None:
            text += f" / [bold]{format_money(report.cost)}[/bold]"
        self.console.print(text, highlight=False)

    def show_csv(self, text: str) -> None:
        """Print CSV text as is, without markup or wrapping."""
        self.console.out(text.rstrip("\n"), highlight=False)

    # -----------------------------------------------------------------------
    # Messages
    # -----------------------------------------------------------------------

    def info(self, text: str) -> None:
        self.console.print(f"[yellow]{escape(text)}[/yellow]", highlight=False)

    def warn(self, text: str) -> None:
        self.console.print(f"[red]{escape(text)}[/red]", highlight=False)

    def error(self, error: Exception) -> None:
        self.console.print(f"[red]{escape(format_error_for_cli(error))}[/red]", highlight=False)
