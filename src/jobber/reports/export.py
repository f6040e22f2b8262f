"""CSV export of listed jobs.

The export is meant for spreadsheets: comma separated with a header row,
one row per job, messages kept with their line breaks (quoted by the csv
module).
"""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from jobber.errors import InvalidColumnsError
from jobber.ledger.models import DEFAULT_RESOLUTION, Job

CSV_COLUMNS = ("pos", "start", "end", "hours", "cost", "message")
DEFAULT_CSV_COLUMNS = "pos,start,end,hours,message"


def parse_columns(text: str) -> List[str]:
    """Split a comma separated column list and check every name.

    Raises:
        InvalidColumnsError: if the list is empty or names an unknown column
    """
    columns = [name.strip().lower() for name in text.split(",") if name.strip()]
    unknown = [name for name in columns if name not in CSV_COLUMNS]
    if not columns or unknown:
        raise InvalidColumnsError(
            f"Invalid CSV columns: {text!r}",
            details={"unknown": ",".join(unknown) or None, "available": ",".join(CSV_COLUMNS)},
        )
    return columns


def export_csv(
    entries: Iterable[Tuple[int, Job]],
    columns: List[str],
    resolution: float = DEFAULT_RESOLUTION,
    rate: Optional[float] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render ``(position, job)`` pairs as CSV text with a header row.

    Running jobs have an empty end and count hours up to ``now``. The cost
    column stays empty without a rate.
    """

    def cost(position: int, job: Job) -> str:
        if rate is None:
            return ""
        return f"{job.hours(resolution, now) * rate:.2f}"

    cells: Dict[str, Callable[[int, Job], str]] = {
        "pos": lambda position, job: str(position),
        "start": lambda position, job: job.start.isoformat(),
        "end": lambda position, job: job.end.isoformat() if job.end else "",
        "hours": lambda position, job: f"{job.hours(resolution, now):g}",
        "cost": cost,
        "message": lambda position, job: job.message,
    }

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(columns)
    for position, job in entries:
        writer.writerow([cells[name](position, job) for name in columns])
    return buffer.getvalue()
