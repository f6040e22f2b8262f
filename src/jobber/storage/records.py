"""Job record format.

One record per job, three ``;``-separated and double-quoted fields:

    "2024-01-05T09:00:00";"2024-01-05T12:30:00";"planning\\nreview"

1. start timestamp (ISO 8601)
2. end timestamp, or ``0`` while the job is running
3. message, with backslashes escaped as ``\\\\`` and line breaks as ``\\n``

Quoting follows the csv module, so messages may contain the delimiter and
double quotes. Timestamps written with a UTC offset (older files) are
converted to local time when read.
"""

from __future__ import annotations

import csv
import io
import re
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Sequence

from dateutil import parser as dateutil_parser

from jobber.errors import RecordFormatError
from jobber.ledger.models import Job

DELIMITER = ";"
OPEN_MARKER = "0"

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}
_ESCAPE_PATTERN = re.compile(r"[\\\n\r]")
_UNESCAPE_PATTERN = re.compile(r"\\([\\nr])")


def escape_message(message: str) -> str:
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], message)


def unescape_message(text: str) -> str:
    return _UNESCAPE_PATTERN.sub(lambda m: _UNESCAPES[m.group(1)], text)


def format_timestamp(timestamp: Optional[datetime]) -> str:
    if timestamp is None:
        return OPEN_MARKER
    return timestamp.isoformat()


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse a stored timestamp; the open marker (or nothing) gives None."""
    text = text.strip()
    if text in ("", OPEN_MARKER):
        return None
    timestamp = dateutil_parser.isoparse(text)
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone().replace(tzinfo=None)
    return timestamp


def serialize_job(job: Job) -> str:
    """Pack a job into one record line (without line terminator)."""
    if not job.is_valid:
        raise ValueError("Cannot store a job without start time")
    buffer = io.StringIO()
    writer = csv.writer(
        buffer, delimiter=DELIMITER, quoting=csv.QUOTE_ALL, lineterminator=""
    )
    writer.writerow(
        [format_timestamp(job.start), format_timestamp(job.end), escape_message(job.message)]
    )
    return buffer.getvalue()


def job_from_fields(
    fields: Sequence[str],
    line_number: Optional[int] = None,
) -> Job:
    """Build a job from the fields of one record."""
    line = DELIMITER.join(fields)
    if len(fields) < 2:
        raise RecordFormatError(line, line_number=line_number)
    try:
        start = parse_timestamp(fields[0])
        end = parse_timestamp(fields[1])
        if start is None:
            raise ValueError("missing start time")
        message = unescape_message(fields[2]) if len(fields) > 2 else ""
        return Job(start=start, end=end, message=message)
    except (ValueError, OverflowError) as exc:
        raise RecordFormatError(
            line,
            line_number=line_number,
            message=f"Malformed job record at line {line_number}: {exc}",
        ) from exc


def deserialize_job(line: str) -> Job:
    """Unpack one record line into a job."""
    fields = next(csv.reader([line], delimiter=DELIMITER), [])
    return job_from_fields(fields)


def read_records(lines: Iterable[str]) -> List[Job]:
    """Read all records from an iterable of lines, skipping blank ones."""
    reader = csv.reader(lines, delimiter=DELIMITER)
    jobs = []
    for fields in reader:
        if not fields or not any(f.strip() for f in fields):
            continue
        jobs.append(job_from_fields(fields, line_number=reader.line_num))
    return jobs


def write_records(jobs: Iterable[Job]) -> Iterator[str]:
    """Yield record lines, each terminated by a newline."""
    for job in jobs:
        yield serialize_job(job) + "\n"
