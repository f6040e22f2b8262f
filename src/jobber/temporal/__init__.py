"""Time expression parsing for job start/end times and list filters."""

from jobber.temporal.models import ParsedTime, TimeExpressionKind
from jobber.temporal.parser import (
    TIME_FORMAT_EXAMPLES,
    TimeExpressionParser,
    lenient_int,
    parse_time,
)

__all__ = [
    "ParsedTime",
    "TimeExpressionKind",
    "TIME_FORMAT_EXAMPLES",
    "TimeExpressionParser",
    "lenient_int",
    "parse_time",
]
