"""Time expression parsing.

Converts the short tokens typed on the command line into absolute local
timestamps, relative to a reference time (normally "now"):

    now              now
    4:10-            4 hours and 10 minutes ago
    1h+              in 1 hour
    14:10            today at 14:10 (yesterday if that is >12h ahead)
    8.1.,14:10       1st of August this year at 14:10
    8/1/2024,14:10   1st of August 2024 at 14:10
    mon,14:10        last monday (or today) at 14:10
    yesterday,14:10  yesterday at 14:10

Expression classes are tried in the order above and the first one whose
pattern matches the *whole* input wins. Anything else is a parse failure
and yields ``None``.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from jobber.temporal.models import ParsedTime, TimeExpressionKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Regular Expression Patterns
# ---------------------------------------------------------------------------

NOW_PATTERN = re.compile(r"now")

# 4:10- / 0:30+
RELATIVE_CLOCK_PATTERN = re.compile(r"(\d{1,2}):(\d{1,2})([+-])")

# 1h+ / 15m-
RELATIVE_UNIT_PATTERN = re.compile(r"(\d{1,2})([hm])([+-])")

# 14:10
ABSOLUTE_CLOCK_PATTERN = re.compile(r"(\d{1,2}):(\d{1,2})")

# D.M / D.M. / D.M.YYYY
GERMAN_DATE_PATTERN = re.compile(r"(\d{1,2})\.(\d{1,2})(?:\.(\d{1,4})?)?")

# M/D/YYYY, or M/D/ for the current year
ENGLISH_DATE_PATTERN = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{1,4})?")

WEEKDAY_PATTERN = re.compile(r"sun|mon|tue|wed|thu|fri|sat|yesterday")

# Sunday first, as in the calendar report
WEEKDAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

# An absolute clock time further ahead than this means the previous day
HALF_DAY = timedelta(hours=12)

MINUTES_PER_DAY = 24 * 60

TIME_FORMAT_EXAMPLES = (
    ("now", "now"),
    ("4:10-", "4 hours and 10 minutes ago"),
    ("1h+", "in 1 hour"),
    ("14:10", "today at 14:10"),
    ("1.8.,14:10", "1st of August this year at 14:10"),
    ("8/1/,14:10", "1st of August this year at 14:10"),
    ("mon,14:10", "last monday at 14:10"),
    ("yesterday,14:10", "yesterday at 14:10"),
)


def lenient_int(text: Optional[str]) -> int:
    """Convert the leading digits of ``text`` to an int; anything else is 0."""
    match = re.match(r"\s*[+-]?\d+", text or "")
    return int(match.group()) if match else 0


def sunday_based_weekday(day: datetime) -> int:
    """Weekday index with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % 7


class TimeExpressionParser:
    """Parse time expressions into absolute timestamps.

    The reference time defaults to the injected ``clock`` (``datetime.now``
    unless a test supplies a fixed one).
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now

    def parse(
        self,
        text: Optional[str],
        allow_date_only: bool = False,
        reference_time: Optional[datetime] = None,
    ) -> Optional[ParsedTime]:
        """Parse ``text`` into a :class:`ParsedTime`.

        Args:
            text: Expression typed by the user
            allow_date_only: Accept a bare date token (time defaults to 00:00)
            reference_time: Moment relative expressions refer to

        Returns:
            ParsedTime, or None if the text matches no expression class
        """
        if text is None:
            return None
        if reference_time is None:
            reference_time = self.clock()

        expr = text.strip()

        if NOW_PATTERN.fullmatch(expr):
            logger.debug(f"parse time '{expr}': now")
            return ParsedTime(expr, reference_time, TimeExpressionKind.NOW)

        match = RELATIVE_CLOCK_PATTERN.fullmatch(expr)
        if match:
            logger.debug(f"parse time '{expr}': relative clock time")
            offset = relativedelta(
                hours=lenient_int(match.group(1)),
                minutes=lenient_int(match.group(2)),
            )
            timestamp = self._apply_sign(reference_time, offset, match.group(3))
            return ParsedTime(expr, timestamp, TimeExpressionKind.RELATIVE_CLOCK)

        match = RELATIVE_UNIT_PATTERN.fullmatch(expr)
        if match:
            logger.debug(f"parse time '{expr}': relative unit time")
            amount = lenient_int(match.group(1))
            if match.group(2) == "h":
                offset = relativedelta(hours=amount)
            else:
                offset = relativedelta(minutes=amount)
            timestamp = self._apply_sign(reference_time, offset, match.group(3))
            return ParsedTime(expr, timestamp, TimeExpressionKind.RELATIVE_UNIT)

        match = ABSOLUTE_CLOCK_PATTERN.fullmatch(expr)
        if match:
            logger.debug(f"parse time '{expr}': absolute clock time")
            midnight = reference_time.replace(hour=0, minute=0, second=0, microsecond=0)
            timestamp = midnight + relativedelta(
                hours=lenient_int(match.group(1)),
                minutes=lenient_int(match.group(2)),
            )
            if timestamp - reference_time > HALF_DAY:
                timestamp -= relativedelta(days=1)
            return ParsedTime(expr, timestamp, TimeExpressionKind.ABSOLUTE_CLOCK)

        timestamp = self._parse_date_time(expr, allow_date_only, reference_time)
        if timestamp is not None:
            return ParsedTime(expr, timestamp, TimeExpressionKind.DATE_TIME)

        logger.debug(f"parse time '{expr}': invalid")
        return None

    # -----------------------------------------------------------------------
    # Private: date and time combinations
    # -----------------------------------------------------------------------

    @staticmethod
    def _apply_sign(reference_time: datetime, offset: relativedelta, sign: str) -> datetime:
        if sign == "-":
            return reference_time - offset
        return reference_time + offset

    def _parse_date_time(
        self,
        expr: str,
        allow_date_only: bool,
        reference_time: datetime,
    ) -> Optional[datetime]:
        """Parse ``date,time``, ``time,date`` or (optionally) a bare date."""
        parts = expr.split(",")
        if len(parts) == 2:
            first, second = parts
            if ABSOLUTE_CLOCK_PATTERN.fullmatch(second) and self._is_date(first):
                date_part, clock_part = first, second
            elif ABSOLUTE_CLOCK_PATTERN.fullmatch(first) and self._is_date(second):
                date_part, clock_part = second, first
            else:
                return None
        elif len(parts) == 1 and allow_date_only and self._is_date(expr):
            date_part, clock_part = expr, None
        else:
            return None

        day = self._resolve_date(date_part, reference_time)
        if day is None:
            return None
        logger.debug(f"parse time '{expr}': date {day.date()} and time {clock_part or '0:00'}")
        return day + timedelta(minutes=self._clock_minutes(clock_part))

    @staticmethod
    def _is_date(token: str) -> bool:
        return bool(
            GERMAN_DATE_PATTERN.fullmatch(token)
            or ENGLISH_DATE_PATTERN.fullmatch(token)
            or WEEKDAY_PATTERN.fullmatch(token)
        )

    @staticmethod
    def _clock_minutes(token: Optional[str]) -> int:
        """Minutes past midnight for a clock token, wrapped into one day."""
        if token is None:
            return 0
        hours, _, minutes = token.partition(":")
        return (60 * lenient_int(hours) + lenient_int(minutes)) % MINUTES_PER_DAY

    def _resolve_date(self, token: str, reference_time: datetime) -> Optional[datetime]:
        """Midnight of the day a date token refers to, or None if invalid."""
        match = GERMAN_DATE_PATTERN.fullmatch(token)
        if match:
            day, month, year = match.groups()
            return self._calendar_date(year, month, day, reference_time)

        match = ENGLISH_DATE_PATTERN.fullmatch(token)
        if match:
            month, day, year = match.groups()
            return self._calendar_date(year, month, day, reference_time)

        today = reference_time.replace(hour=0, minute=0, second=0, microsecond=0)
        if token == "yesterday":
            return today - relativedelta(days=1)

        wanted = WEEKDAY_NAMES.index(token)
        day = today
        for _ in range(len(WEEKDAY_NAMES)):
            if sunday_based_weekday(day) == wanted:
                return day
            day -= relativedelta(days=1)
        return None

    @staticmethod
    def _calendar_date(
        year: Optional[str],
        month: str,
        day: str,
        reference_time: datetime,
    ) -> Optional[datetime]:
        resolved_year = lenient_int(year) if year else reference_time.year
        try:
            return datetime(resolved_year, lenient_int(month), lenient_int(day))
        except ValueError:
            logger.debug(f"no such date: {resolved_year}-{month}-{day}")
            return None


_default_parser = TimeExpressionParser()


def parse_time(
    text: Optional[str],
    allow_date_only: bool = False,
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """Parse ``text`` and return only the timestamp (None on failure)."""
    parsed = _default_parser.parse(text, allow_date_only=allow_date_only, reference_time=now)
    return parsed.timestamp if parsed else None
