"""Data models for parsed time expressions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TimeExpressionKind(Enum):
    """Expression class that produced a timestamp, in matching priority order."""

    NOW = "now"                          # now
    RELATIVE_CLOCK = "relative_clock"    # 4:10-, 0:30+
    RELATIVE_UNIT = "relative_unit"      # 1h+, 15m-
    ABSOLUTE_CLOCK = "absolute_clock"    # 14:10
    DATE_TIME = "date_time"              # 8.1.,14:10 / mon,9:00 / yesterday


@dataclass(frozen=True)
class ParsedTime:
    """Result of a successful parse.

    A parse either yields one of these or nothing at all; there is no partial
    result.
    """

    text: str
    timestamp: datetime
    kind: TimeExpressionKind
