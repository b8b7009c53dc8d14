"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem, network or terminal I/O.
* No imports from ``cli`` or ``infra``.
* "Now" is always passed in, never read from the clock directly.
"""

from animesh.core.anime_service import AnimeService
from animesh.core.countdown import CountdownFrame, CountdownLoop, CountdownOutcome
from animesh.core.models import (
    AiringEntry,
    CreditEntry,
    FuzzyDate,
    MediaDetails,
    MediaSummary,
    MediaTitle,
    ScheduleWindow,
    TimezoneOffset,
)
from animesh.core.protocols import Clock, KeySource, QueryTransport
from animesh.core.timefmt import (
    format_datetime,
    format_duration,
    format_offset,
    format_relative,
)
from animesh.core.timezones import TimezoneResolver, match_timezone, resolve_timezone
from animesh.core.windows import day_window, interval_window, parse_day_of_week

__all__: list[str] = [
    "AiringEntry",
    "AnimeService",
    "Clock",
    "CountdownFrame",
    "CountdownLoop",
    "CountdownOutcome",
    "CreditEntry",
    "FuzzyDate",
    "KeySource",
    "MediaDetails",
    "MediaSummary",
    "MediaTitle",
    "QueryTransport",
    "ScheduleWindow",
    "TimezoneOffset",
    "TimezoneResolver",
    "day_window",
    "format_datetime",
    "format_duration",
    "format_offset",
    "format_relative",
    "interval_window",
    "match_timezone",
    "parse_day_of_week",
    "resolve_timezone",
]
