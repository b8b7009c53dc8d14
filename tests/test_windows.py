"""Tests for schedule windows (core/windows.py).

All functions under test are pure — "now" and the offset are arguments.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from animesh.core.models import ScheduleWindow, TimezoneOffset, UTC_OFFSET
from animesh.core.windows import (
    day_window,
    interval_window,
    parse_day_of_week,
    weekday_at,
)

NOW = 1_700_000_000

IST = TimezoneOffset(19800, "IST", "alias")
PST = TimezoneOffset(-28800, "PST", "alias")
OFFSETS = [
    UTC_OFFSET,
    IST,
    PST,
    TimezoneOffset(14 * 3600),
    TimezoneOffset(-12 * 3600),
    TimezoneOffset(20700),
]
NOWS = [NOW, NOW + 3 * 3600, 0, 1_735_689_599]


def _local(ts: int, offset: TimezoneOffset) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc).astimezone(offset.tzinfo)


# ---------------------------------------------------------------------------
# parse_day_of_week
# ---------------------------------------------------------------------------

class TestParseDayOfWeek:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("mon", 0),
            ("Monday", 0),
            ("tue", 1),
            ("TUES", 1),
            ("wed", 2),
            ("thu", 3),
            ("thurs", 3),
            ("fri", 4),
            ("sat", 5),
            ("sun", 6),
            ("  sunday ", 6),
        ],
    )
    def test_names(self, name: str, expected: int) -> None:
        assert parse_day_of_week(name) == expected

    @pytest.mark.parametrize("name", ["", "funday", "mo", "7", "tomorrowish"])
    def test_unknown_names(self, name: str) -> None:
        assert parse_day_of_week(name, NOW) is None

    def test_today_and_tomorrow_need_now(self) -> None:
        assert parse_day_of_week("today") is None
        assert parse_day_of_week("tomorrow") is None

    def test_today_and_tomorrow_follow_offset(self) -> None:
        # NOW is Tuesday in UTC and already Wednesday in IST.
        assert parse_day_of_week("today", NOW) == 1
        assert parse_day_of_week("tomorrow", NOW) == 2
        assert parse_day_of_week("today", NOW, IST) == 2
        assert parse_day_of_week("Tomorrow", NOW, IST) == 3

    def test_tomorrow_wraps_sunday(self) -> None:
        sunday = NOW + 5 * 86400
        assert parse_day_of_week("tomorrow", sunday) == 0


class TestWeekdayAt:
    def test_calendar_depends_on_offset(self) -> None:
        assert weekday_at(NOW) == 1
        assert weekday_at(NOW, IST) == 2
        assert weekday_at(NOW, PST) == 1


# ---------------------------------------------------------------------------
# day_window
# ---------------------------------------------------------------------------

class TestDayWindow:
    def test_today_in_utc(self) -> None:
        window = day_window(1, NOW)
        assert window == ScheduleWindow(1_699_920_000, 1_699_920_000 + 86399)

    def test_next_monday_in_utc(self) -> None:
        window = day_window(0, NOW)
        assert window.start == 1_699_920_000 + 6 * 86400

    def test_today_in_ist(self) -> None:
        # Wednesday 00:00 IST is Tuesday 18:30 UTC.
        window = day_window(2, NOW, IST)
        assert window.start == 1_699_986_600
        assert window.end == 1_699_986_600 + 86399

    @pytest.mark.parametrize("offset", OFFSETS, ids=lambda o: o.label)
    @pytest.mark.parametrize("now", NOWS)
    @pytest.mark.parametrize("day", range(7))
    def test_window_properties(
        self, day: int, now: int, offset: TimezoneOffset,
    ) -> None:
        window = day_window(day, now, offset)
        start = _local(window.start, offset)
        end = _local(window.end, offset)

        assert window.start < window.end
        assert window.length == 86399
        assert start.weekday() == day
        assert (start.hour, start.minute, start.second) == (0, 0, 0)
        assert (end.hour, end.minute, end.second) == (23, 59, 59)
        assert start.date() == end.date()
        # The next occurrence: never in the past, at most six days ahead.
        assert window.end >= now
        assert (start.date() - _local(now, offset).date()).days in range(7)

    @pytest.mark.parametrize("day", [-1, 7, 42])
    def test_rejects_out_of_range_day(self, day: int) -> None:
        with pytest.raises(ValueError, match="0..6"):
            day_window(day, NOW)


# ---------------------------------------------------------------------------
# interval_window
# ---------------------------------------------------------------------------

class TestIntervalWindow:
    @pytest.mark.parametrize("days", [0, 1, 7, 30])
    def test_upcoming(self, days: int) -> None:
        window = interval_window(NOW, days)
        assert window.start == NOW
        assert window.end - window.start == days * 86400

    @pytest.mark.parametrize("days", [0, 1, 7, 30])
    def test_past(self, days: int) -> None:
        window = interval_window(NOW, days, past=True)
        assert window.end == NOW
        assert window.end - window.start == days * 86400

    def test_rejects_negative_days(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            interval_window(NOW, -1)
