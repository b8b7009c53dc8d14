"""Schedule query windows.

Every function here is a **pure** function of its arguments: "now" is
always passed in as UTC epoch seconds, and the display offset is passed
explicitly.  Nothing reads the clock or the environment.

Day-of-week encoding follows ISO: 0 = Monday ... 6 = Sunday.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

from animesh.core.models import UTC_OFFSET, ScheduleWindow, TimezoneOffset
from animesh.core.timefmt import DAY

_DAY_NAMES: dict[str, int] = {
    "mon": 0,
    "monday": 0,
    "tue": 1,
    "tues": 1,
    "tuesday": 1,
    "wed": 2,
    "wednesday": 2,
    "thu": 3,
    "thur": 3,
    "thurs": 3,
    "thursday": 3,
    "fri": 4,
    "friday": 4,
    "sat": 5,
    "saturday": 5,
    "sun": 6,
    "sunday": 6,
}


def weekday_at(now: int, offset: TimezoneOffset = UTC_OFFSET) -> int:
    """ISO weekday (0 = Monday) of *now* on the calendar of *offset*."""
    return _local(now, offset).weekday()


def parse_day_of_week(
    name: str,
    now: int | None = None,
    offset: TimezoneOffset = UTC_OFFSET,
) -> int | None:
    """Map a day name to 0..6, or ``None`` when it is not recognised.

    ``today`` and ``tomorrow`` are accepted when *now* is supplied.
    """
    key = name.strip().lower()
    if key in _DAY_NAMES:
        return _DAY_NAMES[key]
    if now is not None and key in ("today", "tomorrow"):
        current = weekday_at(now, offset)
        return current if key == "today" else (current + 1) % 7
    return None


def day_window(
    day_of_week: int,
    now: int,
    offset: TimezoneOffset = UTC_OFFSET,
) -> ScheduleWindow:
    """Bounds of the next occurrence of *day_of_week* in *offset*.

    Today counts as the next occurrence when it matches.  The window runs
    from 00:00:00 to 23:59:59 local time, expressed in UTC epoch seconds.
    """
    if not 0 <= day_of_week <= 6:
        raise ValueError(f"day_of_week must be in 0..6, got {day_of_week}")

    local_now = _local(now, offset)
    days_ahead = (day_of_week + 7 - local_now.weekday()) % 7
    target = local_now.date() + timedelta(days=days_ahead)

    start = datetime.combine(target, time(0, 0, 0), tzinfo=offset.tzinfo)
    end = datetime.combine(target, time(23, 59, 59), tzinfo=offset.tzinfo)
    return ScheduleWindow(int(start.timestamp()), int(end.timestamp()))


def interval_window(now: int, days: int, past: bool = False) -> ScheduleWindow:
    """An N-day window that starts (or, when *past*, ends) at *now*."""
    if days < 0:
        raise ValueError(f"days must not be negative, got {days}")
    span = days * DAY
    if past:
        return ScheduleWindow(now - span, now)
    return ScheduleWindow(now, now + span)


def _local(now: int, offset: TimezoneOffset) -> datetime:
    return datetime.fromtimestamp(now, tz=timezone.utc).astimezone(offset.tzinfo)
