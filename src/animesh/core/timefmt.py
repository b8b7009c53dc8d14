"""Pure time formatting helpers.

Two distinct duration renderings live here and must not be confused:

* :func:`format_relative` shows a **single** unit (``"3h ago"``,
  ``"in 2d"``) and is used wherever a timestamp is described relative
  to now.
* :func:`format_duration` shows **every** unit from the largest non-zero
  one down to seconds (``"2d 3h 45m 30s"``) and drives the countdown.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from animesh.core.models import UTC_OFFSET, TimezoneOffset

MINUTE: int = 60
HOUR: int = 60 * MINUTE
DAY: int = 24 * HOUR


def _largest_unit(seconds: int) -> str | None:
    """Return ``"{n}{unit}"`` for the largest unit that fits, or ``None``."""
    if seconds >= DAY:
        return f"{seconds // DAY}d"
    if seconds >= HOUR:
        return f"{seconds // HOUR}h"
    if seconds >= MINUTE:
        return f"{seconds // MINUTE}m"
    return None


def format_relative(target: int, now: int) -> str:
    """Describe *target* relative to *now* using one unit.

    Thresholds are inclusive, so exactly 24 hours is ``"1d"`` and exactly
    one hour is ``"1h"``.

    >>> format_relative(0, 3600)
    '1h ago'
    >>> format_relative(90, 0)
    'in 1m'
    """
    diff = target - now
    if diff < 0:
        unit = _largest_unit(-diff)
        return f"{unit} ago" if unit else "just now"
    unit = _largest_unit(diff)
    return f"in {unit}" if unit else "now"


def format_duration(duration: timedelta | int) -> str:
    """Render a non-negative duration as a countdown string.

    >>> format_duration(timedelta(minutes=45, seconds=30))
    '45m 30s'
    """
    total = (
        int(duration.total_seconds())
        if isinstance(duration, timedelta)
        else int(duration)
    )
    if total < 0:
        raise ValueError(f"duration must not be negative, got {total}s")

    days, rem = divmod(total, DAY)
    hours, rem = divmod(rem, HOUR)
    minutes, seconds = divmod(rem, MINUTE)

    if days > 0:
        return f"{days}d {hours}h {minutes}m {seconds}s"
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_offset(seconds: int) -> str:
    """Render a UTC offset in seconds as ``±HH:MM``."""
    return TimezoneOffset(seconds).label


def format_datetime(timestamp: int, offset: TimezoneOffset = UTC_OFFSET) -> str:
    """Render epoch seconds in *offset* as ``YYYY-MM-DD HH:MM:SS (±HH:MM)``."""
    local = datetime.fromtimestamp(timestamp, tz=timezone.utc).astimezone(
        offset.tzinfo,
    )
    return f"{local:%Y-%m-%d %H:%M:%S} ({offset.label})"
