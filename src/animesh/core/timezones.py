"""Timezone resolution: user strings and defaults to fixed UTC offsets.

Resolution chain for an explicit string (first hit wins):

1. **Alias** — a small fixed table (``UTC``, ``IST``, ``JST``, ``PST``,
   ``EST``), case-insensitive.
2. **Hours** — a bare signed integer (``5``, ``-8``, ``+9``).
3. **Offset literal** — ``±HH:MM`` with an optional ``UTC``/``GMT`` prefix.
4. **Named zone** — any IANA name known to :mod:`zoneinfo`; its offset is
   snapshotted at "now".

When every step fails, a warning is logged and the default is used.
The default chain is: configured override, then the host's local offset,
then UTC.  Resolution never raises.

The resolver takes "now", the configured override and the system offset
probe as constructor arguments so it can be exercised deterministically.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime, timezone
from types import MappingProxyType
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from animesh.config import Settings
from animesh.core.models import MAX_OFFSET_SECONDS, UTC_OFFSET, TimezoneOffset

logger = logging.getLogger(__name__)

ALIASES: Mapping[str, int] = MappingProxyType(
    {
        "UTC": 0,
        "IST": 5 * 3600 + 30 * 60,
        "JST": 9 * 3600,
        "PST": -8 * 3600,
        "EST": -5 * 3600,
    }
)
"""Short codes with a fixed offset in seconds east of UTC."""

_HOURS_RE = re.compile(r"^[+-]?\d{1,2}$")
_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?([+-])(\d{1,2}):(\d{2})$", re.IGNORECASE)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _system_offset(now: datetime) -> int | None:
    """Host local UTC offset at *now*, in seconds."""
    offset = now.astimezone().utcoffset()
    if offset is None:
        return None
    return int(offset.total_seconds())


def _build(seconds: int, name: str, source: str) -> TimezoneOffset | None:
    """Construct an offset, or ``None`` when it falls outside ±14 hours."""
    if abs(seconds) > MAX_OFFSET_SECONDS:
        return None
    return TimezoneOffset(seconds, name, source)


# ---------------------------------------------------------------------------
# Individual matchers
# ---------------------------------------------------------------------------

def _match_alias(text: str, _now: datetime) -> TimezoneOffset | None:
    key = text.upper()
    if key not in ALIASES:
        return None
    return TimezoneOffset(ALIASES[key], key, "alias")


def _match_hours(text: str, _now: datetime) -> TimezoneOffset | None:
    if not _HOURS_RE.match(text):
        return None
    hours = int(text)
    sign = "-" if hours < 0 else "+"
    return _build(hours * 3600, f"{sign}{abs(hours):02d}:00", "hours")


def _match_offset(text: str, _now: datetime) -> TimezoneOffset | None:
    match = _OFFSET_RE.match(text)
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    if int(minutes) >= 60:
        return None
    seconds = int(hours) * 3600 + int(minutes) * 60
    if sign == "-":
        seconds = -seconds
    offset = _build(seconds, "", "offset")
    if offset is None:
        return None
    return replace(offset, name=offset.label)


def _match_zone(text: str, now: datetime) -> TimezoneOffset | None:
    try:
        zone = ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None
    utcoffset = now.astimezone(zone).utcoffset()
    if utcoffset is None:
        return None
    return _build(int(utcoffset.total_seconds()), text, "zone")


_MATCHERS: tuple[Callable[[str, datetime], TimezoneOffset | None], ...] = (
    _match_alias,
    _match_hours,
    _match_offset,
    _match_zone,
)


def match_timezone(text: str, now: datetime | None = None) -> TimezoneOffset | None:
    """Run the explicit-string chain only; ``None`` when nothing matches."""
    candidate = text.strip()
    if not candidate:
        return None
    moment = now if now is not None else _utc_now()
    for matcher in _MATCHERS:
        offset = matcher(candidate, moment)
        if offset is not None:
            return offset
    return None


# ---------------------------------------------------------------------------
# Resolver with defaults
# ---------------------------------------------------------------------------

class TimezoneResolver:
    """Resolve optional user input to a :class:`TimezoneOffset`.

    Parameters
    ----------
    env_timezone:
        Configured default timezone string (normally from
        :attr:`Settings.timezone`), or ``None``.
    now:
        Callable returning the current aware datetime.
    system_offset:
        Callable returning the host offset in seconds at a given instant.
    """

    def __init__(
        self,
        env_timezone: str | None = None,
        *,
        now: Callable[[], datetime] = _utc_now,
        system_offset: Callable[[datetime], int | None] = _system_offset,
    ) -> None:
        self._env_timezone: str | None = env_timezone
        self._now: Callable[[], datetime] = now
        self._system_offset: Callable[[datetime], int | None] = system_offset

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        now: Callable[[], datetime] = _utc_now,
    ) -> TimezoneResolver:
        return cls(settings.timezone, now=now)

    def default(self) -> TimezoneOffset:
        """Configured override, else host offset, else UTC."""
        now = self._now()
        if self._env_timezone:
            matched = match_timezone(self._env_timezone, now)
            if matched is not None:
                logger.debug("Using configured timezone %s", matched.name)
                return replace(matched, source="environment")
            logger.warning(
                "Invalid timezone in environment: %r. Using system timezone.",
                self._env_timezone,
            )

        seconds = self._system_offset(now)
        if seconds is not None:
            system = _build(seconds, "", "system")
            if system is not None:
                logger.debug("Using system timezone %s", system.label)
                return replace(system, name=system.label)
            logger.warning("System UTC offset %ss is out of range.", seconds)

        return UTC_OFFSET

    def resolve(self, text: str | None = None) -> TimezoneOffset:
        """Resolve *text*, falling back to :meth:`default`.  Never raises."""
        if text is None:
            return self.default()
        matched = match_timezone(text, self._now())
        if matched is None:
            logger.warning("Invalid timezone: %r. Using default timezone.", text)
            return self.default()
        logger.debug(
            "Resolved timezone %r via %s to %s",
            text,
            matched.source,
            matched.label,
        )
        return matched


def resolve_timezone(
    text: str | None = None,
    settings: Settings | None = None,
) -> TimezoneOffset:
    """Convenience wrapper: resolve with the real clock and host offset."""
    env_timezone = settings.timezone if settings is not None else None
    return TimezoneResolver(env_timezone).resolve(text)
