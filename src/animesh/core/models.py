"""Domain models for animesh.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and a few derived properties.  They carry
zero I/O and zero dependencies on external packages.

Timestamps are integer UTC epoch seconds throughout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta, timezone

MAX_OFFSET_SECONDS: int = 14 * 3600
"""Largest absolute UTC offset accepted anywhere in the application."""


# ---------------------------------------------------------------------------
# Timezone offset
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TimezoneOffset:
    """A fixed UTC offset resolved from user input or the environment.

    Offsets derived from named zones are snapshots: they are correct near
    the moment of resolution and do not follow later DST transitions.
    """

    seconds: int
    """Signed offset east of UTC, within ±14 hours."""

    name: str = ""
    """Display name (``IST``, ``Asia/Tokyo``, ``+05:30`` ...)."""

    source: str = "utc"
    """How the offset was obtained (``alias``, ``zone``, ``system`` ...)."""

    def __post_init__(self) -> None:
        if abs(self.seconds) > MAX_OFFSET_SECONDS:
            raise ValueError(
                f"UTC offset {self.seconds}s is outside ±14 hours",
            )

    @property
    def tzinfo(self) -> timezone:
        """Equivalent :class:`datetime.timezone`."""
        return timezone(timedelta(seconds=self.seconds))

    @property
    def label(self) -> str:
        """Signed ``±HH:MM`` rendering of the offset."""
        sign = "-" if self.seconds < 0 else "+"
        hours, rem = divmod(abs(self.seconds), 3600)
        return f"{sign}{hours:02d}:{rem // 60:02d}"


UTC_OFFSET = TimezoneOffset(0, "UTC", "utc")


# ---------------------------------------------------------------------------
# Query window
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ScheduleWindow:
    """Inclusive ``[start, end]`` range of UTC epoch seconds."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"window start {self.start} is after end {self.end}",
            )

    @property
    def length(self) -> int:
        return self.end - self.start


# ---------------------------------------------------------------------------
# Response-derived records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MediaTitle:
    """The title variants AniList reports for a media entry."""

    english: str | None = None
    romaji: str | None = None
    native: str | None = None

    @property
    def preferred(self) -> str | None:
        """Localized title first, romanized second."""
        return self.english or self.romaji or None


@dataclass(frozen=True, slots=True)
class FuzzyDate:
    """A partial calendar date; any part may be missing."""

    year: int | None = None
    month: int | None = None
    day: int | None = None

    @property
    def is_unknown(self) -> bool:
        return not (self.year or self.month or self.day)


@dataclass(frozen=True, slots=True)
class AiringEntry:
    """One scheduled episode broadcast."""

    title: MediaTitle
    episode: int | None
    airing_at: int | None
    """UTC epoch seconds of the broadcast."""


@dataclass(frozen=True, slots=True)
class CreditEntry:
    """A character or staff credit: role plus full name."""

    role: str | None
    name: str | None


@dataclass(frozen=True, slots=True)
class MediaSummary:
    """A single row of search or top-N results."""

    id: int | None
    title: MediaTitle
    type: str | None = None
    format: str | None = None
    status: str | None = None
    episodes: int | None = None
    chapters: int | None = None
    volumes: int | None = None
    average_score: float | None = None
    popularity: int | None = None
    genres: tuple[str, ...] = ()
    start_date: FuzzyDate = field(default_factory=FuzzyDate)

    @property
    def units(self) -> int | None:
        """Episode count for anime, chapter count for everything else."""
        if self.type == "ANIME":
            return self.episodes
        return self.chapters


@dataclass(frozen=True, slots=True)
class MediaDetails:
    """Everything the ``info`` command displays for one media entry."""

    summary: MediaSummary
    description: str | None = None
    duration: int | None = None
    """Minutes per episode."""

    end_date: FuzzyDate = field(default_factory=FuzzyDate)
    next_airing: AiringEntry | None = None
    characters: tuple[CreditEntry, ...] = ()
    staff: tuple[CreditEntry, ...] = ()
