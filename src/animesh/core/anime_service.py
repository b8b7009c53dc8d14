"""Core AniList service — builds query variables and parses responses.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~animesh.core.protocols.QueryTransport` injected at
construction time (dependency inversion), keeping the core free of any
HTTP library imports.

Guarantees
----------
* Pure orchestration — no I/O, no ``print()``, no filesystem access.
* Exactly one transport call per public method.
* Only :class:`~animesh.exceptions.AnimeshError` subclasses escape.
* A missing container object (``Page``, ``Media``, the result list) is
  fatal; a missing leaf field is parsed as ``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from animesh.core import queries
from animesh.core.models import (
    AiringEntry,
    CreditEntry,
    FuzzyDate,
    MediaDetails,
    MediaSummary,
    MediaTitle,
    ScheduleWindow,
)
from animesh.core.protocols import QueryTransport
from animesh.exceptions import (
    AnimeshError,
    ApiError,
    ApiRequestError,
    ApiResponseError,
    MediaNotFoundError,
)

logger = logging.getLogger(__name__)

MAX_PER_PAGE: int = 50
"""AniList refuses larger pages; every request is a single page."""

SCHEDULE_PAGE_SIZE: int = 50
SEARCH_PAGE_SIZE: int = 20
TOP_PAGE_SIZE: int = 10


def clamp_per_page(value: int) -> int:
    """Clamp a requested page size into ``1..MAX_PER_PAGE``."""
    return max(1, min(MAX_PER_PAGE, value))


class AnimeService:
    """Stateless service that runs one AniList query per call.

    Parameters
    ----------
    transport:
        Any object satisfying the :class:`QueryTransport` protocol.
    """

    def __init__(self, transport: QueryTransport) -> None:
        self._transport: QueryTransport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def airing_schedule(self, window: ScheduleWindow) -> list[AiringEntry]:
        """Episodes airing inside *window*, earliest first."""
        data = self._execute(
            queries.AIRING_SCHEDULE_QUERY,
            {
                # airingAt_greater/_lesser are strict; the window is inclusive.
                "start": window.start - 1,
                "end": window.end + 1,
                "perPage": SCHEDULE_PAGE_SIZE,
            },
        )
        rows = self._page_list(data, "airingSchedules")
        return [self._parse_airing(row) for row in rows]

    def next_airing(self, now: int) -> AiringEntry | None:
        """The first episode airing after *now*, or ``None``."""
        data = self._execute(queries.NEXT_AIRING_QUERY, {"now": now})
        rows = self._page_list(data, "airingSchedules")
        if not rows:
            return None
        return self._parse_airing(rows[0])

    def search(
        self,
        text: str,
        *,
        media_type: str | None = None,
        year: int | None = None,
        season: str | None = None,
        limit: int = SEARCH_PAGE_SIZE,
    ) -> list[MediaSummary]:
        """Media matching *text*, optionally filtered by type and season."""
        data = self._execute(
            queries.SEARCH_QUERY,
            {
                "search": text,
                "type": media_type,
                "year": year,
                "season": season,
                "perPage": clamp_per_page(limit),
            },
        )
        rows = self._page_list(data, "media")
        return [self._parse_summary(row) for row in rows]

    def top(
        self,
        *,
        media_type: str | None = None,
        genre: str | None = None,
        limit: int = TOP_PAGE_SIZE,
    ) -> list[MediaSummary]:
        """Highest-scored media, optionally restricted to one genre."""
        data = self._execute(
            queries.TOP_QUERY,
            {
                "type": media_type,
                "genre": genre,
                "perPage": clamp_per_page(limit),
            },
        )
        rows = self._page_list(data, "media")
        return [self._parse_summary(row) for row in rows]

    def info(self, media_id: int, media_type: str = "ANIME") -> MediaDetails:
        """Full details for one media entry.

        Raises
        ------
        MediaNotFoundError
            If AniList has no media with that id and type.
        """
        not_found = MediaNotFoundError(
            f"No {media_type.lower()} found with id {media_id}.",
            hint="Use the search command to look up valid ids.",
        )
        try:
            data = self._execute(
                queries.INFO_QUERY,
                {"id": media_id, "type": media_type},
            )
        except ApiRequestError as exc:
            # AniList answers unknown ids with HTTP 404 and a null Media.
            if exc.status_code == 404:
                raise not_found from exc
            raise
        media = data.get("Media")
        if media is None:
            raise not_found
        if not isinstance(media, dict):
            raise ApiResponseError("Response field 'Media' is not an object.")
        return self._parse_details(media)

    # ------------------------------------------------------------------
    # Transport delegation (safe boundary)
    # ------------------------------------------------------------------

    def _execute(self, query: str, variables: Mapping[str, Any]) -> dict[str, Any]:
        """Call the transport and ensure only our exceptions escape."""
        logger.debug("GraphQL variables: %s", dict(variables))
        try:
            data = self._transport.execute(query, variables)
        except AnimeshError:
            # Already one of ours — let it propagate unchanged.
            raise
        except Exception as exc:
            raise ApiError(f"Unexpected transport error: {exc}") from exc
        if not isinstance(data, dict):
            raise ApiResponseError("Response 'data' is not an object.")
        return data

    @staticmethod
    def _page_list(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
        """Pull ``data.Page.<key>`` or raise :class:`ApiResponseError`."""
        page = data.get("Page")
        if not isinstance(page, dict):
            raise ApiResponseError("Response is missing the 'Page' object.")
        rows = page.get(key)
        if not isinstance(rows, list):
            raise ApiResponseError(f"Response is missing the 'Page.{key}' list.")
        # Each element is expected to be a dict; skip malformed entries.
        return [row for row in rows if isinstance(row, dict)]

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_title(raw: object) -> MediaTitle:
        if not isinstance(raw, dict):
            return MediaTitle()
        return MediaTitle(
            english=_opt_str(raw.get("english")),
            romaji=_opt_str(raw.get("romaji")),
            native=_opt_str(raw.get("native")),
        )

    @staticmethod
    def _parse_date(raw: object) -> FuzzyDate:
        if not isinstance(raw, dict):
            return FuzzyDate()
        return FuzzyDate(
            year=_opt_int(raw.get("year")),
            month=_opt_int(raw.get("month")),
            day=_opt_int(raw.get("day")),
        )

    @classmethod
    def _parse_airing(cls, raw: dict[str, Any]) -> AiringEntry:
        media = raw.get("media")
        title_raw = media.get("title") if isinstance(media, dict) else None
        return AiringEntry(
            title=cls._parse_title(title_raw),
            episode=_opt_int(raw.get("episode")),
            airing_at=_opt_int(raw.get("airingAt")),
        )

    @classmethod
    def _parse_summary(cls, raw: dict[str, Any]) -> MediaSummary:
        genres_raw = raw.get("genres")
        genres = (
            tuple(g for g in genres_raw if isinstance(g, str))
            if isinstance(genres_raw, list)
            else ()
        )
        score = raw.get("averageScore")
        return MediaSummary(
            id=_opt_int(raw.get("id")),
            title=cls._parse_title(raw.get("title")),
            type=_opt_str(raw.get("type")),
            format=_opt_str(raw.get("format")),
            status=_opt_str(raw.get("status")),
            episodes=_opt_int(raw.get("episodes")),
            chapters=_opt_int(raw.get("chapters")),
            volumes=_opt_int(raw.get("volumes")),
            average_score=(
                float(score)
                if isinstance(score, (int, float)) and not isinstance(score, bool)
                else None
            ),
            popularity=_opt_int(raw.get("popularity")),
            genres=genres,
            start_date=cls._parse_date(raw.get("startDate")),
        )

    @staticmethod
    def _parse_credits(raw: object) -> tuple[CreditEntry, ...]:
        """Parse a ``{edges: [{role, node: {name: {full}}}]}`` connection."""
        if not isinstance(raw, dict):
            return ()
        edges = raw.get("edges")
        if not isinstance(edges, list):
            return ()
        credits: list[CreditEntry] = []
        for edge in edges:
            if not isinstance(edge, dict):
                continue
            node = edge.get("node")
            name = node.get("name") if isinstance(node, dict) else None
            full = name.get("full") if isinstance(name, dict) else None
            credits.append(
                CreditEntry(role=_opt_str(edge.get("role")), name=_opt_str(full)),
            )
        return tuple(credits)

    @classmethod
    def _parse_details(cls, raw: dict[str, Any]) -> MediaDetails:
        next_raw = raw.get("nextAiringEpisode")
        summary = cls._parse_summary(raw)
        next_airing = (
            AiringEntry(
                title=summary.title,
                episode=_opt_int(next_raw.get("episode")),
                airing_at=_opt_int(next_raw.get("airingAt")),
            )
            if isinstance(next_raw, dict)
            else None
        )
        return MediaDetails(
            summary=summary,
            description=_opt_str(raw.get("description")),
            duration=_opt_int(raw.get("duration")),
            end_date=cls._parse_date(raw.get("endDate")),
            next_airing=next_airing,
            characters=cls._parse_credits(raw.get("characters")),
            staff=cls._parse_credits(raw.get("staff")),
        )


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _opt_int(value: object) -> int | None:
    """Return *value* as ``int`` when it is a JSON integer, else ``None``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _opt_str(value: object) -> str | None:
    """Return *value* when it is a non-empty string, else ``None``."""
    if isinstance(value, str) and value:
        return value
    return None
