"""Runtime settings read from the process environment.

The environment is consulted exactly once, in :meth:`Settings.from_env`.
Everything downstream (the timezone resolver, the HTTP client) receives
plain values from the resulting :class:`Settings` object, which keeps
those components testable without touching ``os.environ``.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_API_URL: str = "https://graphql.anilist.co"
DEFAULT_TIMEOUT: float = 10.0

TIMEZONE_ENV_VARS: tuple[str, ...] = ("ANIMESH_TIMEZONE", "TZ")
"""Checked in order; the first non-empty value wins."""

API_URL_ENV_VAR: str = "ANIMESH_API_URL"
TIMEOUT_ENV_VAR: str = "ANIMESH_TIMEOUT"


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable runtime configuration."""

    timezone: str | None = None
    """Default timezone string, used when no ``--timezone`` flag is given."""

    api_url: str = DEFAULT_API_URL
    """GraphQL endpoint that receives every query."""

    timeout: float = DEFAULT_TIMEOUT
    """Seconds to wait for the endpoint before giving up."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ

        timezone: str | None = None
        for name in TIMEZONE_ENV_VARS:
            value = env.get(name, "").strip()
            if name == "TZ":
                value = _zone_from_tz(value)
            if value:
                timezone = value
                break

        api_url = env.get(API_URL_ENV_VAR, "").strip() or DEFAULT_API_URL

        return cls(
            timezone=timezone,
            api_url=api_url,
            timeout=_parse_timeout(env.get(TIMEOUT_ENV_VAR)),
        )


def _parse_timeout(raw: str | None) -> float:
    """Parse a positive float timeout, falling back to the default."""
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(
            "Invalid %s value %r. Using %.0f seconds.",
            TIMEOUT_ENV_VAR,
            raw,
            DEFAULT_TIMEOUT,
        )
        return DEFAULT_TIMEOUT
    if not math.isfinite(value) or value <= 0:
        logger.warning(
            "%s must be positive, got %r. Using %.0f seconds.",
            TIMEOUT_ENV_VAR,
            raw,
            DEFAULT_TIMEOUT,
        )
        return DEFAULT_TIMEOUT
    return value


def _zone_from_tz(raw: str) -> str:
    """Reduce a POSIX ``TZ`` value to something the resolver can use.

    ``:Asia/Tokyo`` names a zone file and becomes ``Asia/Tokyo``.
    ``:/etc/localtime`` and a bare ``:`` point at the host zone, which the
    system offset already covers, so they yield ``""``.
    """
    if not raw.startswith(":"):
        return raw
    zone = raw[1:].strip()
    if not zone or zone.startswith("/"):
        logger.debug("Ignoring TZ=%r; using the system offset.", raw)
        return ""
    return zone
