"""requests backed implementation of :class:`~animesh.core.protocols.QueryTransport`.

This module is the **only** place in the codebase that imports
``requests``.  All requests exceptions are caught here and re-raised as
typed :class:`~animesh.exceptions.AnimeshError` subclasses — nothing raw
escapes the infrastructure boundary.

One :meth:`AniListClient.execute` call is one HTTP POST.  There is no
retry, no pagination and no caching.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from animesh.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, Settings
from animesh.exceptions import (
    ApiConnectionError,
    ApiRequestError,
    ApiResponseError,
    EnvironmentError,
)
from animesh.version import __version__

logger = logging.getLogger(__name__)

USER_AGENT: str = f"animesh/{__version__} (+https://anilist.co)"


def _import_requests() -> Any:
    """Import requests lazily so ``--help`` works without it."""
    try:
        import requests
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "requests is not installed. Install with: pip install requests",
        ) from exc
    return requests


class AniListClient:
    """Concrete :class:`QueryTransport` for the AniList GraphQL endpoint.

    Usage::

        with AniListClient() as client:
            data = client.execute(query, {"id": 1})

    Parameters
    ----------
    api_url:
        Endpoint receiving the POST.
    timeout:
        Seconds to wait for connect and read.
    session:
        Optional pre-built ``requests.Session`` (tests inject a mock).
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: Any | None = None,
    ) -> None:
        self._api_url: str = api_url
        self._timeout: float = timeout
        self._session: Any | None = session

    @classmethod
    def from_settings(cls, settings: Settings) -> AniListClient:
        return cls(settings.api_url, timeout=settings.timeout)

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> AniListClient:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying session (idempotent)."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _get_session(self) -> Any:
        if self._session is None:
            requests = _import_requests()
            session = requests.Session()
            session.headers.update(
                {
                    "User-Agent": USER_AGENT,
                    "Accept": "application/json",
                },
            )
            self._session = session
        return self._session

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def execute(self, query: str, variables: Mapping[str, Any]) -> dict[str, Any]:
        """POST *query* with *variables* and return the ``data`` object.

        Raises
        ------
        ApiConnectionError
            On connection failures and timeouts.
        ApiRequestError
            When the status code is not 2xx.
        ApiResponseError
            When the body is not JSON or carries no ``data`` object.
        """
        requests = _import_requests()
        session = self._get_session()
        body = {"query": query, "variables": dict(variables)}

        logger.debug("POST %s", self._api_url)
        try:
            response = session.post(self._api_url, json=body, timeout=self._timeout)
        except requests.Timeout as exc:
            raise ApiConnectionError(
                f"Request to {self._api_url} timed out after {self._timeout:g}s.",
                hint="Check your connection or raise ANIMESH_TIMEOUT.",
            ) from exc
        except requests.RequestException as exc:
            raise ApiConnectionError(
                f"Could not reach {self._api_url}: {exc}",
                hint="Check your internet connection and try again.",
            ) from exc

        status: int = response.status_code
        logger.debug("HTTP %s from %s", status, self._api_url)
        payload = self._decode(response)

        if not 200 <= status < 300:
            messages = _error_messages(payload)
            detail = f": {messages}" if messages else ""
            raise ApiRequestError(
                f"AniList returned HTTP {status}{detail}",
                status_code=status,
                hint=_status_hint(status),
            )

        if not isinstance(payload, dict):
            raise ApiResponseError("AniList returned a non-JSON response.")

        data = payload.get("data")
        if not isinstance(data, dict):
            messages = _error_messages(payload)
            raise ApiResponseError(
                f"AniList response has no data{': ' + messages if messages else '.'}",
            )

        messages = _error_messages(payload)
        if messages:
            logger.warning("AniList reported errors: %s", messages)
        return data

    # ------------------------------------------------------------------
    # Body decoding
    # ------------------------------------------------------------------

    @staticmethod
    def _decode(response: Any) -> object:
        """Return the parsed JSON body, or ``None`` when it is not JSON."""
        try:
            return response.json()
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _error_messages(payload: object) -> str:
    """Join the ``errors[].message`` strings of a GraphQL body."""
    if not isinstance(payload, dict):
        return ""
    errors = payload.get("errors")
    if not isinstance(errors, list):
        return ""
    messages = [
        str(err["message"])
        for err in errors
        if isinstance(err, dict) and err.get("message")
    ]
    return "; ".join(messages)


def _status_hint(status: int) -> str | None:
    if status == 429:
        return "AniList rate limit reached. Wait a minute and try again."
    if status >= 500:
        return "AniList may be down. Try again later."
    return None
