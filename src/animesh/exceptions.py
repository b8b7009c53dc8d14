"""Custom exception hierarchy for animesh.

All exceptions that cross layer boundaries must inherit from
:class:`AnimeshError`.  Raw third-party exceptions (e.g. from requests)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Recoverable input problems (an unknown timezone or day name) are not
exceptions at all: they are logged and replaced by a default.

Hierarchy
---------
AnimeshError
├── ApiError
│   ├── ApiConnectionError
│   ├── ApiRequestError
│   └── ApiResponseError
├── MediaNotFoundError
└── EnvironmentError
"""

from __future__ import annotations


class AnimeshError(Exception):
    """Base exception for all animesh errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Remote API ------------------------------------------------------------

class ApiError(AnimeshError):
    """Raised when the round trip to the GraphQL endpoint fails."""


class ApiConnectionError(ApiError):
    """Raised when the endpoint cannot be reached or the request times out."""


class ApiRequestError(ApiError):
    """Raised when the endpoint answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int = status_code


class ApiResponseError(ApiError):
    """Raised when the response body is not the JSON shape we expect."""


# --- Lookups ---------------------------------------------------------------

class MediaNotFoundError(AnimeshError):
    """Raised when an ``info`` lookup returns no media for the given id."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(AnimeshError):
    """Raised when a required runtime dependency is not available."""
