"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class QueryTransport(Protocol):
    """Contract for GraphQL transports.

    Any object that implements :meth:`execute` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def execute(self, query: str, variables: Mapping[str, Any]) -> dict[str, Any]:
        """Send one GraphQL document and return the ``data`` object.

        Implementations must map all backend-specific exceptions to
        :class:`~animesh.exceptions.AnimeshError` subclasses.

        Raises
        ------
        ApiConnectionError
            When the endpoint cannot be reached.
        ApiRequestError
            When the endpoint answers with a non-2xx status.
        ApiResponseError
            When the body is not a JSON object carrying ``data``.
        """
        ...  # pragma: no cover


class Clock(Protocol):
    """Wall clock used by the countdown loop."""

    def now(self) -> float:
        """Current UTC epoch time in seconds."""
        ...  # pragma: no cover

    def sleep(self, seconds: float) -> None:
        """Block for *seconds*."""
        ...  # pragma: no cover


class KeySource(Protocol):
    """Non-blocking single-key input used by the countdown loop."""

    def poll(self) -> str | None:
        """Return one pending key press, or ``None`` when there is none."""
        ...  # pragma: no cover
