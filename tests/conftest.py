"""Shared pytest fixtures and configuration for the animesh test suite.

Guidelines
----------
* No internet access in any test.
* HTTP is mocked at the ``requests.Session`` or transport boundary.
* Core tests must be pure — "now" is always injected.
* Tests must not depend on the host timezone or terminal.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime, timezone

import pytest

from animesh.core.models import TimezoneOffset

NOW: int = 1_700_000_000
"""Tuesday 2023-11-14 22:13:20 UTC (Wednesday 03:43:20 in IST)."""


@pytest.fixture()
def now() -> int:
    return NOW


@pytest.fixture()
def now_dt() -> datetime:
    return datetime.fromtimestamp(NOW, tz=timezone.utc)


@pytest.fixture()
def ist() -> TimezoneOffset:
    return TimezoneOffset(19800, "IST", "alias")


@pytest.fixture(autouse=True)
def _reset_animesh_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so handlers never outlive a test."""
    logger = logging.getLogger("animesh")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
