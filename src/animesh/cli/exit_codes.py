"""Process exit codes returned by :func:`animesh.cli.app.main`.

Every exit path in :mod:`animesh.cli.app` goes through one of these.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command finished; empty results and recovered input still count."""

GENERAL_ERROR: int = 1
"""An :class:`~animesh.exceptions.AnimeshError` reached the boundary
(network failure, unknown media id, missing dependency)."""

UNEXPECTED_ERROR: int = 2
"""Any other exception; reported as a bug."""

KEYBOARD_INTERRUPT: int = 130
"""Ctrl+C, 128 + SIGINT."""
