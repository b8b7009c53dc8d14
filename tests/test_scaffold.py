"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
* The error boundary maps exceptions to exit codes.
"""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from animesh import __version__
from animesh.cli import exit_codes
from animesh.cli.app import cli, main
from animesh.exceptions import (
    AnimeshError,
    ApiConnectionError,
    ApiError,
    ApiRequestError,
    ApiResponseError,
    EnvironmentError,
    MediaNotFoundError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [ApiError, MediaNotFoundError, EnvironmentError],
    )
    def test_inherits_from_base(self, exc_class: type) -> None:
        assert issubclass(exc_class, AnimeshError)

    @pytest.mark.parametrize(
        "exc_class",
        [ApiConnectionError, ApiResponseError],
    )
    def test_api_errors(self, exc_class: type) -> None:
        assert issubclass(exc_class, ApiError)

    def test_hint(self) -> None:
        exc = AnimeshError("boom", hint="try again")
        assert str(exc) == "boom"
        assert exc.hint == "try again"

    def test_hint_defaults_to_none(self) -> None:
        assert ApiError("boom").hint is None

    def test_request_error_carries_status(self) -> None:
        exc = ApiRequestError("HTTP 500", status_code=500, hint="later")
        assert isinstance(exc, ApiError)
        assert exc.status_code == 500
        assert exc.hint == "later"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI entry points
# ---------------------------------------------------------------------------

class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == exit_codes.SUCCESS
        assert "schedule" in capsys.readouterr().out

    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["bogus"])
        assert exc_info.value.code == 2

    @pytest.mark.parametrize(
        "argv",
        [
            ["schedule", "--interval", "0"],
            ["schedule", "--day", "mon", "--today"],
            ["search", "x", "--limit", "51"],
            ["search", "x", "--type", "novel"],
            ["info", "abc"],
            ["top", "--limit", "0"],
        ],
    )
    def test_rejects_bad_arguments(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 2


class TestErrorBoundary:
    def _run_cli(self) -> int:
        with patch.object(sys, "argv", ["animesh"]):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        return int(exc_info.value.code)

    def test_success(self) -> None:
        with patch("animesh.cli.app.main", return_value=exit_codes.SUCCESS):
            assert self._run_cli() == exit_codes.SUCCESS

    def test_animesh_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = ApiConnectionError("Could not reach AniList", hint="Check your connection.")
        with patch("animesh.cli.app.main", side_effect=error):
            assert self._run_cli() == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "Could not reach AniList" in err
        assert "Check your connection." in err

    def test_keyboard_interrupt(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("animesh.cli.app.main", side_effect=KeyboardInterrupt):
            assert self._run_cli() == exit_codes.KEYBOARD_INTERRUPT
        assert "Aborted by user." in capsys.readouterr().err

    def test_unexpected_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("animesh.cli.app.main", side_effect=RuntimeError("kaboom")):
            assert self._run_cli() == exit_codes.UNEXPECTED_ERROR
        err = capsys.readouterr().err
        assert "Unexpected error." in err
        assert "RuntimeError: kaboom" in err
