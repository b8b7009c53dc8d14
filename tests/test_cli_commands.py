"""Tests for command handlers in cli/app.py.

The AniList client and service are patched where the handlers import
them, and "now" is pinned through ``animesh.cli.app._now``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from unittest.mock import MagicMock, patch

import pytest

from animesh.cli import exit_codes
from animesh.cli.app import main
from animesh.config import Settings
from animesh.core.models import (
    AiringEntry,
    MediaDetails,
    MediaSummary,
    MediaTitle,
    ScheduleWindow,
    TimezoneOffset,
)
from animesh.core.windows import day_window
from animesh.exceptions import ApiConnectionError, MediaNotFoundError

NOW = 1_700_000_000
UTC = TimezoneOffset(0, "UTC", "alias")
IST = TimezoneOffset(19800, "IST", "alias")


@dataclass
class Mocks:
    client_cls: MagicMock
    service: MagicMock


@pytest.fixture()
def mocks(monkeypatch: pytest.MonkeyPatch) -> Iterator[Mocks]:
    monkeypatch.setenv("COLUMNS", "200")
    with patch("animesh.cli.app._now", return_value=NOW), \
            patch("animesh.infra.anilist_client.AniListClient") as client_cls, \
            patch("animesh.core.anime_service.AnimeService") as service_cls:
        service = service_cls.return_value
        service.airing_schedule.return_value = []
        service.search.return_value = []
        service.top.return_value = []
        service.next_airing.return_value = None
        yield Mocks(client_cls=client_cls, service=service)


def _window(mocks: Mocks) -> ScheduleWindow:
    return mocks.service.airing_schedule.call_args.args[0]


# ---------------------------------------------------------------------------
# schedule
# ---------------------------------------------------------------------------

class TestSchedule:
    def test_default_is_next_day(self, mocks: Mocks) -> None:
        code = main(["schedule", "-t", "UTC"], settings=Settings())
        assert code == exit_codes.SUCCESS
        assert _window(mocks) == ScheduleWindow(NOW, NOW + 86400)

    def test_past_interval(self, mocks: Mocks) -> None:
        main(["schedule", "--past", "--interval", "3", "-t", "UTC"], settings=Settings())
        assert _window(mocks) == ScheduleWindow(NOW - 3 * 86400, NOW)

    def test_named_day(self, mocks: Mocks) -> None:
        main(["schedule", "--day", "mon", "-t", "UTC"], settings=Settings())
        assert _window(mocks) == day_window(0, NOW, UTC)

    def test_today_uses_display_calendar(self, mocks: Mocks) -> None:
        main(["schedule", "--today", "-t", "IST"], settings=Settings())
        assert _window(mocks) == day_window(2, NOW, IST)

    def test_tomorrow(self, mocks: Mocks) -> None:
        main(["schedule", "--day", "tomorrow", "-t", "IST"], settings=Settings())
        assert _window(mocks) == day_window(3, NOW, IST)

    def test_invalid_day_shows_today(
        self, mocks: Mocks, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="animesh"):
            code = main(["schedule", "--day", "funday", "-t", "UTC"], settings=Settings())

        assert code == exit_codes.SUCCESS
        assert _window(mocks) == day_window(1, NOW, UTC)
        assert "Invalid day: 'funday'" in caplog.text

    def test_invalid_timezone_uses_configured_default(
        self, mocks: Mocks, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="animesh"):
            code = main(
                ["schedule", "--today", "-t", "Nowhere/Land"],
                settings=Settings(timezone="IST"),
            )

        assert code == exit_codes.SUCCESS
        assert _window(mocks) == day_window(2, NOW, IST)
        assert "Invalid timezone: 'Nowhere/Land'" in caplog.text

    def test_prints_results(
        self, mocks: Mocks, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mocks.service.airing_schedule.return_value = [
            AiringEntry(MediaTitle(english="Frieren"), 5, NOW + 3600),
        ]
        main(["schedule", "-t", "UTC"], settings=Settings())

        out = capsys.readouterr().out
        assert "Frieren" in out
        assert "in 1h" in out

    def test_client_built_from_settings(self, mocks: Mocks) -> None:
        settings = Settings(api_url="http://local.test", timeout=2.0)
        main(["schedule", "-t", "UTC"], settings=settings)
        mocks.client_cls.from_settings.assert_called_once_with(settings)

    def test_api_errors_propagate_to_boundary(self, mocks: Mocks) -> None:
        mocks.service.airing_schedule.side_effect = ApiConnectionError("offline")
        with pytest.raises(ApiConnectionError):
            main(["schedule"], settings=Settings())


# ---------------------------------------------------------------------------
# search / top
# ---------------------------------------------------------------------------

class TestSearch:
    def test_filters_are_forwarded(self, mocks: Mocks) -> None:
        main(
            ["search", "frieren", "--type", "anime", "--year", "2023",
             "--season", "fall", "--limit", "5"],
            settings=Settings(),
        )
        mocks.service.search.assert_called_once_with(
            "frieren",
            media_type="ANIME",
            year=2023,
            season="FALL",
            limit=5,
        )

    def test_no_results(self, mocks: Mocks, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["search", "zzz"], settings=Settings()) == exit_codes.SUCCESS
        assert "No results found." in capsys.readouterr().out


class TestTop:
    def test_defaults(self, mocks: Mocks) -> None:
        main(["top", "--genre", "Action"], settings=Settings())
        mocks.service.top.assert_called_once_with(media_type=None, genre="Action", limit=10)

    def test_ranked_output(self, mocks: Mocks, capsys: pytest.CaptureFixture[str]) -> None:
        mocks.service.top.return_value = [
            MediaSummary(id=1, title=MediaTitle(english="Frieren"), popularity=10),
        ]
        main(["top", "--type", "manga", "--limit", "1"], settings=Settings())

        out = capsys.readouterr().out
        assert "Popularity" in out
        assert "Frieren" in out


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------

class TestInfo:
    def test_prints_details(self, mocks: Mocks, capsys: pytest.CaptureFixture[str]) -> None:
        mocks.service.info.return_value = MediaDetails(
            summary=MediaSummary(id=30013, title=MediaTitle(romaji="One Punch-Man"), type="MANGA"),
        )
        code = main(["info", "30013", "--type", "manga"], settings=Settings())

        assert code == exit_codes.SUCCESS
        mocks.service.info.assert_called_once_with(30013, "MANGA")
        assert "One Punch-Man" in capsys.readouterr().out

    def test_not_found_propagates(self, mocks: Mocks) -> None:
        mocks.service.info.side_effect = MediaNotFoundError("No anime found with id 1.")
        with pytest.raises(MediaNotFoundError):
            main(["info", "1"], settings=Settings())


# ---------------------------------------------------------------------------
# countdown
# ---------------------------------------------------------------------------

class TestCountdown:
    def test_nothing_upcoming(self, mocks: Mocks, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["countdown"], settings=Settings()) == exit_codes.SUCCESS
        mocks.service.next_airing.assert_called_once_with(NOW)
        captured = capsys.readouterr()
        assert "No upcoming episodes found." in captured.out
        assert "No upcoming" not in captured.err

    def test_runs_display(self, mocks: Mocks) -> None:
        entry = AiringEntry(MediaTitle(english="Frieren"), 5, NOW + 60)
        mocks.service.next_airing.return_value = entry

        with patch("animesh.cli.countdown_view.run_countdown_display") as display, \
                patch("animesh.infra.terminal.TerminalKeySource") as keys_cls:
            code = main(["countdown", "-t", "IST"], settings=Settings())

        assert code == exit_codes.SUCCESS
        display.assert_called_once()
        args, kwargs = display.call_args
        assert args == (entry, IST)
        assert kwargs["keys"] is keys_cls.return_value.__enter__.return_value
        keys_cls.return_value.__exit__.assert_called_once()
