"""CLI application entry point and command routing for animesh.

This module is the **sole error boundary** for the entire application.
It catches :class:`~animesh.exceptions.AnimeshError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* Each command resolves its display timezone, performs at most one
  request, and only then renders, so output is all-or-nothing.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from animesh.cli import exit_codes
from animesh.cli.console import configure_logging, console, stdout_console
from animesh.config import Settings
from animesh.core.anime_service import MAX_PER_PAGE, SEARCH_PAGE_SIZE, TOP_PAGE_SIZE
from animesh.exceptions import AnimeshError
from animesh.version import __version__

logger = logging.getLogger(__name__)

MEDIA_TYPES: tuple[str, ...] = ("ANIME", "MANGA")
SEASONS: tuple[str, ...] = ("WINTER", "SPRING", "SUMMER", "FALL")


def _now() -> int:
    """Current UTC epoch seconds (patched in tests)."""
    return int(time.time())


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _page_size(raw: str) -> int:
    value = _positive_int(raw)
    if value > MAX_PER_PAGE:
        raise argparse.ArgumentTypeError(f"must be at most {MAX_PER_PAGE}, got {value}")
    return value


def _add_timezone_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-t",
        "--timezone",
        default=None,
        help=(
            "Display timezone: UTC, IST, JST, PST, EST, hours (5, -8), "
            "an offset (+05:30) or a zone name (Asia/Tokyo)."
        ),
    )


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands:
    * ``animesh schedule``   — airing schedule by day or interval
    * ``animesh search``     — search anime/manga
    * ``animesh info``       — details for one media id
    * ``animesh top``        — top-rated anime/manga
    * ``animesh countdown``  — live countdown to the next episode
    * ``animesh doctor``     — environment diagnostics
    """
    parser = argparse.ArgumentParser(
        prog="animesh",
        description="Track anime schedules and discover new shows.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details to stderr.",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    schedule = sub.add_parser("schedule", help="Show the anime airing schedule.")
    day_group = schedule.add_mutually_exclusive_group()
    day_group.add_argument(
        "-d",
        "--day",
        default=None,
        help="Day of the week (mon..sun, monday..sunday, today, tomorrow).",
    )
    day_group.add_argument(
        "--today",
        action="store_true",
        help="Show today's schedule.",
    )
    schedule.add_argument(
        "-i",
        "--interval",
        type=_positive_int,
        default=1,
        help="Number of days to cover when no day is given (default: 1).",
    )
    schedule.add_argument(
        "-p",
        "--past",
        action="store_true",
        help="Show episodes from the past interval instead of upcoming ones.",
    )
    _add_timezone_option(schedule)

    search = sub.add_parser("search", help="Search for anime or manga.")
    search.add_argument("query", help="Text to search for.")
    search.add_argument("--type", type=str.upper, choices=MEDIA_TYPES, default=None)
    search.add_argument("--year", type=int, default=None, help="Season year.")
    search.add_argument("--season", type=str.upper, choices=SEASONS, default=None)
    search.add_argument(
        "--limit",
        type=_page_size,
        default=SEARCH_PAGE_SIZE,
        help=f"Maximum results (1-{MAX_PER_PAGE}, default: {SEARCH_PAGE_SIZE}).",
    )

    info = sub.add_parser("info", help="Show details for one anime or manga.")
    info.add_argument("id", type=int, help="AniList media id.")
    info.add_argument("--type", type=str.upper, choices=MEDIA_TYPES, default="ANIME")
    info.add_argument("--characters", action="store_true", help="List main characters.")
    info.add_argument("--staff", action="store_true", help="List key staff.")
    _add_timezone_option(info)

    top = sub.add_parser("top", help="Show top-rated anime or manga.")
    top.add_argument("--type", type=str.upper, choices=MEDIA_TYPES, default=None)
    top.add_argument("--genre", default=None, help="Restrict to one genre.")
    top.add_argument(
        "--limit",
        type=_page_size,
        default=TOP_PAGE_SIZE,
        help=f"Number of entries (1-{MAX_PER_PAGE}, default: {TOP_PAGE_SIZE}).",
    )

    countdown = sub.add_parser("countdown", help="Count down to the next episode.")
    _add_timezone_option(countdown)

    sub.add_parser("doctor", help="Run environment diagnostics.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_schedule(args: argparse.Namespace, settings: Settings) -> int:
    """Fetch and print the airing schedule for a day or an interval."""
    from animesh.cli.render import print_schedule
    from animesh.core.anime_service import AnimeService
    from animesh.core.timezones import TimezoneResolver
    from animesh.core.windows import (
        day_window,
        interval_window,
        parse_day_of_week,
        weekday_at,
    )
    from animesh.infra.anilist_client import AniListClient

    offset = TimezoneResolver.from_settings(settings).resolve(args.timezone)
    now = _now()

    if args.today or args.day is not None:
        day = weekday_at(now, offset)
        if args.day is not None:
            parsed = parse_day_of_week(args.day, now, offset)
            if parsed is None:
                logger.warning("Invalid day: %r. Showing today's schedule.", args.day)
            else:
                day = parsed
        window = day_window(day, now, offset)
    else:
        window = interval_window(now, args.interval, args.past)
    logger.debug("Schedule window %s..%s", window.start, window.end)

    with AniListClient.from_settings(settings) as client:
        entries = AnimeService(client).airing_schedule(window)

    print_schedule(entries, window, offset, now)
    return exit_codes.SUCCESS


def _handle_search(args: argparse.Namespace, settings: Settings) -> int:
    from animesh.cli.render import print_media
    from animesh.core.anime_service import AnimeService
    from animesh.infra.anilist_client import AniListClient

    with AniListClient.from_settings(settings) as client:
        results = AnimeService(client).search(
            args.query,
            media_type=args.type,
            year=args.year,
            season=args.season,
            limit=args.limit,
        )

    print_media(results)
    return exit_codes.SUCCESS


def _handle_info(args: argparse.Namespace, settings: Settings) -> int:
    from animesh.cli.render import print_info
    from animesh.core.anime_service import AnimeService
    from animesh.core.timezones import TimezoneResolver
    from animesh.infra.anilist_client import AniListClient

    offset = TimezoneResolver.from_settings(settings).resolve(args.timezone)

    with AniListClient.from_settings(settings) as client:
        details = AnimeService(client).info(args.id, args.type)

    print_info(
        details,
        offset,
        _now(),
        show_characters=args.characters,
        show_staff=args.staff,
    )
    return exit_codes.SUCCESS


def _handle_top(args: argparse.Namespace, settings: Settings) -> int:
    from animesh.cli.render import print_media
    from animesh.core.anime_service import AnimeService
    from animesh.infra.anilist_client import AniListClient

    with AniListClient.from_settings(settings) as client:
        results = AnimeService(client).top(
            media_type=args.type,
            genre=args.genre,
            limit=args.limit,
        )

    print_media(results, ranked=True)
    return exit_codes.SUCCESS


def _handle_countdown(args: argparse.Namespace, settings: Settings) -> int:
    """Find the next airing episode and run the live countdown."""
    from animesh.cli.countdown_view import run_countdown_display
    from animesh.core.anime_service import AnimeService
    from animesh.core.timezones import TimezoneResolver
    from animesh.infra.anilist_client import AniListClient
    from animesh.infra.terminal import SystemClock, TerminalKeySource

    offset = TimezoneResolver.from_settings(settings).resolve(args.timezone)

    with AniListClient.from_settings(settings) as client:
        entry = AnimeService(client).next_airing(_now())

    if entry is None or entry.airing_at is None:
        stdout_console.print("[yellow]No upcoming episodes found.[/yellow]")
        return exit_codes.SUCCESS

    with TerminalKeySource() as keys:
        run_countdown_display(entry, offset, clock=SystemClock(), keys=keys)
    return exit_codes.SUCCESS


def _handle_doctor(_args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from animesh.cli.doctor import run_doctor

    return run_doctor(settings)


_HANDLERS = {
    "schedule": _handle_schedule,
    "search": _handle_search,
    "info": _handle_info,
    "top": _handle_top,
    "countdown": _handle_countdown,
    "doctor": _handle_doctor,
}


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Run the animesh CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    settings:
        Explicit configuration.  When ``None``, it is read from the
        environment once, here.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)
    if settings is None:
        settings = Settings.from_env()

    return _HANDLERS[args.command](args, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except AnimeshError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
