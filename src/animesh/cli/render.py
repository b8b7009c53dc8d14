"""Rendering of command results as Rich tables and text.

This module is responsible for:

* Mapping nullable model fields to display defaults.
* Building Rich tables for schedules, search and top-N results.
* Printing the multi-section ``info`` view.

All display-related logic lives here — no business logic, no network.
"""

from __future__ import annotations

import html
import re
from collections.abc import Sequence
from typing import Any

from animesh.cli.console import stdout_console
from animesh.core.models import (
    AiringEntry,
    CreditEntry,
    FuzzyDate,
    MediaDetails,
    MediaSummary,
    MediaTitle,
    ScheduleWindow,
    TimezoneOffset,
)
from animesh.core.timefmt import format_datetime, format_relative
from animesh.exceptions import EnvironmentError

UNKNOWN_TITLE: str = "Unknown Title"
UNKNOWN: str = "Unknown"
MISSING_NUMBER: str = "?"
MAX_CREDITS: int = 5


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for result rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


def _escape(text: str) -> str:
    """Escape Rich markup in API-supplied text (titles may contain brackets)."""
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        return text
    return escape(text)


# ---------------------------------------------------------------------------
# Display defaults (pure transforms — no I/O themselves)
# ---------------------------------------------------------------------------

def display_title(title: MediaTitle) -> str:
    """English title, else romaji, else ``"Unknown Title"``."""
    return title.preferred or UNKNOWN_TITLE


def display_number(value: int | None) -> str:
    """Render a count or ``"?"`` when unavailable."""
    if value is None:
        return MISSING_NUMBER
    return str(value)


def display_text(value: str | None) -> str:
    """Render an enum-like string or ``"Unknown"``."""
    return value or UNKNOWN


def display_score(score: float | None) -> str:
    """Render an average score with one decimal, or ``"?"``."""
    if score is None:
        return MISSING_NUMBER
    return f"{score:.1f}"


def display_date(date: FuzzyDate) -> str:
    """``YYYY-MM-DD`` with missing parts as zero, or ``"Unknown"``."""
    if date.is_unknown:
        return UNKNOWN
    return f"{date.year or 0:04d}-{date.month or 0:02d}-{date.day or 0:02d}"


def display_airing(
    entry: AiringEntry,
    offset: TimezoneOffset,
    now: int,
) -> tuple[str, str]:
    """Absolute and relative airing time, or ``"Unknown"`` for both."""
    if entry.airing_at is None:
        return UNKNOWN, UNKNOWN
    return (
        format_datetime(entry.airing_at, offset),
        format_relative(entry.airing_at, now),
    )


def strip_html(text: str) -> str:
    """Drop HTML tags and entities, keeping ``<br>`` as line breaks."""
    text = re.sub(r"(?i)<br\s*/?>", "\n", text)
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n+", "\n\n", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def _new_table(title: str | None = None) -> Any:
    table_class = _import_rich_table()
    return table_class(
        title=title,
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )


def build_schedule_table(
    entries: Sequence[AiringEntry],
    offset: TimezoneOffset,
    now: int,
) -> Any:
    """Title / Episode / Airs at / When."""
    table = _new_table()
    table.add_column("Title", style="cyan")
    table.add_column("Episode", justify="right", style="yellow")
    table.add_column(f"Airs at ({offset.name or offset.label})", style="green")
    table.add_column("When", justify="right", style="magenta")

    for entry in entries:
        absolute, relative = display_airing(entry, offset, now)
        table.add_row(
            _escape(display_title(entry.title)),
            display_number(entry.episode),
            absolute,
            relative,
        )
    return table


def build_media_table(
    items: Sequence[MediaSummary],
    *,
    ranked: bool = False,
) -> Any:
    """Search results, or top-N results when *ranked* is set.

    Ranked tables add rank, popularity and genre columns.
    """
    table = _new_table()
    if ranked:
        table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Format", style="green")
    table.add_column("Status", style="magenta")
    table.add_column("Episodes/Chapters", justify="right", style="blue")
    table.add_column("Score", justify="right", style="red")
    if ranked:
        table.add_column("Popularity", justify="right")
        table.add_column("Genres", style="green")
    table.add_column("Start Date")

    for index, item in enumerate(items, start=1):
        row: list[str] = []
        if ranked:
            row.append(str(index))
        row.extend(
            [
                display_number(item.id),
                _escape(display_title(item.title)),
                display_text(item.type),
                display_text(item.format),
                display_text(item.status),
                display_number(item.units),
                display_score(item.average_score),
            ]
        )
        if ranked:
            row.append(display_number(item.popularity))
            row.append(_escape(", ".join(item.genres) or UNKNOWN))
        row.append(display_date(item.start_date))
        table.add_row(*row)
    return table


def build_properties_table(details: MediaDetails) -> Any:
    """Two-column Property / Value table for the ``info`` view."""
    summary = details.summary
    table = _new_table()
    table.add_column("Property", style="bold cyan")
    table.add_column("Value")

    duration = (
        f"{details.duration} min" if details.duration is not None else MISSING_NUMBER
    )
    properties = [
        ("Type", display_text(summary.type)),
        ("Format", display_text(summary.format)),
        ("Status", display_text(summary.status)),
        ("Episodes", display_number(summary.episodes)),
        ("Chapters", display_number(summary.chapters)),
        ("Volumes", display_number(summary.volumes)),
        ("Duration", duration),
        ("Score", display_score(summary.average_score)),
        ("Popularity", display_number(summary.popularity)),
        ("Genres", _escape(", ".join(summary.genres) or UNKNOWN)),
    ]
    for key, value in properties:
        table.add_row(key, value)
    return table


# ---------------------------------------------------------------------------
# Printers
# ---------------------------------------------------------------------------

def _heading(text: str) -> None:
    stdout_console.print(f"[bold]{_escape(text)}[/bold]")
    stdout_console.print("=" * len(text))


def _credit_lines(credits: Sequence[CreditEntry]) -> list[str]:
    return [
        f"{display_text(c.role)}: {display_text(c.name)}"
        for c in credits[:MAX_CREDITS]
    ]


def print_schedule(
    entries: Sequence[AiringEntry],
    window: ScheduleWindow,
    offset: TimezoneOffset,
    now: int,
) -> None:
    """Print the airing schedule for *window*."""
    table = build_schedule_table(entries, offset, now)
    start = format_datetime(window.start, offset)
    end = format_datetime(window.end, offset)
    stdout_console.print(f"[bold]Airing schedule[/bold] {start} → {end}")
    if not entries:
        stdout_console.print("[yellow]No episodes found in this window.[/yellow]")
        return
    stdout_console.print(table)


def print_media(items: Sequence[MediaSummary], *, ranked: bool = False) -> None:
    """Print search or top-N results."""
    table = build_media_table(items, ranked=ranked)
    if not items:
        stdout_console.print("[yellow]No results found.[/yellow]")
        return
    stdout_console.print(table)


def print_info(
    details: MediaDetails,
    offset: TimezoneOffset,
    now: int,
    *,
    show_characters: bool = False,
    show_staff: bool = False,
) -> None:
    """Print the multi-section detail view for one media entry."""
    properties = build_properties_table(details)

    _heading(display_title(details.summary.title))
    if details.summary.title.native:
        stdout_console.print(_escape(details.summary.title.native))
    stdout_console.print()
    stdout_console.print(properties)
    stdout_console.print()

    if details.description:
        _heading("Description")
        stdout_console.print(_escape(strip_html(details.description)))
        stdout_console.print()

    _heading("Dates")
    stdout_console.print(f"Start: {display_date(details.summary.start_date)}")
    stdout_console.print(f"End: {display_date(details.end_date)}")
    stdout_console.print()

    next_airing = details.next_airing
    if next_airing is not None:
        absolute, relative = display_airing(next_airing, offset, now)
        _heading("Next Episode")
        stdout_console.print(
            f"Episode {display_number(next_airing.episode)} airs on "
            f"{absolute} ({relative})",
        )
        stdout_console.print()

    if show_characters and details.characters:
        _heading("Main Characters")
        for line in _credit_lines(details.characters):
            stdout_console.print(_escape(line))
        stdout_console.print()

    if show_staff and details.staff:
        _heading("Key Staff")
        for line in _credit_lines(details.staff):
            stdout_console.print(_escape(line))
        stdout_console.print()
