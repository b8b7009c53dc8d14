"""Rich live display driven by :class:`~animesh.core.countdown.CountdownLoop`.

The core loop produces :class:`~animesh.core.countdown.CountdownFrame`
objects; this module turns each one into Rich text and pushes it into a
:class:`rich.live.Live` region.  Terminal key handling lives in
:mod:`animesh.infra.terminal`.
"""

from __future__ import annotations

from typing import Any

from animesh.cli.console import get_rich_console
from animesh.core.countdown import CountdownFrame, CountdownLoop, CountdownOutcome
from animesh.core.models import AiringEntry, TimezoneOffset
from animesh.core.protocols import Clock, KeySource
from animesh.exceptions import EnvironmentError


def _import_rich_live() -> tuple[type[Any], type[Any]]:
    """Import ``Live`` and ``Text`` lazily."""
    try:
        from rich.live import Live
        from rich.text import Text
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Live, Text


def frame_renderable(frame: CountdownFrame, text_class: type[Any]) -> Any:
    """Build the Rich text block for one frame."""
    text = text_class()
    text.append(f"{frame.headline}\n", style="bold cyan")
    text.append(f"{frame.countdown}\n", style="bold yellow")
    text.append(f"{frame.airing_at}\n\n", style="green")
    if frame.aired:
        text.append("Airing now!", style="bold green")
    else:
        text.append("Press 'q' to quit", style="dim")
    return text


def run_countdown_display(
    entry: AiringEntry,
    offset: TimezoneOffset,
    *,
    clock: Clock,
    keys: KeySource,
) -> CountdownOutcome:
    """Show a live countdown to *entry* until it airs or the user quits."""
    live_class, text_class = _import_rich_live()
    loop = CountdownLoop(entry, offset, clock=clock, keys=keys)

    with live_class(
        frame_renderable(loop.frame(), text_class),
        console=get_rich_console(stderr=False),
        auto_refresh=False,
        transient=False,
    ) as live:

        def render(frame: CountdownFrame) -> None:
            live.update(frame_renderable(frame, text_class), refresh=True)

        return loop.run(render)
