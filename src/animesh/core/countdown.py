"""Event-driven countdown loop.

The loop owns no I/O: time comes from an injected
:class:`~animesh.core.protocols.Clock`, key presses from an injected
:class:`~animesh.core.protocols.KeySource`, and each frame is handed to
a render callback.  Tests drive it with a fake clock and scripted keys.

One tick:

1. Poll the key source once; a quit key ends the loop.
2. Build and render a :class:`CountdownFrame`.
3. If the episode has aired, end the loop.
4. Sleep for the redraw interval.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from animesh.core.models import AiringEntry, TimezoneOffset
from animesh.core.protocols import Clock, KeySource
from animesh.core.timefmt import format_datetime, format_duration

logger = logging.getLogger(__name__)

REDRAW_INTERVAL: float = 0.1
QUIT_KEYS: frozenset[str] = frozenset({"q", "Q", "\x1b"})


class CountdownOutcome(enum.Enum):
    """Why the loop stopped."""

    QUIT = "quit"
    AIRED = "aired"


@dataclass(frozen=True, slots=True)
class CountdownFrame:
    """Everything needed to draw one countdown screen."""

    headline: str
    remaining: int
    """Whole seconds until airing, never negative."""

    countdown: str
    airing_at: str

    @property
    def aired(self) -> bool:
        return self.remaining == 0


def headline_for(entry: AiringEntry) -> str:
    """``"{title} Episode {n}"`` with the usual display defaults."""
    title = entry.title.preferred or "Unknown Title"
    episode = entry.episode if entry.episode is not None else "?"
    return f"{title} Episode {episode}"


class CountdownLoop:
    """Redraw a countdown to *entry* until it airs or the user quits.

    Parameters
    ----------
    entry:
        The episode to count down to; ``airing_at`` must be set.
    offset:
        Display offset for the absolute airing time.
    clock, keys:
        Time and input sources.
    interval:
        Seconds between redraws.
    """

    def __init__(
        self,
        entry: AiringEntry,
        offset: TimezoneOffset,
        *,
        clock: Clock,
        keys: KeySource,
        interval: float = REDRAW_INTERVAL,
    ) -> None:
        if entry.airing_at is None:
            raise ValueError("countdown entry has no airing time")
        self._target: int = entry.airing_at
        self._headline: str = headline_for(entry)
        self._airing_at: str = f"Airing at: {format_datetime(entry.airing_at, offset)}"
        self._clock: Clock = clock
        self._keys: KeySource = keys
        self._interval: float = interval

    def frame(self) -> CountdownFrame:
        """Snapshot the countdown at the clock's current time."""
        remaining = max(0, self._target - int(self._clock.now()))
        return CountdownFrame(
            headline=self._headline,
            remaining=remaining,
            countdown=format_duration(remaining),
            airing_at=self._airing_at,
        )

    def run(self, render: Callable[[CountdownFrame], None]) -> CountdownOutcome:
        """Drive the loop until a quit key or the airing moment."""
        while True:
            key = self._keys.poll()
            if key is not None and key in QUIT_KEYS:
                logger.debug("Countdown cancelled by key %r", key)
                return CountdownOutcome.QUIT

            current = self.frame()
            render(current)
            if current.aired:
                return CountdownOutcome.AIRED

            self._clock.sleep(self._interval)
