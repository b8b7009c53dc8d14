"""animesh — anime airing schedules and AniList lookups in the terminal.

Layers: ``core`` (pure schedule, timezone and parsing logic), ``infra``
(HTTP transport, clock, terminal keys) and ``cli`` (argparse, Rich
rendering, exit codes).
"""

from animesh.version import __version__

__all__: list[str] = ["__version__"]
