"""Infrastructure layer — external system integration.

This layer wraps all interaction with the AniList HTTP endpoint and the
controlling terminal.  Every raw third-party exception must be caught
here and re-raised as a :class:`~animesh.exceptions.AnimeshError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from animesh.infra.anilist_client import AniListClient
from animesh.infra.terminal import SystemClock, TerminalKeySource

__all__: list[str] = [
    "AniListClient",
    "SystemClock",
    "TerminalKeySource",
]
