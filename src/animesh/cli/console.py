"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Two proxies are exported: :data:`console` writes status, warnings and
errors to stderr; :data:`stdout_console` writes command results.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from animesh.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr (or stdout)."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr: bool = stderr

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain print."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except EnvironmentError:
			stream = sys.stderr if self._stderr else sys.stdout
			print(*objects, file=stream)
			return
		rich_console.print(*objects)


console = _ConsoleProxy(stderr=True)
stdout_console = _ConsoleProxy(stderr=False)


def configure_logging(verbose: bool = False) -> None:
	"""Attach a single stderr handler to the ``animesh`` logger.

	Rich's handler is used when available; otherwise a plain
	``StreamHandler``.  Calling this again replaces the previous handler.
	"""
	handler: logging.Handler
	try:
		from rich.logging import RichHandler
	except ModuleNotFoundError:
		handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
	else:
		handler = RichHandler(
			console=get_rich_console(stderr=True),
			show_time=False,
			show_path=verbose,
			markup=False,
		)

	logger = logging.getLogger("animesh")
	for existing in list(logger.handlers):
		logger.removeHandler(existing)
	logger.addHandler(handler)
	logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
