"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from mirari.exceptions import EnvironmentError


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

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)


console = _ConsoleProxy()


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _level_for(verbosity: int) -> int:
	"""0 -> WARNING, 1 -> INFO, 2+ -> DEBUG."""
	if verbosity <= 0:
		return logging.WARNING
	if verbosity == 1:
		return logging.INFO
	return logging.DEBUG


def _build_log_handler() -> logging.Handler:
	"""Return a RichHandler on stderr, or a plain stream handler."""
	try:
		from rich.logging import RichHandler

		handler: logging.Handler = RichHandler(
			console=get_rich_console(),
			show_time=False,
			show_path=False,
		)
		handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
	except (ModuleNotFoundError, EnvironmentError):
		handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter(_LOG_FORMAT))
	return handler


def configure_logging(verbosity: int = 0) -> None:
	"""Attach a single handler to the ``mirari`` logger at *verbosity*.

	Safe to call repeatedly; the previous handler is replaced.
	"""
	logger = logging.getLogger("mirari")
	for handler in list(logger.handlers):
		logger.removeHandler(handler)
	logger.addHandler(_build_log_handler())
	logger.setLevel(_level_for(verbosity))
	logger.propagate = False
