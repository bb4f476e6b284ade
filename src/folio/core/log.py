"""Logging setup and fatal error reporting for the CLI."""

from __future__ import annotations

import logging
from typing import NoReturn

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.traceback import Traceback

from folio.core.config import is_ci

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library loggers through rich.

    Args:
        verbose: Show DEBUG records instead of WARNING and above
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger("folio")
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(show_path=verbose, markup=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)


def abort(error: BaseException, verbose: bool = False) -> NoReturn:
    """Print a fatal error and exit with status 1.

    The traceback is shown in verbose mode and under CI.
    """
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    if verbose or is_ci():
        console.print(Traceback.from_exception(type(error), error, error.__traceback__))
    raise SystemExit(1) from error
