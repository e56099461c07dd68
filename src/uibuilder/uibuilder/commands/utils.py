"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
import sys
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from uibuilder.exceptions import UIBuilderError

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the uibuilder CLI.

    Log levels:
    - Normal: Only warnings/errors shown (refused edits, unknown references)
    - Verbose (-v): INFO level - shows files loaded and pages compiled
    - Debug (UIBUILDER_DEBUG=1): DEBUG level - shows everything
    """
    debug = bool(os.environ.get("UIBUILDER_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("uibuilder")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Handle and exit on uibuilder errors."""
    if isinstance(error, UIBuilderError):
        exit_with_error(str(error))
    else:
        # Unexpected error
        typer.echo(f"Unexpected error: {error}", err=True)
        sys.exit(1)
