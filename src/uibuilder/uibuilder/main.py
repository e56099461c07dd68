"""uibuilder CLI Main Entry Point

Usage:
    uibuilder export page.yaml -r registry.yaml        # print TSX of the selected page
    uibuilder export page.yaml -r registry.yaml -o Page.tsx
    uibuilder export page.yaml -r registry.yaml -f functions.yaml -p <page-id>
    uibuilder pages page.yaml                          # list pages
    uibuilder --version
"""

from __future__ import annotations

from typing import Optional

import typer

from ._version import __version__
from .commands import export_command, pages_command
from .commands.utils import setup_logging

typer_app = typer.Typer(no_args_is_help=True, help="Layer documents to React source code.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"uibuilder {__version__}")
        raise typer.Exit()


@typer_app.callback()
def cli(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show info logs."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Compile UI builder layer documents."""
    setup_logging(verbose)


typer_app.command("export")(export_command)
typer_app.command("pages")(pages_command)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
