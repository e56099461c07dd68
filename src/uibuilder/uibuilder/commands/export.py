"""Export command - compile a document page to TSX"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from uibuilder.editor import Editor

from .utils import console, handle_error

log = logging.getLogger(__name__)


def export_command(
    document: Path = typer.Argument(..., help="Document file (YAML or JSON)."),
    registry: Path = typer.Option(..., "-r", "--registry", help="Component registry file."),
    functions: Optional[Path] = typer.Option(
        None, "-f", "--functions", help="Function registry file."
    ),
    page: Optional[str] = typer.Option(
        None, "-p", "--page", help="Page id to export (default: selected page)."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write TSX to file instead of stdout."
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Editor config file."),
) -> None:
    """Compile a page of DOCUMENT into a React component."""
    try:
        editor = Editor.from_files(registry, document, functions, config)
        code = editor.export(page)
    except Exception as e:
        handle_error(e)

    if output is None:
        typer.echo(code, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(code)
    log.info("Wrote %s", output)
    console.print(f"[green]Exported[/green] {output}")
