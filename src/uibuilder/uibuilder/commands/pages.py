"""Pages command - list the pages of a document"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from uibuilder.models import Document
from uibuilder import tree

from .utils import console, handle_error


def pages_command(
    document: Path = typer.Argument(..., help="Document file (YAML or JSON)."),
) -> None:
    """List the pages of DOCUMENT."""
    try:
        doc = Document.load(document)
    except Exception as e:
        handle_error(e)

    table = Table()
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Layers", justify="right")
    table.add_column("Selected")

    for page in doc.pages:
        selected = "[green]*[/green]" if page.id == doc.selected_page_id else ""
        table.add_row(
            page.id,
            page.name or "",
            str(tree.count_layers(page.children)),
            selected,
        )

    console.print(table)
    if doc.variables:
        console.print(f"[dim]{len(doc.variables)} variable(s)[/dim]")
