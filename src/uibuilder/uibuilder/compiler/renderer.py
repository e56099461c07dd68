"""Renderer - converts PageSource IR to final TSX text."""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from uibuilder.compiler.spec import PageSource

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class Renderer:
    """Renders PageSource IR to TSX text."""

    TEMPLATE = "page.tsx.j2"

    def __init__(self, templates_dir: Optional[Path] = None):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, source: PageSource) -> str:
        """Render a PageSource to a TSX module.

        Args:
            source: The PageSource IR to render.

        Returns:
            Complete TSX source ending with a newline.
        """
        return self.env.get_template(self.TEMPLATE).render(source=source)
