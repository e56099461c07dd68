"""CLI commands"""

from .export import export_command
from .pages import pages_command

__all__ = ["export_command", "pages_command"]
