"""Compiler IR spec - React page intermediate representation."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class InterfaceField:
    """One member of a ``PageProps`` group, e.g. ``userName: string``."""

    name: str
    type: str


@dataclass
class PageSource:
    """Complete TSX page IR."""

    imports: List[str] = field(default_factory=list)  # full import statements
    variable_fields: List[InterfaceField] = field(default_factory=list)
    function_fields: List[InterfaceField] = field(default_factory=list)
    root_attributes: str = ""  # leading space included when non-empty
    body: List[str] = field(default_factory=list)  # already indented lines

    @property
    def has_interface(self) -> bool:
        return bool(self.variable_fields or self.function_fields)

    @property
    def params(self) -> str:
        """Destructured component parameter, empty when nothing is injected."""
        names = []
        if self.variable_fields:
            names.append("variables")
        if self.function_fields:
            names.append("functions")
        if not names:
            return ""
        return f"{{ {', '.join(names)} }}: PageProps"
