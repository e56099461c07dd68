"""Source code compiler: page layer trees to React TSX."""

from uibuilder.compiler.compiler import (
    THEME_PROP_KEYS,
    PageCompiler,
    compile_document,
    compile_page,
    generate_layer_code,
    generate_props_string,
)
from uibuilder.compiler.identifiers import generate_variable_identifiers, to_valid_identifier
from uibuilder.compiler.renderer import Renderer
from uibuilder.compiler.signatures import function_type
from uibuilder.compiler.spec import InterfaceField, PageSource

__all__ = [
    "THEME_PROP_KEYS",
    "InterfaceField",
    "PageCompiler",
    "PageSource",
    "Renderer",
    "compile_document",
    "compile_page",
    "function_type",
    "generate_layer_code",
    "generate_props_string",
    "generate_variable_identifiers",
    "to_valid_identifier",
]
