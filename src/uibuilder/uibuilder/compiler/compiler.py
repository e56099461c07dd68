"""Compiler - turns a page layer tree into a React TSX module.

Like the store, the compiler never fails on incomplete metadata: unknown
layer types get no import, unknown variables compile to ``undefined`` and
unknown functions get the generic function type.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence

from pydantic import BaseModel

from uibuilder.compiler.identifiers import generate_variable_identifiers
from uibuilder.compiler.renderer import Renderer
from uibuilder.compiler.signatures import function_type
from uibuilder.compiler.spec import InterfaceField, PageSource
from uibuilder.models import (
    FUNCTION_PROP_PREFIX,
    ComponentLayer,
    Document,
    PageLayer,
    Variable,
    VariableType,
)
from uibuilder.registry import ComponentRegistry, FunctionRegistry
from uibuilder.resolver import find_variable, reference_id
from uibuilder import tree

log = logging.getLogger(__name__)

THEME_PROP_KEYS = ("mode", "colorTheme", "borderRadius")

INDENT = "  "
# Layer lines sit inside ``return (`` and the root ``<div>``
BODY_INDENT = "    "

VARIABLE_TS_TYPES = {
    VariableType.STRING: "string",
    VariableType.NUMBER: "number",
    VariableType.BOOLEAN: "boolean",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Compact JSON, as JavaScript's ``JSON.stringify`` writes it."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def import_statement(layer_type: str, source: str, default_export: bool = False) -> str:
    if default_export:
        return f'import {layer_type} from "{source}";'
    return f'import {{ {layer_type} }} from "{source}";'


def function_metadata(props: Mapping[str, Any]) -> dict[str, str]:
    """``__function_<prop>`` entries as ``{prop: function_id}``."""
    return {
        key[len(FUNCTION_PROP_PREFIX):]: value
        for key, value in props.items()
        if key.startswith(FUNCTION_PROP_PREFIX) and isinstance(value, str)
    }


class PageCompiler:
    """Compiles pages against one registry and variable set."""

    def __init__(
        self,
        registry: ComponentRegistry,
        variables: Sequence[Variable] = (),
        function_registry: FunctionRegistry | None = None,
        exclude_props: Sequence[str] = THEME_PROP_KEYS,
    ):
        self.registry = registry
        self.variables = list(variables)
        self.function_registry = function_registry or {}
        self.exclude_props = set(exclude_props)
        self.identifiers = generate_variable_identifiers(self.variables)
        self.renderer = Renderer()

    def compile(self, page: PageLayer) -> str:
        return self.renderer.render(self.build(page))

    def build(self, page: PageLayer) -> PageSource:
        """Build the page IR."""
        layers = list(page.children) if tree.has_layer_children(page) else []

        root_props = {k: v for k, v in page.props.items() if k not in self.exclude_props}

        body: list[str] = []
        for layer in layers:
            body.extend(BODY_INDENT + line for line in self.layer_lines(layer, 1))

        return PageSource(
            imports=self.imports(layers),
            variable_fields=self.variable_fields(),
            function_fields=self.function_fields(page),
            root_attributes=self.props_string(root_props),
            body=body,
        )

    # --- Imports ---

    def imports(self, layers: Sequence[ComponentLayer]) -> list[str]:
        """One import per distinct registered type, in first-encounter order."""
        statements: dict[str, str] = {}
        for layer in tree.iter_layers(layers):
            if layer.type in statements:
                continue
            entry = self.registry.get(layer.type)
            if entry is None:
                log.debug("No registry entry for %s; no import emitted", layer.type)
                continue
            if entry.from_:
                statements[layer.type] = import_statement(
                    layer.type, entry.from_, entry.is_from_default_export
                )
        return list(statements.values())

    # --- Interface ---

    def variable_fields(self) -> list[InterfaceField]:
        return [
            InterfaceField(self.identifiers[v.id], VARIABLE_TS_TYPES.get(v.type, "unknown"))
            for v in self.variables
            if not v.is_function
        ]

    def function_fields(self, page: PageLayer) -> list[InterfaceField]:
        """Function variables first, then ``__function_`` metadata ids of the page and its layers."""
        fields: dict[str, InterfaceField] = {}

        for variable in self.variables:
            if not variable.is_function:
                continue
            name = self.identifiers[variable.id]
            function_id = variable.default_value
            definition = (
                self.function_registry.get(function_id)
                if isinstance(function_id, str)
                else None
            )
            fields.setdefault(name, InterfaceField(name, function_type(definition)))

        for layer in tree.iter_layers([page]):
            for function_id in function_metadata(layer.props).values():
                definition = self.function_registry.get(function_id)
                if definition is None:
                    log.warning("Function %r not found in function registry", function_id)
                fields.setdefault(function_id, InterfaceField(function_id, function_type(definition)))

        return list(fields.values())

    # --- Layers ---

    def layer_lines(self, layer: ComponentLayer, indent: int = 0) -> list[str]:
        """Source lines of ``layer`` at ``indent`` levels, children included."""
        indentation = INDENT * indent
        attributes = self.props_string(layer.props)

        children: list[str] = []
        if tree.has_layer_children(layer):
            for child in layer.children:  # type: ignore[union-attr]
                children.extend(self.layer_lines(child, indent + 1))
        elif isinstance(layer.children, str):
            if layer.children:
                children.append(f"{indentation}{INDENT}{{{to_json(layer.children)}}}")
        elif reference_id(layer.children) is not None:
            children.append(f"{indentation}{INDENT}{self.reference_expression(layer.children)}")

        if not children:
            return [f"{indentation}<{layer.type}{attributes} />"]
        return [
            f"{indentation}<{layer.type}{attributes}>",
            *children,
            f"{indentation}</{layer.type}>",
        ]

    def reference_expression(self, value: Any) -> str:
        variable = find_variable(self.variables, reference_id(value) or "")
        if variable is None:
            return "{undefined}"
        namespace = "functions" if variable.is_function else "variables"
        return f"{{{namespace}.{self.identifiers[variable.id]}}}"

    def props_string(self, props: Mapping[str, Any]) -> str:
        """JSX attribute string with a leading space, or ``""``."""
        functions = function_metadata(props)
        attributes: list[str] = []

        for key, value in props.items():
            if key.startswith(FUNCTION_PROP_PREFIX) or key in functions:
                continue
            if reference_id(value) is not None:
                attributes.append(f"{key}={self.reference_expression(value)}")
            elif isinstance(value, str):
                attributes.append(f"{key}={self.string_attribute(value)}")
            elif isinstance(value, bool):
                attributes.append(f"{key}={{{to_json(value)}}}")
            elif isinstance(value, (int, float)):
                attributes.append(f"{key}={{{value}}}")
            else:
                attributes.append(f"{key}={{{to_json(value)}}}")

        for prop_name, function_id in functions.items():
            attributes.append(f"{prop_name}={{functions.{function_id}}}")

        return f" {' '.join(attributes)}" if attributes else ""

    @staticmethod
    def string_attribute(value: str) -> str:
        # JSX string literals cannot escape quotes
        if '"' in value or "\n" in value:
            return f"{{{to_json(value)}}}"
        return f'"{value}"'


def generate_layer_code(
    layer: ComponentLayer,
    indent: int = 0,
    variables: Sequence[Variable] = (),
    registry: ComponentRegistry | None = None,
) -> str:
    """JSX for one layer and its subtree."""
    compiler = PageCompiler(registry or {}, variables)
    return "\n".join(compiler.layer_lines(layer, indent))


def generate_props_string(
    props: Mapping[str, Any], variables: Sequence[Variable] = ()
) -> str:
    """JSX attribute string for ``props``."""
    return PageCompiler({}, variables).props_string(props)


def compile_page(
    page: PageLayer,
    registry: ComponentRegistry,
    variables: Sequence[Variable] = (),
    function_registry: FunctionRegistry | None = None,
    exclude_props: Sequence[str] = THEME_PROP_KEYS,
) -> str:
    """Compile a page into a self-contained React TSX module.

    Args:
        page: Page layer to compile.
        registry: Component registry (import sources).
        variables: Document variables, exposed through ``PageProps``.
        function_registry: Signatures of registered functions.
        exclude_props: Page props kept out of the root element.

    Returns:
        TSX source text.
    """
    return PageCompiler(registry, variables, function_registry, exclude_props).compile(page)


def compile_document(
    document: Document,
    registry: ComponentRegistry,
    function_registry: FunctionRegistry | None = None,
    exclude_props: Sequence[str] = THEME_PROP_KEYS,
) -> dict[str, str]:
    """Compile every page of ``document``, keyed by page id."""
    compiler = PageCompiler(registry, document.variables, function_registry, exclude_props)
    return {page.id: compiler.compile(page) for page in document.pages}
