"""Variable resolution.

Pure functions over variable references. A reference to an unknown variable
resolves to ``None``; callers treat that as "unbound", never as an error.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from uibuilder.models import (
    FUNCTION_PROP_PREFIX,
    VARIABLE_REF_KEY,
    Variable,
    VariableReference,
)
from uibuilder.registry import FunctionDefinition

log = logging.getLogger(__name__)


def is_variable_reference(value: Any) -> bool:
    """True for a VariableReference or a dict carrying the reserved marker key."""
    if isinstance(value, VariableReference):
        return True
    return (
        isinstance(value, dict)
        and VARIABLE_REF_KEY in value
        and isinstance(value[VARIABLE_REF_KEY], str)
    )


def reference_id(value: Any) -> str | None:
    """Variable id a reference points at, or None if ``value`` is not one."""
    if isinstance(value, VariableReference):
        return value.ref_id
    if is_variable_reference(value):
        return value[VARIABLE_REF_KEY]
    return None


def find_variable(variables: Sequence[Variable], variable_id: str) -> Variable | None:
    return next((v for v in variables if v.id == variable_id), None)


def resolve(value: Any, variables: Sequence[Variable]) -> Any:
    """Resolve ``value`` to a literal.

    Non-references are returned as-is, references to known variables yield
    the variable's default value, references to unknown variables yield None.
    """
    ref = reference_id(value)
    if ref is None:
        return value
    variable = find_variable(variables, ref)
    if variable is None:
        return None
    return variable.default_value


def resolve_children(
    children: Any,
    variables: Sequence[Variable],
    values: Mapping[str, Any] | None = None,
) -> Any:
    """Resolve a children slot bound to a variable into its text.

    Unknown variables give an empty string; lists and literal strings pass
    through unchanged.
    """
    ref = reference_id(children)
    if ref is None:
        return children
    variable = find_variable(variables, ref)
    if variable is None:
        return ""
    value = (values or {}).get(variable.id)
    if value is None:
        value = variable.default_value
    return str(value)


def _resolve_function(
    function_id: str,
    function_registry: Mapping[str, FunctionDefinition] | None,
) -> FunctionDefinition | None:
    if function_registry is None:
        log.warning("Function %r referenced but no function registry provided", function_id)
        return None
    definition = function_registry.get(function_id)
    if definition is None:
        log.warning("Function %r not found in function registry", function_id)
    return definition


def resolve_props(
    props: Mapping[str, Any],
    variables: Sequence[Variable],
    values: Mapping[str, Any] | None = None,
    function_registry: Mapping[str, FunctionDefinition] | None = None,
) -> dict[str, Any]:
    """Resolve every variable reference in ``props``.

    Args:
        props: Layer props, possibly holding references or function metadata.
        variables: Document variables.
        values: Runtime overrides keyed by variable id (fall back to defaults).
        function_registry: Used for function-typed variables and
            ``__function_<prop>`` metadata.

    Returns:
        New props dict. Function bindings resolve to their FunctionDefinition.
    """
    values = values or {}
    resolved: dict[str, Any] = {}

    function_props = {
        key[len(FUNCTION_PROP_PREFIX):]: value
        for key, value in props.items()
        if key.startswith(FUNCTION_PROP_PREFIX) and isinstance(value, str)
    }
    if function_registry is not None:
        for prop_name, function_id in function_props.items():
            resolved[prop_name] = _resolve_function(function_id, function_registry)

    for key, value in props.items():
        if key.startswith(FUNCTION_PROP_PREFIX):
            continue
        if key in function_props:
            if function_registry is not None:
                continue
            log.warning(
                "Function metadata for %r found but no function registry provided; "
                "keeping the literal value",
                key,
            )

        ref = reference_id(value)
        if ref is not None:
            variable = find_variable(variables, ref)
            if variable is None:
                resolved[key] = None
            elif variable.is_function:
                resolved[key] = _resolve_function(
                    str(variable.default_value), function_registry
                )
            else:
                override = values.get(variable.id)
                resolved[key] = override if override is not None else variable.default_value
        elif isinstance(value, dict):
            resolved[key] = resolve_props(value, variables, values, function_registry)
        else:
            resolved[key] = value

    return resolved
