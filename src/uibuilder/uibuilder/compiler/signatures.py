"""TypeScript signatures for registered functions."""

from __future__ import annotations

from uibuilder.registry import FunctionDefinition, FunctionSchema, ParamSchema

GENERIC_FUNCTION_TYPE = "(...args: unknown[]) => unknown"
OBJECT_FUNCTION_TYPE = "(params: Record<string, unknown>) => void"
NO_ARGS_FUNCTION_TYPE = "() => void"

# Schema token -> TypeScript type
TYPE_TOKENS = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "void": "void",
    "undefined": "undefined",
    "null": "null",
    "any": "unknown",
    "unknown": "unknown",
    "custom": "unknown",
    "object": "Record<string, unknown>",
    "array": "unknown[]",
}


def param_type(schema: ParamSchema | None) -> str:
    if schema is None:
        return "unknown"
    if schema.type == "optional":
        return f"{param_type(schema.inner)} | undefined"
    if schema.type == "nullable":
        return f"{param_type(schema.inner)} | null"
    return TYPE_TOKENS.get(schema.type, "unknown")


def schema_type(schema: FunctionSchema) -> str:
    """Infer a function type from its parameter schema."""
    if schema.kind == "tuple":
        if not schema.items:
            return NO_ARGS_FUNCTION_TYPE
        params = []
        for index, item in enumerate(schema.items):
            # top-level optional params use the ``?`` marker instead of a union
            if item.type == "optional":
                params.append(f"arg{index}?: {param_type(item.inner)}")
            else:
                params.append(f"arg{index}: {param_type(item)}")
        return f"({', '.join(params)}) => void"
    if schema.kind == "object":
        return OBJECT_FUNCTION_TYPE
    return GENERIC_FUNCTION_TYPE


def function_type(definition: FunctionDefinition | None) -> str:
    """Explicit type signature, else inferred from the schema, else generic."""
    if definition is None:
        return GENERIC_FUNCTION_TYPE
    if definition.type_signature:
        return definition.type_signature
    if definition.params is not None:
        return schema_type(definition.params)
    return GENERIC_FUNCTION_TYPE
