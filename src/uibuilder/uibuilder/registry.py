"""Component and function registry definitions.

The component registry maps a layer ``type`` to its metadata:
  - props: property schema (type, required, default) used for default values
  - defaultChildren: text or a layer template inserted on creation
  - defaultVariableBindings: props bound to variables on creation
  - from / isFromDefaultExport: where generated code imports the component from

The function registry maps a function id to the parameter schema and/or
explicit type signature used when generating typed ``functions`` props.

Both are read-only to the editor core.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Mapping, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from uibuilder.exceptions import RegistryLoadError
from uibuilder.models import ComponentLayer, VariableReference

CHILDREN_PROP = "children"


class PropSpec(BaseModel):
    """Specification for a component prop."""

    type: str = "any"  # string, number, boolean, enum, object, array, function, any
    required: bool = False
    default: Any = None
    options: list[Any] | None = None  # enum values
    description: str | None = None

    @property
    def has_default(self) -> bool:
        """True when a default was declared, even an explicit null."""
        return "default" in self.model_fields_set

    def default_value(self) -> tuple[bool, Any]:
        """Return ``(found, value)`` for this prop's default.

        Enums without an explicit default fall back to their first option.
        """
        if self.has_default:
            return True, self.default
        if self.type == "enum" and self.options:
            return True, self.options[0]
        return False, None


def _infer_prop_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "any"


class DefaultVariableBinding(BaseModel):
    """A prop bound to a variable as soon as the component is created."""

    model_config = ConfigDict(populate_by_name=True)

    prop_name: str = Field(alias="propName")
    variable_id: str = Field(alias="variableId")
    immutable: bool = False


class RegistryEntry(BaseModel):
    """Metadata for one layer type."""

    model_config = ConfigDict(populate_by_name=True)

    props: dict[str, Union[PropSpec, str, int, float, bool, list, None]] = Field(
        default_factory=dict
    )
    from_: str | None = Field(default=None, alias="from")
    is_from_default_export: bool = Field(default=False, alias="isFromDefaultExport")
    default_children: Union[list[ComponentLayer], VariableReference, str, None] = (
        Field(default=None, alias="defaultChildren")
    )
    default_variable_bindings: list[DefaultVariableBinding] = Field(
        default_factory=list, alias="defaultVariableBindings"
    )
    # Editor form overrides, opaque to the core
    field_overrides: dict[str, Any] = Field(default_factory=dict, alias="fieldOverrides")
    child_of: list[str] | None = Field(default=None, alias="childOf")

    @field_validator("default_children", mode="before")
    @classmethod
    def coerce_children_reference(cls, value: Any) -> Any:
        if isinstance(value, dict) and "__variableRef" in value:
            return VariableReference(ref_id=value["__variableRef"])
        return value

    def model_post_init(self, __context: Any) -> None:
        """Normalize shorthand props: ``title: "Hi"`` -> PropSpec(default="Hi")."""
        normalized: dict[str, PropSpec] = {}
        for key, val in self.props.items():
            if isinstance(val, PropSpec):
                normalized[key] = val
            elif isinstance(val, dict):
                normalized[key] = PropSpec(**val)
            else:
                normalized[key] = PropSpec(type=_infer_prop_type(val), default=val)
        object.__setattr__(self, "props", normalized)

    def prop_spec(self, name: str) -> PropSpec | None:
        spec = self.props.get(name)
        return spec if isinstance(spec, PropSpec) else None

    def default_props(self) -> dict[str, Any]:
        """Default values for every prop that declares one.

        ``children`` is a slot, not a prop, and is never included.
        """
        defaults: dict[str, Any] = {}
        for name, spec in self.props.items():
            if name == CHILDREN_PROP or not isinstance(spec, PropSpec):
                continue
            found, value = spec.default_value()
            if found:
                defaults[name] = value
        return defaults

    def missing_required_props(self) -> list[str]:
        """Required props with no default (cannot be pre-filled)."""
        return [
            name
            for name, spec in self.props.items()
            if isinstance(spec, PropSpec)
            and name != CHILDREN_PROP
            and spec.required
            and not spec.default_value()[0]
        ]

    @property
    def accepts_text_children(self) -> bool:
        """True when the schema declares a string-typed ``children`` prop."""
        spec = self.prop_spec(CHILDREN_PROP)
        return spec is not None and spec.type == "string"

    def text_children_default(self) -> str | None:
        if isinstance(self.default_children, str):
            return self.default_children
        spec = self.prop_spec(CHILDREN_PROP)
        if spec is not None and isinstance(spec.default, str):
            return spec.default
        return None

    def immutable_binding(self, prop_name: str) -> str | None:
        """Variable id an immutable binding pins ``prop_name`` to, if any."""
        for binding in self.default_variable_bindings:
            if binding.prop_name == prop_name and binding.immutable:
                return binding.variable_id
        return None


ComponentRegistry = dict[str, RegistryEntry]


# --- Function registry ---


class ParamSchema(BaseModel):
    """Type token of one function parameter.

    ``optional`` and ``nullable`` wrap ``inner``.
    """

    type: str = "unknown"
    inner: ParamSchema | None = None

    @classmethod
    def parse(cls, value: Union["ParamSchema", str, dict]) -> "ParamSchema":
        """Accept ``"string"``, ``"number?"`` (optional) or a full mapping."""
        if isinstance(value, ParamSchema):
            return value
        if isinstance(value, dict):
            return cls(**value)
        if value.endswith("?"):
            return cls(type="optional", inner=cls(type=value[:-1]))
        return cls(type=value)


class FunctionSchema(BaseModel):
    """Parameter schema of a registered function."""

    kind: Literal["tuple", "object", "function"] = "tuple"
    items: list[ParamSchema] = Field(default_factory=list)
    # object params: name -> schema
    shape: dict[str, ParamSchema] = Field(default_factory=dict)

    @field_validator("items", mode="before")
    @classmethod
    def parse_items(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [ParamSchema.parse(item) for item in value]
        return value

    @field_validator("shape", mode="before")
    @classmethod
    def parse_shape(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: ParamSchema.parse(item) for key, item in value.items()}
        return value


class FunctionDefinition(BaseModel):
    """A function that function-typed variables or props can point at."""

    model_config = ConfigDict(populate_by_name=True)

    params: FunctionSchema | None = Field(default=None, alias="schema")
    type_signature: str | None = Field(default=None, alias="typeSignature")
    description: str | None = None


FunctionRegistry = dict[str, FunctionDefinition]


def are_signatures_compatible(
    target: FunctionSchema | None, candidate: FunctionSchema | None
) -> bool:
    """Whether a function accepting ``candidate`` can be called as ``target``.

    Positional: the candidate may take fewer args than the caller passes.
    Object: every candidate key must be provided by the caller.
    Anything else (missing or mixed schemas) is accepted.
    """
    if target is None or candidate is None:
        return True
    if target.kind == "tuple" and candidate.kind == "tuple":
        return len(candidate.items) <= len(target.items)
    if target.kind == "object" and candidate.kind == "object":
        return all(key in target.shape for key in candidate.shape)
    return True


def get_compatible_functions(
    function_registry: Mapping[str, FunctionDefinition] | None,
    target: FunctionSchema | None,
) -> list[str]:
    """Ids of registered functions that fit the ``target`` call signature."""
    if not function_registry:
        return []
    return [
        function_id
        for function_id, definition in function_registry.items()
        if are_signatures_compatible(target, definition.params)
    ]


# --- Loading ---


def parse_component_registry(data: Mapping[str, Any]) -> ComponentRegistry:
    """Build a component registry from a ``type -> entry`` mapping."""
    return {
        layer_type: entry
        if isinstance(entry, RegistryEntry)
        else RegistryEntry.model_validate(entry or {})
        for layer_type, entry in data.items()
    }


def parse_function_registry(data: Mapping[str, Any]) -> FunctionRegistry:
    """Build a function registry from an ``id -> definition`` mapping."""
    return {
        function_id: definition
        if isinstance(definition, FunctionDefinition)
        else FunctionDefinition.model_validate(definition or {})
        for function_id, definition in data.items()
    }


def _load_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise RegistryLoadError(str(path), "file not found")
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise RegistryLoadError(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise RegistryLoadError(str(path), "top level must be a mapping")
    return data


def load_component_registry(path: str | Path) -> ComponentRegistry:
    """Load a component registry from a YAML (or JSON) file."""
    path = Path(path)
    data = _load_mapping(path)
    try:
        return parse_component_registry(data)
    except ValidationError as e:
        raise RegistryLoadError(str(path), str(e)) from e


def load_function_registry(path: str | Path) -> FunctionRegistry:
    """Load a function registry from a YAML (or JSON) file."""
    path = Path(path)
    data = _load_mapping(path)
    try:
        return parse_function_registry(data)
    except ValidationError as e:
        raise RegistryLoadError(str(path), str(e)) from e
