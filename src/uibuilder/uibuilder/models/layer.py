"""Layer models

A document is a forest of pages. Each page is the root of a tree of
component layers. Layers are frozen: every edit builds a new layer with
``model_copy`` or ``model_validate`` and leaves the old one untouched.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid_extensions import uuid7str

# Reserved marker key of a serialized variable reference
VARIABLE_REF_KEY = "__variableRef"

# Props named __function_<prop> carry a function registry id for <prop>
FUNCTION_PROP_PREFIX = "__function_"

PAGE_LAYER_TYPE = "_page_"


def create_id() -> str:
    """Create a fresh, globally unique layer or variable id."""
    return uuid7str()


class VariableReference(BaseModel):
    """Indirect prop value pointing at a document variable.

    Serializes to ``{"__variableRef": "<variable id>"}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ref_id: str = Field(alias=VARIABLE_REF_KEY)

    def to_dict(self) -> dict[str, str]:
        return {VARIABLE_REF_KEY: self.ref_id}


def _coerce_reference(value: Any) -> Any:
    if (
        isinstance(value, dict)
        and VARIABLE_REF_KEY in value
        and isinstance(value[VARIABLE_REF_KEY], str)
    ):
        return VariableReference(ref_id=value[VARIABLE_REF_KEY])
    return value


class ComponentLayer(BaseModel):
    """A node of the layer tree.

    ``children`` is either a list of child layers, a literal text string or a
    ``VariableReference`` to a string variable. Unknown attributes are kept
    (``extra="allow"``) so that layer patches are never schema-gated.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str = Field(default_factory=create_id)
    type: str
    name: str | None = None
    props: dict[str, Any] = Field(default_factory=dict)
    children: Union[list["ComponentLayer"], VariableReference, str] = Field(
        default_factory=list
    )

    @field_validator("props", mode="before")
    @classmethod
    def coerce_prop_references(cls, value: Any) -> Any:
        """Turn marker dicts (as loaded from JSON/YAML) into VariableReference."""
        if isinstance(value, dict):
            return {key: _coerce_reference(val) for key, val in value.items()}
        return value

    @field_validator("children", mode="before")
    @classmethod
    def coerce_children_reference(cls, value: Any) -> Any:
        return _coerce_reference(value)

    @property
    def has_children_list(self) -> bool:
        return isinstance(self.children, list)


class PageLayer(ComponentLayer):
    """Root layer of a page. Always owns a list of children."""

    type: str = PAGE_LAYER_TYPE
    children: list[ComponentLayer] = Field(default_factory=list)


Layer = Union[PageLayer, ComponentLayer]
