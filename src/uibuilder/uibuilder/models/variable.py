"""Variable model"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .layer import create_id


class VariableType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    FUNCTION = "function"  # default_value holds a function registry id


class Variable(BaseModel):
    """A named, typed document-level value that props can be bound to."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=create_id)
    name: str
    type: VariableType
    default_value: Any = Field(default=None, alias="defaultValue")

    @property
    def is_function(self) -> bool:
        return self.type == VariableType.FUNCTION
