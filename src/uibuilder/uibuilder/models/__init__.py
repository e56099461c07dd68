"""Document, layer and variable models"""

from .layer import (
    FUNCTION_PROP_PREFIX,
    PAGE_LAYER_TYPE,
    VARIABLE_REF_KEY,
    ComponentLayer,
    Layer,
    PageLayer,
    VariableReference,
    create_id,
)
from .variable import Variable, VariableType
from .document import Document

__all__ = [
    "FUNCTION_PROP_PREFIX",
    "PAGE_LAYER_TYPE",
    "VARIABLE_REF_KEY",
    "ComponentLayer",
    "Layer",
    "PageLayer",
    "VariableReference",
    "create_id",
    "Variable",
    "VariableType",
    "Document",
]
