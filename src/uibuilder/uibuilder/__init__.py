"""uibuilder - layer document editing core and React source code compiler"""

from ._version import __version__
from .compiler import compile_document, compile_page
from .config import EditorConfig
from .editor import Editor, RevisionCounter
from .exceptions import (
    DocumentLoadError,
    InvariantError,
    PageNotFoundError,
    RegistryLoadError,
    UIBuilderError,
)
from .history import TemporalHistory
from .models import (
    ComponentLayer,
    Document,
    PageLayer,
    Variable,
    VariableReference,
    VariableType,
)
from .registry import (
    FunctionDefinition,
    RegistryEntry,
    load_component_registry,
    load_function_registry,
)
from .store import LayerStore

__all__ = [
    "__version__",
    "ComponentLayer",
    "Document",
    "DocumentLoadError",
    "Editor",
    "EditorConfig",
    "FunctionDefinition",
    "InvariantError",
    "LayerStore",
    "PageLayer",
    "PageNotFoundError",
    "RegistryEntry",
    "RegistryLoadError",
    "RevisionCounter",
    "TemporalHistory",
    "UIBuilderError",
    "Variable",
    "VariableReference",
    "VariableType",
    "compile_document",
    "compile_page",
    "load_component_registry",
    "load_function_registry",
]
