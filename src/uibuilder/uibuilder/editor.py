"""Editor - a store, its history and a revision counter wired together"""

from __future__ import annotations

import logging
from pathlib import Path

from uibuilder.compiler import compile_page
from uibuilder.config import EditorConfig
from uibuilder.exceptions import PageNotFoundError
from uibuilder.history import TemporalHistory
from uibuilder.models import Document
from uibuilder.registry import (
    ComponentRegistry,
    FunctionRegistry,
    load_component_registry,
    load_function_registry,
)
from uibuilder.store import LayerStore

log = logging.getLogger(__name__)


class RevisionCounter:
    """Monotonic counter bumped whenever state changes outside the store's commits."""

    def __init__(self) -> None:
        self.value = 0

    def increment(self) -> int:
        self.value += 1
        return self.value


class Editor:
    """Host of a LayerStore with undo/redo.

    Undo and redo replace the store's document without notifying its
    subscribers, so views keyed on ``revision`` must resync when it changes.
    """

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        function_registry: FunctionRegistry | None = None,
        config: EditorConfig | None = None,
        document: Document | None = None,
    ):
        self.config = config or EditorConfig()
        self.store = LayerStore(registry, function_registry, self.config, document)
        self.history = TemporalHistory(self.store, self.config.history_limit)
        self.revision_counter = RevisionCounter()

    @classmethod
    def from_files(
        cls,
        registry_path: Path,
        document_path: Path | None = None,
        functions_path: Path | None = None,
        config_path: Path | None = None,
    ) -> "Editor":
        """Build an editor from registry, document and config files.

        Raises:
            RegistryLoadError: If a registry file is invalid.
            DocumentLoadError: If the document file is invalid.
        """
        registry = load_component_registry(registry_path)
        function_registry = load_function_registry(functions_path) if functions_path else None
        document = Document.load(document_path) if document_path else None
        config = EditorConfig.load(config_path)
        log.info(
            "Loaded %d component types and %d functions",
            len(registry),
            len(function_registry or {}),
        )
        return cls(registry, function_registry, config, document)

    @property
    def revision(self) -> int:
        return self.revision_counter.value

    @property
    def document(self) -> Document:
        return self.store.document

    def undo(self) -> bool:
        moved = self.history.undo()
        self.revision_counter.increment()
        return moved

    def redo(self) -> bool:
        moved = self.history.redo()
        self.revision_counter.increment()
        return moved

    def export(self, page_id: str | None = None) -> str:
        """TSX source of ``page_id`` (default: the selected page).

        Raises:
            PageNotFoundError: If ``page_id`` is not a page of the document.
        """
        document = self.store.document
        target = page_id or document.selected_page_id or ""
        page = document.page(target)
        if page is None:
            raise PageNotFoundError(target)
        return compile_page(
            page,
            self.store.registry,
            document.variables,
            self.store.function_registry,
            self.config.theme_prop_keys,
        )
