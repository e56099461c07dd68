"""uibuilder Exceptions

Raised only at the I/O edges (loading documents and registries) and for
broken internal invariants. Editing operations never raise; they log.
"""

from __future__ import annotations


class UIBuilderError(Exception):
    """Base exception for all uibuilder errors."""

    pass


class DocumentLoadError(UIBuilderError):
    """Raised when a document file cannot be read or validated."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load document {path}: {reason}")


class RegistryLoadError(UIBuilderError):
    """Raised when a component or function registry file is invalid."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load registry {path}: {reason}")


class PageNotFoundError(UIBuilderError):
    """Raised when an export targets a page that is not in the document."""

    def __init__(self, page_id: str):
        self.page_id = page_id
        super().__init__(f"Page not found: {page_id}")


class InvariantError(UIBuilderError):
    """Raised when a document violates a structural invariant."""

    pass
