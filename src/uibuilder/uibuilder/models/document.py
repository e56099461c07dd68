"""Document model

The complete editable state: pages, selection and variables. Snapshots of
this model are what the history stores and compares.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from uibuilder.exceptions import DocumentLoadError, InvariantError

from .layer import ComponentLayer, PageLayer
from .variable import Variable


def _iter_layers(layers: list[ComponentLayer]) -> Iterator[ComponentLayer]:
    for layer in layers:
        yield layer
        if isinstance(layer.children, list):
            yield from _iter_layers(layer.children)


class Document(BaseModel):
    """Pages (at least one), selection and variables."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pages: list[PageLayer] = Field(min_length=1)
    selected_page_id: str | None = Field(default=None, alias="selectedPageId")
    selected_layer_id: str | None = Field(default=None, alias="selectedLayerId")
    variables: list[Variable] = Field(default_factory=list)

    def model_post_init(self, __context: Any) -> None:
        """Check id uniqueness and point the selection at an existing page."""
        seen: set[str] = set()
        for layer in _iter_layers(list(self.pages)):
            if layer.id in seen:
                raise InvariantError(f"Duplicate layer id in document: {layer.id}")
            seen.add(layer.id)

        page_ids = [page.id for page in self.pages]
        if self.selected_page_id not in page_ids:
            object.__setattr__(self, "selected_page_id", page_ids[0])

    def page(self, page_id: str) -> PageLayer | None:
        return next((page for page in self.pages if page.id == page_id), None)

    @property
    def selected_page(self) -> PageLayer | None:
        return self.page(self.selected_page_id or "")

    def variable(self, variable_id: str) -> Variable | None:
        return next((v for v in self.variables if v.id == variable_id), None)

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible dict (camelCase keys, marker-dict references)."""
        return self.model_dump(mode="json", by_alias=True)

    def save(self, path: Path) -> Path:
        """Save to ``path`` as JSON (``.json``) or YAML (anything else)."""
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".json":
            path.write_text(json.dumps(self.to_dict(), indent=2))
        else:
            with open(path, "w") as f:
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        return path

    @classmethod
    def load(cls, path: Path) -> "Document":
        """Load from a JSON or YAML file.

        Raises:
            DocumentLoadError: If the file is missing, unparsable or invalid.
        """
        if not path.exists():
            raise DocumentLoadError(str(path), "file not found")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise DocumentLoadError(str(path), str(e)) from e

        # A bare list is accepted as the page list
        if isinstance(data, list):
            data = {"pages": data}

        try:
            return cls.model_validate(data)
        except (ValidationError, InvariantError) as e:
            raise DocumentLoadError(str(path), str(e)) from e
