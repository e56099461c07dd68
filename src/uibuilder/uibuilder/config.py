"""Configuration parsing for uibuilder.yaml"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from uibuilder.models import PAGE_LAYER_TYPE

DEFAULT_PAGE_PROPS: dict[str, Any] = {
    "className": "h-screen p-4 flex flex-col gap-2 bg-background overflow-y-scroll",
}


class EditorConfig(BaseModel):
    """Editor settings"""

    history_limit: int = Field(default=100, ge=1, description="Undo/redo depth")
    page_type: str = Field(default=PAGE_LAYER_TYPE, description="Type tag of new pages")
    default_page_props: dict[str, Any] = Field(
        default_factory=lambda: dict(DEFAULT_PAGE_PROPS),
        description="Props given to pages created by add_page_layer",
    )
    copy_suffix: str = Field(default=" (Copy)", description="Appended to duplicated names")
    theme_prop_keys: list[str] = Field(
        default_factory=lambda: ["mode", "colorTheme", "borderRadius"],
        description="Page props that never reach generated code",
    )

    @classmethod
    def load(cls, path: Path | None) -> "EditorConfig":
        """Load config from yaml file, defaults if missing"""
        if path is None or not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.model_validate(data)
