"""Temporal history - undo/redo over store snapshots.

Observes the store's commits and keeps two bounded stacks of documents.
Restoring goes around the store's commit path, so nothing observing the
store hears about undo/redo: the host bumps its own revision counter.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Callable

from uibuilder.models import Document
from uibuilder.store import LayerStore

log = logging.getLogger(__name__)


def _snapshot_key(document: Document) -> str:
    # 1 == True == 1.0 in Python; the serialized forms keep them apart
    return json.dumps(document.to_dict(), sort_keys=True)


class TemporalHistory:
    """Undo/redo stacks fed by a LayerStore."""

    def __init__(self, store: LayerStore, limit: int | None = None):
        self.store = store
        self.limit = limit or store.config.history_limit
        self.present: Document = store.document
        self._past: deque[Document] = deque(maxlen=self.limit)
        self._future: deque[Document] = deque(maxlen=self.limit)
        self._unsubscribe: Callable[[], None] = store.subscribe(self._on_commit)

    def _on_commit(self, previous: Document, current: Document) -> None:
        # No-op commits are not recorded
        if current is self.present or _snapshot_key(current) == _snapshot_key(self.present):
            return
        self._past.append(self.present)
        self._future.clear()
        self.present = current

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def past_states(self) -> int:
        return len(self._past)

    @property
    def future_states(self) -> int:
        return len(self._future)

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when there is nothing to undo."""
        if not self._past:
            log.debug("Nothing to undo")
            return False
        self._future.append(self.present)
        self.present = self._past.pop()
        self.store.restore(self.present)
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False when there is nothing to redo."""
        if not self._future:
            log.debug("Nothing to redo")
            return False
        self._past.append(self.present)
        self.present = self._future.pop()
        self.store.restore(self.present)
        return True

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()
        self.present = self.store.document

    def close(self) -> None:
        """Stop recording store commits."""
        self._unsubscribe()
