"""In-memory document store."""

from __future__ import annotations

import copy
from typing import Any

from tracking.stores.base import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document = copy.deepcopy(document) if document is not None else None
        self.save_count = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._document)

    def save(self, document: dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)
        self.save_count += 1
