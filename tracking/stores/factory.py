"""Document store selection from configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from tracking.stores.base import DocumentStore
from tracking.stores.json_file_store import JsonFileDocumentStore
from tracking.stores.memory_store import InMemoryDocumentStore
from tracking.stores.sql_store import SQLDocumentStore

SUPPORTED_BACKENDS = ("json", "sqlite", "memory")


def build_document_store(config: dict[str, Any], paths: dict[str, Path]) -> DocumentStore:
    """Build the configured persistence adapter."""
    backend = str(config.get("persistence", {}).get("backend", "json")).lower().strip()
    if backend == "json":
        return JsonFileDocumentStore(paths["data_path"])
    if backend == "sqlite":
        store = SQLDocumentStore(paths["db_path"])
        store.create_all()
        return store
    if backend == "memory":
        return InMemoryDocumentStore()
    raise ValueError(
        f"Unknown persistence backend '{backend}', expected one of {', '.join(SUPPORTED_BACKENDS)}."
    )
