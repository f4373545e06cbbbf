"""JSON file document store."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from tracking.stores.base import DocumentStore


class JsonFileDocumentStore(DocumentStore):
    """Keeps the document in one UTF-8 JSON file, replaced atomically on save."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Tracking document must be a JSON object: {self.path}")
        return data

    def save(self, document: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)
