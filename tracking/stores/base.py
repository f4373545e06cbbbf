"""Persistence port for the tracking document."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class DocumentStore(ABC):
    """Reads and writes the single serialized tracking document."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the stored document, or None when nothing was saved yet.

        Implementations may raise on corrupt content; the caller recovers.
        """

    @abstractmethod
    def save(self, document: dict[str, Any]) -> None:
        """Replace the stored document."""
