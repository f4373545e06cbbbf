"""SQLite SQLAlchemy document store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from tracking.schemas import Base, TrackingDocumentRecord
from tracking.stores.base import DocumentStore

DEFAULT_DOCUMENT_NAME = "performance"


class SQLDocumentStore(DocumentStore):
    """Stores the tracking document as a JSON column in SQLite."""

    def __init__(self, db_path: Path, document_name: str = DEFAULT_DOCUMENT_NAME) -> None:
        self.db_path = db_path
        self.document_name = document_name
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(f"sqlite+pysqlite:///{self.db_path}", future=True)
        self._session_factory = sessionmaker(bind=self.engine, future=True)

    def create_all(self) -> None:
        """Create all schema tables if missing."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager that commits on success and rolls back on error."""
        sess = self._session_factory()
        try:
            yield sess
            sess.commit()
        except Exception:
            sess.rollback()
            raise
        finally:
            sess.close()

    def load(self) -> dict[str, Any] | None:
        with self.session() as sess:
            row = sess.get(TrackingDocumentRecord, self.document_name)
            if row is None:
                return None
            return dict(row.payload or {})

    def save(self, document: dict[str, Any]) -> None:
        with self.session() as sess:
            row = sess.get(TrackingDocumentRecord, self.document_name)
            if row is None:
                sess.add(TrackingDocumentRecord(name=self.document_name, payload=document))
            else:
                row.payload = document
