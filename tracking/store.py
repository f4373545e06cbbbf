"""Live tracking store with copy-on-write mutations and best-effort persistence."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from core.event_bus import PERSIST_FAILED, STORE_COMMITTED, STORE_LOADED, EventBus
from tracking.models import Store
from tracking.status import with_derived_status
from tracking.stores.base import DocumentStore

logger = logging.getLogger("perf.store")

Transform = Callable[[Store], Store]


class PerformanceStore:
    """Owns the live ``Store`` and the persistence port it is flushed to.

    Reads go through ``data``. The only write path is ``mutate``.
    """

    def __init__(self, document_store: DocumentStore, event_bus: EventBus | None = None) -> None:
        self.document_store = document_store
        self.event_bus = event_bus or EventBus()
        self._data = Store.empty()

    @property
    def data(self) -> Store:
        return self._data

    def load(self) -> Store:
        """Replace the live store with the persisted document.

        A missing or unreadable document yields an empty store; nothing is raised.
        """
        try:
            document = self.document_store.load()
        except Exception as exc:
            logger.warning("Could not read tracking document, starting empty: %s", exc)
            document = None

        store = Store.empty()
        if document is not None:
            try:
                store = Store.from_document(document)
            except ValidationError as exc:
                logger.warning(
                    "Tracking document is malformed (%d errors), starting empty",
                    exc.error_count(),
                )

        self._data = store
        self.event_bus.emit(STORE_LOADED, {"plans": len(store.plans), "tasks": len(store.tasks)})
        return store

    def mutate(self, transform: Transform) -> Store:
        """Apply ``transform`` to a copy, commit the result, then try to persist it.

        Plan statuses are re-derived on the result before it is committed.
        Errors raised by ``transform`` propagate and leave the live store as it was.
        """
        working = self._data.clone()
        result = transform(working)
        if result is None:
            raise TypeError("Store transform must return the transformed Store.")
        result.plans = {plan_id: with_derived_status(plan) for plan_id, plan in result.plans.items()}

        self._data = result
        logger.debug(
            "Committed store: %d plans, %d tasks, %d kpis",
            len(result.plans),
            len(result.tasks),
            len(result.kpis),
        )
        self.event_bus.emit(STORE_COMMITTED, {"store": result})
        self._persist(result)
        return result

    def _persist(self, store: Store) -> bool:
        try:
            self.document_store.save(store.to_document())
        except Exception as exc:
            logger.warning("Persisting tracking document failed, keeping in-memory state: %s", exc)
            self.event_bus.emit(PERSIST_FAILED, {"error": str(exc)})
            return False
        return True
