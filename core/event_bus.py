"""In-process event bus for store lifecycle notifications."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]

STORE_LOADED = "store_loaded"
STORE_COMMITTED = "store_committed"
PERSIST_FAILED = "persist_failed"

logger = logging.getLogger("perf.events")


class EventBus:
    """Dispatches events to subscribers by event name.

    A failing subscriber is logged and skipped so that notifications never
    undo a committed mutation.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        for handler in list(self._handlers.get(event_name, [])):
            try:
                handler(payload)
            except Exception as exc:
                logger.warning("Handler for '%s' failed: %s", event_name, exc)
