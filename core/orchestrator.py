"""Top-level application orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.event_bus import EventBus
from core.policy_runtime import ensure_runtime_dirs, load_effective_config
from tracking.commands import PerformanceCommands
from tracking.store import PerformanceStore
from tracking.stores.factory import build_document_store


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    paths: dict[str, Path]
    event_bus: EventBus
    store: PerformanceStore
    commands: PerformanceCommands


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, config: dict[str, Any] | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self._config = config

    def build(self) -> RuntimeBundle:
        config = self._config if self._config is not None else load_effective_config(self.root)
        paths = ensure_runtime_dirs(self.root, config)

        event_bus = EventBus()
        store = PerformanceStore(
            document_store=build_document_store(config, paths),
            event_bus=event_bus,
        )
        store.load()

        return RuntimeBundle(
            config=config,
            paths=paths,
            event_bus=event_bus,
            store=store,
            commands=PerformanceCommands(store),
        )
