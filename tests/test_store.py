"""Store loading, mutation and persistence adapter tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.event_bus import PERSIST_FAILED, STORE_COMMITTED, EventBus
from tracking.models import Kpi, Period, Plan, PlanStatus, Store, SubItem, Task, note_key
from tracking.store import PerformanceStore
from tracking.stores.base import DocumentStore
from tracking.stores.json_file_store import JsonFileDocumentStore
from tracking.stores.memory_store import InMemoryDocumentStore
from tracking.stores.sql_store import SQLDocumentStore


class FailingDocumentStore(DocumentStore):
    def load(self):
        return None

    def save(self, document):
        raise OSError("quota exceeded")


def sample_store() -> Store:
    plan = Plan(id="plan-1", objective_id="pr1", name="Opening", sub_items=[SubItem(progress_percent=40)])
    task = Task(id="task-1", plan_id="plan-1", title="Sign lease", deadline="2026-04-01")
    kpi = Kpi(id="kpi-1", objective_id="pr1", name="Signed", target=10, linked_plan_ids=["plan-1"])
    return Store(
        plans={plan.id: plan},
        tasks={task.id: task},
        kpis={kpi.id: kpi},
        notes={note_key("pr1", Period.FIRST_HALF): 7.5},
    )


def test_missing_document_loads_empty() -> None:
    store = PerformanceStore(InMemoryDocumentStore())
    data = store.load()
    assert data.plans == {} and data.tasks == {} and data.notes == {}


def test_corrupt_json_file_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "performance.json"
    path.write_text("{not json", encoding="utf-8")
    store = PerformanceStore(JsonFileDocumentStore(path))
    assert store.load() == Store.empty()


def test_non_object_json_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "performance.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    store = PerformanceStore(JsonFileDocumentStore(path))
    assert store.load().plans == {}


def test_malformed_document_shape_loads_empty() -> None:
    store = PerformanceStore(InMemoryDocumentStore({"plans": ["not", "a", "mapping"], "journal": 5}))
    assert store.load() == Store.empty()


def test_invalid_entities_are_dropped_one_by_one() -> None:
    document = sample_store().to_document()
    document["plans"]["broken"] = {"objectiveId": "pr1", "name": None}
    document["tasks"]["orphan"] = "garbage"
    document["kpis"]["kpi-2"] = {"name": "no objective"}
    document["journal"] = {"pr1": [{"text": "kept"}, {"timestamp": "yesterday"}], "pr2": "oops"}
    backend = InMemoryDocumentStore(document)
    store = PerformanceStore(backend)

    loaded = store.load()
    assert list(loaded.plans) == ["plan-1"]
    assert list(loaded.tasks) == ["task-1"]
    assert list(loaded.kpis) == ["kpi-1"]
    assert [entry.text for entry in loaded.journal["pr1"]] == ["kept"]
    assert "pr2" not in loaded.journal
    assert loaded.note("pr1", Period.FIRST_HALF) == 7.5

    def add_plan(data: Store) -> Store:
        data.plans["plan-2"] = Plan(id="plan-2", objective_id="pr2", name="Leasing")
        return data

    store.mutate(add_plan)
    assert sorted(backend.load()["plans"]) == ["plan-1", "plan-2"]
    assert list(backend.load()["tasks"]) == ["task-1"]


def test_mutate_rederives_plan_status() -> None:
    backend = InMemoryDocumentStore()
    store = PerformanceStore(backend)
    store.load()
    store.mutate(lambda data: Store(plans={"a": Plan(id="a", objective_id="pr1", name="Opening")}))

    def finish(data: Store) -> Store:
        data.plans["a"].manual_progress_percent = 100
        return data

    store.mutate(finish)
    assert store.data.plans["a"].status is PlanStatus.DONE
    assert backend.load()["plans"]["a"]["status"] == "done"

    def block(data: Store) -> Store:
        data.plans["a"] = data.plans["a"].model_copy(update={"blocked": True, "status": PlanStatus.TODO})
        return data

    store.mutate(block)
    assert backend.load()["plans"]["a"]["status"] == "blocked"


def test_failing_transform_leaves_store_untouched() -> None:
    backend = InMemoryDocumentStore(sample_store().to_document())
    store = PerformanceStore(backend)
    before = store.load()

    def broken(data: Store) -> Store:
        data.plans.clear()
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.mutate(broken)

    assert store.data is before
    assert "plan-1" in store.data.plans
    assert backend.save_count == 0


def test_transform_must_return_store() -> None:
    store = PerformanceStore(InMemoryDocumentStore())
    store.load()
    with pytest.raises(TypeError):
        store.mutate(lambda data: None)


def test_persist_failure_keeps_commit_and_emits_event() -> None:
    bus = EventBus()
    seen: list[str] = []
    bus.subscribe(PERSIST_FAILED, lambda payload: seen.append(payload["error"]))
    bus.subscribe(STORE_COMMITTED, lambda payload: seen.append("committed"))
    store = PerformanceStore(FailingDocumentStore(), event_bus=bus)
    store.load()

    def add_note(data: Store) -> Store:
        data.notes["p1_firstHalf"] = 4.0
        return data

    result = store.mutate(add_note)
    assert result.notes["p1_firstHalf"] == 4.0
    assert store.data.notes["p1_firstHalf"] == 4.0
    assert seen == ["committed", "quota exceeded"]


def test_failing_subscriber_does_not_break_mutation() -> None:
    bus = EventBus()
    bus.subscribe(STORE_COMMITTED, lambda payload: 1 / 0)
    store = PerformanceStore(InMemoryDocumentStore(), event_bus=bus)
    store.load()
    store.mutate(lambda data: data)
    assert store.document_store.save_count == 1


def test_json_document_round_trip_uses_camel_case(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "performance.json"
    store = PerformanceStore(JsonFileDocumentStore(path))
    store.load()
    store.mutate(lambda data: sample_store())

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["plans"]["plan-1"]["objectiveId"] == "pr1"
    assert raw["plans"]["plan-1"]["subItems"][0]["progressPercent"] == 40
    assert raw["tasks"]["task-1"]["deadline"] == "2026-04-01"
    assert raw["kpis"]["kpi-1"]["linkedPlanIds"] == ["plan-1"]
    assert raw["notes"] == {"pr1_firstHalf": 7.5}

    reloaded = PerformanceStore(JsonFileDocumentStore(path)).load()
    assert reloaded == store.data


def test_sql_document_round_trip(tmp_path: Path) -> None:
    backend = SQLDocumentStore(tmp_path / "performance.db")
    backend.create_all()
    assert backend.load() is None

    backend.save(sample_store().to_document())
    backend.save(sample_store().to_document())
    loaded = PerformanceStore(backend).load()
    assert loaded.plans["plan-1"].name == "Opening"
    assert loaded.note("pr1", Period.FIRST_HALF) == 7.5


def test_clone_is_independent() -> None:
    source = sample_store()
    cloned = source.clone()
    cloned.plans["plan-1"].sub_items[0].progress_percent = 90
    cloned.notes["pr2_firstHalf"] = 1.0
    cloned.tasks.pop("task-1")

    assert source.plans["plan-1"].sub_items[0].progress_percent == 40
    assert "pr2_firstHalf" not in source.notes
    assert "task-1" in source.tasks
