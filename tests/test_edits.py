"""Edit payload dispatch tests."""

from __future__ import annotations

import pytest

from tracking.commands import PerformanceCommands
from tracking.edits import EditAction, KpiEdit, PlanEdit, TaskEdit, apply_edit
from tracking.models import Kpi, Plan, Task
from tracking.store import PerformanceStore
from tracking.stores.memory_store import InMemoryDocumentStore


def build_commands() -> PerformanceCommands:
    store = PerformanceStore(InMemoryDocumentStore())
    store.load()
    return PerformanceCommands(store)


def test_save_and_delete_each_entity_kind() -> None:
    commands = build_commands()
    plan = Plan(objective_id="pr1", name="Opening")
    task = Task(plan_id=plan.id, title="Sign lease")
    kpi = Kpi(objective_id="pr1", name="Signed", target=3)

    apply_edit(commands, PlanEdit(plan))
    apply_edit(commands, TaskEdit(task))
    apply_edit(commands, KpiEdit(kpi))
    data = commands.store.data
    assert plan.id in data.plans
    assert task.id in data.tasks
    assert kpi.id in data.kpis

    apply_edit(commands, KpiEdit(kpi, EditAction.DELETE))
    assert commands.store.data.kpis == {}
    apply_edit(commands, PlanEdit(plan, EditAction.DELETE))
    assert commands.store.data.plans == {} and commands.store.data.tasks == {}


def test_task_delete_edit() -> None:
    commands = build_commands()
    task = Task(plan_id="p", title="Sign lease")
    apply_edit(commands, TaskEdit(task))
    apply_edit(commands, TaskEdit(task, EditAction.DELETE))
    assert commands.store.data.tasks == {}


def test_invalid_save_propagates_validation_error() -> None:
    commands = build_commands()
    with pytest.raises(ValueError):
        apply_edit(commands, PlanEdit(Plan(objective_id="pr1", name="")))


def test_unknown_payload_is_rejected() -> None:
    with pytest.raises(TypeError):
        apply_edit(build_commands(), object())
