"""Mutation commands over the tracking store.

Every command runs through ``PerformanceStore.mutate``, so each one commits
atomically and is flushed to persistence before returning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from tracking.bonus import MAX_NOTE
from tracking.models import (
    JournalEntry,
    Kpi,
    Period,
    Plan,
    Store,
    Task,
    TaskStatus,
    note_key,
)
from tracking.numbers import clamp, parse_number
from tracking.status import with_derived_status
from tracking.store import PerformanceStore

logger = logging.getLogger("perf.commands")

Clock = Callable[[], datetime]


def _utc_clock() -> datetime:
    return datetime.now(UTC)


class PerformanceCommands:
    """The write surface of the engine."""

    def __init__(self, store: PerformanceStore, clock: Clock | None = None) -> None:
        self.store = store
        self.clock = clock or _utc_clock

    # ── Plans ────────────────────────────────────────────────────────

    def upsert_plan(self, plan: Plan) -> Plan:
        """Insert or replace a plan; its stored status is re-derived."""
        if not plan.name.strip():
            raise ValueError("Plan name cannot be empty")
        saved = with_derived_status(plan)

        def apply(data: Store) -> Store:
            data.plans[saved.id] = saved.model_copy(deep=True)
            return data

        self.store.mutate(apply)
        return saved

    def delete_plan(self, plan_id: str) -> int:
        """Delete a plan and every task referencing it. Returns the number of tasks removed."""
        removed: list[str] = []

        def apply(data: Store) -> Store:
            data.plans.pop(plan_id, None)
            for task_id in [tid for tid, task in data.tasks.items() if task.plan_id == plan_id]:
                del data.tasks[task_id]
                removed.append(task_id)
            return data

        self.store.mutate(apply)
        logger.info("Deleted plan %s with %d task(s)", plan_id, len(removed))
        return len(removed)

    def set_sub_item_done(self, plan_id: str, item_id: str, done: bool) -> Plan | None:
        """Toggle a sub-item; progress is forced to 100 or 0 as a side effect."""
        return self._update_plan(
            plan_id,
            lambda plan: plan.model_copy(
                update={
                    "sub_items": [
                        item.with_done(done) if item.id == item_id else item
                        for item in plan.sub_items
                    ]
                }
            ),
        )

    def set_sub_item_progress(self, plan_id: str, item_id: str, progress: float) -> Plan | None:
        return self._update_plan(
            plan_id,
            lambda plan: plan.model_copy(
                update={
                    "sub_items": [
                        item.with_progress(progress) if item.id == item_id else item
                        for item in plan.sub_items
                    ]
                }
            ),
        )

    def set_deliverable_done(self, plan_id: str, deliverable_id: str, done: bool) -> Plan | None:
        return self._update_plan(
            plan_id,
            lambda plan: plan.model_copy(
                update={
                    "deliverables": [
                        item.model_copy(update={"done": done}) if item.id == deliverable_id else item
                        for item in plan.deliverables
                    ]
                }
            ),
        )

    def set_plan_blocked(self, plan_id: str, blocked: bool) -> Plan | None:
        return self._update_plan(plan_id, lambda plan: plan.model_copy(update={"blocked": blocked}))

    def _update_plan(self, plan_id: str, change: Callable[[Plan], Plan]) -> Plan | None:
        updated: list[Plan] = []

        def apply(data: Store) -> Store:
            plan = data.plans.get(plan_id)
            if plan is None:
                return data
            new_plan = with_derived_status(change(plan))
            data.plans[plan_id] = new_plan
            updated.append(new_plan)
            return data

        self.store.mutate(apply)
        return updated[0] if updated else None

    # ── Tasks ────────────────────────────────────────────────────────

    def upsert_task(self, task: Task) -> Task:
        if not task.title.strip():
            raise ValueError("Task title cannot be empty")
        if not task.plan_id:
            raise ValueError("Task must belong to a plan")

        def apply(data: Store) -> Store:
            data.tasks[task.id] = task.model_copy(deep=True)
            return data

        self.store.mutate(apply)
        return task

    def delete_task(self, task_id: str) -> None:
        def apply(data: Store) -> Store:
            data.tasks.pop(task_id, None)
            return data

        self.store.mutate(apply)

    def move_task(self, task_id: str, new_status: TaskStatus | str) -> Task | None:
        """Set a task's status directly; any of the four states is accepted from any other."""
        status = TaskStatus(new_status)
        moved: list[Task] = []

        def apply(data: Store) -> Store:
            task = data.tasks.get(task_id)
            if task is not None:
                data.tasks[task_id] = task.model_copy(update={"status": status})
                moved.append(data.tasks[task_id])
            return data

        self.store.mutate(apply)
        return moved[0] if moved else None

    def set_subtask_done(self, task_id: str, subtask_id: str, done: bool) -> Task | None:
        changed: list[Task] = []

        def apply(data: Store) -> Store:
            task = data.tasks.get(task_id)
            if task is None:
                return data
            subtasks = [
                sub.model_copy(update={"done": done}) if sub.id == subtask_id else sub
                for sub in task.subtasks
            ]
            data.tasks[task_id] = task.model_copy(update={"subtasks": subtasks})
            changed.append(data.tasks[task_id])
            return data

        self.store.mutate(apply)
        return changed[0] if changed else None

    # ── KPIs ─────────────────────────────────────────────────────────

    def upsert_kpi(self, kpi: Kpi) -> Kpi:
        if not kpi.name.strip():
            raise ValueError("KPI name cannot be empty")

        def apply(data: Store) -> Store:
            data.kpis[kpi.id] = kpi.model_copy(deep=True)
            return data

        self.store.mutate(apply)
        return kpi

    def delete_kpi(self, kpi_id: str) -> None:
        def apply(data: Store) -> Store:
            data.kpis.pop(kpi_id, None)
            return data

        self.store.mutate(apply)

    # ── Notes ────────────────────────────────────────────────────────

    def set_note(self, objective_id: str, period: Period | str, value: float | str) -> float:
        """Upsert an evaluation note clamped to [0, 10]. Returns the stored value."""
        note = clamp(parse_number(value), 0.0, MAX_NOTE)
        key = note_key(objective_id, Period(period))

        def apply(data: Store) -> Store:
            data.notes[key] = note
            return data

        self.store.mutate(apply)
        return note

    # ── Journal ──────────────────────────────────────────────────────

    def add_journal_entry(self, objective_id: str, text: str) -> JournalEntry:
        """Append a journal entry; surrounding whitespace is trimmed."""
        text = text.strip()
        if not text:
            raise ValueError("Journal entry cannot be empty")
        entry = JournalEntry(text=text, timestamp=self.clock())

        def apply(data: Store) -> Store:
            data.journal.setdefault(objective_id, []).append(entry)
            return data

        self.store.mutate(apply)
        return entry

    def delete_journal_entry(self, objective_id: str, entry_id: str) -> None:
        def apply(data: Store) -> Store:
            entries = data.journal.get(objective_id)
            if entries is not None:
                data.journal[objective_id] = [entry for entry in entries if entry.id != entry_id]
            return data

        self.store.mutate(apply)
