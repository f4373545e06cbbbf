"""Read-side summaries consumed by dashboards and exporters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

from tracking.bonus import bonus_breakdown, objective_bonus
from tracking.catalog import ALL_OBJECTIVES, ORGANIZATIONAL_UNITS, get_objective, objectives_in_unit
from tracking.kpi import is_kpi_achieved
from tracking.models import (
    JournalEntry,
    Objective,
    ObjectiveCategory,
    Period,
    Plan,
    PlanStatus,
    Priority,
    Store,
    Task,
    TaskStatus,
)
from tracking.numbers import round_half_up
from tracking.progress import (
    objective_kpis,
    objective_plans,
    objective_progress,
    objective_tasks,
    plan_effective_progress,
    task_completion_ratio,
)
from tracking.status import overdue_tasks, plan_status


def task_status_breakdown(tasks: Iterable[Task]) -> dict[str, int]:
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status.value] += 1
    return counts


def filter_tasks(
    store: Store,
    status: TaskStatus | None = None,
    priority: Priority | None = None,
    unit: str | None = None,
    search: str = "",
) -> list[Task]:
    """Filter tasks and sort them critical first."""
    tasks = list(store.tasks.values())
    if status is not None:
        tasks = [task for task in tasks if task.status is status]
    if priority is not None:
        tasks = [task for task in tasks if task.priority is priority]
    if unit is not None:
        objective_ids = {objective.id for objective in objectives_in_unit(unit)}
        plan_ids = {plan.id for plan in store.plans.values() if plan.objective_id in objective_ids}
        tasks = [task for task in tasks if task.plan_id in plan_ids]
    needle = search.strip().lower()
    if needle:
        tasks = [
            task
            for task in tasks
            if needle in task.title.lower() or needle in task.description.lower()
        ]
    return sorted(tasks, key=lambda task: task.priority.rank)


PLAN_SORTS = ("name", "progress", "date", "priority", "status")
OBJECTIVE_SORTS = ("name", "progress", "weight", "unit")

_PLAN_STATUS_RANK = {
    PlanStatus.BLOCKED: 0,
    PlanStatus.TODO: 1,
    PlanStatus.IN_PROGRESS: 2,
    PlanStatus.DONE: 3,
}


def filter_plans(
    store: Store,
    unit: str | None = None,
    status: PlanStatus | None = None,
    priority: Priority | None = None,
    search: str = "",
    sort: str = "name",
) -> list[Plan]:
    """Filter plans and sort them by name, progress, target date, priority or status.

    Status filtering and sorting use the derived status; blocked plans sort first.
    Search matches the plan name, its owner and its objective's name.
    """
    if sort not in PLAN_SORTS:
        raise ValueError(f"Unknown plan sort '{sort}', expected one of {', '.join(PLAN_SORTS)}.")
    plans = list(store.plans.values())
    if status is not None:
        plans = [plan for plan in plans if plan_status(plan) is status]
    if priority is not None:
        plans = [plan for plan in plans if plan.priority is priority]
    if unit is not None:
        objective_ids = {objective.id for objective in objectives_in_unit(unit)}
        plans = [plan for plan in plans if plan.objective_id in objective_ids]
    needle = search.strip().lower()
    if needle:
        plans = [
            plan
            for plan in plans
            if any(needle in text.lower() for text in _plan_search_fields(plan))
        ]

    if sort == "progress":
        return sorted(plans, key=plan_effective_progress, reverse=True)
    if sort == "date":
        # undated plans go last
        return sorted(plans, key=lambda plan: plan.target_date or date.max)
    if sort == "priority":
        return sorted(plans, key=lambda plan: plan.priority.rank)
    if sort == "status":
        return sorted(plans, key=lambda plan: _PLAN_STATUS_RANK[plan_status(plan)])
    return sorted(plans, key=lambda plan: plan.name.casefold())


def _plan_search_fields(plan: Plan) -> tuple[str, ...]:
    objective = get_objective(plan.objective_id)
    return (plan.name, plan.owner, objective.name if objective is not None else "")


def filter_objectives(
    store: Store,
    category: ObjectiveCategory | None = None,
    unit: str | None = None,
    search: str = "",
    sort: str = "name",
) -> list[Objective]:
    """Catalog objectives matching the filters; search looks at name and unit."""
    if sort not in OBJECTIVE_SORTS:
        raise ValueError(
            f"Unknown objective sort '{sort}', expected one of {', '.join(OBJECTIVE_SORTS)}."
        )
    objectives = [
        objective
        for objective in ALL_OBJECTIVES
        if (category is None or objective.category is category)
        and (unit is None or objective.organizational_unit == unit)
    ]
    needle = search.strip().lower()
    if needle:
        objectives = [
            objective
            for objective in objectives
            if needle in objective.name.lower() or needle in objective.organizational_unit.lower()
        ]

    if sort == "progress":
        return sorted(objectives, key=lambda o: objective_progress(store, o.id), reverse=True)
    if sort == "weight":
        return sorted(objectives, key=lambda o: o.weight_percent, reverse=True)
    if sort == "unit":
        return sorted(objectives, key=lambda o: o.organizational_unit.casefold())
    return sorted(objectives, key=lambda o: o.name.casefold())


def objective_journal(store: Store, objective_id: str) -> list[JournalEntry]:
    """Journal of one objective, newest first."""
    return sorted(store.journal.get(objective_id, []), key=lambda e: e.timestamp, reverse=True)


def recent_journal(store: Store, limit: int = 20) -> list[dict[str, Any]]:
    """Journal entries across catalog objectives, newest first."""
    rows: list[tuple[datetime, dict[str, Any]]] = []
    for objective in ALL_OBJECTIVES:
        for entry in store.journal.get(objective.id, []):
            rows.append(
                (
                    entry.timestamp,
                    {
                        "id": entry.id,
                        "objective_id": objective.id,
                        "objective_name": objective.name,
                        "text": entry.text,
                        "timestamp": entry.timestamp.isoformat(),
                    },
                )
            )
    rows.sort(key=lambda row: row[0], reverse=True)
    return [payload for _, payload in rows[:limit]]


@dataclass
class ObjectiveOverview:
    objective_id: str
    name: str
    organizational_unit: str
    weight_percent: float
    progress: int
    plans: int
    tasks: int
    kpis: int
    note: float
    bonus_contribution: float


def objective_overview(store: Store, objective_id: str, period: Period) -> ObjectiveOverview | None:
    objective = get_objective(objective_id)
    if objective is None:
        return None
    note = store.note(objective_id, period)
    return ObjectiveOverview(
        objective_id=objective.id,
        name=objective.name,
        organizational_unit=objective.organizational_unit,
        weight_percent=objective.weight_percent,
        progress=objective_progress(store, objective.id),
        plans=len(objective_plans(store, objective.id)),
        tasks=len(objective_tasks(store, objective.id)),
        kpis=len(objective_kpis(store, objective.id)),
        note=note,
        bonus_contribution=objective_bonus(objective, note),
    )


@dataclass
class UnitStats:
    unit: str
    objectives: int
    tasks: int
    done: int
    overdue: int
    average_progress: int
    average_note: float
    bonus: float


def unit_stats(store: Store, period: Period, now: datetime) -> list[UnitStats]:
    """Per business unit figures over project objectives; units without any are skipped."""
    stats: list[UnitStats] = []
    for unit in ORGANIZATIONAL_UNITS:
        objectives = objectives_in_unit(unit, ObjectiveCategory.PROJECT)
        if not objectives:
            continue
        tasks = [task for objective in objectives for task in objective_tasks(store, objective.id)]
        notes = [store.note(objective.id, period) for objective in objectives]
        progress = [objective_progress(store, objective.id) for objective in objectives]
        stats.append(
            UnitStats(
                unit=unit,
                objectives=len(objectives),
                tasks=len(tasks),
                done=sum(1 for task in tasks if task.status is TaskStatus.DONE),
                overdue=len(overdue_tasks(tasks, now)),
                average_progress=round_half_up(sum(progress) / len(objectives)),
                average_note=sum(notes) / len(objectives),
                bonus=sum(
                    objective_bonus(objective, note) for objective, note in zip(objectives, notes)
                ),
            )
        )
    return stats


@dataclass
class DashboardSummary:
    period: str
    bonus: dict[str, Any]
    total_tasks: int
    completion: int
    status_breakdown: dict[str, int]
    overdue: int
    open_critical: int
    kpis: int
    kpis_achieved: int
    units: list[dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def dashboard_summary(store: Store, period: Period, now: datetime) -> DashboardSummary:
    tasks = list(store.tasks.values())
    kpis = list(store.kpis.values())
    return DashboardSummary(
        period=period.value,
        bonus=bonus_breakdown(period, store.notes).as_dict(),
        total_tasks=len(tasks),
        completion=task_completion_ratio(tasks),
        status_breakdown=task_status_breakdown(tasks),
        overdue=len(overdue_tasks(tasks, now)),
        open_critical=sum(
            1 for task in tasks if task.priority is Priority.CRITICAL and task.status is not TaskStatus.DONE
        ),
        kpis=len(kpis),
        kpis_achieved=sum(1 for kpi in kpis if is_kpi_achieved(kpi, store.plans)),
        units=[asdict(row) for row in unit_stats(store, period, now)],
    )
