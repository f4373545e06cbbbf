"""Progress aggregation over the store.

All functions are pure reads. Dangling references (a task whose plan is gone,
a plan whose objective is unknown) simply drop out of the results.
"""

from __future__ import annotations

from collections.abc import Iterable

from tracking.catalog import get_objective
from tracking.models import Kpi, Objective, Plan, Store, Task, TaskStatus
from tracking.numbers import round_half_up


def task_completion_ratio(tasks: Iterable[Task]) -> int:
    """Percentage of tasks in ``done``; 0 for no tasks."""
    tasks = list(tasks)
    if not tasks:
        return 0
    done = sum(1 for task in tasks if task.status is TaskStatus.DONE)
    return round_half_up(done / len(tasks) * 100)


def plan_effective_progress(plan: Plan) -> int:
    """Mean sub-item progress when the plan has sub-items, else the manual value."""
    if plan.sub_items:
        mean = sum(item.progress_percent for item in plan.sub_items) / len(plan.sub_items)
        return round_half_up(mean)
    return plan.manual_progress_percent


def objective_plans(store: Store, objective_id: str) -> list[Plan]:
    return [plan for plan in store.plans.values() if plan.objective_id == objective_id]


def plan_tasks(store: Store, plan_id: str) -> list[Task]:
    return [task for task in store.tasks.values() if task.plan_id == plan_id]


def objective_tasks(store: Store, objective_id: str) -> list[Task]:
    plan_ids = {plan.id for plan in objective_plans(store, objective_id)}
    return [task for task in store.tasks.values() if task.plan_id in plan_ids]


def objective_kpis(store: Store, objective_id: str) -> list[Kpi]:
    return [kpi for kpi in store.kpis.values() if kpi.objective_id == objective_id]


def objective_progress(store: Store, objective_id: str) -> int:
    """Binary task completion over every task of every plan of the objective.

    Plan sizes and plan progress are not weighted in.
    """
    return task_completion_ratio(objective_tasks(store, objective_id))


def task_plan(store: Store, task: Task) -> Plan | None:
    return store.plans.get(task.plan_id)


def task_objective(store: Store, task: Task) -> Objective | None:
    plan = task_plan(store, task)
    if plan is None:
        return None
    return get_objective(plan.objective_id)
