"""Status derivation for plans and deadline checks for tasks."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from tracking.models import Plan, PlanStatus, Task, TaskStatus
from tracking.progress import plan_effective_progress


def derive_plan_status(effective_progress: int, blocked: bool) -> PlanStatus:
    """Plan lifecycle as a pure function of progress and the blocked flag."""
    if blocked:
        return PlanStatus.BLOCKED
    if effective_progress <= 0:
        return PlanStatus.TODO
    if effective_progress >= 100:
        return PlanStatus.DONE
    return PlanStatus.IN_PROGRESS


def plan_status(plan: Plan) -> PlanStatus:
    return derive_plan_status(plan_effective_progress(plan), plan.blocked)


def with_derived_status(plan: Plan) -> Plan:
    """Copy of ``plan`` whose stored status matches its derived status."""
    return plan.model_copy(update={"status": plan_status(plan)})


def is_overdue(task: Task, now: datetime) -> bool:
    """True when the deadline's end of day is strictly before ``now`` and the task is open."""
    if task.deadline is None or task.status is TaskStatus.DONE:
        return False
    end_of_day = datetime.combine(task.deadline, time.max, tzinfo=now.tzinfo)
    return end_of_day < now


def overdue_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    return [task for task in tasks if is_overdue(task, now)]


def upcoming_tasks(tasks: Iterable[Task], today: date, days: int = 7) -> list[Task]:
    """Open tasks whose deadline falls within ``[today, today + days]``."""
    horizon = today + timedelta(days=days)
    return [
        task
        for task in tasks
        if task.deadline is not None
        and task.status is not TaskStatus.DONE
        and today <= task.deadline <= horizon
    ]
