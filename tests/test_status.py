"""Plan status derivation and task deadline tests."""

from __future__ import annotations

from datetime import UTC, date, datetime

from tracking.models import Plan, PlanStatus, SubItem, Task, TaskStatus
from tracking.status import (
    derive_plan_status,
    is_overdue,
    overdue_tasks,
    plan_status,
    upcoming_tasks,
    with_derived_status,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def test_plan_status_follows_progress_when_not_blocked() -> None:
    assert derive_plan_status(0, blocked=False) is PlanStatus.TODO
    for progress in range(1, 100):
        assert derive_plan_status(progress, blocked=False) is PlanStatus.IN_PROGRESS
    assert derive_plan_status(100, blocked=False) is PlanStatus.DONE


def test_blocked_wins_regardless_of_progress() -> None:
    for progress in (0, 50, 100):
        assert derive_plan_status(progress, blocked=True) is PlanStatus.BLOCKED


def test_stored_status_is_overwritten_by_derivation() -> None:
    plan = Plan(
        objective_id="pr1",
        name="Opening",
        status=PlanStatus.DONE,
        sub_items=[SubItem(progress_percent=100, done=True), SubItem(progress_percent=50)],
    )
    assert plan_status(plan) is PlanStatus.IN_PROGRESS
    assert with_derived_status(plan).status is PlanStatus.IN_PROGRESS


def test_overdue_only_after_end_of_deadline_day() -> None:
    yesterday = Task(plan_id="a", title="late", deadline=date(2026, 3, 9))
    today = Task(plan_id="a", title="today", deadline=date(2026, 3, 10))
    assert is_overdue(yesterday, NOW)
    assert not is_overdue(today, NOW)
    assert not is_overdue(today, datetime(2026, 3, 10, 23, 59, tzinfo=UTC))
    assert is_overdue(today, datetime(2026, 3, 11, 0, 0, tzinfo=UTC))


def test_done_or_undated_tasks_are_never_overdue() -> None:
    done = Task(plan_id="a", title="done", deadline=date(2020, 1, 1), status=TaskStatus.DONE)
    undated = Task(plan_id="a", title="open")
    assert not is_overdue(done, NOW)
    assert not is_overdue(undated, NOW)
    assert overdue_tasks([done, undated], NOW) == []


def test_blank_deadline_string_means_no_deadline() -> None:
    assert Task(plan_id="a", title="x", deadline="").deadline is None
    assert Task(plan_id="a", title="x", deadline="2026-03-01").deadline == date(2026, 3, 1)


def test_upcoming_tasks_window() -> None:
    tasks = [
        Task(plan_id="a", title="today", deadline=date(2026, 3, 10)),
        Task(plan_id="a", title="in a week", deadline=date(2026, 3, 17)),
        Task(plan_id="a", title="later", deadline=date(2026, 3, 18)),
        Task(plan_id="a", title="past", deadline=date(2026, 3, 9)),
        Task(plan_id="a", title="closed", deadline=date(2026, 3, 11), status=TaskStatus.DONE),
    ]
    titles = [task.title for task in upcoming_tasks(tasks, date(2026, 3, 10))]
    assert titles == ["today", "in a week"]
