"""Typer command handlers."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path

import typer

from core.orchestrator import Orchestrator, RuntimeBundle
from core.policy_runtime import configure_logging, default_period, upcoming_days
from tracking.bonus import bonus_breakdown
from tracking.kpi import kpi_progress_percent, resolve_current
from tracking.models import (
    Kpi,
    ObjectiveCategory,
    Period,
    Plan,
    PlanStatus,
    Priority,
    SubItem,
    Task,
    TaskStatus,
)
from tracking.progress import plan_effective_progress, plan_tasks, task_completion_ratio
from tracking.reporting import (
    dashboard_summary,
    filter_objectives,
    filter_plans,
    filter_tasks,
    objective_journal,
    objective_overview,
    unit_stats,
)
from tracking.status import overdue_tasks, plan_status, upcoming_tasks


def _runtime(root: Path | None = None) -> RuntimeBundle:
    bundle = Orchestrator(root=root).build()
    configure_logging(bundle.config)
    return bundle


def _period(bundle: RuntimeBundle, period: str | None) -> Period:
    return Period(period) if period else default_period(bundle.config)


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(_json_safe(payload), indent=2, ensure_ascii=False))


def objectives_list(
    period: str | None,
    category: str | None = None,
    unit: str | None = None,
    search: str = "",
    sort: str = "name",
) -> None:
    """List catalog objectives with progress and note."""
    bundle = _runtime()
    chosen = _period(bundle, period)
    data = bundle.store.data
    objectives = filter_objectives(
        data,
        category=ObjectiveCategory(category) if category else None,
        unit=unit,
        search=search,
        sort=sort,
    )
    rows = [asdict(objective_overview(data, o.id, chosen)) for o in objectives]
    _echo_json(rows)


def plans_add(objective_id: str, name: str, priority: str, progress: int, sub_items: list[str]) -> None:
    bundle = _runtime()
    plan = Plan(
        objective_id=objective_id,
        name=name,
        priority=Priority(priority),
        manual_progress_percent=progress,
        sub_items=[SubItem(label=label) for label in sub_items],
    )
    saved = bundle.commands.upsert_plan(plan)
    typer.echo(f"Added plan {saved.id} ({saved.status.value})")


def plans_list(
    objective_id: str | None,
    unit: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    search: str = "",
    sort: str = "name",
) -> None:
    bundle = _runtime()
    data = bundle.store.data
    plans = filter_plans(
        data,
        unit=unit,
        status=PlanStatus(status) if status else None,
        priority=Priority(priority) if priority else None,
        search=search,
        sort=sort,
    )
    rows = []
    for plan in plans:
        if objective_id and plan.objective_id != objective_id:
            continue
        tasks = plan_tasks(data, plan.id)
        rows.append(
            {
                "id": plan.id,
                "objective_id": plan.objective_id,
                "name": plan.name,
                "status": plan_status(plan).value,
                "progress": plan_effective_progress(plan),
                "tasks": len(tasks),
                "tasks_done": task_completion_ratio(tasks),
                "deliverables": f"{plan.delivered_count}/{len(plan.deliverables)}",
            }
        )
    _echo_json(rows)


def plans_delete(plan_id: str) -> None:
    bundle = _runtime()
    removed = bundle.commands.delete_plan(plan_id)
    typer.echo(f"Deleted plan {plan_id} and {removed} task(s)")


def plans_block(plan_id: str, blocked: bool) -> None:
    bundle = _runtime()
    plan = bundle.commands.set_plan_blocked(plan_id, blocked)
    if plan is None:
        typer.echo(f"Plan not found: {plan_id}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Plan {plan_id} is now {plan.status.value}")


def plans_sub_item(plan_id: str, item_id: str, done: bool | None, progress: int | None) -> None:
    bundle = _runtime()
    plan = None
    if done is not None:
        plan = bundle.commands.set_sub_item_done(plan_id, item_id, done)
    if progress is not None:
        plan = bundle.commands.set_sub_item_progress(plan_id, item_id, progress)
    if plan is None:
        typer.echo(f"Plan not found or nothing to change: {plan_id}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Plan {plan_id}: {plan_effective_progress(plan)}% ({plan.status.value})")


def tasks_add(plan_id: str, title: str, priority: str, deadline: str | None) -> None:
    bundle = _runtime()
    task = Task(plan_id=plan_id, title=title, priority=Priority(priority), deadline=deadline)
    saved = bundle.commands.upsert_task(task)
    typer.echo(f"Added task {saved.id}")


def tasks_list(status: str | None, priority: str | None, unit: str | None, search: str) -> None:
    bundle = _runtime()
    tasks = filter_tasks(
        bundle.store.data,
        status=TaskStatus(status) if status else None,
        priority=Priority(priority) if priority else None,
        unit=unit,
        search=search,
    )
    _echo_json([task.model_dump(mode="json") for task in tasks])


def tasks_move(task_id: str, status: str) -> None:
    bundle = _runtime()
    task = bundle.commands.move_task(task_id, TaskStatus(status))
    if task is None:
        typer.echo(f"Task not found: {task_id}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Task {task_id} -> {task.status.value}")


def tasks_delete(task_id: str) -> None:
    bundle = _runtime()
    bundle.commands.delete_task(task_id)
    typer.echo(f"Deleted task {task_id}")


def tasks_due() -> None:
    """Show overdue and upcoming tasks."""
    bundle = _runtime()
    now = datetime.now(UTC)
    tasks = list(bundle.store.data.tasks.values())
    _echo_json(
        {
            "overdue": [task.model_dump(mode="json") for task in overdue_tasks(tasks, now)],
            "upcoming": [
                task.model_dump(mode="json")
                for task in upcoming_tasks(tasks, now.date(), days=upcoming_days(bundle.config))
            ],
        }
    )


def kpis_add(objective_id: str, name: str, target: str, current: str, unit: str, plan_ids: list[str]) -> None:
    bundle = _runtime()
    kpi = Kpi(
        objective_id=objective_id,
        name=name,
        target=target,
        manual_current=current,
        unit=unit,
        linked_plan_ids=plan_ids,
    )
    saved = bundle.commands.upsert_kpi(kpi)
    typer.echo(f"Added KPI {saved.id}")


def kpis_list(objective_id: str | None) -> None:
    bundle = _runtime()
    data = bundle.store.data
    rows = []
    for kpi in data.kpis.values():
        if objective_id and kpi.objective_id != objective_id:
            continue
        rows.append(
            {
                "id": kpi.id,
                "objective_id": kpi.objective_id,
                "name": kpi.name,
                "target": kpi.target,
                "current": round(resolve_current(kpi, data.plans), 1),
                "unit": kpi.unit,
                "progress": kpi_progress_percent(kpi, data.plans),
                "linked_plans": list(kpi.linked_plan_ids),
            }
        )
    _echo_json(rows)


def kpis_delete(kpi_id: str) -> None:
    bundle = _runtime()
    bundle.commands.delete_kpi(kpi_id)
    typer.echo(f"Deleted KPI {kpi_id}")


def notes_set(objective_id: str, value: str, period: str | None) -> None:
    bundle = _runtime()
    chosen = _period(bundle, period)
    stored = bundle.commands.set_note(objective_id, chosen, value)
    typer.echo(f"Note {objective_id} [{chosen.value}] = {stored:g}")


def journal_add(objective_id: str, text: str) -> None:
    bundle = _runtime()
    entry = bundle.commands.add_journal_entry(objective_id, text)
    typer.echo(f"Added journal entry {entry.id}")


def journal_list(objective_id: str) -> None:
    bundle = _runtime()
    entries = objective_journal(bundle.store.data, objective_id)
    _echo_json([entry.model_dump(mode="json") for entry in entries])


def journal_delete(objective_id: str, entry_id: str) -> None:
    bundle = _runtime()
    bundle.commands.delete_journal_entry(objective_id, entry_id)
    typer.echo(f"Deleted journal entry {entry_id}")


def bonus_show(period: str | None) -> None:
    bundle = _runtime()
    breakdown = bonus_breakdown(_period(bundle, period), bundle.store.data.notes)
    typer.echo(f"Personal: {breakdown.personal:.1f}% / 10%")
    typer.echo(f"Project: {breakdown.project:.1f}% / 10%")
    typer.echo("Organization: n/a (external decision)")
    typer.echo(f"Total: {breakdown.total:.1f}%")


def report_summary(period: str | None) -> None:
    bundle = _runtime()
    summary = dashboard_summary(bundle.store.data, _period(bundle, period), datetime.now(UTC))
    _echo_json(summary.as_dict())


def report_units(period: str | None) -> None:
    bundle = _runtime()
    rows = unit_stats(bundle.store.data, _period(bundle, period), datetime.now(UTC))
    _echo_json([asdict(row) for row in rows])


def config_show() -> None:
    """Show effective runtime config."""
    bundle = _runtime()
    _echo_json({"config": bundle.config, "paths": bundle.paths})


def _json_safe(payload: object) -> object:
    """Convert datetimes and paths to strings for JSON output."""
    if isinstance(payload, dict):
        return {k: _json_safe(v) for k, v in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_json_safe(v) for v in payload]
    if isinstance(payload, Path):
        return str(payload)
    if hasattr(payload, "isoformat"):
        return payload.isoformat()
    return payload
