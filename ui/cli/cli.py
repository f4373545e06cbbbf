"""CLI entrypoint for the performance tracker."""

from __future__ import annotations

from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Performance tracking and bonus cockpit")
objectives_app = typer.Typer(help="Objective catalog")
plans_app = typer.Typer(help="Action plan commands")
tasks_app = typer.Typer(help="Task commands")
kpis_app = typer.Typer(help="KPI commands")
notes_app = typer.Typer(help="Evaluation note commands")
journal_app = typer.Typer(help="Objective journal commands")
bonus_app = typer.Typer(help="Bonus computation")
report_app = typer.Typer(help="Reporting summaries")
config_app = typer.Typer(help="Configuration commands")

PERIOD_HELP = "Evaluation period: firstHalf or secondHalf (default from config)"


@objectives_app.command("list")
def objectives_list_cmd(
    period: Optional[str] = typer.Option(None, help=PERIOD_HELP),
    category: Optional[str] = typer.Option(None, help="personal or project"),
    unit: Optional[str] = typer.Option(None, help="Organizational unit"),
    search: str = typer.Option("", help="Text in name or unit"),
    sort: str = typer.Option("name", help="name, progress, weight or unit"),
) -> None:
    """List objectives with progress, counts and note."""
    commands.objectives_list(period=period, category=category, unit=unit, search=search, sort=sort)


@plans_app.command("add")
def plans_add_cmd(
    objective_id: str = typer.Argument(..., help="Objective id, e.g. pr1"),
    name: str = typer.Argument(..., help="Plan name"),
    priority: str = typer.Option("medium", help="critical, high, medium or low"),
    progress: int = typer.Option(0, min=0, max=100, help="Manual progress percent"),
    sub_item: list[str] = typer.Option([], "--sub-item", help="Sub-item label (repeatable)"),
) -> None:
    """Add an action plan."""
    commands.plans_add(
        objective_id=objective_id,
        name=name,
        priority=priority,
        progress=progress,
        sub_items=sub_item,
    )


@plans_app.command("list")
def plans_list_cmd(
    objective: Optional[str] = typer.Option(None, help="Only this objective"),
    unit: Optional[str] = typer.Option(None, help="Organizational unit"),
    status: Optional[str] = typer.Option(None, help="todo, in_progress, done or blocked"),
    priority: Optional[str] = typer.Option(None),
    search: str = typer.Option("", help="Text in name, owner or objective name"),
    sort: str = typer.Option("name", help="name, progress, date, priority or status"),
) -> None:
    """List plans with derived progress and status."""
    commands.plans_list(
        objective_id=objective,
        unit=unit,
        status=status,
        priority=priority,
        search=search,
        sort=sort,
    )


@plans_app.command("delete")
def plans_delete_cmd(plan_id: str) -> None:
    """Delete a plan and its tasks."""
    commands.plans_delete(plan_id=plan_id)


@plans_app.command("block")
def plans_block_cmd(
    plan_id: str,
    unblock: bool = typer.Option(False, "--unblock", help="Clear the blocked flag"),
) -> None:
    """Mark a plan blocked (or unblocked)."""
    commands.plans_block(plan_id=plan_id, blocked=not unblock)


@plans_app.command("sub-item")
def plans_sub_item_cmd(
    plan_id: str,
    item_id: str,
    done: Optional[bool] = typer.Option(None, "--done/--not-done", help="Toggle done"),
    progress: Optional[int] = typer.Option(None, min=0, max=100, help="Set progress"),
) -> None:
    """Update one plan sub-item."""
    commands.plans_sub_item(plan_id=plan_id, item_id=item_id, done=done, progress=progress)


@tasks_app.command("add")
def tasks_add_cmd(
    plan_id: str = typer.Argument(..., help="Owning plan id"),
    title: str = typer.Argument(..., help="Task title"),
    priority: str = typer.Option("medium", help="critical, high, medium or low"),
    deadline: Optional[str] = typer.Option(None, help="Deadline as YYYY-MM-DD"),
) -> None:
    """Add a task."""
    commands.tasks_add(plan_id=plan_id, title=title, priority=priority, deadline=deadline)


@tasks_app.command("list")
def tasks_list_cmd(
    status: Optional[str] = typer.Option(None, help="todo, in_progress, in_review or done"),
    priority: Optional[str] = typer.Option(None),
    unit: Optional[str] = typer.Option(None, help="Organizational unit"),
    search: str = typer.Option("", help="Text in title or description"),
) -> None:
    """List tasks, critical first."""
    commands.tasks_list(status=status, priority=priority, unit=unit, search=search)


@tasks_app.command("move")
def tasks_move_cmd(task_id: str, status: str) -> None:
    """Move a task to any board column."""
    commands.tasks_move(task_id=task_id, status=status)


@tasks_app.command("delete")
def tasks_delete_cmd(task_id: str) -> None:
    commands.tasks_delete(task_id=task_id)


@tasks_app.command("due")
def tasks_due_cmd() -> None:
    """Show overdue and upcoming tasks."""
    commands.tasks_due()


@kpis_app.command("add")
def kpis_add_cmd(
    objective_id: str,
    name: str,
    target: str = typer.Option("0", help="Target value"),
    current: str = typer.Option("0", help="Manual current value (ignored while plans are linked)"),
    unit: str = typer.Option("%", help="Unit label"),
    plan: list[str] = typer.Option([], "--plan", help="Linked plan id (repeatable)"),
) -> None:
    """Add a KPI."""
    commands.kpis_add(
        objective_id=objective_id,
        name=name,
        target=target,
        current=current,
        unit=unit,
        plan_ids=plan,
    )


@kpis_app.command("list")
def kpis_list_cmd(objective: Optional[str] = typer.Option(None)) -> None:
    """List KPIs with resolved current values."""
    commands.kpis_list(objective_id=objective)


@kpis_app.command("delete")
def kpis_delete_cmd(kpi_id: str) -> None:
    commands.kpis_delete(kpi_id=kpi_id)


@notes_app.command("set")
def notes_set_cmd(
    objective_id: str,
    value: str = typer.Argument(..., help="Note between 0 and 10"),
    period: Optional[str] = typer.Option(None, help=PERIOD_HELP),
) -> None:
    """Set an evaluation note (clamped to 0..10)."""
    commands.notes_set(objective_id=objective_id, value=value, period=period)


@journal_app.command("add")
def journal_add_cmd(objective_id: str, text: str) -> None:
    commands.journal_add(objective_id=objective_id, text=text)


@journal_app.command("list")
def journal_list_cmd(objective_id: str) -> None:
    commands.journal_list(objective_id=objective_id)


@journal_app.command("delete")
def journal_delete_cmd(objective_id: str, entry_id: str) -> None:
    commands.journal_delete(objective_id=objective_id, entry_id=entry_id)


@bonus_app.command("show")
def bonus_show_cmd(period: Optional[str] = typer.Option(None, help=PERIOD_HELP)) -> None:
    """Show the bonus breakdown for a period."""
    commands.bonus_show(period=period)


@report_app.command("summary")
def report_summary_cmd(period: Optional[str] = typer.Option(None, help=PERIOD_HELP)) -> None:
    """Dashboard summary as JSON."""
    commands.report_summary(period=period)


@report_app.command("units")
def report_units_cmd(period: Optional[str] = typer.Option(None, help=PERIOD_HELP)) -> None:
    """Per organizational unit statistics."""
    commands.report_units(period=period)


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


app.add_typer(objectives_app, name="objectives")
app.add_typer(plans_app, name="plans")
app.add_typer(tasks_app, name="tasks")
app.add_typer(kpis_app, name="kpis")
app.add_typer(notes_app, name="notes")
app.add_typer(journal_app, name="journal")
app.add_typer(bonus_app, name="bonus")
app.add_typer(report_app, name="report")
app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
