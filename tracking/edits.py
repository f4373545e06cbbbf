"""Typed edit payloads coming from editing dialogs.

Each payload says which entity it carries and whether it is saved or
deleted; ``apply_edit`` dispatches on the payload type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from tracking.commands import PerformanceCommands
from tracking.models import Kpi, Plan, Task


class EditAction(str, Enum):
    SAVE = "save"
    DELETE = "delete"


@dataclass(frozen=True)
class TaskEdit:
    task: Task
    action: EditAction = EditAction.SAVE


@dataclass(frozen=True)
class PlanEdit:
    plan: Plan
    action: EditAction = EditAction.SAVE


@dataclass(frozen=True)
class KpiEdit:
    kpi: Kpi
    action: EditAction = EditAction.SAVE


EditPayload = Union[TaskEdit, PlanEdit, KpiEdit]


def apply_edit(commands: PerformanceCommands, payload: EditPayload) -> None:
    """Route an edit payload to the matching command."""
    if isinstance(payload, TaskEdit):
        if payload.action is EditAction.DELETE:
            commands.delete_task(payload.task.id)
        else:
            commands.upsert_task(payload.task)
    elif isinstance(payload, PlanEdit):
        if payload.action is EditAction.DELETE:
            commands.delete_plan(payload.plan.id)
        else:
            commands.upsert_plan(payload.plan)
    elif isinstance(payload, KpiEdit):
        if payload.action is EditAction.DELETE:
            commands.delete_kpi(payload.kpi.id)
        else:
            commands.upsert_kpi(payload.kpi)
    else:
        raise TypeError(f"Unsupported edit payload: {type(payload).__name__}")
