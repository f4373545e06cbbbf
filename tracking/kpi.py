"""KPI current-value resolution."""

from __future__ import annotations

from collections.abc import Mapping

from tracking.models import Kpi, Plan
from tracking.numbers import round_half_up
from tracking.progress import plan_effective_progress


def linked_plans(kpi: Kpi, plans: Mapping[str, Plan]) -> list[Plan]:
    """Plans the KPI links to, skipping ids that no longer exist."""
    return [plans[plan_id] for plan_id in kpi.linked_plan_ids if plan_id in plans]


def is_derived(kpi: Kpi, plans: Mapping[str, Plan]) -> bool:
    return bool(linked_plans(kpi, plans))


def resolve_current(kpi: Kpi, plans: Mapping[str, Plan]) -> float:
    """Current KPI value.

    With at least one live linked plan the value is the plans' mean effective
    progress scaled onto the target and ``manual_current`` is ignored. A linked
    KPI without a positive target resolves to 0. The value is not rounded.
    """
    linked = linked_plans(kpi, plans)
    if not linked:
        return kpi.manual_current
    if kpi.target <= 0:
        return 0.0
    average = sum(plan_effective_progress(plan) for plan in linked) / len(linked)
    return (average / 100) * kpi.target


def effective_target(kpi: Kpi) -> float:
    # A zero or negative target counts as 1, not as "already complete".
    return kpi.target if kpi.target > 0 else 1.0


def kpi_progress_percent(kpi: Kpi, plans: Mapping[str, Plan]) -> int:
    current = resolve_current(kpi, plans)
    ratio = current / effective_target(kpi) * 100
    return max(0, min(100, round_half_up(ratio)))


def is_kpi_achieved(kpi: Kpi, plans: Mapping[str, Plan]) -> bool:
    return resolve_current(kpi, plans) >= effective_target(kpi)
