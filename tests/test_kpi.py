"""KPI resolution tests."""

from __future__ import annotations

import pytest

from tracking.commands import PerformanceCommands
from tracking.kpi import is_kpi_achieved, kpi_progress_percent, resolve_current
from tracking.models import Kpi, Plan
from tracking.store import PerformanceStore
from tracking.stores.memory_store import InMemoryDocumentStore


def plans_with(*progress: int) -> dict[str, Plan]:
    plans = [
        Plan(id=f"p{i}", objective_id="pr2", name=f"plan {i}", manual_progress_percent=value)
        for i, value in enumerate(progress)
    ]
    return {plan.id: plan for plan in plans}


def test_linked_plans_drive_current_value() -> None:
    plans = plans_with(80, 40)
    kpi = Kpi(objective_id="pr2", name="Leasing", target=50, manual_current=5, linked_plan_ids=["p0", "p1"])
    assert resolve_current(kpi, plans) == pytest.approx(30)
    assert kpi_progress_percent(kpi, plans) == 60


def test_manual_value_is_inert_while_linked() -> None:
    plans = plans_with(20)
    low = Kpi(objective_id="pr2", name="k", target=10, manual_current=1, linked_plan_ids=["p0"])
    high = low.model_copy(update={"manual_current": 999})
    assert resolve_current(low, plans) == resolve_current(high, plans) == pytest.approx(2)


def test_manual_value_used_without_links() -> None:
    kpi = Kpi(objective_id="pr2", name="k", target=200, manual_current="150")
    assert resolve_current(kpi, {}) == 150
    assert kpi_progress_percent(kpi, {}) == 75


def test_dangling_links_are_ignored() -> None:
    plans = plans_with(60)
    kpi = Kpi(objective_id="pr2", name="k", target=10, manual_current=9, linked_plan_ids=["ghost", "p0"])
    assert resolve_current(kpi, plans) == pytest.approx(6)

    only_dangling = kpi.model_copy(update={"linked_plan_ids": ["ghost"]})
    assert resolve_current(only_dangling, plans) == 9


def test_zero_target_is_treated_as_one() -> None:
    kpi = Kpi(objective_id="pr2", name="k", target=0, manual_current=0.5)
    assert kpi_progress_percent(kpi, {}) == 50
    assert not is_kpi_achieved(kpi, {})
    assert is_kpi_achieved(kpi.model_copy(update={"manual_current": 1}), {})


def test_progress_is_capped_and_invalid_numbers_are_zero() -> None:
    over = Kpi(objective_id="pr2", name="k", target=10, manual_current=25)
    assert kpi_progress_percent(over, {}) == 100
    junk = Kpi(objective_id="pr2", name="k", target="lots", manual_current="n/a")
    assert junk.target == 0 and junk.manual_current == 0
    assert Kpi(objective_id="pr2", name="k", target="12,5").target == 12.5


def test_current_follows_linked_plan_updates() -> None:
    store = PerformanceStore(document_store=InMemoryDocumentStore())
    store.load()
    commands = PerformanceCommands(store)
    plan = commands.upsert_plan(Plan(objective_id="pr2", name="Leasing", manual_progress_percent=20))
    kpi = commands.upsert_kpi(
        Kpi(objective_id="pr2", name="Occupancy", target=100, linked_plan_ids=[plan.id])
    )
    assert resolve_current(store.data.kpis[kpi.id], store.data.plans) == pytest.approx(20)

    commands.upsert_plan(plan.model_copy(update={"manual_progress_percent": 90}))
    assert resolve_current(store.data.kpis[kpi.id], store.data.plans) == pytest.approx(90)


def test_linked_kpi_without_positive_target_resolves_to_zero() -> None:
    plans = plans_with(70)
    for target in (0, -20):
        kpi = Kpi(objective_id="pr2", name="k", target=target, manual_current=4, linked_plan_ids=["p0"])
        assert resolve_current(kpi, plans) == 0
        assert kpi_progress_percent(kpi, plans) == 0
