"""Static objective catalog.

Objectives and their weights are configuration, never edited at runtime.
Within each category the weights sum to 100.
"""

from __future__ import annotations

from tracking.models import Objective, ObjectiveCategory

ORGANIZATIONAL_UNITS = ("NH", "EPSA", "RCP", "Praedium", "Groupe")


def _personal(objective_id: str, name: str, weight: float) -> Objective:
    return Objective(
        id=objective_id,
        name=name,
        organizational_unit="Groupe",
        weight_percent=weight,
        category=ObjectiveCategory.PERSONAL,
    )


def _project(objective_id: str, name: str, unit: str, weight: float) -> Objective:
    return Objective(
        id=objective_id,
        name=name,
        organizational_unit=unit,
        weight_percent=weight,
        category=ObjectiveCategory.PROJECT,
    )


PERSONAL_OBJECTIVES: tuple[Objective, ...] = (
    _personal("p1", "Teamwork & leadership", 10),
    _personal("p2", "Loyalty", 10),
    _personal("p3", "Emotional stability", 10),
    _personal("p4", "Accountability", 10),
    _personal("p5", "Organization", 10),
    _personal("p6", "Mentoring", 10),
    _personal("p7", "Attendance & punctuality", 10),
    _personal("p8", "Communication", 10),
    _personal("p9", "Analysis & synthesis", 10),
    _personal("p10", "Autonomy & tenacity", 10),
)

PROJECT_OBJECTIVES: tuple[Objective, ...] = (
    _project("pr1", "Cosmos Angre - pre-opening process", "NH", 20),
    _project("pr2", "Cosmos Angre - leasing follow-up to 100%", "NH", 10),
    _project("pr3", "Cosmos Angre - construction follow-up", "NH", 5),
    _project("pr4", "Castle Omega - food court opening", "NH", 5),
    _project("pr5", "Castle Omega - team assistance", "NH", 5),
    _project("pr6", "Cosmos Yop - financial performance", "EPSA", 7.5),
    _project("pr7", "Cosmos Yop - operational excellence", "EPSA", 7.5),
    _project("pr8", "Cosmos Yop - stakeholder relations", "EPSA", 7.5),
    _project("pr9", "Cosmos Yop - governance & compliance", "EPSA", 2.5),
    _project("pr10", "Cap Ivoire - leasing follow-up to 100%", "RCP", 10),
    _project("pr11", "Cap Ivoire - construction follow-up", "RCP", 5),
    _project("pr12", "Praedium Tech - transition follow-up", "Praedium", 5),
    _project("pr13", "Support for other RCP projects", "RCP", 10),
)

ALL_OBJECTIVES: tuple[Objective, ...] = PERSONAL_OBJECTIVES + PROJECT_OBJECTIVES

_BY_ID = {objective.id: objective for objective in ALL_OBJECTIVES}


def get_objective(objective_id: str) -> Objective | None:
    return _BY_ID.get(objective_id)


def objectives_for(category: ObjectiveCategory) -> tuple[Objective, ...]:
    if category is ObjectiveCategory.PERSONAL:
        return PERSONAL_OBJECTIVES
    return PROJECT_OBJECTIVES


def objectives_in_unit(unit: str, category: ObjectiveCategory | None = None) -> list[Objective]:
    return [
        objective
        for objective in ALL_OBJECTIVES
        if objective.organizational_unit == unit
        and (category is None or objective.category is category)
    ]


def category_weight_totals(objectives: tuple[Objective, ...] = ALL_OBJECTIVES) -> dict[str, float]:
    """Sum of weights per category; each should be exactly 100."""
    totals: dict[str, float] = {category.value: 0.0 for category in ObjectiveCategory}
    for objective in objectives:
        totals[objective.category.value] += objective.weight_percent
    return totals
