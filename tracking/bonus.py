"""Weighted bonus computation from evaluation notes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from tracking.catalog import PERSONAL_OBJECTIVES, PROJECT_OBJECTIVES
from tracking.models import Objective, Period, note_key
from tracking.numbers import clamp

MAX_NOTE = 10.0
MAX_CATEGORY_BONUS = 10.0


def objective_bonus(objective: Objective, note: float) -> float:
    """Contribution of one objective: (note/10) * (weight/100) * 10."""
    return (clamp(note, 0.0, MAX_NOTE) / MAX_NOTE) * (objective.weight_percent / 100) * MAX_CATEGORY_BONUS


def category_bonus(
    objectives: Iterable[Objective],
    period: Period,
    notes: Mapping[str, float],
) -> float:
    """Bonus percentage for one category; lies in [0, 10] when weights sum to 100."""
    return sum(
        objective_bonus(objective, notes.get(note_key(objective.id, period), 0.0))
        for objective in objectives
    )


@dataclass(frozen=True)
class BonusBreakdown:
    """Per-category bonus for a period.

    ``organization`` is decided outside this engine and is always ``None``.
    """

    period: Period
    personal: float
    project: float
    organization: float | None = None

    @property
    def total(self) -> float:
        return self.personal + self.project

    def as_dict(self) -> dict[str, object]:
        return {
            "period": self.period.value,
            "personal": self.personal,
            "project": self.project,
            "organization": self.organization,
            "total": self.total,
        }


def bonus_breakdown(period: Period, notes: Mapping[str, float]) -> BonusBreakdown:
    return BonusBreakdown(
        period=period,
        personal=category_bonus(PERSONAL_OBJECTIVES, period, notes),
        project=category_bonus(PROJECT_OBJECTIVES, period, notes),
    )


def total_bonus(period: Period, notes: Mapping[str, float]) -> float:
    """Personal plus project bonus; the organization-level share is not included."""
    return bonus_breakdown(period, notes).total
