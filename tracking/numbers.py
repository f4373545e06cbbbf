"""Numeric coercion helpers shared by models and resolvers."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any


def parse_number(value: Any) -> float:
    """Coerce user input to a float, mapping anything unparsable to 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return 0.0
        try:
            parsed = float(text)
        except ValueError:
            return 0.0
        return parsed if math.isfinite(parsed) else 0.0
    return 0.0


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (percentages never go negative)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_percent(value: Any) -> int:
    """Parse and clamp an integer percentage into [0, 100]."""
    return int(clamp(round_half_up(parse_number(value)), 0, 100))


def parse_optional_date(value: Any) -> date | None:
    """Accept ISO strings, dates and datetimes; blank or malformed input becomes None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None
