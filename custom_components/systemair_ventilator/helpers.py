from __future__ import annotations

from math import isfinite
from typing import Any

from .const import LEVEL_OFF, LEVEL_TO_PERCENT, PERCENT_BUCKETS


def clamp(value: float | int, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, float(value)))


def to_int(v: Any, default: int = 0) -> int:
    """Register value -> int, `default` for missing or garbage values."""
    try:
        return int(v)
    except (TypeError, ValueError, OverflowError):
        return default


def percent_to_level(percent: int | float | None) -> int:
    """0 → 0, 1..34 → 2, 35..57 → 3, 58..100 → 4."""
    try:
        p = float(percent)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return LEVEL_OFF
    if not isfinite(p):
        return LEVEL_OFF
    p = clamp(p, 0, 100)
    if p <= 0:
        return LEVEL_OFF
    for upper, level in PERCENT_BUCKETS:
        if p <= upper:
            return level
    return PERCENT_BUCKETS[-1][1]


def level_to_percent(level: Any) -> int:
    """2 → 25, 3 → 45, 4 → 70, everything else → 0."""
    if isinstance(level, bool):
        return 0
    return LEVEL_TO_PERCENT.get(level, 0) if isinstance(level, int) else 0


def timer_to_percent(raw: Any) -> int:
    """Remaining minutes clamped into 0..100."""
    return int(clamp(to_int(raw), 0, 100))
