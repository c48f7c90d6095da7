"""
Common utility functions for the skill engine.

Small numeric and naming helpers shared by the detection and matching
packages so both round, clamp and key skills the same way.
"""

import math
from datetime import datetime, timezone


def skill_key(name: str) -> str:
    """
    Case-insensitive identity key for a skill name.

    Example:
        >>> skill_key("  TypeScript ")
        'typescript'
    """
    return " ".join((name or "").strip().lower().split())


def clamp(value: float, minimum: float = 0.0, maximum: float = 1.0) -> float:
    """Clamp value into [minimum, maximum]."""
    return max(minimum, min(maximum, float(value)))


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    numerator / denominator, or 0.0 when the denominator is not positive.

    Keeps NaN and infinity out of scores that are later sorted and rounded.
    """
    if denominator <= 0:
        return 0.0
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding (round(67.5) == 68 but
    round(66.5) == 66); percentages here must always round .5 up.

    Example:
        >>> round_half_up(66.5)
        67
        >>> round_half_up(-2.5)
        -3
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current wall-clock time in UTC (default clock for impure callers)."""
    return datetime.now(timezone.utc)
