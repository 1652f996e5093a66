"""Half-up rounding helpers.

Python's built-in round() uses banker's rounding; seeded benchmark figures and
every score here round halves upward, so everything goes through these.
"""
from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_to(value: float, granularity: int) -> int:
    """Round to the nearest multiple of *granularity* (100 → ¥100 steps)."""
    if granularity <= 1:
        return round_int(value)
    return round_int(value / granularity) * granularity
