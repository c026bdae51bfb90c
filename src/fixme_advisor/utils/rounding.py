"""Half-up rounding used for scores, confidences and rates."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up, unlike Python's banker's rounding.

    ``round_half_up(0.125, 2) == 0.13`` and ``round_half_up(42.5) == 43.0``.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_percent(value: float) -> int:
    """Round a percentage to the nearest integer, ties up."""
    return int(round_half_up(value))
