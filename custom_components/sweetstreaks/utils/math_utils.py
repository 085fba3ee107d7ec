# File: utils/math_utils.py
"""Math and calculation utilities for SweetStreaks.

Functions:
    - round_half_up: Integer rounding with .5 always rounded up
    - mean_score: Rounded mean of a sequence of scores
    - calculate_percentage: Rounded, clamped percentage of part over whole
"""

from __future__ import annotations

from collections.abc import Iterable
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with exact halves rounded up.

    Python's built-in round() uses banker's rounding (round(92.5) == 92);
    scores are displayed to users, who expect 92.5 to become 93.

    Examples:
        round_half_up(96.666) → 97
        round_half_up(92.5) → 93
        round_half_up(0.4) → 0
    """
    return math.floor(value + 0.5)


def mean_score(scores: Iterable[int], default: int) -> int:
    """Return the half-up rounded mean of `scores`, or `default` if empty.

    Examples:
        mean_score([100, 100, 90], default=100) → 97
        mean_score([], default=0) → 0
    """
    values = list(scores)
    if not values:
        return default
    return round_half_up(sum(values) / len(values))


def calculate_percentage(part: float, whole: float) -> int:
    """Return round(part / whole * 100), clamped to 0..100.

    A non-positive `whole` yields 100.
    """
    if whole <= 0:
        return 100
    return max(0, min(100, round_half_up(part / whole * 100)))
