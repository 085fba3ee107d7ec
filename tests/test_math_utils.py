"""Tests for utils/math_utils.py."""

import pytest

from custom_components.sweetstreaks.utils.math_utils import (
    calculate_percentage,
    mean_score,
    round_half_up,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(96.666, 97), (92.5, 93), (0.5, 1), (0.4, 0), (100.0, 100)],
)
def test_round_half_up(value: float, expected: int) -> None:
    """Exact halves round up, unlike round()."""
    assert round_half_up(value) == expected


def test_mean_score() -> None:
    """Mean is rounded half-up; empty input returns the default."""
    assert mean_score([100, 100, 90], default=100) == 97
    assert mean_score([], default=0) == 0
    assert mean_score(iter([80, 90]), default=0) == 85


def test_calculate_percentage() -> None:
    """Percentages are rounded and clamped to 0..100."""
    assert calculate_percentage(1, 3) == 33
    assert calculate_percentage(5, 4) == 100
    assert calculate_percentage(0, 10) == 0
    assert calculate_percentage(3, 0) == 100
