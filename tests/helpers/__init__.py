"""Test helpers for SweetStreaks tests.

    from tests.helpers import NOW, START_DATE, TZ_UTC, check_in_daily

See scenarios.py for documentation.
"""

from tests.helpers.scenarios import (
    NOW,
    START_DATE,
    TZ_UTC,
    check_in_daily,
    shield_used_at,
)

__all__ = [
    "NOW",
    "START_DATE",
    "TZ_UTC",
    "check_in_daily",
    "shield_used_at",
]
