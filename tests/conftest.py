"""Shared fixtures for SweetStreaks tests."""

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest

from custom_components.sweetstreaks.data_builders import build_streak_state
from custom_components.sweetstreaks.engines.checkin_engine import CheckInEngine
from custom_components.sweetstreaks.type_defs import StreakState
from tests.helpers import NOW, START_DATE, TZ_UTC


@pytest.fixture
def now() -> datetime:
    """Return the fixed reference instant."""
    return NOW


@pytest.fixture
def fresh_state() -> StreakState:
    """Return a streak started 30 days ago with no check-ins."""
    return build_streak_state(START_DATE)


@pytest.fixture
def state_checked_in_hours_ago(
    fresh_state: StreakState,
) -> Callable[[float], StreakState]:
    """Return a factory building a state whose only check-in was N hours before NOW."""

    def _build(hours_ago: float) -> StreakState:
        return CheckInEngine.commit(
            fresh_state, NOW - timedelta(hours=hours_ago), TZ_UTC
        )

    return _build
