"""Unit tests for NotificationEngine - next alert time and kind."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta

import pytest

from custom_components.sweetstreaks import const
from custom_components.sweetstreaks.engines.checkin_engine import CheckInEngine
from custom_components.sweetstreaks.engines.notification_engine import (
    NotificationEngine,
)
from custom_components.sweetstreaks.type_defs import StreakState
from tests.helpers import NOW, TZ_UTC

# =============================================================================
# Test: scheduling
# =============================================================================


class TestNextNotification:
    """Tests for the 20h / 23h / 25h offsets."""

    def test_no_check_in_schedules_nothing(self, fresh_state: StreakState) -> None:
        """Without a check-in there is nothing to count from."""
        assert NotificationEngine.get_next_notification(fresh_state, NOW) is None
        assert NotificationEngine.get_next_notification_time(fresh_state, NOW) is None

    @pytest.mark.parametrize(
        ("hours_ago", "offset", "kind"),
        [
            (0, 20, const.NOTIFICATION_REMINDER),
            (19.5, 20, const.NOTIFICATION_REMINDER),
            (20, 23, const.NOTIFICATION_WARNING),
            (22, 23, const.NOTIFICATION_WARNING),
            (23, 25, const.NOTIFICATION_CRITICAL),
            (24.5, 25, const.NOTIFICATION_CRITICAL),
        ],
    )
    def test_next_offset_ahead_of_now(
        self,
        state_checked_in_hours_ago: Callable[[float], StreakState],
        hours_ago: float,
        offset: int,
        kind: str,
    ) -> None:
        """The first offset not yet reached is scheduled."""
        state = state_checked_in_hours_ago(hours_ago)
        last_check_in = state[const.DATA_LAST_CHECK_IN]
        assert last_check_in is not None

        plan = NotificationEngine.get_next_notification(state, NOW)

        assert plan == {
            "fire_at": last_check_in + timedelta(hours=offset),
            "kind": kind,
        }
        assert NotificationEngine.get_next_notification_time(state, NOW) == (
            plan["fire_at"]
        )

    @pytest.mark.parametrize("hours_ago", [25, 25.5, 40])
    def test_nothing_after_critical(
        self,
        state_checked_in_hours_ago: Callable[[float], StreakState],
        hours_ago: float,
    ) -> None:
        """Once the critical alert is behind, nothing more is scheduled."""
        state = state_checked_in_hours_ago(hours_ago)
        assert NotificationEngine.get_next_notification(state, NOW) is None


# =============================================================================
# Test: firing time re-evaluation
# =============================================================================


class TestResolveAtFireTime:
    """The kind is re-derived from state when the alert actually fires."""

    def test_critical_when_nothing_changed(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """The 25h alert still reports critical if no check-in happened."""
        state = state_checked_in_hours_ago(24.5)
        plan = NotificationEngine.get_next_notification(state, NOW)
        assert plan is not None

        assert NotificationEngine.resolve_kind_at_fire_time(state, plan["fire_at"]) == (
            const.NOTIFICATION_CRITICAL
        )

    def test_check_in_before_firing_clears_alert(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """A check-in committed after scheduling leaves nothing pending."""
        state = state_checked_in_hours_ago(22)
        plan = NotificationEngine.get_next_notification(state, NOW)
        assert plan is not None

        state = CheckInEngine.commit(state, NOW, TZ_UTC)

        assert NotificationEngine.resolve_kind_at_fire_time(state, plan["fire_at"]) is None

    def test_warning_alert_resolves_to_reminder_while_active(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """The 23h alert fires while the phase is still active."""
        state = state_checked_in_hours_ago(21)
        plan = NotificationEngine.get_next_notification(state, NOW)
        assert plan is not None
        assert plan["kind"] == const.NOTIFICATION_WARNING

        assert NotificationEngine.resolve_kind_at_fire_time(state, plan["fire_at"]) == (
            const.NOTIFICATION_REMINDER
        )
