"""Unit tests for StatusEngine - phase bands, time budget and shield offers.

Test Categories:
- Streak without any check-in
- Phase band boundaries (24h / 25h / 26h)
- Pending notification kinds
- Shield eligibility gated by phase
- Same-day detection and status text
- Daylight saving transitions
- Independence from the wall clock
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from custom_components.sweetstreaks import const
from custom_components.sweetstreaks.data_builders import build_shield_record
from custom_components.sweetstreaks.engines.checkin_engine import CheckInEngine
from custom_components.sweetstreaks.engines.status_engine import StatusEngine
from custom_components.sweetstreaks.exceptions import InvalidTimestamp
from custom_components.sweetstreaks.type_defs import StreakState
from tests.helpers import NOW, TZ_UTC

# =============================================================================
# Test: no check-in yet
# =============================================================================


class TestNoCheckIn:
    """Tests for a streak that never checked in."""

    def test_fresh_state_is_active_with_full_day(
        self, fresh_state: StreakState, now: datetime
    ) -> None:
        """Absent last_check_in always yields active with 24 hours."""
        snapshot = StatusEngine.evaluate(fresh_state, now, TZ_UTC)

        assert snapshot["phase"] == const.PHASE_ACTIVE
        assert snapshot["hours_remaining"] == 24
        assert snapshot["shield_eligible"] is False
        assert snapshot["pending_notification"] == const.NOTIFICATION_REMINDER

    def test_independent_of_now(self, fresh_state: StreakState) -> None:
        """Any instant gives the same snapshot for a fresh state."""
        far_future = NOW + timedelta(days=400)
        assert StatusEngine.evaluate(fresh_state, far_future) == StatusEngine.evaluate(
            fresh_state, NOW
        )

    def test_naive_now_rejected(self, fresh_state: StreakState) -> None:
        """A naive 'now' is malformed input."""
        with pytest.raises(InvalidTimestamp):
            StatusEngine.evaluate(fresh_state, datetime(2026, 10, 18, 12, 0))


# =============================================================================
# Test: phase bands
# =============================================================================


class TestPhaseBands:
    """Tests for the mapping of hours elapsed to phases."""

    @pytest.mark.parametrize(
        ("hours_elapsed", "phase", "pending"),
        [
            (0.0, const.PHASE_ACTIVE, None),
            (19.99, const.PHASE_ACTIVE, None),
            (20.0, const.PHASE_ACTIVE, const.NOTIFICATION_REMINDER),
            (23.5, const.PHASE_ACTIVE, const.NOTIFICATION_REMINDER),
            (24.0, const.PHASE_WARNING, const.NOTIFICATION_WARNING),
            (24.99, const.PHASE_WARNING, const.NOTIFICATION_WARNING),
            (25.0, const.PHASE_CRITICAL, const.NOTIFICATION_CRITICAL),
            (25.999, const.PHASE_CRITICAL, const.NOTIFICATION_CRITICAL),
            (26.0, const.PHASE_BROKEN, const.NOTIFICATION_RECOVERY),
            (100.0, const.PHASE_BROKEN, const.NOTIFICATION_RECOVERY),
        ],
    )
    def test_classify(self, hours_elapsed: float, phase: str, pending: str | None) -> None:
        """Band boundaries are inclusive at the lower edge."""
        assert StatusEngine.classify(hours_elapsed) == (phase, pending)

    def test_exactly_24_hours_is_warning(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """24.0 hours elapsed is warning, not active."""
        snapshot = StatusEngine.evaluate(state_checked_in_hours_ago(24), NOW, TZ_UTC)
        assert snapshot["phase"] == const.PHASE_WARNING
        assert snapshot["hours_remaining"] == pytest.approx(2.0)

    def test_just_below_26_hours_is_critical(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """25.999 hours elapsed is still critical."""
        snapshot = StatusEngine.evaluate(
            state_checked_in_hours_ago(25.999), NOW, TZ_UTC
        )
        assert snapshot["phase"] == const.PHASE_CRITICAL
        assert snapshot["hours_remaining"] == pytest.approx(0.001, abs=1e-6)

    def test_exactly_26_hours_is_broken(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """26.0 hours elapsed breaks the streak and leaves no time."""
        snapshot = StatusEngine.evaluate(state_checked_in_hours_ago(26), NOW, TZ_UTC)
        assert snapshot["phase"] == const.PHASE_BROKEN
        assert snapshot["hours_remaining"] == 0

    def test_hours_remaining_never_negative(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """Long after the break the budget stays at zero."""
        snapshot = StatusEngine.evaluate(state_checked_in_hours_ago(30), NOW, TZ_UTC)
        assert snapshot["hours_remaining"] == 0


# =============================================================================
# Test: shield offers
# =============================================================================


class TestShieldOffer:
    """Shields are only offered in critical or broken phases."""

    def test_not_offered_while_active(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """An eligible user is not offered a shield while active."""
        snapshot = StatusEngine.evaluate(state_checked_in_hours_ago(10), NOW, TZ_UTC)
        assert snapshot["shield_eligible"] is False

    def test_not_offered_while_warning(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """Warning phase does not offer a shield either."""
        snapshot = StatusEngine.evaluate(state_checked_in_hours_ago(24.5), NOW, TZ_UTC)
        assert snapshot["shield_eligible"] is False

    def test_offered_when_critical(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """Critical phase with no shields used offers one."""
        snapshot = StatusEngine.evaluate(state_checked_in_hours_ago(25.5), NOW, TZ_UTC)
        assert snapshot["shield_eligible"] is True

    def test_not_offered_during_cooldown(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """A broken streak inside a shield cooldown gets no offer."""
        state = state_checked_in_hours_ago(30)
        recent = NOW - timedelta(days=2)
        state[const.DATA_SHIELDS] = [build_shield_record(recent, recent.date())]

        snapshot = StatusEngine.evaluate(state, NOW, TZ_UTC)
        assert snapshot["phase"] == const.PHASE_BROKEN
        assert snapshot["shield_eligible"] is False


# =============================================================================
# Test: helpers
# =============================================================================


class TestHelpers:
    """Tests for same-day detection and status text."""

    def test_has_checked_in_today_uses_local_day(
        self, fresh_state: StreakState
    ) -> None:
        """A check-in at 23:30 New York counts for that local day only."""
        tz = "America/New_York"
        late_evening = datetime.fromisoformat("2026-10-17T23:30:00-04:00")
        state = CheckInEngine.commit(fresh_state, late_evening, tz)

        next_morning = datetime.fromisoformat("2026-10-18T00:30:00-04:00")
        assert StatusEngine.has_checked_in_today(state, late_evening, tz) is True
        assert StatusEngine.has_checked_in_today(state, next_morning, tz) is False

    def test_status_message_warning(self) -> None:
        """Warning text shows the countdown."""
        message = StatusEngine.status_message(
            {
                "phase": const.PHASE_WARNING,
                "hours_remaining": 1.5,
                "shield_eligible": False,
                "pending_notification": const.NOTIFICATION_WARNING,
            }
        )
        assert message == "1h 30m remaining"

    def test_status_message_broken_with_shield(self) -> None:
        """Broken text points at the shield when one can be used."""
        message = StatusEngine.status_message(
            {
                "phase": const.PHASE_BROKEN,
                "hours_remaining": 0.0,
                "shield_eligible": True,
                "pending_notification": const.NOTIFICATION_RECOVERY,
            }
        )
        assert "shield" in message


# =============================================================================
# Test: daylight saving transitions
# =============================================================================

BERLIN = ZoneInfo("Europe/Berlin")


class TestDaylightSaving:
    """Hours are counted in real time when the zone changes offset."""

    def test_extra_autumn_hour_is_counted(self, fresh_state: StreakState) -> None:
        """12:00 CEST to 11:30 CET next day is 24.5 hours, so warning."""
        state = CheckInEngine.commit(
            fresh_state, datetime(2026, 10, 24, 12, 0, tzinfo=BERLIN), BERLIN
        )

        snapshot = StatusEngine.evaluate(
            state, datetime(2026, 10, 25, 11, 30, tzinfo=BERLIN), BERLIN
        )

        assert snapshot["phase"] == const.PHASE_WARNING
        assert snapshot["hours_remaining"] == pytest.approx(1.5)
        assert snapshot["pending_notification"] == const.NOTIFICATION_WARNING
        assert StatusEngine.status_message(snapshot) == "1h 30m remaining"

    def test_autumn_window_closes_one_wall_hour_early(
        self, fresh_state: StreakState
    ) -> None:
        """26 real hours after 12:00 CEST is 13:00 CET the next day."""
        state = CheckInEngine.commit(
            fresh_state, datetime(2026, 10, 24, 12, 0, tzinfo=BERLIN), BERLIN
        )

        snapshot = StatusEngine.evaluate(
            state, datetime(2026, 10, 25, 13, 0, tzinfo=BERLIN), BERLIN
        )

        assert snapshot["phase"] == const.PHASE_BROKEN
        assert snapshot["hours_remaining"] == 0.0

    def test_missing_spring_hour_is_not_counted(
        self, fresh_state: StreakState
    ) -> None:
        """12:00 CET to 12:30 CEST next day is 23.5 hours, so still active."""
        state = CheckInEngine.commit(
            fresh_state, datetime(2026, 3, 28, 12, 0, tzinfo=BERLIN), BERLIN
        )

        snapshot = StatusEngine.evaluate(
            state, datetime(2026, 3, 29, 12, 30, tzinfo=BERLIN), BERLIN
        )

        assert snapshot["phase"] == const.PHASE_ACTIVE
        assert snapshot["hours_remaining"] == pytest.approx(2.5)
        assert snapshot["pending_notification"] == const.NOTIFICATION_REMINDER


# =============================================================================
# Test: wall clock independence
# =============================================================================


class TestDeterminism:
    """The evaluator only depends on its arguments."""

    def test_frozen_wall_clock_does_not_change_result(
        self, state_checked_in_hours_ago: Callable[[float], StreakState]
    ) -> None:
        """Moving the system clock has no effect on the snapshot."""
        state = state_checked_in_hours_ago(25.5)
        expected = StatusEngine.evaluate(state, NOW, TZ_UTC)

        with freeze_time("2040-01-01 00:00:00"):
            assert StatusEngine.evaluate(state, NOW, TZ_UTC) == expected
