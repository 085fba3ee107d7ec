"""Status Engine - Phase and time budget of a streak at a given instant.

The check-in window is 26 hours from the last check-in: 24 nominal hours
plus a 2 hour grace period. Hours elapsed map to phases:

    [0, 24)   active    reminder pending from hour 20
    [24, 25)  warning   warning pending
    [25, 26)  critical  critical pending
    [26, ...) broken    recovery pending

ARCHITECTURE: evaluate() is pure and cheap. Callers re-invoke it after
every commit and on every poll; results are never cached.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import ensure_aware, format_countdown, hours_between, local_date
from .shield_engine import ShieldEngine

if TYPE_CHECKING:
    from datetime import datetime
    from zoneinfo import ZoneInfo

    from ..type_defs import StatusSnapshot, StreakState


class StatusEngine:
    """Pure logic engine deriving a StatusSnapshot from state and now."""

    @staticmethod
    def classify(hours_elapsed: float) -> tuple[str, str | None]:
        """Return (phase, pending_notification) for hours since last check-in."""
        if hours_elapsed < const.CHECK_IN_WINDOW_HOURS:
            if hours_elapsed >= const.REMINDER_THRESHOLD_HOURS:
                return const.PHASE_ACTIVE, const.NOTIFICATION_REMINDER
            return const.PHASE_ACTIVE, None

        if hours_elapsed < const.TOTAL_WINDOW_HOURS:
            if hours_elapsed < const.CRITICAL_THRESHOLD_HOURS:
                return const.PHASE_WARNING, const.NOTIFICATION_WARNING
            return const.PHASE_CRITICAL, const.NOTIFICATION_CRITICAL

        return const.PHASE_BROKEN, const.NOTIFICATION_RECOVERY

    @staticmethod
    def evaluate(
        state: StreakState,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> StatusSnapshot:
        """Return the current phase, hours remaining and shield eligibility.

        Args:
            state: Current streak state
            now: Caller-supplied current time (timezone-aware)
            timezone: Zone used for the shield monthly cap

        Returns:
            StatusSnapshot for `now`.
        """
        ensure_aware(now, "now")
        last_check_in = state[const.DATA_LAST_CHECK_IN]
        if last_check_in is None:
            return {
                "phase": const.PHASE_ACTIVE,
                "hours_remaining": float(const.CHECK_IN_WINDOW_HOURS),
                "shield_eligible": False,
                "pending_notification": const.NOTIFICATION_REMINDER,
            }

        hours_elapsed = hours_between(last_check_in, now)
        phase, pending = StatusEngine.classify(hours_elapsed)
        shield_eligible = phase in const.SHIELD_PHASES and ShieldEngine.is_eligible(
            state, now, timezone
        )

        return {
            "phase": phase,
            "hours_remaining": max(0.0, const.TOTAL_WINDOW_HOURS - hours_elapsed),
            "shield_eligible": shield_eligible,
            "pending_notification": pending,
        }

    @staticmethod
    def has_checked_in_today(
        state: StreakState,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> bool:
        """Return True if any history entry falls on now's local calendar day."""
        today = local_date(now, timezone)
        return any(
            entry[const.DATA_ENTRY_DATE] == today for entry in state[const.DATA_HISTORY]
        )

    @staticmethod
    def status_message(snapshot: StatusSnapshot) -> str:
        """Return a short countdown/status text for a snapshot.

        Examples:
            warning, 1.5h left → "1h 30m remaining"
            critical, 0.25h left → "Critical: 15m left"
            broken, shield eligible → "Use a streak shield to recover"
        """
        remaining = format_countdown(timedelta(hours=snapshot["hours_remaining"]))
        phase = snapshot["phase"]
        if phase == const.PHASE_WARNING:
            return f"{remaining} remaining"
        if phase == const.PHASE_CRITICAL:
            return f"Critical: {remaining} left"
        if phase == const.PHASE_BROKEN:
            if snapshot["shield_eligible"]:
                return "Use a streak shield to recover"
            return "Streak broken - start fresh"
        return ""
