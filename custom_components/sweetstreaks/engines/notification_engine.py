"""Notification Engine - When the next status-change alert becomes due.

Alerts fire at fixed offsets from the last check-in: 20h (reminder),
23h (warning) and 25h (critical). These offsets are the phase band
boundaries used by StatusEngine; both read them from const.py.

The engine only computes *when* and *what kind*. Delivery is the caller's
job, and the caller must re-evaluate the status at firing time because the
state may have changed in between (see resolve_kind_at_fire_time).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import add_elapsed, ensure_aware, hours_between
from .status_engine import StatusEngine

if TYPE_CHECKING:
    from ..type_defs import NotificationPlan, StreakState


class NotificationEngine:
    """Pure logic engine for alert scheduling."""

    @staticmethod
    def get_next_notification(
        state: StreakState, now: datetime
    ) -> NotificationPlan | None:
        """Return the next alert still ahead of `now`, or None.

        None when the streak has no check-in yet or the critical alert is
        already behind (nothing further is scheduled before the break).
        """
        ensure_aware(now, "now")
        last_check_in = state[const.DATA_LAST_CHECK_IN]
        if last_check_in is None:
            return None

        elapsed = hours_between(last_check_in, now)
        for offset_hours, kind in const.NOTIFICATION_SCHEDULE:
            if elapsed < offset_hours:
                return {
                    "fire_at": add_elapsed(
                        last_check_in, timedelta(hours=offset_hours)
                    ),
                    "kind": kind,
                }
        return None

    @staticmethod
    def get_next_notification_time(
        state: StreakState, now: datetime
    ) -> datetime | None:
        """Return only the instant of the next alert, or None."""
        plan = NotificationEngine.get_next_notification(state, now)
        return plan["fire_at"] if plan else None

    @staticmethod
    def resolve_kind_at_fire_time(
        state: StreakState, fire_at: datetime
    ) -> str | None:
        """Return the alert kind that is actually pending when an alert fires.

        Pass the state as it is at firing time; a check-in committed since
        scheduling yields a different (often empty) kind.
        """
        return StatusEngine.evaluate(state, fire_at)["pending_notification"]
