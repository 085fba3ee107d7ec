"""Shield Engine - Eligibility and commit logic for streak shields.

A shield repairs one missed day at a reduced quality score. Use is gated by:
- A monthly cap (MAX_SHIELDS_PER_MONTH per calendar month)
- A cooldown after each use (SHIELD_COOLDOWN_DAYS)
- A usage window (the miss must be at most SHIELD_USAGE_WINDOW_HOURS old)

ARCHITECTURE: All functions are static methods that operate on passed-in
data. commit() returns a new StreakState; the input is never mutated.

Shield commits leave current_streak untouched. They advance last_check_in
to the repaired instant (when that is later than the stored value). A miss
older than the nominal window is anchored one window before now instead, so
the status evaluator never reports broken right after a shield commit.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..data_builders import (
    build_history_entry,
    build_shield_record,
    copy_streak_state,
)
from ..exceptions import (
    AlreadyCheckedIn,
    InvalidTimestamp,
    ShieldUnavailable,
    ShieldWindowExpired,
)
from ..utils.dt_utils import (
    add_elapsed,
    as_utc,
    elapsed,
    ensure_aware,
    format_countdown,
    hours_between,
    local_date,
)
from .analytics_engine import AnalyticsEngine

if TYPE_CHECKING:
    from collections.abc import Sequence
    from zoneinfo import ZoneInfo

    from ..type_defs import ShieldRecord, StreakState


class ShieldEngine:
    """Pure logic engine for shield eligibility and shield commits.

    All methods are static - no instance state.
    """

    # =========================================================================
    # QUERIES
    # =========================================================================

    @staticmethod
    def latest_shield(shields: Sequence[ShieldRecord]) -> ShieldRecord | None:
        """Return the most recently used shield, or None."""
        if not shields:
            return None
        return max(
            shields, key=lambda shield: as_utc(shield[const.DATA_SHIELD_USED_AT])
        )

    @staticmethod
    def shields_used_this_month(
        state: StreakState,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> int:
        """Count shields used in now's calendar month and year."""
        today = local_date(now, timezone)
        count = 0
        for shield in state[const.DATA_SHIELDS]:
            used_on = local_date(shield[const.DATA_SHIELD_USED_AT], timezone)
            if (used_on.year, used_on.month) == (today.year, today.month):
                count += 1
        return count

    @staticmethod
    def get_remaining(
        state: StreakState,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> int:
        """Return how many shields are still available this calendar month."""
        used = ShieldEngine.shields_used_this_month(state, now, timezone)
        return max(0, const.MAX_SHIELDS_PER_MONTH - used)

    @staticmethod
    def cooldown_remaining(state: StreakState, now: datetime) -> timedelta:
        """Return the time left on the active cooldown (zero when none)."""
        latest = ShieldEngine.latest_shield(state[const.DATA_SHIELDS])
        if latest is None:
            return timedelta()
        remaining = elapsed(now, latest[const.DATA_SHIELD_COOLDOWN_UNTIL])
        return max(remaining, timedelta())

    @staticmethod
    def is_eligible(
        state: StreakState,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> bool:
        """Return True when both the monthly cap and the cooldown allow a shield."""
        if ShieldEngine.get_remaining(state, now, timezone) <= 0:
            return False
        return ShieldEngine.cooldown_remaining(state, now) <= timedelta()

    @staticmethod
    def hours_until_window_expiry(missed_at: datetime, now: datetime) -> float:
        """Return the hours left before a miss can no longer be repaired."""
        hours_since_miss = hours_between(missed_at, now)
        return max(0.0, const.SHIELD_USAGE_WINDOW_HOURS - hours_since_miss)

    @staticmethod
    def default_missed_at(state: StreakState, now: datetime) -> datetime:
        """Return the instant a shield should repair when the caller has no choice.

        That is the end of the nominal window after the last check-in, or one
        day before `now` for a streak that never checked in.
        """
        last_check_in = state[const.DATA_LAST_CHECK_IN]
        if last_check_in is None:
            return add_elapsed(now, -timedelta(hours=const.CHECK_IN_WINDOW_HOURS))
        return add_elapsed(last_check_in, timedelta(hours=const.CHECK_IN_WINDOW_HOURS))

    @staticmethod
    def repaired_check_in(missed_at: datetime, now: datetime) -> datetime:
        """Return the check-in instant a shield commit records for a repaired miss.

        A miss less than a nominal window old is recorded as is. An older
        miss (up to the usage window) is recorded one nominal window before
        `now`, which leaves the grace period open for today's check-in.
        """
        window = timedelta(hours=const.CHECK_IN_WINDOW_HOURS)
        if elapsed(missed_at, now) <= window:
            return missed_at
        return add_elapsed(now, -window)

    # =========================================================================
    # COMMIT
    # =========================================================================

    @staticmethod
    def commit(
        state: StreakState,
        now: datetime,
        missed_at: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> StreakState:
        """Spend a shield to repair the day containing `missed_at`.

        Args:
            state: Current streak state (not modified)
            now: Caller-supplied current time (timezone-aware)
            missed_at: Instant of the miss being repaired (timezone-aware)
            timezone: Zone used to derive calendar days and months

        Returns:
            New StreakState with one shield history entry and one shield record.

        Raises:
            InvalidTimestamp: A timestamp is naive or missed_at is after now.
            ShieldUnavailable: Monthly cap reached or cooldown still running.
            ShieldWindowExpired: The miss is older than the usage window.
            AlreadyCheckedIn: The missed day already carries a history entry.
        """
        ensure_aware(now, "now")
        ensure_aware(missed_at, "missed_at")
        if elapsed(now, missed_at) > timedelta():
            raise InvalidTimestamp(
                f"Missed instant {missed_at.isoformat()} is after {now.isoformat()}",
                placeholders={"field": "missed_at"},
            )

        if not ShieldEngine.is_eligible(state, now, timezone):
            remaining = ShieldEngine.get_remaining(state, now, timezone)
            cooldown = ShieldEngine.cooldown_remaining(state, now)
            const.LOGGER.debug(
                "ShieldEngine.commit: rejected, remaining=%s, cooldown=%s",
                remaining,
                cooldown,
            )
            raise ShieldUnavailable(
                "Cannot use streak shield at this time",
                placeholders={
                    "shields_remaining": str(remaining),
                    "cooldown": format_countdown(cooldown),
                },
            )

        hours_since_miss = hours_between(missed_at, now)
        if hours_since_miss > const.SHIELD_USAGE_WINDOW_HOURS:
            const.LOGGER.debug(
                "ShieldEngine.commit: rejected, miss is %.2fh old", hours_since_miss
            )
            raise ShieldWindowExpired(
                f"Shield usage window expired ({hours_since_miss:.1f}h since miss)",
                placeholders={"hours": str(const.SHIELD_USAGE_WINDOW_HOURS)},
            )

        recovered_day = local_date(missed_at, timezone)
        if any(
            entry[const.DATA_ENTRY_DATE] == recovered_day
            for entry in state[const.DATA_HISTORY]
        ):
            raise AlreadyCheckedIn(
                f"{recovered_day.isoformat()} already has a history entry",
                placeholders={"date": recovered_day.isoformat()},
            )

        new_state = copy_streak_state(state)
        new_state[const.DATA_HISTORY].append(
            build_history_entry(recovered_day, now, const.ENTRY_KIND_SHIELD)
        )
        new_state[const.DATA_SHIELDS].append(build_shield_record(now, recovered_day))
        new_state[const.DATA_TOTAL_CHECK_INS] = state[const.DATA_TOTAL_CHECK_INS] + 1

        anchor = ShieldEngine.repaired_check_in(missed_at, now)
        last_check_in = state[const.DATA_LAST_CHECK_IN]
        if last_check_in is None or elapsed(last_check_in, anchor) > timedelta():
            new_state[const.DATA_LAST_CHECK_IN] = anchor

        quality, consistency = AnalyticsEngine.calculate_metrics(
            state[const.DATA_START_DATE], new_state[const.DATA_HISTORY], now
        )
        new_state[const.DATA_QUALITY_SCORE] = quality
        new_state[const.DATA_CONSISTENCY_PERCENTAGE] = consistency

        const.LOGGER.debug(
            "ShieldEngine.commit: repaired %s, shields_left=%s, quality=%s",
            recovered_day,
            ShieldEngine.get_remaining(new_state, now, timezone),
            quality,
        )
        return new_state
