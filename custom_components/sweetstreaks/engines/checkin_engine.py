"""Check-in Engine - Validation and commit of daily check-ins.

This engine provides stateless, pure Python functions for:
- Timestamp tolerance checks against a reference clock
- Same-day duplicate detection (by local calendar day, not by timestamp)
- Quality assignment (perfect vs. grace) from the remaining window
- Streak continuation and longest-streak tracking
- Retroactive streak days when the declared start date changes

ARCHITECTURE: commit() validates everything before building the new state,
so a failed check-in never leaves a partially updated value behind. The
input state is never mutated.
"""

from __future__ import annotations

from datetime import datetime, timedelta
import math
from typing import TYPE_CHECKING

from .. import const
from ..data_builders import build_history_entry, copy_streak_state
from ..exceptions import AlreadyCheckedIn, InvalidTimestamp, WindowExpired
from ..utils.dt_utils import as_utc, elapsed, ensure_aware, local_date
from .analytics_engine import AnalyticsEngine
from .status_engine import StatusEngine

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from ..type_defs import StreakState


class CheckInEngine:
    """Pure logic engine for committing check-ins.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_valid_timestamp(timestamp: datetime, reference: datetime) -> bool:
        """Return True if `timestamp` lies within the tolerance around `reference`.

        The tolerance is asymmetric: up to 7 days in the past, at most
        5 minutes in the future.
        """
        offset = elapsed(reference, timestamp)
        return (
            -timedelta(days=const.TIMESTAMP_MAX_PAST_DAYS)
            <= offset
            <= timedelta(minutes=const.TIMESTAMP_MAX_FUTURE_MINUTES)
        )

    @staticmethod
    def classify_quality(hours_remaining: float) -> str:
        """Return the entry kind earned with `hours_remaining` left in the window.

        Raises:
            WindowExpired: No time is left.
        """
        if hours_remaining >= const.PERFECT_MIN_HOURS_REMAINING:
            return const.ENTRY_KIND_PERFECT
        if hours_remaining > 0:
            return const.ENTRY_KIND_GRACE
        raise WindowExpired("Check-in window expired")

    @staticmethod
    def calculate_retroactive_streak(
        start_date: datetime, first_check_in: datetime
    ) -> int:
        """Return whole days between a declared start and the first check-in.

        Used when a user reports having kept the habit before installing;
        zero when the start is not before the first check-in.
        """
        span = elapsed(start_date, first_check_in)
        if span <= timedelta():
            return 0
        return math.floor(span / timedelta(days=1))

    @staticmethod
    def reset_streak(state: StreakState) -> StreakState:
        """Return a copy of `state` with the current streak started fresh.

        A broken window always reports zero hours remaining, so commit()
        keeps raising WindowExpired until the caller either spends a shield
        or starts fresh. History, shields and the longest streak are kept;
        the next check-in is evaluated as a first check-in.
        """
        new_state = copy_streak_state(state)
        new_state[const.DATA_CURRENT_STREAK] = 0
        new_state[const.DATA_LAST_CHECK_IN] = None
        const.LOGGER.debug(
            "CheckInEngine.reset_streak: dropped streak of %s",
            state[const.DATA_CURRENT_STREAK],
        )
        return new_state

    @staticmethod
    def change_start_date(
        state: StreakState, start_date: datetime, now: datetime
    ) -> StreakState:
        """Return a copy of `state` with a new declared start date.

        Days between the new start and the first check-in (or `now` when
        there is none) count towards the streak: current_streak becomes at
        least retroactive days plus total check-ins. It never decreases, and
        longest_streak follows it. Metrics are recomputed as of `now`.

        Raises:
            InvalidTimestamp: A timestamp is naive or start_date is after now.
        """
        ensure_aware(now, "now")
        ensure_aware(start_date, "start_date")
        if elapsed(now, start_date) > timedelta():
            raise InvalidTimestamp(
                f"Start date {start_date.isoformat()} is after {now.isoformat()}",
                placeholders={"field": "start_date"},
            )

        history = state[const.DATA_HISTORY]
        first_check_in = min(
            (entry[const.DATA_ENTRY_CHECK_IN_TIME] for entry in history),
            key=as_utc,
            default=now,
        )
        retroactive = CheckInEngine.calculate_retroactive_streak(
            start_date, first_check_in
        )
        new_streak = max(
            state[const.DATA_CURRENT_STREAK],
            retroactive + state[const.DATA_TOTAL_CHECK_INS],
        )

        new_state = copy_streak_state(state)
        new_state[const.DATA_START_DATE] = start_date
        new_state[const.DATA_CURRENT_STREAK] = new_streak
        new_state[const.DATA_LONGEST_STREAK] = max(
            state[const.DATA_LONGEST_STREAK], new_streak
        )
        quality, consistency = AnalyticsEngine.calculate_metrics(
            start_date, history, now
        )
        new_state[const.DATA_QUALITY_SCORE] = quality
        new_state[const.DATA_CONSISTENCY_PERCENTAGE] = consistency

        const.LOGGER.debug(
            "CheckInEngine.change_start_date: start=%s, retroactive=%s, streak=%s",
            start_date.isoformat(),
            retroactive,
            new_streak,
        )
        return new_state

    @staticmethod
    def commit(
        state: StreakState,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
        reference_time: datetime | None = None,
    ) -> StreakState:
        """Commit today's check-in.

        Args:
            state: Current streak state (not modified)
            now: Caller-supplied check-in time (timezone-aware)
            timezone: Zone deciding which calendar day "today" is
            reference_time: Trusted clock reading to validate `now` against;
                when omitted `now` is its own reference

        Returns:
            New StreakState with one appended history entry.

        Raises:
            InvalidTimestamp: `now` is naive or outside the tolerance.
            AlreadyCheckedIn: Today already carries a history entry.
            WindowExpired: The 26 hour window since the last check-in closed.
        """
        ensure_aware(now, "now")
        reference = ensure_aware(reference_time, "reference_time") if reference_time else now

        today = local_date(now, timezone)
        if StatusEngine.has_checked_in_today(state, now, timezone):
            const.LOGGER.debug("CheckInEngine.commit: %s already logged", today)
            raise AlreadyCheckedIn(
                "Already checked in today",
                placeholders={"date": today.isoformat()},
            )

        if not CheckInEngine.is_valid_timestamp(now, reference):
            const.LOGGER.debug(
                "CheckInEngine.commit: timestamp %s outside tolerance of %s",
                now.isoformat(),
                reference.isoformat(),
            )
            raise InvalidTimestamp(
                "Invalid timestamp detected",
                placeholders={"field": "now"},
            )

        status = StatusEngine.evaluate(state, now, timezone)
        kind = CheckInEngine.classify_quality(status["hours_remaining"])

        if status["phase"] == const.PHASE_BROKEN:
            new_streak = 1
        else:
            new_streak = state[const.DATA_CURRENT_STREAK] + 1

        new_state = copy_streak_state(state)
        new_state[const.DATA_HISTORY].append(build_history_entry(today, now, kind))
        new_state[const.DATA_CURRENT_STREAK] = new_streak
        new_state[const.DATA_LONGEST_STREAK] = max(
            state[const.DATA_LONGEST_STREAK], new_streak
        )
        new_state[const.DATA_LAST_CHECK_IN] = now
        new_state[const.DATA_TOTAL_CHECK_INS] = state[const.DATA_TOTAL_CHECK_INS] + 1

        quality, consistency = AnalyticsEngine.calculate_metrics(
            state[const.DATA_START_DATE], new_state[const.DATA_HISTORY], now
        )
        new_state[const.DATA_QUALITY_SCORE] = quality
        new_state[const.DATA_CONSISTENCY_PERCENTAGE] = consistency

        const.LOGGER.debug(
            "CheckInEngine.commit: day=%s, kind=%s, streak=%s, longest=%s, quality=%s",
            today,
            kind,
            new_streak,
            new_state[const.DATA_LONGEST_STREAK],
            quality,
        )
        return new_state
