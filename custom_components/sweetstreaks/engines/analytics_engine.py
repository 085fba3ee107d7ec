"""Analytics Engine - Read-only summaries derived from streak history.

This engine provides stateless, pure Python functions for:
- Quality score (rounded mean of entry scores)
- Consistency percentage (logged days over days since start)
- Counts of history entries by kind
- The fixed six-month rolling quality trend
- Quality rating tiers and streak milestone progress

ARCHITECTURE: All functions are static methods that operate on passed-in
data. Nothing is cached; summaries are recomputed on demand.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
import math
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import (
    elapsed,
    ensure_aware,
    local_date,
    month_key,
    month_label,
    trailing_month_starts,
)
from ..utils.math_utils import calculate_percentage, mean_score

if TYPE_CHECKING:
    from collections.abc import Sequence
    from zoneinfo import ZoneInfo

    from ..type_defs import (
        AnalyticsSummary,
        HistoryEntry,
        MilestoneProgress,
        MonthlyPerformance,
        StreakState,
    )

SECONDS_PER_DAY = 86400


class AnalyticsEngine:
    """Pure logic engine for streak metrics and dashboard summaries.

    All methods are static - no instance state.

    Example:
        summary = AnalyticsEngine.summarize(state, now, "Europe/Berlin")
        summary["monthly_performance"]  # always six buckets, oldest first
    """

    # =========================================================================
    # STORED METRICS
    # =========================================================================

    @staticmethod
    def calculate_quality_score(history: Sequence[HistoryEntry]) -> int:
        """Return the rounded mean score of all entries, or 100 when empty."""
        return mean_score(
            (entry[const.DATA_ENTRY_QUALITY_SCORE] for entry in history),
            default=const.DEFAULT_QUALITY_SCORE,
        )

    @staticmethod
    def days_since_start(start_date: datetime, now: datetime) -> int:
        """Return whole days elapsed since start, counting the start day as 1."""
        ensure_aware(start_date, "start_date")
        since_start = elapsed(start_date, ensure_aware(now, "now"))
        return math.floor(since_start.total_seconds() / SECONDS_PER_DAY) + 1

    @staticmethod
    def calculate_consistency_percentage(
        start_date: datetime,
        history: Sequence[HistoryEntry],
        now: datetime,
    ) -> int:
        """Return the share of days since start that carry a logged entry.

        Returns 100 while `now` precedes the start date. The result is
        clamped to 0..100.
        """
        days = AnalyticsEngine.days_since_start(start_date, now)
        if days <= 0:
            return const.DEFAULT_CONSISTENCY_PERCENTAGE
        return calculate_percentage(len(history), days)

    @staticmethod
    def calculate_metrics(
        start_date: datetime,
        history: Sequence[HistoryEntry],
        now: datetime,
    ) -> tuple[int, int]:
        """Return (quality_score, consistency_percentage) over `history`."""
        return (
            AnalyticsEngine.calculate_quality_score(history),
            AnalyticsEngine.calculate_consistency_percentage(start_date, history, now),
        )

    # =========================================================================
    # BREAKDOWNS
    # =========================================================================

    @staticmethod
    def count_by_kind(history: Sequence[HistoryEntry]) -> dict[str, int]:
        """Return the number of entries of every kind (zero for absent kinds)."""
        counts = Counter(entry[const.DATA_ENTRY_KIND] for entry in history)
        return {kind: counts.get(kind, 0) for kind in const.ENTRY_KINDS}

    @staticmethod
    def monthly_performance(
        history: Sequence[HistoryEntry],
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> list[MonthlyPerformance]:
        """Return exactly six monthly buckets ending at now's month, oldest first.

        Months without entries are kept with check_ins=0 and quality=0 so
        consumers can rely on a fixed-length sequence.
        """
        anchor = local_date(now, timezone)
        by_month: dict[str, list[int]] = {}
        for entry in history:
            key = month_key(entry[const.DATA_ENTRY_DATE])
            by_month.setdefault(key, []).append(entry[const.DATA_ENTRY_QUALITY_SCORE])

        buckets: list[MonthlyPerformance] = []
        for month_start in trailing_month_starts(
            anchor, const.MONTHLY_PERFORMANCE_MONTHS
        ):
            scores = by_month.get(month_key(month_start), [])
            buckets.append(
                {
                    "month": month_key(month_start),
                    "label": month_label(month_start),
                    "check_ins": len(scores),
                    "quality": mean_score(scores, default=0),
                }
            )
        return buckets

    # =========================================================================
    # PRESENTATION HELPERS
    # =========================================================================

    @staticmethod
    def quality_rating(score: int) -> str:
        """Map a quality score to its rating tier."""
        for minimum, rating in const.QUALITY_RATING_TIERS:
            if score >= minimum:
                return rating
        return const.QUALITY_RATING_IMPROVING

    @staticmethod
    def milestone_progress(current_streak: int) -> MilestoneProgress:
        """Return progress through the streak milestones.

        progress_percentage is the share of milestones achieved.
        next_milestone_percentage measures the distance covered between the
        last milestone reached (or zero) and the next one; it is 100 once
        every milestone is achieved.
        """
        achieved = [days for days, _ in const.STREAK_MILESTONES if days <= current_streak]
        upcoming = [
            (days, title)
            for days, title in const.STREAK_MILESTONES
            if days > current_streak
        ]
        previous = achieved[-1] if achieved else 0
        total = len(const.STREAK_MILESTONES)
        overall = calculate_percentage(len(achieved), total)

        if not upcoming:
            return {
                "achieved": len(achieved),
                "total": total,
                "next_milestone_days": None,
                "next_milestone_title": None,
                "days_to_go": 0,
                "progress_percentage": overall,
                "next_milestone_percentage": 100,
            }

        next_days, next_title = upcoming[0]
        return {
            "achieved": len(achieved),
            "total": total,
            "next_milestone_days": next_days,
            "next_milestone_title": next_title,
            "days_to_go": next_days - current_streak,
            "progress_percentage": overall,
            "next_milestone_percentage": calculate_percentage(
                current_streak - previous, next_days - previous
            ),
        }

    # =========================================================================
    # SUMMARY
    # =========================================================================

    @staticmethod
    def summarize(
        state: StreakState,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> AnalyticsSummary:
        """Build the dashboard summary for `state` as of `now`.

        Quality and consistency are recomputed from history rather than
        read from the stored fields, so the summary reflects `now`.
        """
        # Local import: the shield engine imports this module for metrics
        from .shield_engine import ShieldEngine

        history = state[const.DATA_HISTORY]
        quality, consistency = AnalyticsEngine.calculate_metrics(
            state[const.DATA_START_DATE], history, now
        )
        counts = AnalyticsEngine.count_by_kind(history)
        current_streak = state[const.DATA_CURRENT_STREAK]

        return {
            "current_streak": current_streak,
            "longest_streak": state[const.DATA_LONGEST_STREAK],
            "total_check_ins": state[const.DATA_TOTAL_CHECK_INS],
            "consistency_percentage": consistency,
            "quality_score": quality,
            "quality_rating": AnalyticsEngine.quality_rating(quality),
            "perfect_days": counts[const.ENTRY_KIND_PERFECT],
            "grace_days": counts[const.ENTRY_KIND_GRACE],
            "shield_days": counts[const.ENTRY_KIND_SHIELD],
            "shields_remaining": ShieldEngine.get_remaining(state, now, timezone),
            "monthly_performance": AnalyticsEngine.monthly_performance(
                history, now, timezone
            ),
            "milestones": AnalyticsEngine.milestone_progress(current_streak),
        }
