"""Type definitions for SweetStreaks data structures.

All structures are plain mappings so the caller can persist them however it
likes. Keys match the DATA_* constants in const.py.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of stored data
happens in store.py.

IMPORTANT: This file must NOT import from the engines to avoid circular
dependencies. Only typing machinery is imported here.
"""

from datetime import date, datetime
from typing import TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ShieldId = str  # "shield_<uuid>"
ChallengeId = str  # template id, "no-soda"
TimezoneName = str  # IANA identifier "Europe/Berlin"


# =============================================================================
# Persistent Structures
# =============================================================================


class HistoryEntry(TypedDict):
    """One logged day. Append-only; never mutated once written."""

    date: date
    check_in_time: datetime
    kind: str  # ENTRY_KIND_*
    quality_score: int


class ShieldRecord(TypedDict):
    """One spent shield."""

    id: ShieldId
    used_at: datetime
    recovered_day: date
    cooldown_until: datetime


class StreakState(TypedDict):
    """The durable record passed into and returned from every commit."""

    current_streak: int
    longest_streak: int
    last_check_in: datetime | None
    start_date: datetime
    total_check_ins: int
    shields: list[ShieldRecord]
    history: list[HistoryEntry]
    quality_score: int
    consistency_percentage: int


class ChallengeTemplate(TypedDict):
    """A built-in challenge a user can start."""

    id: ChallengeId
    title: str
    description: str
    duration: int  # days


class ChallengeState(TypedDict):
    """A started challenge: a day counter running alongside the streak."""

    id: ChallengeId
    title: str
    description: str
    duration: int
    current_day: int
    is_active: bool
    is_completed: bool
    start_date: datetime
    last_check_in: datetime | None


# =============================================================================
# Derived Structures (never persisted)
# =============================================================================


class StatusSnapshot(TypedDict):
    """Current phase and time budget, derived from state and now."""

    phase: str  # PHASE_*
    hours_remaining: float
    shield_eligible: bool
    pending_notification: str | None  # NOTIFICATION_* or None


class MonthlyPerformance(TypedDict):
    """One calendar-month bucket of the rolling quality trend."""

    month: str  # "2026-10"
    label: str  # "Oct 2026"
    check_ins: int
    quality: int


class MilestoneProgress(TypedDict):
    """Progress through the streak milestones."""

    achieved: int
    total: int
    next_milestone_days: int | None
    next_milestone_title: str | None
    days_to_go: int
    progress_percentage: int  # share of milestones achieved
    next_milestone_percentage: int  # distance from the previous milestone


class AnalyticsSummary(TypedDict):
    """Read-only dashboard summary."""

    current_streak: int
    longest_streak: int
    total_check_ins: int
    consistency_percentage: int
    quality_score: int
    quality_rating: str
    perfect_days: int
    grace_days: int
    shield_days: int
    shields_remaining: int
    monthly_performance: list[MonthlyPerformance]
    milestones: MilestoneProgress


class NotificationPlan(TypedDict):
    """When the next status-change alert is due and of what kind."""

    fire_at: datetime
    kind: str  # NOTIFICATION_*
