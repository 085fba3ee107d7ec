"""Streak structure building helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Field defaults of a fresh StreakState
- Construction of HistoryEntry, ShieldRecord and ChallengeState values

Build functions return complete, new mappings. They never mutate their
arguments; the engines compose them into the StreakState they return.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import cast
import uuid

from . import const
from .type_defs import (
    ChallengeState,
    ChallengeTemplate,
    HistoryEntry,
    ShieldRecord,
    StreakState,
)
from .utils.dt_utils import add_elapsed, as_utc, ensure_aware

# ==============================================================================
# STREAK STATE
# ==============================================================================


def build_streak_state(start_date: datetime) -> StreakState:
    """Build the initial state of a new streak.

    Args:
        start_date: When the user started the habit (timezone-aware)

    Returns:
        StreakState with zero streak, empty history and default metrics.
    """
    return {
        const.DATA_CURRENT_STREAK: 0,
        const.DATA_LONGEST_STREAK: 0,
        const.DATA_LAST_CHECK_IN: None,
        const.DATA_START_DATE: ensure_aware(start_date, "start_date"),
        const.DATA_TOTAL_CHECK_INS: 0,
        const.DATA_SHIELDS: [],
        const.DATA_HISTORY: [],
        const.DATA_QUALITY_SCORE: const.DEFAULT_QUALITY_SCORE,
        const.DATA_CONSISTENCY_PERCENTAGE: const.DEFAULT_CONSISTENCY_PERCENTAGE,
    }


def copy_streak_state(state: StreakState) -> StreakState:
    """Return a shallow copy with fresh history and shield lists.

    Entries themselves are immutable by convention and are shared.
    """
    new_state = cast("StreakState", dict(state))
    new_state[const.DATA_SHIELDS] = list(state[const.DATA_SHIELDS])
    new_state[const.DATA_HISTORY] = list(state[const.DATA_HISTORY])
    return new_state


# ==============================================================================
# HISTORY ENTRIES
# ==============================================================================


def build_history_entry(
    day: date,
    check_in_time: datetime,
    kind: str,
) -> HistoryEntry:
    """Build a history entry; the quality score follows from the kind.

    Raises:
        ValueError: `kind` is not one of const.ENTRY_KINDS.
    """
    if kind not in const.ENTRY_KIND_SCORES:
        raise ValueError(f"Unknown history entry kind: {kind}")

    return {
        const.DATA_ENTRY_DATE: day,
        const.DATA_ENTRY_CHECK_IN_TIME: check_in_time,
        const.DATA_ENTRY_KIND: kind,
        const.DATA_ENTRY_QUALITY_SCORE: const.ENTRY_KIND_SCORES[kind],
    }


# ==============================================================================
# SHIELD RECORDS
# ==============================================================================


def build_shield_id(used_at: datetime, recovered_day: date) -> str:
    """Return a stable unique token for a shield use.

    Derived from its inputs (uuid5) so identical commits produce identical
    state.
    """
    name = f"{const.DOMAIN}/shield/{as_utc(used_at).isoformat()}/{recovered_day.isoformat()}"
    return f"{const.SHIELD_ID_PREFIX}{uuid.uuid5(uuid.NAMESPACE_URL, name).hex}"


def build_shield_record(used_at: datetime, recovered_day: date) -> ShieldRecord:
    """Build the record of a shield spent at `used_at` to repair `recovered_day`."""
    return {
        const.DATA_SHIELD_ID: build_shield_id(used_at, recovered_day),
        const.DATA_SHIELD_USED_AT: used_at,
        const.DATA_SHIELD_RECOVERED_DAY: recovered_day,
        const.DATA_SHIELD_COOLDOWN_UNTIL: add_elapsed(
            used_at, timedelta(days=const.SHIELD_COOLDOWN_DAYS)
        ),
    }


# ==============================================================================
# CHALLENGES
# ==============================================================================


def build_challenge(template: ChallengeTemplate, start_date: datetime) -> ChallengeState:
    """Build a freshly started challenge from a template.

    The counter starts at day 0; the first check-in makes it day 1.
    """
    return {
        const.DATA_CHALLENGE_ID: template[const.DATA_CHALLENGE_ID],
        const.DATA_CHALLENGE_TITLE: template[const.DATA_CHALLENGE_TITLE],
        const.DATA_CHALLENGE_DESCRIPTION: template[const.DATA_CHALLENGE_DESCRIPTION],
        const.DATA_CHALLENGE_DURATION: template[const.DATA_CHALLENGE_DURATION],
        const.DATA_CHALLENGE_CURRENT_DAY: 0,
        const.DATA_CHALLENGE_IS_ACTIVE: True,
        const.DATA_CHALLENGE_IS_COMPLETED: False,
        const.DATA_CHALLENGE_START_DATE: ensure_aware(start_date, "start_date"),
        const.DATA_CHALLENGE_LAST_CHECK_IN: None,
    }


def copy_challenge(challenge: ChallengeState) -> ChallengeState:
    """Return a copy of a challenge; every field is a scalar."""
    return cast("ChallengeState", dict(challenge))
