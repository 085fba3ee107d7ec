# File: store.py
"""Conversion of StreakState and challenges to and from their storable form.

The engine never reads or writes storage itself. Callers persist the plain
mapping returned by state_to_storage() however they like (JSON file, key
value store, ...) and hand the loaded mapping back to state_from_storage().

Contract:
- Timestamps are stored as ISO 8601 strings with their UTC offset and
  round-trip losslessly.
- Calendar days are stored as ISO dates ("2026-10-18").
- The shields, history and challenge lists keep their insertion order.
- Counters are strict ints (a bool is not a count) and each history entry
  carries the score its kind earns.
- Loaded data is validated with voluptuous; anything malformed raises
  InvalidStreakData instead of leaking a half-parsed state.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from . import const
from .exceptions import InvalidStreakData, InvalidTimestamp
from .utils.dt_utils import dt_parse_date, dt_parse_datetime

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .type_defs import ChallengeState, HistoryEntry, ShieldRecord, StreakState


# ==============================================================================
# VALIDATORS
# ==============================================================================


def _aware_datetime(value: Any) -> Any:
    """Voluptuous validator: ISO string → timezone-aware datetime."""
    try:
        return dt_parse_datetime(value)
    except InvalidTimestamp as err:
        raise vol.Invalid(str(err)) from err


def _calendar_date(value: Any) -> Any:
    """Voluptuous validator: ISO string → date."""
    try:
        return dt_parse_date(value)
    except InvalidTimestamp as err:
        raise vol.Invalid(str(err)) from err


def _strict_int(value: Any) -> int:
    """Voluptuous validator: an int that is not a bool."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise vol.Invalid(f"expected an integer, got {value!r}")
    return value


def _score_matches_kind(entry: dict[str, Any]) -> dict[str, Any]:
    """Voluptuous validator: a history entry's score is the one its kind earns."""
    expected = const.ENTRY_KIND_SCORES[entry[const.DATA_ENTRY_KIND]]
    if entry[const.DATA_ENTRY_QUALITY_SCORE] != expected:
        raise vol.Invalid(
            f"{entry[const.DATA_ENTRY_KIND]} entry must score {expected}, "
            f"got {entry[const.DATA_ENTRY_QUALITY_SCORE]}",
            path=[const.DATA_ENTRY_QUALITY_SCORE],
        )
    return entry


_COUNTER = vol.All(_strict_int, vol.Range(min=0))
_PERCENT = vol.All(_strict_int, vol.Range(min=0, max=100))

HISTORY_ENTRY_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required(const.DATA_ENTRY_DATE): _calendar_date,
            vol.Required(const.DATA_ENTRY_CHECK_IN_TIME): _aware_datetime,
            vol.Required(const.DATA_ENTRY_KIND): vol.In(const.ENTRY_KINDS),
            vol.Required(const.DATA_ENTRY_QUALITY_SCORE): _PERCENT,
        }
    ),
    _score_matches_kind,
)

SHIELD_RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_SHIELD_ID): vol.All(str, vol.Length(min=1)),
        vol.Required(const.DATA_SHIELD_USED_AT): _aware_datetime,
        vol.Required(const.DATA_SHIELD_RECOVERED_DAY): _calendar_date,
        vol.Required(const.DATA_SHIELD_COOLDOWN_UNTIL): _aware_datetime,
    }
)

STREAK_STATE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_CURRENT_STREAK): _COUNTER,
        vol.Required(const.DATA_LONGEST_STREAK): _COUNTER,
        vol.Required(const.DATA_LAST_CHECK_IN): vol.Any(None, _aware_datetime),
        vol.Required(const.DATA_START_DATE): _aware_datetime,
        vol.Required(const.DATA_TOTAL_CHECK_INS): _COUNTER,
        vol.Required(const.DATA_SHIELDS): [SHIELD_RECORD_SCHEMA],
        vol.Required(const.DATA_HISTORY): [HISTORY_ENTRY_SCHEMA],
        vol.Required(const.DATA_QUALITY_SCORE): _PERCENT,
        vol.Required(const.DATA_CONSISTENCY_PERCENTAGE): _PERCENT,
    }
)

CHALLENGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_CHALLENGE_ID): vol.All(str, vol.Length(min=1)),
        vol.Required(const.DATA_CHALLENGE_TITLE): str,
        vol.Required(const.DATA_CHALLENGE_DESCRIPTION): str,
        vol.Required(const.DATA_CHALLENGE_DURATION): vol.All(
            _strict_int, vol.Range(min=1)
        ),
        vol.Required(const.DATA_CHALLENGE_CURRENT_DAY): _COUNTER,
        vol.Required(const.DATA_CHALLENGE_IS_ACTIVE): bool,
        vol.Required(const.DATA_CHALLENGE_IS_COMPLETED): bool,
        vol.Required(const.DATA_CHALLENGE_START_DATE): _aware_datetime,
        vol.Required(const.DATA_CHALLENGE_LAST_CHECK_IN): vol.Any(
            None, _aware_datetime
        ),
    }
)

_META_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_META_SCHEMA_VERSION): vol.All(
            _strict_int, vol.Range(min=1, max=const.STORAGE_VERSION)
        ),
    }
)

STORAGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_META): _META_SCHEMA,
        vol.Required(const.DATA_STREAK): dict,
    }
)

CHALLENGES_STORAGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_META): _META_SCHEMA,
        vol.Required(const.DATA_CHALLENGES): [CHALLENGE_SCHEMA],
    }
)


# ==============================================================================
# SERIALIZATION
# ==============================================================================


def _history_entry_to_storage(entry: HistoryEntry) -> dict[str, Any]:
    return {
        const.DATA_ENTRY_DATE: entry[const.DATA_ENTRY_DATE].isoformat(),
        const.DATA_ENTRY_CHECK_IN_TIME: entry[
            const.DATA_ENTRY_CHECK_IN_TIME
        ].isoformat(),
        const.DATA_ENTRY_KIND: entry[const.DATA_ENTRY_KIND],
        const.DATA_ENTRY_QUALITY_SCORE: entry[const.DATA_ENTRY_QUALITY_SCORE],
    }


def _shield_record_to_storage(shield: ShieldRecord) -> dict[str, Any]:
    return {
        const.DATA_SHIELD_ID: shield[const.DATA_SHIELD_ID],
        const.DATA_SHIELD_USED_AT: shield[const.DATA_SHIELD_USED_AT].isoformat(),
        const.DATA_SHIELD_RECOVERED_DAY: shield[
            const.DATA_SHIELD_RECOVERED_DAY
        ].isoformat(),
        const.DATA_SHIELD_COOLDOWN_UNTIL: shield[
            const.DATA_SHIELD_COOLDOWN_UNTIL
        ].isoformat(),
    }


def state_to_storage(state: StreakState) -> dict[str, Any]:
    """Return a JSON-compatible mapping of `state` wrapped in the storage envelope."""
    last_check_in = state[const.DATA_LAST_CHECK_IN]
    return {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.STORAGE_VERSION},
        const.DATA_STREAK: {
            const.DATA_CURRENT_STREAK: state[const.DATA_CURRENT_STREAK],
            const.DATA_LONGEST_STREAK: state[const.DATA_LONGEST_STREAK],
            const.DATA_LAST_CHECK_IN: last_check_in.isoformat()
            if last_check_in
            else None,
            const.DATA_START_DATE: state[const.DATA_START_DATE].isoformat(),
            const.DATA_TOTAL_CHECK_INS: state[const.DATA_TOTAL_CHECK_INS],
            const.DATA_SHIELDS: [
                _shield_record_to_storage(shield)
                for shield in state[const.DATA_SHIELDS]
            ],
            const.DATA_HISTORY: [
                _history_entry_to_storage(entry) for entry in state[const.DATA_HISTORY]
            ],
            const.DATA_QUALITY_SCORE: state[const.DATA_QUALITY_SCORE],
            const.DATA_CONSISTENCY_PERCENTAGE: state[
                const.DATA_CONSISTENCY_PERCENTAGE
            ],
        },
    }


def state_from_storage(data: Any) -> StreakState:
    """Validate a stored mapping and rebuild the StreakState it describes.

    Raises:
        InvalidStreakData: The data does not match the storage schema or
            breaks a state invariant.
    """
    try:
        envelope = STORAGE_SCHEMA(data)
        state: StreakState = STREAK_STATE_SCHEMA(envelope[const.DATA_STREAK])
    except vol.Invalid as err:
        const.LOGGER.warning("Rejected stored streak data: %s", err)
        raise InvalidStreakData(
            f"Invalid streak data: {err}",
            placeholders={"error": str(err)},
        ) from err

    if state[const.DATA_TOTAL_CHECK_INS] != len(state[const.DATA_HISTORY]):
        raise InvalidStreakData(
            "total_check_ins does not match history length",
            placeholders={"error": "total_check_ins"},
        )
    if state[const.DATA_LONGEST_STREAK] < state[const.DATA_CURRENT_STREAK]:
        raise InvalidStreakData(
            "longest_streak is below current_streak",
            placeholders={"error": "longest_streak"},
        )
    return state


def dumps_state(state: StreakState) -> str:
    """Serialize `state` to a JSON string."""
    return json.dumps(state_to_storage(state))


def _parse_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as err:
        raise InvalidStreakData(
            f"Stored streak data is not valid JSON: {err}",
            placeholders={"error": str(err)},
        ) from err


def loads_state(raw: str) -> StreakState:
    """Rebuild a StreakState from a JSON string written by dumps_state().

    Raises:
        InvalidStreakData: The string is not JSON or fails validation.
    """
    return state_from_storage(_parse_json(raw))


# ==============================================================================
# CHALLENGES
# ==============================================================================


def _challenge_to_storage(challenge: ChallengeState) -> dict[str, Any]:
    last_check_in = challenge[const.DATA_CHALLENGE_LAST_CHECK_IN]
    return {
        const.DATA_CHALLENGE_ID: challenge[const.DATA_CHALLENGE_ID],
        const.DATA_CHALLENGE_TITLE: challenge[const.DATA_CHALLENGE_TITLE],
        const.DATA_CHALLENGE_DESCRIPTION: challenge[const.DATA_CHALLENGE_DESCRIPTION],
        const.DATA_CHALLENGE_DURATION: challenge[const.DATA_CHALLENGE_DURATION],
        const.DATA_CHALLENGE_CURRENT_DAY: challenge[const.DATA_CHALLENGE_CURRENT_DAY],
        const.DATA_CHALLENGE_IS_ACTIVE: challenge[const.DATA_CHALLENGE_IS_ACTIVE],
        const.DATA_CHALLENGE_IS_COMPLETED: challenge[
            const.DATA_CHALLENGE_IS_COMPLETED
        ],
        const.DATA_CHALLENGE_START_DATE: challenge[
            const.DATA_CHALLENGE_START_DATE
        ].isoformat(),
        const.DATA_CHALLENGE_LAST_CHECK_IN: last_check_in.isoformat()
        if last_check_in
        else None,
    }


def challenges_to_storage(challenges: Sequence[ChallengeState]) -> dict[str, Any]:
    """Return a JSON-compatible mapping of `challenges` in the storage envelope."""
    return {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.STORAGE_VERSION},
        const.DATA_CHALLENGES: [
            _challenge_to_storage(challenge) for challenge in challenges
        ],
    }


def challenges_from_storage(data: Any) -> list[ChallengeState]:
    """Validate stored challenges and rebuild them.

    Raises:
        InvalidStreakData: The data does not match the schema, an id repeats,
            or a challenge's counters and flags disagree.
    """
    try:
        envelope = CHALLENGES_STORAGE_SCHEMA(data)
    except vol.Invalid as err:
        const.LOGGER.warning("Rejected stored challenge data: %s", err)
        raise InvalidStreakData(
            f"Invalid challenge data: {err}",
            placeholders={"error": str(err)},
        ) from err

    challenges: list[ChallengeState] = envelope[const.DATA_CHALLENGES]
    seen: set[str] = set()
    for challenge in challenges:
        challenge_id = challenge[const.DATA_CHALLENGE_ID]
        if challenge_id in seen:
            raise InvalidStreakData(
                f"Challenge {challenge_id} is stored twice",
                placeholders={"error": const.DATA_CHALLENGE_ID},
            )
        seen.add(challenge_id)
        if (
            challenge[const.DATA_CHALLENGE_CURRENT_DAY]
            > challenge[const.DATA_CHALLENGE_DURATION]
        ):
            raise InvalidStreakData(
                f"Challenge {challenge_id} is past its duration",
                placeholders={"error": const.DATA_CHALLENGE_CURRENT_DAY},
            )
        if (
            challenge[const.DATA_CHALLENGE_IS_ACTIVE]
            and challenge[const.DATA_CHALLENGE_IS_COMPLETED]
        ):
            raise InvalidStreakData(
                f"Challenge {challenge_id} is both active and completed",
                placeholders={"error": const.DATA_CHALLENGE_IS_COMPLETED},
            )
    return challenges


def dumps_challenges(challenges: Sequence[ChallengeState]) -> str:
    """Serialize `challenges` to a JSON string."""
    return json.dumps(challenges_to_storage(challenges))


def loads_challenges(raw: str) -> list[ChallengeState]:
    """Rebuild challenges from a JSON string written by dumps_challenges().

    Raises:
        InvalidStreakData: The string is not JSON or fails validation.
    """
    return challenges_from_storage(_parse_json(raw))
