"""Challenge Engine - Time-boxed habit challenges beside the main streak.

A challenge is started from one of the built-in templates and counts days
up to its duration:
- Each check-in advances current_day by one (at most once per local day)
- Reaching the duration completes the challenge and deactivates it
- An active challenge left without a check-in for more than
  CHALLENGE_MISSED_AFTER_HOURS restarts at day 0

Challenges keep no history, shields or quality scores; they only share the
main streak's 26 hour window.

ARCHITECTURE: All functions are static methods over a list of
ChallengeState. Mutating operations return a new list and never touch the
input or its items.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, cast

from .. import const
from ..data_builders import build_challenge, copy_challenge
from ..exceptions import AlreadyCheckedIn, ChallengeUnavailable
from ..utils.dt_utils import elapsed, ensure_aware, local_date
from ..utils.math_utils import calculate_percentage

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from zoneinfo import ZoneInfo

    from ..type_defs import ChallengeState, ChallengeTemplate


class ChallengeEngine:
    """Pure logic engine for starting and advancing challenges.

    All methods are static - no instance state.
    """

    # =========================================================================
    # QUERIES
    # =========================================================================

    @staticmethod
    def get_template(template_id: str) -> ChallengeTemplate:
        """Return the built-in template with `template_id`.

        Raises:
            ChallengeUnavailable: No template has that id.
        """
        for template in const.CHALLENGE_TEMPLATES:
            if template[const.DATA_CHALLENGE_ID] == template_id:
                return cast("ChallengeTemplate", template)
        raise ChallengeUnavailable(
            f"Unknown challenge: {template_id}",
            placeholders={"challenge": template_id},
        )

    @staticmethod
    def available_templates(
        challenges: Sequence[ChallengeState],
    ) -> list[ChallengeTemplate]:
        """Return the templates not started yet (finished ones count as started)."""
        started = {challenge[const.DATA_CHALLENGE_ID] for challenge in challenges}
        return [
            cast("ChallengeTemplate", template)
            for template in const.CHALLENGE_TEMPLATES
            if template[const.DATA_CHALLENGE_ID] not in started
        ]

    @staticmethod
    def active(challenges: Sequence[ChallengeState]) -> list[ChallengeState]:
        """Return the challenges still running."""
        return [
            challenge
            for challenge in challenges
            if challenge[const.DATA_CHALLENGE_IS_ACTIVE]
        ]

    @staticmethod
    def completed(challenges: Sequence[ChallengeState]) -> list[ChallengeState]:
        """Return the challenges that reached their duration."""
        return [
            challenge
            for challenge in challenges
            if challenge[const.DATA_CHALLENGE_IS_COMPLETED]
        ]

    @staticmethod
    def progress_percentage(challenge: ChallengeState) -> int:
        """Return days done over duration, as a rounded 0..100 percentage."""
        return calculate_percentage(
            challenge[const.DATA_CHALLENGE_CURRENT_DAY],
            challenge[const.DATA_CHALLENGE_DURATION],
        )

    @staticmethod
    def is_missed(challenge: ChallengeState, now: datetime) -> bool:
        """Return True if an active challenge went too long without a check-in."""
        last_check_in = challenge[const.DATA_CHALLENGE_LAST_CHECK_IN]
        if not challenge[const.DATA_CHALLENGE_IS_ACTIVE] or last_check_in is None:
            return False
        return elapsed(last_check_in, now) > timedelta(
            hours=const.CHALLENGE_MISSED_AFTER_HOURS
        )

    # =========================================================================
    # COMMANDS
    # =========================================================================

    @staticmethod
    def start(
        challenges: Sequence[ChallengeState],
        template_id: str,
        now: datetime,
    ) -> list[ChallengeState]:
        """Start the challenge built from `template_id`.

        Raises:
            InvalidTimestamp: `now` is naive.
            ChallengeUnavailable: Unknown template, or it was already started.
        """
        ensure_aware(now, "now")
        template = ChallengeEngine.get_template(template_id)
        if any(
            challenge[const.DATA_CHALLENGE_ID] == template_id
            for challenge in challenges
        ):
            raise ChallengeUnavailable(
                f"Challenge already started: {template_id}",
                placeholders={"challenge": template_id},
            )

        const.LOGGER.debug("ChallengeEngine.start: %s", template_id)
        return [*challenges, build_challenge(template, now)]

    @staticmethod
    def reset_missed(
        challenges: Sequence[ChallengeState], now: datetime
    ) -> list[ChallengeState]:
        """Restart every missed challenge at day 0.

        Returns:
            A new list; challenges that were not missed are passed through.
        """
        ensure_aware(now, "now")
        result: list[ChallengeState] = []
        for challenge in challenges:
            if not ChallengeEngine.is_missed(challenge, now):
                result.append(challenge)
                continue
            const.LOGGER.debug(
                "ChallengeEngine.reset_missed: %s restarts after day %s",
                challenge[const.DATA_CHALLENGE_ID],
                challenge[const.DATA_CHALLENGE_CURRENT_DAY],
            )
            restarted = copy_challenge(challenge)
            restarted[const.DATA_CHALLENGE_CURRENT_DAY] = 0
            restarted[const.DATA_CHALLENGE_LAST_CHECK_IN] = None
            result.append(restarted)
        return result

    @staticmethod
    def check_in(
        challenges: Sequence[ChallengeState],
        challenge_id: str,
        now: datetime,
        timezone: ZoneInfo | str | None = None,
    ) -> list[ChallengeState]:
        """Log today's day for the challenge `challenge_id`.

        A missed challenge is restarted first, so this check-in becomes day 1.

        Raises:
            InvalidTimestamp: `now` is naive.
            ChallengeUnavailable: Not started, or no longer active.
            AlreadyCheckedIn: The challenge was already advanced today.
        """
        ensure_aware(now, "now")
        index = next(
            (
                position
                for position, challenge in enumerate(challenges)
                if challenge[const.DATA_CHALLENGE_ID] == challenge_id
            ),
            None,
        )
        if index is None or not challenges[index][const.DATA_CHALLENGE_IS_ACTIVE]:
            raise ChallengeUnavailable(
                f"Challenge is not running: {challenge_id}",
                placeholders={"challenge": challenge_id},
            )

        current = ChallengeEngine.reset_missed([challenges[index]], now)[0]
        today = local_date(now, timezone)
        last_check_in = current[const.DATA_CHALLENGE_LAST_CHECK_IN]
        if last_check_in is not None and local_date(last_check_in, timezone) == today:
            raise AlreadyCheckedIn(
                f"Challenge {challenge_id} already logged today",
                placeholders={"date": today.isoformat()},
            )

        updated = copy_challenge(current)
        day = current[const.DATA_CHALLENGE_CURRENT_DAY] + 1
        updated[const.DATA_CHALLENGE_CURRENT_DAY] = day
        updated[const.DATA_CHALLENGE_LAST_CHECK_IN] = now
        if day >= current[const.DATA_CHALLENGE_DURATION]:
            updated[const.DATA_CHALLENGE_IS_COMPLETED] = True
            updated[const.DATA_CHALLENGE_IS_ACTIVE] = False

        const.LOGGER.debug(
            "ChallengeEngine.check_in: %s day %s/%s, completed=%s",
            challenge_id,
            day,
            current[const.DATA_CHALLENGE_DURATION],
            updated[const.DATA_CHALLENGE_IS_COMPLETED],
        )
        result = list(challenges)
        result[index] = updated
        return result
