"""Typed errors raised by the SweetStreaks engines.

Every error is caller-recoverable. Each carries a translation key and
placeholders so the caller can map it to user-facing messaging (and, where
it applies, an alternate action such as offering a shield after
WindowExpired).
"""

from __future__ import annotations

from . import const


class StreakError(Exception):
    """Base class for all streak engine errors.

    Attributes:
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Dict of values for translation string placeholders
    """

    translation_key: str = ""

    def __init__(
        self,
        message: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize StreakError.

        Args:
            message: Developer-facing description of the failure
            placeholders: Optional dict for translation string placeholders
        """
        self.placeholders = placeholders or {}
        super().__init__(message)


class AlreadyCheckedIn(StreakError):
    """A history entry already exists for the requested calendar day."""

    translation_key = const.TRANS_KEY_ERROR_ALREADY_CHECKED_IN


class InvalidTimestamp(StreakError):
    """A timestamp is naive or falls outside the accepted tolerance."""

    translation_key = const.TRANS_KEY_ERROR_INVALID_TIMESTAMP


class WindowExpired(StreakError):
    """The check-in window (nominal plus grace) has already closed."""

    translation_key = const.TRANS_KEY_ERROR_WINDOW_EXPIRED


class ShieldUnavailable(StreakError):
    """The monthly shield cap is reached or a cooldown is still running."""

    translation_key = const.TRANS_KEY_ERROR_SHIELD_UNAVAILABLE


class ShieldWindowExpired(StreakError):
    """The missed day is too far in the past to be repaired by a shield."""

    translation_key = const.TRANS_KEY_ERROR_SHIELD_WINDOW_EXPIRED


class InvalidTimezone(StreakError):
    """The timezone identifier is not known to the tz database."""

    translation_key = const.TRANS_KEY_ERROR_INVALID_TIMEZONE


class InvalidStreakData(StreakError):
    """Stored streak data failed schema validation."""

    translation_key = const.TRANS_KEY_ERROR_INVALID_STREAK_DATA


class ChallengeUnavailable(StreakError):
    """The challenge does not exist or cannot take the requested action."""

    translation_key = const.TRANS_KEY_ERROR_CHALLENGE_UNAVAILABLE
