"""SweetStreaks: daily check-in streak engine.

Tracks a single user's habit streak: whether a check-in landed inside the
26 hour window, the quality score it earned, how capped and cooldown-gated
shields repair a missed day, and the consistency and quality metrics that
follow. Time-boxed challenges (ChallengeEngine) run beside the streak.

Every operation takes the state and the current time from the caller and
returns a new state. Nothing here reads the wall clock or touches storage;
see store.py for (de)serialization.
"""

from .data_builders import build_streak_state
from .engines import (
    AnalyticsEngine,
    ChallengeEngine,
    CheckInEngine,
    NotificationEngine,
    ShieldEngine,
    StatusEngine,
)
from .exceptions import (
    AlreadyCheckedIn,
    ChallengeUnavailable,
    InvalidStreakData,
    InvalidTimestamp,
    InvalidTimezone,
    ShieldUnavailable,
    ShieldWindowExpired,
    StreakError,
    WindowExpired,
)

__all__ = [
    "AlreadyCheckedIn",
    "AnalyticsEngine",
    "ChallengeEngine",
    "ChallengeUnavailable",
    "CheckInEngine",
    "InvalidStreakData",
    "InvalidTimestamp",
    "InvalidTimezone",
    "NotificationEngine",
    "ShieldEngine",
    "ShieldUnavailable",
    "ShieldWindowExpired",
    "StatusEngine",
    "StreakError",
    "WindowExpired",
    "build_streak_state",
]
