"""Engine modules for SweetStreaks.

Contains specialized computation engines:
- status_engine: Phase and time budget of the current window
- checkin_engine: Check-in validation and commit
- shield_engine: Shield eligibility and commit
- analytics_engine: Quality, consistency and dashboard summaries
- challenge_engine: Time-boxed challenges from built-in templates
- notification_engine: Next alert time and kind
"""

# Use relative imports within package to avoid mypy module resolution issues
from .analytics_engine import AnalyticsEngine
from .challenge_engine import ChallengeEngine
from .checkin_engine import CheckInEngine
from .notification_engine import NotificationEngine
from .shield_engine import ShieldEngine
from .status_engine import StatusEngine

__all__ = [
    "AnalyticsEngine",
    "ChallengeEngine",
    "CheckInEngine",
    "NotificationEngine",
    "ShieldEngine",
    "StatusEngine",
]
