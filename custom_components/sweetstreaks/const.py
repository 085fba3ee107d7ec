# File: const.py
"""Constants for the SweetStreaks streak engine.

This file centralizes policy numbers, storage keys, phase/kind labels and
translation keys for consistency across the engines.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General / Package Information
# ------------------------------------------------------------------------------------------------
DOMAIN = "sweetstreaks"

# Logger
LOGGER = logging.getLogger(__package__)

# Storage and Versioning
STORAGE_VERSION = 1

# Default timezone identifier used when the caller does not supply one
DEFAULT_TIME_ZONE_NAME = "UTC"

# ------------------------------------------------------------------------------------------------
# Check-in Window Policy
# ------------------------------------------------------------------------------------------------
CHECK_IN_WINDOW_HOURS = 24
GRACE_PERIOD_HOURS = 2
TOTAL_WINDOW_HOURS = CHECK_IN_WINDOW_HOURS + GRACE_PERIOD_HOURS

# Phase band boundaries (hours since last check-in)
REMINDER_THRESHOLD_HOURS = 20
WARNING_THRESHOLD_HOURS = 23
CRITICAL_THRESHOLD_HOURS = 25

# A check-in with at least this many hours left is "perfect"
PERFECT_MIN_HOURS_REMAINING = 2

# Timestamp tolerance around the reference clock
TIMESTAMP_MAX_PAST_DAYS = 7
TIMESTAMP_MAX_FUTURE_MINUTES = 5

# ------------------------------------------------------------------------------------------------
# Shield Policy
# ------------------------------------------------------------------------------------------------
MAX_SHIELDS_PER_MONTH = 3
SHIELD_COOLDOWN_DAYS = 7
SHIELD_USAGE_WINDOW_HOURS = 48
SHIELD_ID_PREFIX = "shield_"

# ------------------------------------------------------------------------------------------------
# Challenge Policy
# ------------------------------------------------------------------------------------------------
# An active challenge without a check-in for longer than this restarts at day 0
CHALLENGE_MISSED_AFTER_HOURS = TOTAL_WINDOW_HOURS

# ------------------------------------------------------------------------------------------------
# Quality Scores
# ------------------------------------------------------------------------------------------------
QUALITY_SCORE_PERFECT = 100
QUALITY_SCORE_GRACE = 90
QUALITY_SCORE_SHIELD = 80
QUALITY_SCORE_MISSED = 0

# Score reported for an account without history
DEFAULT_QUALITY_SCORE = 100
DEFAULT_CONSISTENCY_PERCENTAGE = 100

# Quality rating tiers (minimum score, label), highest first
QUALITY_RATING_EXCELLENT = "excellent"
QUALITY_RATING_GREAT = "great"
QUALITY_RATING_GOOD = "good"
QUALITY_RATING_IMPROVING = "improving"

QUALITY_RATING_TIERS = [
    (95, QUALITY_RATING_EXCELLENT),
    (85, QUALITY_RATING_GREAT),
    (75, QUALITY_RATING_GOOD),
]

# ------------------------------------------------------------------------------------------------
# Analytics
# ------------------------------------------------------------------------------------------------
MONTHLY_PERFORMANCE_MONTHS = 6

MONTH_ABBREVIATIONS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]

# Streak milestones (days, title)
STREAK_MILESTONES = [
    (1, "First Step"),
    (3, "Momentum Builder"),
    (7, "Week Warrior"),
    (14, "Fortnight Fighter"),
    (30, "Monthly Master"),
    (50, "Halfway Hero"),
    (100, "Century Star"),
    (365, "Yearly Legend"),
]

# ------------------------------------------------------------------------------------------------
# Phases, Entry Kinds, Notification Kinds
# ------------------------------------------------------------------------------------------------
PHASE_ACTIVE = "active"
PHASE_WARNING = "warning"
PHASE_CRITICAL = "critical"
PHASE_BROKEN = "broken"

# Phases during which a shield may be offered
SHIELD_PHASES = (PHASE_CRITICAL, PHASE_BROKEN)

ENTRY_KIND_PERFECT = "perfect"
ENTRY_KIND_GRACE = "grace"
ENTRY_KIND_SHIELD = "shield"
ENTRY_KIND_MISSED = "missed"

ENTRY_KINDS = [
    ENTRY_KIND_PERFECT,
    ENTRY_KIND_GRACE,
    ENTRY_KIND_SHIELD,
    ENTRY_KIND_MISSED,
]

ENTRY_KIND_SCORES = {
    ENTRY_KIND_PERFECT: QUALITY_SCORE_PERFECT,
    ENTRY_KIND_GRACE: QUALITY_SCORE_GRACE,
    ENTRY_KIND_SHIELD: QUALITY_SCORE_SHIELD,
    ENTRY_KIND_MISSED: QUALITY_SCORE_MISSED,
}

NOTIFICATION_REMINDER = "reminder"
NOTIFICATION_WARNING = "warning"
NOTIFICATION_CRITICAL = "critical"
NOTIFICATION_RECOVERY = "recovery"

# Alert schedule: (hours after last check-in, kind). Must match the phase bands.
NOTIFICATION_SCHEDULE = [
    (REMINDER_THRESHOLD_HOURS, NOTIFICATION_REMINDER),
    (WARNING_THRESHOLD_HOURS, NOTIFICATION_WARNING),
    (CRITICAL_THRESHOLD_HOURS, NOTIFICATION_CRITICAL),
]

# ------------------------------------------------------------------------------------------------
# Streak State Keys
# ------------------------------------------------------------------------------------------------
DATA_CURRENT_STREAK = "current_streak"
DATA_LONGEST_STREAK = "longest_streak"
DATA_LAST_CHECK_IN = "last_check_in"
DATA_START_DATE = "start_date"
DATA_TOTAL_CHECK_INS = "total_check_ins"
DATA_SHIELDS = "shields"
DATA_HISTORY = "history"
DATA_QUALITY_SCORE = "quality_score"
DATA_CONSISTENCY_PERCENTAGE = "consistency_percentage"

# History entry keys
DATA_ENTRY_DATE = "date"
DATA_ENTRY_CHECK_IN_TIME = "check_in_time"
DATA_ENTRY_KIND = "kind"
DATA_ENTRY_QUALITY_SCORE = "quality_score"

# Shield record keys
DATA_SHIELD_ID = "id"
DATA_SHIELD_USED_AT = "used_at"
DATA_SHIELD_RECOVERED_DAY = "recovered_day"
DATA_SHIELD_COOLDOWN_UNTIL = "cooldown_until"

# Challenge keys
DATA_CHALLENGE_ID = "id"
DATA_CHALLENGE_TITLE = "title"
DATA_CHALLENGE_DESCRIPTION = "description"
DATA_CHALLENGE_DURATION = "duration"
DATA_CHALLENGE_CURRENT_DAY = "current_day"
DATA_CHALLENGE_IS_ACTIVE = "is_active"
DATA_CHALLENGE_IS_COMPLETED = "is_completed"
DATA_CHALLENGE_START_DATE = "start_date"
DATA_CHALLENGE_LAST_CHECK_IN = "last_check_in"

# Built-in challenge templates (duration in days)
CHALLENGE_TEMPLATES = [
    {
        DATA_CHALLENGE_ID: "no-sugar-drinks",
        DATA_CHALLENGE_TITLE: "7 Days No Sugary Drinks",
        DATA_CHALLENGE_DESCRIPTION: "Cut out all sugary beverages including juices",
        DATA_CHALLENGE_DURATION: 7,
    },
    {
        DATA_CHALLENGE_ID: "home-cooked",
        DATA_CHALLENGE_TITLE: "30 Days Home Cooked Meals",
        DATA_CHALLENGE_DESCRIPTION: "Eat only home-prepared meals for a month",
        DATA_CHALLENGE_DURATION: 30,
    },
    {
        DATA_CHALLENGE_ID: "no-processed",
        DATA_CHALLENGE_TITLE: "14 Days No Processed Foods",
        DATA_CHALLENGE_DESCRIPTION: "Avoid all packaged and processed foods",
        DATA_CHALLENGE_DURATION: 14,
    },
    {
        DATA_CHALLENGE_ID: "no-maida",
        DATA_CHALLENGE_TITLE: "21 Days No Refined Flour",
        DATA_CHALLENGE_DESCRIPTION: "Stay away from refined flour (maida) products",
        DATA_CHALLENGE_DURATION: 21,
    },
    {
        DATA_CHALLENGE_ID: "no-soda",
        DATA_CHALLENGE_TITLE: "10 Days No Soda",
        DATA_CHALLENGE_DESCRIPTION: "Cut out all sodas and fizzy drinks",
        DATA_CHALLENGE_DURATION: 10,
    },
    {
        DATA_CHALLENGE_ID: "no-fast-food",
        DATA_CHALLENGE_TITLE: "14 Days No Fast Food",
        DATA_CHALLENGE_DESCRIPTION: "Avoid all fast food restaurants and takeaways",
        DATA_CHALLENGE_DURATION: 14,
    },
]

# Storage envelope keys
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_STREAK = "streak"
DATA_CHALLENGES = "challenges"

# ------------------------------------------------------------------------------------------------
# Translation Keys (error messaging is mapped by the caller)
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_ALREADY_CHECKED_IN = "already_checked_in"
TRANS_KEY_ERROR_INVALID_TIMESTAMP = "invalid_timestamp"
TRANS_KEY_ERROR_WINDOW_EXPIRED = "window_expired"
TRANS_KEY_ERROR_SHIELD_UNAVAILABLE = "shield_unavailable"
TRANS_KEY_ERROR_SHIELD_WINDOW_EXPIRED = "shield_window_expired"
TRANS_KEY_ERROR_INVALID_TIMEZONE = "invalid_timezone"
TRANS_KEY_ERROR_INVALID_STREAK_DATA = "invalid_streak_data"
TRANS_KEY_ERROR_CHALLENGE_UNAVAILABLE = "challenge_unavailable"
