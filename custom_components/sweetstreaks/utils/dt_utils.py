# File: utils/dt_utils.py
"""Date and time utilities for SweetStreaks.

This is the single place where timestamps are turned into calendar days.
DST transitions make ad hoc day arithmetic unsafe, so every engine asks
these helpers which local day or month a timestamp belongs to.

No function here reads the wall clock: `now` is always supplied by the
caller.

Functions:
    - set_default_timezone / get_default_timezone: Fallback zone for callers
    - get_time_zone: Resolve an IANA identifier to a ZoneInfo
    - ensure_aware: Reject naive or non-datetime timestamps
    - as_utc / as_local: Timezone conversion
    - local_date: Calendar day of a timestamp in a zone
    - elapsed / hours_between / add_elapsed: Real elapsed time (via UTC)
    - month_key / month_label: Calendar month identifiers
    - trailing_month_starts: First days of the N months ending at an anchor
    - dt_parse_datetime / dt_parse_date: Strict ISO parsing for stored data
    - format_countdown: Countdown text ("1h 30m")

All elapsed-time arithmetic and ordering goes through UTC. Two aware
datetimes sharing one ZoneInfo subtract and compare by wall clock, which is
off by an hour across a DST change.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
import math
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Third-party date utilities
from dateutil.relativedelta import relativedelta

from .. import const
from ..exceptions import InvalidTimestamp, InvalidTimezone

_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo(const.DEFAULT_TIME_ZONE_NAME)

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
MINUTES_PER_DAY = 1440


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo | str) -> None:
    """Set the fallback timezone used when a caller passes none.

    Args:
        tz: ZoneInfo object or IANA identifier
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = get_time_zone(tz)


def get_default_timezone() -> ZoneInfo:
    """Return the configured fallback timezone."""
    return DEFAULT_TIME_ZONE


def get_time_zone(tz: ZoneInfo | str | None) -> ZoneInfo:
    """Resolve a timezone argument to a ZoneInfo.

    Args:
        tz: ZoneInfo, IANA identifier string, or None for the default zone

    Returns:
        The resolved ZoneInfo.

    Raises:
        InvalidTimezone: The identifier is empty or unknown.
    """
    if tz is None:
        return DEFAULT_TIME_ZONE
    if isinstance(tz, ZoneInfo):
        return tz
    if not isinstance(tz, str) or not tz:
        raise InvalidTimezone(
            f"Invalid timezone identifier: {tz!r}",
            placeholders={"timezone": str(tz)},
        )
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as err:
        _LOGGER.debug("Unknown timezone identifier %s: %s", tz, err)
        raise InvalidTimezone(
            f"Unknown timezone identifier: {tz}",
            placeholders={"timezone": tz},
        ) from err


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def ensure_aware(moment: datetime, field: str = "timestamp") -> datetime:
    """Return `moment` unchanged if it is a timezone-aware datetime.

    Raises:
        InvalidTimestamp: `moment` is not a datetime or carries no offset.
    """
    if not isinstance(moment, datetime):
        raise InvalidTimestamp(
            f"{field} must be a datetime, got {type(moment).__name__}",
            placeholders={"field": field},
        )
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        raise InvalidTimestamp(
            f"{field} must be timezone-aware: {moment.isoformat()}",
            placeholders={"field": field},
        )
    return moment


def as_utc(dt_obj: datetime) -> datetime:
    """Convert an aware datetime to UTC."""
    return ensure_aware(dt_obj).astimezone(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | str | None = None) -> datetime:
    """Convert an aware datetime to the given (or default) timezone."""
    return ensure_aware(dt_obj).astimezone(get_time_zone(tz))


def local_date(moment: datetime, tz: ZoneInfo | str | None = None) -> date:
    """Return the calendar day `moment` falls on in timezone `tz`.

    Example:
        local_date(datetime(2026, 3, 1, 2, 0, tzinfo=UTC), "America/New_York")
        → date(2026, 2, 28)
    """
    return as_local(moment, tz).date()


def elapsed(start: datetime, end: datetime) -> timedelta:
    """Return the real time elapsed from `start` to `end` (signed)."""
    return as_utc(end) - as_utc(start)


def hours_between(start: datetime, end: datetime) -> float:
    """Return the signed number of real hours from `start` to `end`."""
    return elapsed(start, end).total_seconds() / SECONDS_PER_HOUR


def add_elapsed(moment: datetime, delta: timedelta) -> datetime:
    """Return the UTC instant `delta` of real time after `moment`.

    Example:
        Berlin 2026-10-24 12:00 CEST + 24h → 2026-10-25 10:00 UTC
        (11:00 CET, not 12:00)
    """
    return as_utc(moment) + delta


# ==============================================================================
# Calendar Months
# ==============================================================================


def month_key(day: date) -> str:
    """Return the "YYYY-MM" period key of a calendar day."""
    return f"{day.year:04d}-{day.month:02d}"


def month_label(day: date) -> str:
    """Return a short display label such as "Oct 2026"."""
    return f"{const.MONTH_ABBREVIATIONS[day.month - 1]} {day.year}"


def trailing_month_starts(anchor: date, count: int) -> list[date]:
    """Return the first day of each of the `count` months ending at `anchor`.

    The result is ordered oldest first and always has exactly `count` items.

    Example:
        trailing_month_starts(date(2026, 2, 14), 3)
        → [date(2025, 12, 1), date(2026, 1, 1), date(2026, 2, 1)]
    """
    first_of_month = anchor.replace(day=1)
    return [
        first_of_month - relativedelta(months=offset)
        for offset in range(count - 1, -1, -1)
    ]


# ==============================================================================
# Parsing (stored data)
# ==============================================================================


def dt_parse_datetime(value: str | datetime) -> datetime:
    """Parse an ISO 8601 string into an aware datetime.

    Naive strings are rejected rather than guessed, so a reload never shifts
    a stored timestamp.

    Raises:
        InvalidTimestamp: The value is not an aware ISO datetime.
    """
    if isinstance(value, datetime):
        return ensure_aware(value)
    if not isinstance(value, str):
        raise InvalidTimestamp(
            f"Expected ISO datetime string, got {type(value).__name__}"
        )
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as err:
        raise InvalidTimestamp(f"Unparseable datetime: {value!r}") from err
    return ensure_aware(parsed)


def dt_parse_date(value: str | date) -> date:
    """Parse an ISO 8601 date string ("2026-10-18") into a date.

    Raises:
        InvalidTimestamp: The value is not an ISO date.
    """
    if isinstance(value, datetime):
        raise InvalidTimestamp(f"Expected a calendar date, got {value!r}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidTimestamp(f"Expected ISO date string, got {type(value).__name__}")
    try:
        return date.fromisoformat(value)
    except ValueError as err:
        raise InvalidTimestamp(f"Unparseable date: {value!r}") from err


# ==============================================================================
# Formatting
# ==============================================================================


def format_countdown(remaining: timedelta | None) -> str:
    """Format the time left on a countdown as "1d 2h 5m".

    Partial minutes round up so a countdown never reads zero while time is
    left. Zero units are dropped.

    Examples:
        format_countdown(timedelta(hours=1.5)) → "1h 30m"
        format_countdown(timedelta(seconds=20)) → "1m"
        format_countdown(timedelta()) → "0m"
    """
    if remaining is None or remaining <= timedelta():
        return "0m"

    minutes = math.ceil(remaining.total_seconds() / SECONDS_PER_MINUTE)
    days, minutes = divmod(minutes, MINUTES_PER_DAY)
    hours, minutes = divmod(minutes, 60)
    return " ".join(
        f"{value}{unit}"
        for value, unit in ((days, "d"), (hours, "h"), (minutes, "m"))
        if value
    )
