# File: utils/dt_utils.py
"""Date and time utilities for KidsTasks.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Every day/week boundary is computed in one fixed civil timezone (Pacific by
default) regardless of the host's local timezone, so every device in the
household sees the same day and week transitions.

Functions:
    - dt_now_local: Current datetime in the civil timezone
    - dt_today_local / dt_today_iso: Today's civil date
    - dt_now_utc / dt_now_iso_utc / dt_to_iso_utc: Instants in UTC
    - dt_parse_instant: Parse a stored ISO instant
    - dt_midnight_local: Local midnight starting the current civil day
    - dt_week_start / dt_week_start_iso: Most recent Sunday
    - dt_week_range / dt_week_range_display: Sunday 00:00 through Saturday end
    - should_reset_daily / should_reset_weekly: Reset boundary checks
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dt_parser
from dateutil.relativedelta import SU, relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

CIVIL_TIME_ZONE_NAME = "America/Los_Angeles"

# Civil timezone used for all boundary math - can be overridden at setup
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo(CIVIL_TIME_ZONE_NAME)


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the civil timezone used by all dt_utils functions.

    Call this during integration setup with the configured timezone.

    Args:
        tz: ZoneInfo object representing the household's civil timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Return the configured civil timezone."""
    return DEFAULT_TIME_ZONE


def get_timezone(name: str | None) -> ZoneInfo | None:
    """Resolve an IANA timezone name, or None when it is unknown."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        _LOGGER.debug("Unknown timezone name '%s'", name)
        return None


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso_utc() -> str:
    """Return the current UTC instant as an ISO 8601 string."""
    return dt_now_utc().isoformat()


def dt_to_iso_utc(value: datetime | None = None) -> str:
    """Return ``value`` (default: now) as a UTC ISO 8601 string.

    Naive values are treated as UTC.
    """
    if value is None:
        return dt_now_iso_utc()
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def dt_now_local(tz: ZoneInfo | None = None, now: datetime | None = None) -> datetime:
    """Return the current datetime in the civil timezone (timezone-aware).

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
        now: Optional instant override for deterministic callers. Naive values
            are treated as UTC.

    Returns:
        Current (or given) instant expressed in the civil timezone.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if now is None:
        return datetime.now(tz_info)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(tz_info)


def dt_today_local(tz: ZoneInfo | None = None, now: datetime | None = None) -> date:
    """Return today's civil date."""
    return dt_now_local(tz, now).date()


def dt_today_iso(tz: ZoneInfo | None = None, now: datetime | None = None) -> str:
    """Return today's civil date as ISO string (YYYY-MM-DD).

    Example:
        "2025-04-07"
    """
    return dt_today_local(tz, now).isoformat()


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_instant(value: str | None) -> datetime | None:
    """Parse a stored ISO 8601 instant into an aware UTC datetime.

    Accepts both Python isoformat output and JavaScript ``toISOString()``
    output ("2024-01-14T08:00:00.000Z"). Naive values are treated as UTC.

    Returns:
        Aware UTC datetime, or None when the value is missing or unparseable.
    """
    if not value:
        return None
    try:
        parsed = dt_parser.isoparse(value)
    except (ValueError, TypeError, OverflowError):
        _LOGGER.debug("Could not parse instant '%s'", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


# ==============================================================================
# Day / Week Boundaries
# ==============================================================================


def dt_midnight_local(tz: ZoneInfo | None = None, now: datetime | None = None) -> datetime:
    """Return local midnight (00:00) of the current civil day, timezone-aware."""
    tz_info = tz or DEFAULT_TIME_ZONE
    today = dt_today_local(tz_info, now)
    return datetime.combine(today, time.min, tzinfo=tz_info)


def dt_week_start(tz: ZoneInfo | None = None, now: datetime | None = None) -> date:
    """Return the civil date of the most recent Sunday (today if Sunday)."""
    return dt_today_local(tz, now) + relativedelta(weekday=SU(-1))


def dt_week_start_iso(tz: ZoneInfo | None = None, now: datetime | None = None) -> str:
    """Return the current week start as ISO date string.

    Example:
        "2024-01-14"
    """
    return dt_week_start(tz, now).isoformat()


def dt_week_range(
    tz: ZoneInfo | None = None, now: datetime | None = None
) -> tuple[datetime, datetime]:
    """Return (start, end) of the current week in the civil timezone.

    Start is Sunday 00:00:00, end is the following Saturday 23:59:59.999999.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    start_date = dt_week_start(tz_info, now)
    start = datetime.combine(start_date, time.min, tzinfo=tz_info)
    end = datetime.combine(start_date + timedelta(days=6), time.max, tzinfo=tz_info)
    return start, end


def dt_week_range_display(
    tz: ZoneInfo | None = None, now: datetime | None = None
) -> str:
    """Format the current week for display, e.g. "Jan 26 - Feb 1"."""
    start, end = dt_week_range(tz, now)
    return f"{start:%b} {start.day} - {end:%b} {end.day}"


# ==============================================================================
# Reset Checks
# ==============================================================================


def should_reset_daily(
    last_reset: str | datetime | None,
    tz: ZoneInfo | None = None,
    now: datetime | None = None,
) -> bool:
    """Return True when local midnight has passed since the last daily reset.

    A missing or unparseable marker is always due.

    Args:
        last_reset: Last daily reset instant (ISO string or aware datetime)
        tz: Optional timezone override
        now: Optional instant override for deterministic callers
    """
    if isinstance(last_reset, datetime):
        last_reset_dt: datetime | None = (
            last_reset if last_reset.tzinfo else last_reset.replace(tzinfo=UTC)
        )
    else:
        last_reset_dt = dt_parse_instant(last_reset)

    if last_reset_dt is None:
        return True

    return last_reset_dt < dt_midnight_local(tz, now)


def should_reset_weekly(
    week_start_date: str | None,
    tz: ZoneInfo | None = None,
    now: datetime | None = None,
) -> bool:
    """Return True when the stored week start differs from the current one."""
    if not week_start_date:
        return True
    return week_start_date != dt_week_start_iso(tz, now)
