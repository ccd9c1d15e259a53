"""Timestamp utilities for UTC handling and display formatting.

Two different instants show up in every notification: the time the
response was submitted (recorded in logs) and the wall-clock time the email
was rendered (shown in the email body). Both go through these helpers.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def isoformat_utc(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with a 'Z' suffix and milliseconds.

    Example:
        >>> isoformat_utc(datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc))
        '2025-11-04T12:00:00.000Z'
    """
    dt = ensure_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def format_for_display(
    dt: datetime,
    tz_name: str = "UTC",
    fmt: str = "%Y-%m-%d %H:%M:%S %Z",
) -> str:
    """Format a datetime for humans in the given IANA timezone.

    Args:
        dt: Datetime to format (naive values are treated as UTC)
        tz_name: IANA timezone name, e.g. "America/New_York"
        fmt: strftime format string

    Returns:
        Localized, formatted timestamp
    """
    return ensure_utc(dt).astimezone(ZoneInfo(tz_name)).strftime(fmt)
