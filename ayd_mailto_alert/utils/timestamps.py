"""Timestamp utilities for UTC handling and RFC 3339 parsing/formatting.

Check records carry RFC 3339 timestamps with arbitrary offsets. Everything
is normalized to timezone-aware UTC internally and rendered with a ``Z``
suffix so that alert timestamps sort lexically.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    If the datetime is timezone-naive, it's treated as UTC.
    If the datetime has a different timezone, it's converted to UTC.

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


def parse_iso_datetime(iso_string: str) -> Optional[datetime]:
    """Parse an RFC 3339 / ISO 8601 datetime string to UTC datetime.

    Supports:
    - 2021-01-02T15:04:05Z
    - 2021-01-02T15:04:05.123+09:00
    - 2021-01-02T15:04:05 (treated as UTC)

    Args:
        iso_string: Formatted datetime string

    Returns:
        Timezone-aware datetime in UTC, or None if parsing fails
    """
    if not iso_string or not iso_string.strip():
        return None

    cleaned = iso_string.strip()
    # fromisoformat() before 3.11 rejects the 'Z' suffix
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(cleaned)
    except ValueError:
        return None

    return ensure_utc(dt)


def format_timestamp(dt: datetime, include_microseconds: bool = False) -> str:
    """Format a datetime as RFC 3339 string in UTC.

    Args:
        dt: Datetime to format
        include_microseconds: Whether to include microseconds in output

    Returns:
        RFC 3339 formatted string with 'Z' suffix

    Example:
        >>> from datetime import datetime, timezone
        >>> format_timestamp(datetime(2021, 1, 2, 15, 4, 5, tzinfo=timezone.utc))
        '2021-01-02T15:04:05Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""

    if include_microseconds:
        return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")
