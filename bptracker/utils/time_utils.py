"""
Time parsing and bucketing utilities for BPTracker.

Provides consistent date/time handling across the insight engine with:
- Multiple input format support (ISO, YYYY-MM-DD, Unix timestamp, datetime)
- UTC normalization (naive values are treated as UTC)
- Calendar-day keys for day bucketing
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """
    Get current UTC time with timezone info.

    Returns:
        datetime: Current time in UTC timezone
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Convert any datetime to an aware UTC datetime.

    Naive datetimes are assumed to already be in UTC.

    Examples:
        >>> ensure_utc(datetime(2024, 1, 1, 12, 0))
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(
    value: Any,
    default: Optional[datetime] = None,
    assume_utc: bool = True
) -> Optional[datetime]:
    """
    Parse a timestamp value into a datetime object.

    Supports:
    - datetime objects (returned UTC-normalized)
    - Unix timestamps as int, float or digit strings
    - ISO 8601 and anything else dateutil understands

    Args:
        value: The value to parse
        default: Value to return if parsing fails (default: None)
        assume_utc: If True and no timezone in the value, assume UTC

    Returns:
        datetime object or default value if parsing fails

    Example:
        >>> parse_datetime("2024-01-15T08:00:00Z")
        datetime.datetime(2024, 1, 15, 8, 0, tzinfo=tzutc())
        >>> parse_datetime("invalid") is None
        True
    """
    if value is None or value == "":
        return default

    if isinstance(value, datetime):
        return ensure_utc(value) if assume_utc else value

    if isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (ValueError, OSError, OverflowError):
            return default

    if not isinstance(value, str):
        return default

    text = value.strip()

    # Try Unix timestamp first
    if text.isdigit():
        try:
            return datetime.fromtimestamp(int(text), tz=timezone.utc)
        except (ValueError, OSError, OverflowError):
            pass

    try:
        dt = date_parser.parse(text)
    except (ValueError, TypeError, OverflowError):
        logger.warning(f"Failed to parse datetime string: {text}")
        return default

    if assume_utc and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def day_key(dt: datetime) -> str:
    """
    Calendar-day key (UTC) used for day bucketing.

    Examples:
        >>> day_key(datetime(2024, 1, 15, 23, 30, tzinfo=timezone.utc))
        '2024-01-15'
    """
    return ensure_utc(dt).date().isoformat()


def day_from_key(key: str) -> date:
    """Inverse of day_key."""
    return date.fromisoformat(key)


def next_day_key(key: str) -> str:
    """Key of the calendar day after ``key``."""
    return (day_from_key(key) + timedelta(days=1)).isoformat()


def hour_of_day(dt: datetime) -> int:
    """UTC hour of ``dt``."""
    return ensure_utc(dt).hour


def days_between(start: datetime, end: datetime) -> float:
    """Elapsed (fractional) days from start to end."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 86400.0
