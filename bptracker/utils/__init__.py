"""Utility modules for BPTracker."""

from .time_utils import (
    day_key,
    ensure_utc,
    hour_of_day,
    parse_datetime,
    utc_now,
)

__all__ = [
    'day_key',
    'ensure_utc',
    'hour_of_day',
    'parse_datetime',
    'utc_now',
]
