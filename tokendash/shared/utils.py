#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utility Functions for TokenDash
Shared helpers for time handling and percentage arithmetic.

All calendar arithmetic is done in UTC on epoch-millisecond integers.
"""
import math
import time
from datetime import date, datetime, timezone
from typing import Any, Optional

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS
WEEK_MS = 7 * DAY_MS

# 1970-01-01 was a Thursday; with Sunday=0 that is weekday 4
_EPOCH_WEEKDAY_SUN0 = 4


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse datetime from various formats

    Args:
        value: String, datetime, date (taken as UTC midnight), or None

    Returns:
        Parsed datetime (naive values are taken as UTC) or None

    Raises:
        ValueError: If datetime format is invalid
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        formats = [
            "%Y-%m-%dT%H:%M:%SZ",
            "%Y-%m-%dT%H:%M:%S",
            "%Y-%m-%d %H:%M:%S",
            "%Y-%m-%d"
        ]

        for fmt in formats:
            try:
                return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue

        raise ValueError(f"Invalid datetime format: {value}. Expected ISO format like '2025-02-01T00:00:00Z'")

    raise ValueError(f"Datetime must be string, date or datetime object, got {type(value)}")


def current_time_ms() -> int:
    """Wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)


def timestamp_to_datetime(timestamp_ms: int) -> datetime:
    """
    Convert millisecond timestamp to UTC datetime

    Args:
        timestamp_ms: Timestamp in milliseconds since epoch

    Returns:
        UTC datetime object
    """
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)


def datetime_to_timestamp(dt: datetime) -> int:
    """
    Convert datetime to millisecond timestamp

    Args:
        dt: Datetime object (naive values are taken as UTC)

    Returns:
        Timestamp in milliseconds since epoch
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def start_of_day_ms(timestamp_ms: int) -> int:
    """Midnight (UTC) of the day containing the timestamp"""
    return (timestamp_ms // DAY_MS) * DAY_MS


def weekday_sun0(timestamp_ms: int) -> int:
    """Day of week with Sunday=0 .. Saturday=6"""
    return (timestamp_ms // DAY_MS + _EPOCH_WEEKDAY_SUN0) % 7


def start_of_week_ms(timestamp_ms: int) -> int:
    """Midnight (UTC) of the Sunday starting the week containing the timestamp"""
    return start_of_day_ms(timestamp_ms) - weekday_sun0(timestamp_ms) * DAY_MS


def is_weekend(timestamp_ms: int) -> bool:
    return weekday_sun0(timestamp_ms) in (0, 6)


def hour_of_day(timestamp_ms: int) -> int:
    return (timestamp_ms % DAY_MS) // HOUR_MS


def calculate_percentage_change(current: float, baseline: float) -> float:
    """
    Percentage change from baseline to current

    Returns 0.0 when the baseline is zero or either value is not finite.
    """
    if not (math.isfinite(current) and math.isfinite(baseline)) or baseline == 0:
        return 0.0
    return (current - baseline) / baseline * 100.0


def lerp(low: float, high: float, fraction: float) -> float:
    """Map a fraction in [0, 1) onto [low, high)"""
    return low + (high - low) * fraction
