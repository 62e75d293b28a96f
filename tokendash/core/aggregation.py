#!/usr/bin/env python3
"""
Time-window filtering and weekly aggregation for dashboard charts.
Does NOT change the underlying series, only what a chart displays.

Short windows show native (daily) resolution; the coarse windows (90D and
ALL) are re-bucketed into calendar weeks starting on Sunday 00:00 UTC so a
long history does not overcrowd the chart.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Union

import numpy as np

from ..shared.errors import InvalidParameterError
from ..shared.models import AggregationMode, Series, SeriesKind, TimeWindow
from ..shared.utils import DAY_MS, current_time_ms

log = logging.getLogger(__name__)

TIME_WINDOWS: Dict[str, TimeWindow] = {
    "24H": TimeWindow("24H", 1, coarse=False),
    "7D": TimeWindow("7D", 7, coarse=False),
    "30D": TimeWindow("30D", 30, coarse=False),
    "90D": TimeWindow("90D", 90, coarse=True),
    "ALL": TimeWindow("ALL", None, coarse=True),
}

_DEFAULT_MODES = {
    SeriesKind.PRICE: AggregationMode.LAST,
    SeriesKind.VOLUME: AggregationMode.SUM,
    SeriesKind.LIQUIDITY: AggregationMode.LAST,
    SeriesKind.HOLDERS: AggregationMode.LAST,
    SeriesKind.TRANSACTIONS: AggregationMode.SUM,
}

# 1970-01-01 was a Thursday (Sunday=0 -> 4)
_EPOCH_WEEKDAY = 4


def resolve_window(label: str) -> TimeWindow:
    """
    Look up a window by label ("24H", "7D", "30D", "90D", "ALL")

    Raises:
        InvalidParameterError: For an unknown or malformed label
    """
    if not isinstance(label, str):
        raise InvalidParameterError(f"Window label must be a string, got {type(label).__name__}")
    window = TIME_WINDOWS.get(label.strip().upper())
    if window is None:
        raise InvalidParameterError(f"Unknown window '{label}'. Expected one of {list(TIME_WINDOWS)}")
    return window


def _resolve_mode(mode: Union[AggregationMode, str]) -> AggregationMode:
    try:
        return AggregationMode(mode)
    except ValueError:
        raise InvalidParameterError(f"Unknown aggregation mode '{mode}'. Expected 'sum' or 'last'")


def default_mode(kind: SeriesKind) -> AggregationMode:
    """Sum for flow quantities, last value for level quantities"""
    return _DEFAULT_MODES[SeriesKind(kind)]


def filter_window(series: Series, window: TimeWindow, now_ms: Optional[int] = None) -> Series:
    """
    Keep the points with timestamp >= now - window.days

    The ALL window (days=None) returns the series unchanged.
    """
    if window.days is None:
        return series
    now_ms = current_time_ms() if now_ms is None else now_ms
    cutoff = now_ms - window.days * DAY_MS
    return Series(series.kind, tuple(p for p in series if p.timestamp >= cutoff))


def week_keys(timestamps: np.ndarray) -> np.ndarray:
    """Start of the Sunday-based UTC week containing each timestamp (ms)"""
    days = np.asarray(timestamps, dtype=np.int64) // DAY_MS
    return (days - (days + _EPOCH_WEEKDAY) % 7) * DAY_MS


def aggregate_weekly(series: Series, mode: AggregationMode) -> Series:
    """
    Re-bucket a series into calendar weeks

    Args:
        series: Time-ordered input series
        mode: SUM adds the values of a bucket, LAST keeps its latest value

    Returns:
        Series with one point per non-empty week, keyed by week start and in
        chronological order of the keys

    Edge Cases:
        - Empty input: returns an empty series
        - A point on a window boundary stays in the week that contains it

    Raises:
        InvalidParameterError: For an unknown mode
    """
    mode = _resolve_mode(mode)
    if len(series) == 0:
        log.warning(f"Empty {series.kind.value} series passed to weekly aggregation")
        return Series(series.kind)

    timestamps = series.timestamps()
    values = series.values()
    keys = week_keys(timestamps)

    # np.unique returns sorted keys, so buckets follow chronological order
    bucket_keys, inverse = np.unique(keys, return_inverse=True)
    inverse = inverse.reshape(-1)

    if mode is AggregationMode.SUM:
        bucket_values = np.bincount(inverse, weights=values, minlength=len(bucket_keys))
    else:
        last_index = np.full(len(bucket_keys), -1, dtype=np.int64)
        np.maximum.at(last_index, inverse, np.arange(len(values), dtype=np.int64))
        bucket_values = values[last_index]

    log.debug(f"Aggregated {len(series)} {series.kind.value} points into {len(bucket_keys)} weekly buckets ({mode.value})")
    return Series.from_arrays(series.kind, bucket_keys.tolist(), bucket_values.tolist())


def windowed(
    series: Series,
    window: TimeWindow,
    mode: Optional[Union[AggregationMode, str]] = None,
    now_ms: Optional[int] = None,
) -> Series:
    """
    Filter a series to a display window and bucket it for coarse windows

    Args:
        series: Full series
        window: Display window
        mode: Aggregation mode for coarse windows; defaults to the series kind's natural mode
        now_ms: Reference "now" (defaults to wall-clock time)
    """
    mode = _resolve_mode(mode) if mode is not None else default_mode(series.kind)
    filtered = filter_window(series, window, now_ms)
    if not window.coarse:
        return filtered
    return aggregate_weekly(filtered, mode)


def filter_and_aggregate(
    series: Series,
    window_label: str,
    mode: Optional[Union[AggregationMode, str]] = None,
    now_ms: Optional[int] = None,
) -> Series:
    """
    Chart-ready series for a window label

    Example:
        >>> weekly = filter_and_aggregate(dataset.get_series("volume"), "ALL")
        >>> len(weekly) <= 27  # 181 daily points fall into at most 27 weeks
        True

    Raises:
        InvalidParameterError: For an unknown window label or aggregation mode
    """
    return windowed(series, resolve_window(window_label), mode, now_ms)
