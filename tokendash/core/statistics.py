#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Summary statistics for a series: current value, 24h/7d change and all-time
extremes.
"""
from __future__ import annotations

import logging

import numpy as np

from ..shared.errors import InvalidParameterError
from ..shared.models import ExtremePoint, Series, SummaryStats
from ..shared.utils import DAY_MS, calculate_percentage_change

log = logging.getLogger(__name__)


def points_per_day(series: Series) -> int:
    """
    Number of points covering one day, inferred from the median spacing

    Returns 1 for daily series, 24 for hourly ones and at least 1 otherwise.
    """
    if len(series) < 2:
        return 1
    spacing = float(np.median(np.diff(series.timestamps())))
    return max(1, int(round(DAY_MS / spacing)))


def change_over(series: Series, offset_points: int) -> float:
    """
    Percent change between the last point and the point offset_points before it

    When the series is shorter than the offset the first point is the baseline.
    """
    if len(series) == 0:
        raise InvalidParameterError(f"Cannot compute change of an empty {series.kind.value} series")
    if offset_points < 0:
        raise InvalidParameterError(f"offset_points must be non-negative, got {offset_points}")
    last_index = len(series) - 1
    baseline_index = max(0, last_index - offset_points)
    return calculate_percentage_change(series[last_index].value, series[baseline_index].value)


def summarize(series: Series) -> SummaryStats:
    """
    Compute SummaryStats for a non-empty series

    Extremes break ties by the earliest timestamp.

    Raises:
        InvalidParameterError: If the series is empty
    """
    if len(series) == 0:
        raise InvalidParameterError(f"Cannot summarize an empty {series.kind.value} series")

    values = series.values()
    k = points_per_day(series)

    # argmax/argmin return the first occurrence and points are time-ordered
    hi = int(np.argmax(values))
    lo = int(np.argmin(values))

    stats = SummaryStats(
        current=series[-1].value,
        change_24h=change_over(series, k),
        change_7d=change_over(series, 7 * k),
        all_time_high=ExtremePoint(series[hi].value, series[hi].timestamp),
        all_time_low=ExtremePoint(series[lo].value, series[lo].timestamp),
    )
    log.debug(
        f"{series.kind.value}: current={stats.current:.6g} 24h={stats.change_24h:+.2f}% "
        f"7d={stats.change_7d:+.2f}%"
    )
    return stats
