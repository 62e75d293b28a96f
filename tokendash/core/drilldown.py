#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Drill-down synthesis.

Expands one aggregated point into finer detail on request, without any
stored backing data:
- volume point  -> 24 hourly volumes summing to the point value, plus trading metrics
- distribution segment -> categorical sub-metrics derived from one label seed
- price point   -> hourly price action around the selection plus market insights

Every result is a pure function of its inputs: asking twice for the same
point returns identical values.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple, Union

from ..shared.errors import InvalidParameterError, NotFoundError
from ..shared.models import (
    CategoryShare,
    Distribution,
    PriceDrillDown,
    PriceInsights,
    Series,
    SeriesKind,
    TimePoint,
    TradeSizeSegmentDetail,
    VolumeDrillDown,
    VolumeMetrics,
    WalletSegmentDetail,
)
from ..shared.utils import HOUR_MS, lerp, start_of_day_ms
from .seeded import DEFAULT_GENERATOR, SeededValueGenerator

log = logging.getLogger(__name__)

HOURS_PER_DAY = 24
ACTIVE_HOURS = (9, 17)
NIGHT_HOURS = (1, 7)
ACTIVE_HOUR_FACTOR = 1.5
NIGHT_HOUR_FACTOR = 0.3
DEFAULT_HOUR_FACTOR = 0.5
HOURLY_JITTER_RANGE = (0.5, 1.5)

PRICE_WINDOW_HOURS = 24

ACTIVITY_BANDS = ("Very High", "High", "Medium", "Low", "Very Low")
HOLDINGS_PER_PERCENT = 10_000_000


def normalize_percentages(shares: Sequence[Tuple[str, float]]) -> Tuple[CategoryShare, ...]:
    """
    Rescale raw shares to integer percentages summing to exactly 100

    Rounding drift is absorbed by the largest category.

    Raises:
        InvalidParameterError: If no share is positive or any share is negative
    """
    if not shares:
        raise InvalidParameterError("At least one share is required")
    if any(value < 0 or not math.isfinite(value) for _, value in shares):
        raise InvalidParameterError("Shares must be finite and non-negative")
    total = math.fsum(value for _, value in shares)
    if total <= 0:
        raise InvalidParameterError("Shares must not all be zero")

    rounded = [int(math.floor(value * 100.0 / total + 0.5)) for _, value in shares]
    largest = max(range(len(rounded)), key=lambda i: rounded[i])
    rounded[largest] += 100 - sum(rounded)
    return tuple(CategoryShare(name, pct) for (name, _), pct in zip(shares, rounded))


def hour_factor(hour: int) -> float:
    """Relative trading intensity of an hour of the day (UTC)"""
    if ACTIVE_HOURS[0] <= hour <= ACTIVE_HOURS[1]:
        return ACTIVE_HOUR_FACTOR
    if NIGHT_HOURS[0] <= hour <= NIGHT_HOURS[1]:
        return NIGHT_HOUR_FACTOR
    return DEFAULT_HOUR_FACTOR


def expand_to_hourly(
    point: TimePoint,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    kind: SeriesKind = SeriesKind.VOLUME,
) -> Series:
    """
    Split a point's total into 24 hourly values of the day containing it

    First pass shapes each hour (hour factor x seeded jitter keyed by the
    parent timestamp and hour index); second pass rescales so the hours sum
    to the parent value.
    """
    if point.value < 0:
        raise InvalidParameterError(f"Cannot expand a negative total ({point.value})")

    day_start = start_of_day_ms(point.timestamp)
    low, high = HOURLY_JITTER_RANGE
    shape = [
        hour_factor(hour) * generator.uniform(low, high, "intraday", point.timestamp, hour)
        for hour in range(HOURS_PER_DAY)
    ]

    scale = point.value / math.fsum(shape)
    values = [s * scale for s in shape]
    peak = max(range(HOURS_PER_DAY), key=lambda h: values[h])
    values[peak] += point.value - math.fsum(values)

    return Series.from_arrays(kind, [day_start + h * HOUR_MS for h in range(HOURS_PER_DAY)], values)


def volume_metrics(
    point: TimePoint,
    symbol: str = "NBC",
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
) -> VolumeMetrics:
    """Trading metrics of one volume point, all derived from a single timestamp seed"""
    volume = point.value
    f = generator.unit("volume-metrics", point.timestamp)

    trade_count = max(1, int(math.floor(volume / lerp(200.0, 500.0, f))))
    avg_trade_size = volume / trade_count
    unique_wallets = int(math.floor(trade_count * lerp(0.4, 0.7, f)))

    top_pairs = normalize_percentages([
        (f"{symbol}-ETH", 50.0 + lerp(-10.0, 10.0, f)),
        (f"{symbol}-USDC", 30.0 + lerp(-8.0, 8.0, f)),
        (f"{symbol}-USDT", 20.0 + lerp(-6.0, 6.0, f)),
    ])

    return VolumeMetrics(
        trade_count=trade_count,
        avg_trade_size=avg_trade_size,
        largest_trade=avg_trade_size * lerp(5.0, 15.0, f),
        unique_wallets=unique_wallets,
        new_wallets=int(math.floor(unique_wallets * lerp(0.05, 0.15, f))),
        top_pairs=top_pairs,
    )


def drill_down_volume(
    point: TimePoint,
    parent: Optional[Series] = None,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    symbol: str = "NBC",
) -> VolumeDrillDown:
    """
    Hourly breakdown and metrics for one (daily or weekly) volume point

    Args:
        point: Selected point
        parent: Series the point was selected from; when given, the point must
            be present in it with the same value
        generator: Seeded generator
        symbol: Token symbol used to name the trading pairs

    Raises:
        NotFoundError: If parent is given and does not contain the point
        InvalidParameterError: If the point value is negative
    """
    if parent is not None:
        found = parent.find(point.timestamp)
        if found is None or found.value != point.value:
            raise NotFoundError(
                f"No {parent.kind.value} point at {point.timestamp} with value {point.value}"
            )

    hourly = expand_to_hourly(point, generator, parent.kind if parent is not None else SeriesKind.VOLUME)
    log.debug(f"Volume drill-down for {point.timestamp}: {len(hourly)} hourly values")
    return VolumeDrillDown(parent=point, hourly=hourly, metrics=volume_metrics(point, symbol, generator))


def _trade_size_detail(label: str, percentage: float, f: float, symbol: str) -> TradeSizeSegmentDetail:
    pairings = normalize_percentages([
        (f"{symbol}-ETH", math.floor(40 + f * 50)),
        (f"{symbol}-USDC", math.floor(30 + f * 40)),
    ])
    return TradeSizeSegmentDetail(
        label=label,
        percentage=percentage,
        transactions=int(math.floor(1000 + f * 4000)),
        avg_trade_value=round(50 + f * 1000, 2),
        change_from_last_week=round(-15 + f * 30, 2),
        top_traders=int(math.floor(5 + f * 45)),
        popular_pairings=pairings,
    )


def _wallet_detail(label: str, percentage: float, f: float) -> WalletSegmentDetail:
    num_wallets = int(math.floor(10 + f * 2000))
    total_holdings = round(percentage * HOLDINGS_PER_PERCENT, 2)
    top_assets = normalize_percentages([
        ("Ethereum", math.floor(20 + f * 60)),
        ("Stablecoins", math.floor(10 + f * 40)),
    ])
    return WalletSegmentDetail(
        label=label,
        percentage=percentage,
        num_wallets=num_wallets,
        total_holdings=total_holdings,
        avg_holding=round(total_holdings / num_wallets, 2),
        activity=ACTIVITY_BANDS[min(len(ACTIVITY_BANDS) - 1, int(f * len(ACTIVITY_BANDS)))],
        holding_period_days=int(math.floor(10 + f * 200)),
        top_assets=top_assets,
    )


def drill_down_segment(
    label: str,
    percentage: float,
    is_trade_size: bool,
    distribution: Optional[Distribution] = None,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    symbol: str = "NBC",
) -> Union[TradeSizeSegmentDetail, WalletSegmentDetail]:
    """
    Sub-metrics of one distribution segment

    One seed is derived from the label's character sum and the percentage;
    every metric is a fixed formula of that seed, so metrics stay mutually
    consistent and stable across calls.

    Raises:
        InvalidParameterError: For an empty label, a percentage outside
            [0, 100] or a segment kind that contradicts the distribution
        NotFoundError: If distribution is given and has no such segment
    """
    if not label:
        raise InvalidParameterError("Segment label cannot be empty")
    if not math.isfinite(percentage) or not 0 <= percentage <= 100:
        raise InvalidParameterError(f"Segment percentage must be within [0, 100], got {percentage}")

    if distribution is not None:
        if distribution.is_trade_size != is_trade_size:
            raise InvalidParameterError(
                f"Distribution '{distribution.name}' is_trade_size={distribution.is_trade_size}, requested {is_trade_size}"
            )
        segment = distribution.find(label)
        if segment is None or segment.percentage != percentage:
            raise NotFoundError(f"Segment '{label}' ({percentage}%) not in distribution '{distribution.name}'")

    f = generator.label_seed(label, percentage)
    if is_trade_size:
        return _trade_size_detail(label, percentage, f, symbol)
    return _wallet_detail(label, percentage, f)


def drill_down_price(
    point: TimePoint,
    hourly: Series,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
) -> PriceDrillDown:
    """
    Hourly price action within 24 hours either side of the selected point

    Raises:
        NotFoundError: If no hourly point lies within one hour of the selection
    """
    if len(hourly) == 0:
        raise NotFoundError("Hourly price series is empty")

    nearest = min(range(len(hourly)), key=lambda i: abs(hourly[i].timestamp - point.timestamp))
    if abs(hourly[nearest].timestamp - point.timestamp) >= HOUR_MS:
        raise NotFoundError(f"No hourly price within one hour of {point.timestamp}")

    start = max(0, nearest - PRICE_WINDOW_HOURS)
    stop = min(len(hourly), nearest + PRICE_WINDOW_HOURS + 1)
    window = Series(hourly.kind, hourly.points[start:stop])

    first = hourly[0].value
    u = generator.unit("price-insights", point.timestamp)
    # successive binary digits of one draw
    insights = PriceInsights(
        is_bullish=point.value > first,
        change_percent=abs((point.value / first - 1.0) * 100.0),
        high_volatility=u >= 0.5,
        pressure="buying" if (u * 2.0) % 1.0 >= 0.5 else "selling",
        investor_type="institutional" if (u * 4.0) % 1.0 >= 0.5 else "retail",
    )
    return PriceDrillDown(selected=point, window=window, insights=insights)
