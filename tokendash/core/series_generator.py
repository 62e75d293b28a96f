#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Primary series generation.

Produces the daily price, volume, liquidity, holder and transaction histories
of the dashboard. Every random draw comes from the injected
SeededValueGenerator keyed by (seed, kind, day index), so a series depends
only on its explicit inputs. Daily series hold horizon_days + 1 points spaced
exactly one day apart and ending at now_ms.

Generation rules:
- price: random walk with a slight upward bias and a weekend penalty
- volume: base volume scaled by the day-over-day price move and a jitter
- liquidity: biased random walk plus rare liquidity events
- holders / transactions: growth whose rate decays over the horizon;
  transactions dip on weekends
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..shared.errors import InvalidParameterError
from ..shared.models import Series, SeriesKind, TimePoint
from ..shared.utils import DAY_MS, HOUR_MS, current_time_ms, hour_of_day, is_weekend
from .seeded import DEFAULT_GENERATOR, SeededValueGenerator

log = logging.getLogger(__name__)

MIN_PRICE = 0.01
WEEKEND_PRICE_FACTOR = 0.995

VOLUME_MOVE_SENSITIVITY = 10.0
VOLUME_JITTER_RANGE = (0.5, 1.5)

LIQUIDITY_STEP_SPAN = 0.03
LIQUIDITY_STEP_CENTER = 0.45
LIQUIDITY_EVENT_PROBABILITY = 0.03
LIQUIDITY_EVENT_SCALE = 0.2

HOLDER_GROWTH_INITIAL = 0.05
HOLDER_GROWTH_STEADY = 0.002
HOLDER_JITTER_RANGE = (0.5, 1.0)

TX_GROWTH_INITIAL = 0.03
TX_GROWTH_STEADY = 0.002
TX_JITTER_RANGE = (0.75, 1.25)
WEEKEND_TX_FACTOR = 0.85

HOURLY_PRICE_VOLATILITY = 0.008
ACTIVE_HOURS = (9, 17)
ACTIVE_HOUR_PRICE_LIFT = 1.0005


@dataclass(frozen=True)
class GenerationParams:
    """
    Tunables shared by the generators

    Attributes:
        seed: Dataset seed mixed into every draw
        volatility: Span of the daily price step (0.03 = steps within about +/-1.5%)
        upward_bias: Shift of the step centre above zero (0.02 moves it from 0.50 to 0.48)
        floor: Exclusive lower bound of price-like series
    """
    seed: str = "NBC"
    volatility: float = 0.03
    upward_bias: float = 0.02
    floor: float = MIN_PRICE

    def __post_init__(self):
        if not self.seed:
            raise InvalidParameterError("seed cannot be empty")
        if not math.isfinite(self.volatility) or self.volatility < 0:
            raise InvalidParameterError("volatility must be a non-negative finite number")
        if not 0.0 <= self.upward_bias < 0.5:
            raise InvalidParameterError("upward_bias must be within [0, 0.5)")
        if not math.isfinite(self.floor) or self.floor <= 0:
            raise InvalidParameterError("floor must be positive")


DEFAULT_PARAMS = GenerationParams()


def _clamp_floor(value: float, floor: float, kind: SeriesKind, index: int) -> float:
    """Replace non-finite values and values at or below the floor by the next float above it"""
    if not math.isfinite(value) or value <= floor:
        clamped = math.nextafter(floor, math.inf)
        log.debug(f"{kind.value}[{index}]: clamped {value!r} to {clamped!r}")
        return clamped
    return value


def _require_positive(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive number, got {value!r}")


def daily_timestamps(horizon_days: int, now_ms: int) -> List[int]:
    """horizon_days + 1 timestamps one day apart, the last one equal to now_ms"""
    if horizon_days <= 0:
        return []
    return [now_ms - (horizon_days - i) * DAY_MS for i in range(horizon_days + 1)]


def _decaying_rate(initial: float, steady: float, index: int, horizon_days: int) -> float:
    progress = index / horizon_days if horizon_days > 0 else 1.0
    return steady + (initial - steady) * (1.0 - progress)


def generate_price_series(
    horizon_days: int,
    start_price: float,
    params: GenerationParams = DEFAULT_PARAMS,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    now_ms: Optional[int] = None,
) -> Series:
    """Daily price random walk"""
    _require_positive("start_price", start_price)
    now_ms = current_time_ms() if now_ms is None else now_ms
    center = 0.5 - params.upward_bias
    kind = SeriesKind.PRICE

    points = []
    price = float(start_price)
    for i, ts in enumerate(daily_timestamps(horizon_days, now_ms)):
        change = (generator.unit(params.seed, kind.value, i) - center) * params.volatility
        price = _clamp_floor(price * (1.0 + change), params.floor, kind, i)
        if is_weekend(ts):
            price = _clamp_floor(price * WEEKEND_PRICE_FACTOR, params.floor, kind, i)
        points.append(TimePoint(ts, price))

    return Series(kind, tuple(points))


def generate_volume_series(
    price_series: Series,
    base_volume: float,
    params: GenerationParams = DEFAULT_PARAMS,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
) -> Series:
    """
    Daily volume derived from the accompanying price series

    Larger day-over-day price moves produce proportionally larger volume.
    """
    _require_positive("base_volume", base_volume)
    if price_series.kind is not SeriesKind.PRICE:
        raise InvalidParameterError(f"Volume must be derived from a price series, got {price_series.kind.value}")
    kind = SeriesKind.VOLUME
    low, high = VOLUME_JITTER_RANGE

    points = []
    previous = None
    for i, point in enumerate(price_series):
        reference = previous.value if previous is not None else point.value
        move = abs(point.value - reference) / reference
        multiplier = 1.0 + move * VOLUME_MOVE_SENSITIVITY
        jitter = generator.uniform(low, high, params.seed, kind.value, i)
        volume = _clamp_floor(base_volume * multiplier * jitter, params.floor, kind, i)
        points.append(TimePoint(point.timestamp, volume))
        previous = point

    return Series(kind, tuple(points))


def generate_liquidity_series(
    horizon_days: int,
    base_liquidity: float,
    params: GenerationParams = DEFAULT_PARAMS,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    now_ms: Optional[int] = None,
) -> Series:
    """Daily liquidity walk with occasional step additions"""
    _require_positive("base_liquidity", base_liquidity)
    now_ms = current_time_ms() if now_ms is None else now_ms
    kind = SeriesKind.LIQUIDITY

    points = []
    liquidity = float(base_liquidity)
    for i, ts in enumerate(daily_timestamps(horizon_days, now_ms)):
        change = (generator.unit(params.seed, kind.value, i) - LIQUIDITY_STEP_CENTER) * LIQUIDITY_STEP_SPAN
        liquidity *= 1.0 + change
        if generator.chance(LIQUIDITY_EVENT_PROBABILITY, params.seed, kind.value, "event", i):
            addition = base_liquidity * LIQUIDITY_EVENT_SCALE * generator.unit(params.seed, kind.value, "event-size", i)
            log.debug(f"liquidity event on day {i}: +{addition:.2f}")
            liquidity += addition
        liquidity = _clamp_floor(liquidity, params.floor, kind, i)
        points.append(TimePoint(ts, liquidity))

    return Series(kind, tuple(points))


def generate_holder_series(
    horizon_days: int,
    initial_holders: float,
    params: GenerationParams = DEFAULT_PARAMS,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    now_ms: Optional[int] = None,
) -> Series:
    """Holder count growing fast early on and tapering towards a steady rate; never decreases"""
    _require_positive("initial_holders", initial_holders)
    now_ms = current_time_ms() if now_ms is None else now_ms
    kind = SeriesKind.HOLDERS
    low, high = HOLDER_JITTER_RANGE

    points = []
    holders = float(math.floor(initial_holders)) or 1.0
    for i, ts in enumerate(daily_timestamps(horizon_days, now_ms)):
        rate = _decaying_rate(HOLDER_GROWTH_INITIAL, HOLDER_GROWTH_STEADY, i, horizon_days)
        growth = 1.0 + rate * generator.uniform(low, high, params.seed, kind.value, i)
        holders = max(holders, float(math.floor(holders * growth)))
        points.append(TimePoint(ts, holders))

    return Series(kind, tuple(points))


def generate_transaction_series(
    horizon_days: int,
    initial_transactions: float,
    params: GenerationParams = DEFAULT_PARAMS,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    now_ms: Optional[int] = None,
) -> Series:
    """
    Daily transaction count

    The underlying activity level compounds with a decaying growth rate;
    weekend days report a reduced count without dragging the level down.
    """
    _require_positive("initial_transactions", initial_transactions)
    now_ms = current_time_ms() if now_ms is None else now_ms
    kind = SeriesKind.TRANSACTIONS
    low, high = TX_JITTER_RANGE

    points = []
    level = float(initial_transactions)
    for i, ts in enumerate(daily_timestamps(horizon_days, now_ms)):
        rate = _decaying_rate(TX_GROWTH_INITIAL, TX_GROWTH_STEADY, i, horizon_days)
        level *= 1.0 + rate * generator.uniform(low, high, params.seed, kind.value, i)
        daily = level * (WEEKEND_TX_FACTOR if is_weekend(ts) else 1.0)
        points.append(TimePoint(ts, float(max(1, math.floor(daily)))))

    return Series(kind, tuple(points))


def generate_hourly_price_series(
    hours: int,
    current_price: float,
    params: GenerationParams = DEFAULT_PARAMS,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    now_ms: Optional[int] = None,
) -> Series:
    """
    Hourly price detail ending at now_ms

    Lower volatility than the daily walk, with a slight lift during active
    trading hours.
    """
    _require_positive("current_price", current_price)
    now_ms = current_time_ms() if now_ms is None else now_ms
    kind = SeriesKind.PRICE
    if hours <= 0:
        return Series(kind)

    points = []
    price = float(current_price)
    for i in range(hours + 1):
        ts = now_ms - (hours - i) * HOUR_MS
        change = (generator.unit(params.seed, "hourly-price", i) - 0.5) * HOURLY_PRICE_VOLATILITY
        price = _clamp_floor(price * (1.0 + change), params.floor, kind, i)
        if ACTIVE_HOURS[0] <= hour_of_day(ts) <= ACTIVE_HOURS[1]:
            price *= ACTIVE_HOUR_PRICE_LIFT
        points.append(TimePoint(ts, price))

    return Series(kind, tuple(points))


def generate_series(
    kind: SeriesKind,
    horizon_days: int,
    start_value: float,
    params: GenerationParams = DEFAULT_PARAMS,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    now_ms: Optional[int] = None,
    reference: Optional[Series] = None,
) -> Series:
    """
    Generate one daily series of the requested kind

    Args:
        kind: Series kind to produce
        horizon_days: Days of history; non-positive values produce an empty series
        start_value: Start price, base volume, base liquidity, initial holders
            or initial transactions depending on kind; must be positive
        params: Generation tunables
        generator: Seeded generator used for every draw
        now_ms: Timestamp of the last point (defaults to wall-clock time)
        reference: Price series the volume is derived from (volume only)

    Returns:
        New Series of kind

    Raises:
        InvalidParameterError: For a non-positive start_value, or a volume
            request without a matching price reference
    """
    kind = SeriesKind(kind)
    _require_positive("start_value", start_value)

    if kind is SeriesKind.VOLUME:
        if reference is None:
            raise InvalidParameterError("Volume generation requires the reference price series")
        if horizon_days <= 0:
            return Series(kind)
        if len(reference) != horizon_days + 1:
            raise InvalidParameterError(
                f"Reference price series has {len(reference)} points, expected {horizon_days + 1}"
            )
        return generate_volume_series(reference, start_value, params, generator)

    builders = {
        SeriesKind.PRICE: generate_price_series,
        SeriesKind.LIQUIDITY: generate_liquidity_series,
        SeriesKind.HOLDERS: generate_holder_series,
        SeriesKind.TRANSACTIONS: generate_transaction_series,
    }
    series = builders[kind](horizon_days, start_value, params, generator, now_ms)
    log.debug(f"Generated {kind.value} series with {len(series)} points")
    return series
