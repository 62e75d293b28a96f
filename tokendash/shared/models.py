#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Domain Models for TokenDash
Defines the immutable data structures produced by the generation engine and
handed to the presentation layer.
"""
from __future__ import annotations

import math
from bisect import bisect_left
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidParameterError


class SeriesKind(str, Enum):
    """Semantic meaning shared by every point of a series"""
    PRICE = "price"
    VOLUME = "volume"
    LIQUIDITY = "liquidity"
    HOLDERS = "holders"
    TRANSACTIONS = "transactions"


class AggregationMode(str, Enum):
    """How points falling into one bucket are combined"""
    SUM = "sum"    # flow quantities (volume, transaction counts)
    LAST = "last"  # level quantities (price, liquidity, holders)


@dataclass(frozen=True)
class TimePoint:
    """A single timestamped value (timestamp in epoch milliseconds)"""
    timestamp: int
    value: float

    def __post_init__(self):
        if not math.isfinite(self.value):
            raise InvalidParameterError(f"TimePoint value must be finite, got {self.value!r}")


@dataclass(frozen=True)
class Series:
    """
    Ordered, read-only sequence of TimePoints sharing one SeriesKind

    Timestamps strictly increase; filtering and aggregation always produce
    new Series instances.
    """
    kind: SeriesKind
    points: Tuple[TimePoint, ...] = ()

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))
        for prev, curr in zip(self.points, self.points[1:]):
            if curr.timestamp <= prev.timestamp:
                raise InvalidParameterError(
                    f"{self.kind.value} series timestamps must strictly increase "
                    f"({prev.timestamp} followed by {curr.timestamp})"
                )

    @classmethod
    def from_arrays(cls, kind: SeriesKind, timestamps: Iterable[int], values: Iterable[float]) -> "Series":
        ts = [int(t) for t in timestamps]
        vs = [float(v) for v in values]
        if len(ts) != len(vs):
            raise InvalidParameterError(f"Length mismatch: {len(ts)} timestamps vs {len(vs)} values")
        return cls(kind=kind, points=tuple(TimePoint(t, v) for t, v in zip(ts, vs)))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TimePoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> TimePoint:
        return self.points[index]

    def timestamps(self) -> np.ndarray:
        return np.fromiter((p.timestamp for p in self.points), dtype=np.int64, count=len(self.points))

    def values(self) -> np.ndarray:
        return np.fromiter((p.value for p in self.points), dtype=float, count=len(self.points))

    def last(self) -> TimePoint:
        if not self.points:
            raise InvalidParameterError(f"{self.kind.value} series is empty")
        return self.points[-1]

    def find(self, timestamp: int) -> Optional[TimePoint]:
        """Return the point with exactly this timestamp, if any"""
        keys = [p.timestamp for p in self.points]
        idx = bisect_left(keys, timestamp)
        if idx < len(keys) and keys[idx] == timestamp:
            return self.points[idx]
        return None


@dataclass(frozen=True)
class TimeWindow:
    """
    Display window selecting recent history

    days=None selects the whole history; coarse windows are re-bucketed by
    calendar week after filtering.
    """
    label: str
    days: Optional[int]
    coarse: bool = False


@dataclass(frozen=True)
class ExtremePoint:
    """All-time high or low together with when it happened"""
    value: float
    timestamp: int


@dataclass(frozen=True)
class SummaryStats:
    """Point-in-time figures derived from one series (percent changes in %)"""
    current: float
    change_24h: float
    change_7d: float
    all_time_high: ExtremePoint
    all_time_low: ExtremePoint


@dataclass(frozen=True)
class DistributionSegment:
    label: str
    percentage: float


@dataclass(frozen=True)
class Distribution:
    """Categorical breakdown shown as a donut chart"""
    name: str
    segments: Tuple[DistributionSegment, ...]
    is_trade_size: bool = False

    def find(self, label: str) -> Optional[DistributionSegment]:
        for segment in self.segments:
            if segment.label == label:
                return segment
        return None

    def total(self) -> float:
        return sum(s.percentage for s in self.segments)


@dataclass(frozen=True)
class CategoryShare:
    """Named integer percentage inside a normalized breakdown"""
    name: str
    percentage: int


@dataclass(frozen=True)
class VolumeMetrics:
    trade_count: int
    avg_trade_size: float
    largest_trade: float
    unique_wallets: int
    new_wallets: int
    top_pairs: Tuple[CategoryShare, ...]


@dataclass(frozen=True)
class VolumeDrillDown:
    """Hourly expansion of one volume point plus its trading metrics"""
    parent: TimePoint
    hourly: Series
    metrics: VolumeMetrics


@dataclass(frozen=True)
class TradeSizeSegmentDetail:
    label: str
    percentage: float
    transactions: int
    avg_trade_value: float
    change_from_last_week: float
    top_traders: int
    popular_pairings: Tuple[CategoryShare, ...]


@dataclass(frozen=True)
class WalletSegmentDetail:
    label: str
    percentage: float
    num_wallets: int
    total_holdings: float
    avg_holding: float
    activity: str
    holding_period_days: int
    top_assets: Tuple[CategoryShare, ...]


@dataclass(frozen=True)
class PriceInsights:
    is_bullish: bool
    change_percent: float
    high_volatility: bool
    pressure: str        # "buying" | "selling"
    investor_type: str   # "institutional" | "retail"


@dataclass(frozen=True)
class PriceDrillDown:
    """Hourly price action around a selected timestamp"""
    selected: TimePoint
    window: Series
    insights: PriceInsights


@dataclass(frozen=True)
class TokenProfile:
    name: str
    symbol: str
    created_at: int
    description: str = ""
    website: str = ""
    contract_address: str = ""
    decimals: int = 18


@dataclass(frozen=True)
class MarketPair:
    pair: str
    liquidity: float
    volume_24h: float


@dataclass(frozen=True)
class MarketOverview:
    dex_volume_24h: float
    dex_volume_change_24h: float
    total_liquidity: float
    liquidity_change_24h: float
    pairs: Tuple[MarketPair, ...]


@dataclass(frozen=True)
class CommunityStats:
    holders: int
    transactions_24h: int
    twitter_followers: int
    discord_members: int
    telegram_members: int


@dataclass(frozen=True)
class SupplyMetrics:
    market_cap: float
    fully_diluted_valuation: float
    circulating_supply: float
    total_supply: float
    max_supply: float


@dataclass(frozen=True)
class Dataset:
    """
    Complete in-memory dataset built once per session

    Rebuilt wholesale when the generation parameters change. The series,
    summary and distribution maps are read-only views.
    """
    token: TokenProfile
    now_ms: int
    series: Mapping[SeriesKind, Series]
    summary: SummaryStats
    summaries: Mapping[SeriesKind, SummaryStats]
    distributions: Mapping[str, Distribution]
    market: MarketOverview
    community: CommunityStats
    supply: SupplyMetrics
    hourly_price: Series = field(default_factory=lambda: Series(SeriesKind.PRICE))

    def __post_init__(self):
        for name in ("series", "summaries", "distributions"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def get_series(self, kind: SeriesKind) -> Series:
        return self.series[SeriesKind(kind)]

    def segment_labels(self) -> List[str]:
        return [s.label for d in self.distributions.values() for s in d.segments]


def series_kinds(names: Sequence[str]) -> List[SeriesKind]:
    """Parse series kind names (case-insensitive)"""
    kinds = []
    for name in names:
        try:
            kinds.append(SeriesKind(str(name).strip().lower()))
        except ValueError:
            raise InvalidParameterError(
                f"Unknown series kind '{name}'. Expected one of {[k.value for k in SeriesKind]}"
            )
    return kinds
