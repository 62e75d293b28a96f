#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
One-shot construction of the dashboard dataset.

generate_dataset() builds every series, their summaries, the fixed
distributions and the derived market/community/supply figures. The result is
immutable and held by the caller for the session; a parameter change means
building a new dataset.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, Optional

from ..shared.config import DatasetConfig, TokenConfig
from ..shared.models import (
    CommunityStats,
    Dataset,
    Distribution,
    DistributionSegment,
    MarketOverview,
    MarketPair,
    SeriesKind,
    SupplyMetrics,
    TokenProfile,
)
from ..shared.utils import DAY_MS, current_time_ms
from .seeded import DEFAULT_GENERATOR, SeededValueGenerator
from .series_generator import (
    GenerationParams,
    generate_holder_series,
    generate_hourly_price_series,
    generate_liquidity_series,
    generate_price_series,
    generate_transaction_series,
    generate_volume_series,
)
from .statistics import summarize

log = logging.getLogger(__name__)

TRADE_SIZE_DISTRIBUTION = "trade_size"
WALLET_CONCENTRATION = "wallet_concentration"

_TRADE_SIZES = (
    ("$0-$100", 45),
    ("$100-$500", 32),
    ("$500-$1k", 12),
    ("$1k-$10k", 8),
    ("$10k+", 3),
)

_WALLET_TIERS = (
    ("Top 10 wallets", 28),
    ("Next 40 wallets", 22),
    ("Next 100 wallets", 18),
    ("Next 1000 wallets", 22),
    ("All others", 10),
)

# (quote asset, share of liquidity, share of 24h volume)
_PAIR_SPLITS = (
    ("ETH", 0.75, 0.65),
    ("USDC", 0.25, 0.35),
)

TWITTER_RATIO = 0.8
DISCORD_RATIO = 0.6
TELEGRAM_RATIO = 0.4


def build_distributions() -> Dict[str, Distribution]:
    """The trade size and wallet concentration breakdowns"""
    return {
        TRADE_SIZE_DISTRIBUTION: Distribution(
            name=TRADE_SIZE_DISTRIBUTION,
            segments=tuple(DistributionSegment(label, pct) for label, pct in _TRADE_SIZES),
            is_trade_size=True,
        ),
        WALLET_CONCENTRATION: Distribution(
            name=WALLET_CONCENTRATION,
            segments=tuple(DistributionSegment(label, pct) for label, pct in _WALLET_TIERS),
            is_trade_size=False,
        ),
    }


def generate_dataset(
    config: DatasetConfig,
    token: Optional[TokenConfig] = None,
    generator: SeededValueGenerator = DEFAULT_GENERATOR,
    now_ms: Optional[int] = None,
) -> Dataset:
    """
    Build the full in-memory dataset

    Args:
        config: Validated generation parameters
        token: Token metadata (defaults to TokenConfig())
        generator: Seeded generator injected into every generation step
        now_ms: End of every series; falls back to config.now_ms, then wall-clock time

    Returns:
        Dataset whose series all hold config.horizon_days + 1 daily points
    """
    token = token or TokenConfig()
    if now_ms is None:
        now_ms = config.now_ms if config.now_ms is not None else current_time_ms()

    params = GenerationParams(seed=config.seed, volatility=config.price_volatility)
    days = config.horizon_days

    price = generate_price_series(days, config.start_price, params, generator, now_ms)
    series = {
        SeriesKind.PRICE: price,
        SeriesKind.VOLUME: generate_volume_series(price, config.base_volume, params, generator),
        SeriesKind.LIQUIDITY: generate_liquidity_series(days, config.base_liquidity, params, generator, now_ms),
        SeriesKind.HOLDERS: generate_holder_series(days, config.initial_holders, params, generator, now_ms),
        SeriesKind.TRANSACTIONS: generate_transaction_series(days, config.initial_transactions, params, generator, now_ms),
    }
    summaries = {kind: summarize(s) for kind, s in series.items()}

    current_price = summaries[SeriesKind.PRICE].current
    current_volume = summaries[SeriesKind.VOLUME].current
    current_liquidity = summaries[SeriesKind.LIQUIDITY].current
    holders = int(summaries[SeriesKind.HOLDERS].current)

    market = MarketOverview(
        dex_volume_24h=current_volume,
        dex_volume_change_24h=summaries[SeriesKind.VOLUME].change_24h,
        total_liquidity=current_liquidity,
        liquidity_change_24h=summaries[SeriesKind.LIQUIDITY].change_24h,
        pairs=tuple(
            MarketPair(f"{token.symbol}-{quote}", current_liquidity * liq_share, current_volume * vol_share)
            for quote, liq_share, vol_share in _PAIR_SPLITS
        ),
    )
    community = CommunityStats(
        holders=holders,
        transactions_24h=int(summaries[SeriesKind.TRANSACTIONS].current),
        twitter_followers=int(math.floor(holders * TWITTER_RATIO)),
        discord_members=int(math.floor(holders * DISCORD_RATIO)),
        telegram_members=int(math.floor(holders * TELEGRAM_RATIO)),
    )
    supply = SupplyMetrics(
        market_cap=current_price * token.circulating_supply,
        fully_diluted_valuation=current_price * token.max_supply,
        circulating_supply=token.circulating_supply,
        total_supply=token.total_supply,
        max_supply=token.max_supply,
    )
    profile = TokenProfile(
        name=token.name,
        symbol=token.symbol,
        created_at=now_ms - days * DAY_MS,
        description=token.description,
        website=token.website,
        contract_address=token.contract_address,
        decimals=token.decimals,
    )

    dataset = Dataset(
        token=profile,
        now_ms=now_ms,
        series=series,
        summary=summaries[SeriesKind.PRICE],
        summaries=summaries,
        distributions=build_distributions(),
        market=market,
        community=community,
        supply=supply,
        hourly_price=generate_hourly_price_series(config.hourly_detail_hours, current_price, params, generator, now_ms),
    )
    log.info(
        f"Generated {token.symbol} dataset: {days + 1} daily points per series, "
        f"price {current_price:.4f} ({dataset.summary.change_24h:+.2f}% 24h)"
    )
    return dataset
