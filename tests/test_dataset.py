#!/usr/bin/env python3
"""
Tests for one-shot dataset construction

Tests cover:
- Series shape and positivity for the default configuration
- Summary/series agreement
- Market, community and supply figures derived from the series
- Fixed distributions
- Determinism, including concurrent generation
"""
import dataclasses
import math
import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tokendash.core.dataset import TRADE_SIZE_DISTRIBUTION, WALLET_CONCENTRATION, generate_dataset
from tokendash.core.seeded import SeededValueGenerator
from tokendash.shared.config import DatasetConfig, TokenConfig
from tokendash.shared.errors import InvalidParameterError
from tokendash.shared.models import SeriesKind
from tokendash.shared.utils import DAY_MS, HOUR_MS, datetime_to_timestamp

NOW = datetime_to_timestamp(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture(scope="module")
def dataset():
    return generate_dataset(DatasetConfig(seed="NBC"), TokenConfig(), now_ms=NOW)


class TestSeries:
    """Test the generated series"""

    def test_default_price_series(self, dataset):
        price = dataset.get_series(SeriesKind.PRICE)

        assert len(price) == 181
        assert all(p.value > 0.01 for p in price)
        assert dataset.summary.current == price[-1].value

    def test_every_series_aligned(self, dataset):
        stamps = dataset.get_series(SeriesKind.PRICE).timestamps().tolist()
        for kind in SeriesKind:
            series = dataset.get_series(kind)
            assert series.kind is kind
            assert series.timestamps().tolist() == stamps
            assert all(v > 0 for v in series.values())

    def test_get_series_by_name(self, dataset):
        assert dataset.get_series("volume") is dataset.series[SeriesKind.VOLUME]

    def test_holders_never_decrease(self, dataset):
        values = dataset.get_series(SeriesKind.HOLDERS).values()
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_summaries_match_series(self, dataset):
        for kind, stats in dataset.summaries.items():
            values = dataset.get_series(kind).values()
            assert stats.current == values[-1]
            assert stats.all_time_high.value == values.max()
            assert stats.all_time_low.value == values.min()
        assert dataset.summary is dataset.summaries[SeriesKind.PRICE]

    def test_hourly_price_detail(self, dataset):
        hourly = dataset.hourly_price
        assert len(hourly) == 73
        assert hourly[-1].timestamp == NOW
        assert hourly[1].timestamp - hourly[0].timestamp == HOUR_MS

    def test_profile(self, dataset):
        assert dataset.token.symbol == "NBC"
        assert dataset.token.created_at == NOW - 180 * DAY_MS
        assert dataset.now_ms == NOW


class TestDerivedFigures:
    """Test market, community and supply figures"""

    def test_market(self, dataset):
        volume = dataset.summaries[SeriesKind.VOLUME]
        liquidity = dataset.summaries[SeriesKind.LIQUIDITY]
        market = dataset.market

        assert market.dex_volume_24h == volume.current
        assert market.total_liquidity == liquidity.current
        assert [p.pair for p in market.pairs] == ["NBC-ETH", "NBC-USDC"]
        assert sum(p.liquidity for p in market.pairs) == pytest.approx(liquidity.current)
        assert sum(p.volume_24h for p in market.pairs) == pytest.approx(volume.current)

    def test_community(self, dataset):
        community = dataset.community
        holders = int(dataset.summaries[SeriesKind.HOLDERS].current)

        assert community.holders == holders
        assert community.twitter_followers == math.floor(holders * 0.8)
        assert community.discord_members == math.floor(holders * 0.6)
        assert community.telegram_members == math.floor(holders * 0.4)

    def test_supply(self, dataset):
        supply = dataset.supply
        assert supply.market_cap == pytest.approx(dataset.summary.current * 1_000_000_000)
        assert supply.fully_diluted_valuation == pytest.approx(dataset.summary.current * 10_000_000_000)
        assert supply.circulating_supply <= supply.total_supply <= supply.max_supply

    def test_distributions(self, dataset):
        trade = dataset.distributions[TRADE_SIZE_DISTRIBUTION]
        wallets = dataset.distributions[WALLET_CONCENTRATION]

        assert trade.total() == 100
        assert wallets.total() == 100
        assert trade.is_trade_size and not wallets.is_trade_size
        assert "Top 10 wallets" in dataset.segment_labels()


class TestReadOnly:
    """Test that a built dataset cannot be changed in place"""

    def test_maps_are_read_only(self, dataset):
        with pytest.raises(TypeError):
            dataset.series[SeriesKind.PRICE] = dataset.get_series(SeriesKind.VOLUME)
        with pytest.raises(TypeError):
            dataset.summaries[SeriesKind.PRICE] = None
        with pytest.raises(TypeError):
            del dataset.distributions[TRADE_SIZE_DISTRIBUTION]

    def test_source_dict_changes_do_not_leak(self, dataset):
        series = dict(dataset.series)
        rebuilt = dataclasses.replace(dataset, series=series)
        series.pop(SeriesKind.PRICE)

        assert SeriesKind.PRICE in rebuilt.series
        assert rebuilt == dataset


class TestDeterminism:
    """Test that identical inputs produce identical datasets"""

    def test_repeat(self, dataset):
        assert generate_dataset(DatasetConfig(seed="NBC"), TokenConfig(), now_ms=NOW) == dataset

    def test_config_anchor(self, dataset):
        assert generate_dataset(DatasetConfig(seed="NBC", now_ms=NOW), TokenConfig()) == dataset

    def test_concurrent_generation(self, dataset):
        config = DatasetConfig(seed="NBC")
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: generate_dataset(config, TokenConfig(), now_ms=NOW), range(4)))
        assert all(r == dataset for r in results)

    def test_seed_changes_output(self, dataset):
        other = generate_dataset(DatasetConfig(seed="OTHER"), TokenConfig(), now_ms=NOW)
        assert other.get_series(SeriesKind.PRICE) != dataset.get_series(SeriesKind.PRICE)

    def test_namespace_changes_output(self, dataset):
        other = generate_dataset(DatasetConfig(seed="NBC"), TokenConfig(), SeededValueGenerator("alt"), now_ms=NOW)
        assert other.get_series(SeriesKind.PRICE) != dataset.get_series(SeriesKind.PRICE)


class TestDatasetConfig:
    """Test DatasetConfig validation"""

    @pytest.mark.parametrize("kwargs", [
        {"horizon_days": 0},
        {"horizon_days": 1.5},
        {"start_price": 0},
        {"start_price": float("nan")},
        {"base_volume": -1},
        {"initial_holders": 0},
        {"seed": "  "},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidParameterError):
            DatasetConfig(**kwargs)

    def test_one_day_horizon(self):
        small = generate_dataset(DatasetConfig(horizon_days=1), now_ms=NOW)
        assert len(small.get_series(SeriesKind.PRICE)) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
