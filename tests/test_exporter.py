#!/usr/bin/env python3
"""
Tests for the Prometheus exposition of a dataset
"""
import pytest
from datetime import datetime, timezone
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tokendash.core.dataset import generate_dataset
from tokendash.core.exporter import build_registry, render_metrics
from tokendash.shared.config import DatasetConfig
from tokendash.shared.models import SeriesKind
from tokendash.shared.utils import datetime_to_timestamp

NOW = datetime_to_timestamp(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture(scope="module")
def dataset():
    return generate_dataset(DatasetConfig(horizon_days=30), now_ms=NOW)


class TestExporter:
    """Test build_registry and render_metrics"""

    def test_summary_gauges(self, dataset):
        registry = build_registry(dataset)
        for kind in SeriesKind:
            value = registry.get_sample_value("tokendash_current_value", {"token": "NBC", "series": kind.value})
            assert value == pytest.approx(dataset.summaries[kind].current)

        ath = registry.get_sample_value("tokendash_all_time_high", {"token": "NBC", "series": "price"})
        assert ath == pytest.approx(dataset.summary.all_time_high.value)

    def test_segment_gauges(self, dataset):
        registry = build_registry(dataset)
        value = registry.get_sample_value(
            "tokendash_segment_percentage",
            {"token": "NBC", "distribution": "wallet_concentration", "segment": "Top 10 wallets"},
        )
        assert value == 28.0

    def test_anchor_time(self, dataset):
        registry = build_registry(dataset)
        assert registry.get_sample_value("tokendash_generated_timestamp_seconds", {"token": "NBC"}) == NOW / 1000.0

    def test_text_exposition(self, dataset):
        text = render_metrics(dataset).decode("utf-8")

        assert 'tokendash_current_value{token="NBC",series="price"}' in text
        assert 'tokendash_segment_percentage{token="NBC",distribution="trade_size",segment="$0-$100"} 45.0' in text

    def test_custom_prefix_and_isolation(self, dataset):
        first = render_metrics(dataset, prefix="dash_").decode("utf-8")
        second = render_metrics(dataset, prefix="dash_").decode("utf-8")

        assert "dash_change_24h_percent" in first
        assert "tokendash_" not in first
        assert first == second


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
