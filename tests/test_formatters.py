#!/usr/bin/env python3
"""
Tests for display formatting helpers
"""
import pytest
from datetime import datetime, timezone
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tokendash.shared.config import DisplayConfig
from tokendash.shared.formatters import (
    format_currency,
    format_number,
    format_percent,
    format_timestamp,
    format_token_price,
)
from tokendash.shared.utils import datetime_to_timestamp

NOW = datetime_to_timestamp(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


class TestNumbers:
    """Test currency, number and percent formatting"""

    @pytest.mark.parametrize("value,decimals,expected", [
        (1_250_000, 2, "$1.25M"),
        (2_500_000_000, 1, "$2.5B"),
        (45_600, 1, "$45.6K"),
        (999.5, 2, "$999.50"),
        (-3_000_000, 0, "$-3M"),
    ])
    def test_currency(self, value, decimals, expected):
        assert format_currency(value, decimals) == expected

    def test_currency_symbol_from_display(self):
        assert format_currency(1500, display=DisplayConfig(currency_symbol="€")) == "€1.50K"

    def test_number(self):
        assert format_number(12_345) == "12K"
        assert format_number(12_345, 1) == "12.3K"
        assert format_number(42) == "42"

    @pytest.mark.parametrize("value,expected", [(3.2, "+3.20%"), (-1.5, "-1.50%"), (0.0, "+0.00%")])
    def test_percent(self, value, expected):
        assert format_percent(value) == expected

    def test_missing_values(self):
        assert format_currency(None) == "-"
        assert format_number(None) == "-"
        assert format_percent(None) == "-"
        assert format_token_price(None) == "-"


class TestTokenPrice:
    """Test format_token_price precision tiers"""

    @pytest.mark.parametrize("price,expected", [
        (0.000005, "$5.00e-06"),
        (0.0005, "$0.000500"),
        (0.005, "$0.00500"),
        (0.05, "$0.0500"),
        (0.75, "$0.750"),
        (12.3456, "$12.35"),
        (1234.7, "$1235"),
    ])
    def test_tiers(self, price, expected):
        assert format_token_price(price) == expected


class TestTimestamp:
    """Test format_timestamp"""

    def test_iso(self):
        assert format_timestamp(NOW, DisplayConfig(time_format="iso")) == "2025-06-01T12:00:00Z"

    def test_human(self):
        assert format_timestamp(NOW, DisplayConfig(time_format="human")) == "Jun 01, 2025 12:00"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
