#!/usr/bin/env python3
"""
Tests for YAML configuration loading and CLI overrides
"""
import pytest
from datetime import datetime, timezone
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tokendash.shared.config import (
    ConfigError,
    DashboardConfig,
    DisplayConfig,
    apply_cli_overrides,
    load_dashboard_config,
)
from tokendash.shared.utils import datetime_to_timestamp, parse_datetime

REPO_CONFIG = Path(__file__).parent.parent / "config" / "dashboard_config.yaml"


def write_config(tmp_path, text: str) -> str:
    path = tmp_path / "dashboard_config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestLoadConfig:
    """Test load_dashboard_config"""

    def test_repo_config(self):
        config = load_dashboard_config(str(REPO_CONFIG))

        assert config.dataset.horizon_days == 180
        assert config.dataset.seed == "NBC"
        assert config.token.symbol == "NBC"
        assert config.display.default_window == "30D"
        assert config.logging_level == "INFO"

    def test_partial_config_uses_defaults(self, tmp_path):
        path = write_config(tmp_path, """
dataset:
  horizon_days: 30
  seed: "ABC"
token:
  symbol: "abc"
logging:
  level: "debug"
""")
        config = load_dashboard_config(path)

        assert config.dataset.horizon_days == 30
        assert config.dataset.start_price == 0.75
        assert config.token.symbol == "ABC"
        assert config.display == DisplayConfig()
        assert config.logging_level == "DEBUG"

    def test_empty_file(self, tmp_path):
        config = load_dashboard_config(write_config(tmp_path, ""))
        assert config.dataset.horizon_days == 180

    def test_now_parsed_as_utc(self, tmp_path):
        path = write_config(tmp_path, 'dataset:\n  now: "2025-06-01T00:00:00Z"\n')
        config = load_dashboard_config(path)
        assert config.dataset.now_ms == datetime_to_timestamp(parse_datetime("2025-06-01T00:00:00Z"))

    def test_unquoted_date(self, tmp_path):
        path = write_config(tmp_path, "dataset:\n  now: 2025-06-01\n")
        config = load_dashboard_config(path)
        assert config.dataset.now_ms == datetime_to_timestamp(datetime(2025, 6, 1, tzinfo=timezone.utc))

    def test_unquoted_datetime(self, tmp_path):
        path = write_config(tmp_path, "dataset:\n  now: 2025-06-01T12:00:00Z\n")
        config = load_dashboard_config(path)
        assert config.dataset.now_ms == datetime_to_timestamp(datetime(2025, 6, 1, 12, tzinfo=timezone.utc))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_dashboard_config(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_dashboard_config(write_config(tmp_path, "dataset: [unclosed"))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            load_dashboard_config(write_config(tmp_path, "- a\n- b\n"))

    @pytest.mark.parametrize("text", [
        "dataset:\n  unknown_key: 1\n",
        "dataset:\n  horizon_days: 0\n",
        "display:\n  theme: blue\n",
        "display:\n  default_window: 1Y\n",
        "token:\n  circulating_supply: 20000000000\n",
        "output:\n  dpi: 0\n",
        "logging:\n  level: LOUD\n",
        "dataset: 5\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        with pytest.raises(ConfigError):
            load_dashboard_config(write_config(tmp_path, text))


class TestOverrides:
    """Test apply_cli_overrides"""

    def test_overrides_applied_to_copy(self):
        base = DashboardConfig()
        updated = apply_cli_overrides(
            base, horizon_days=30, seed="XYZ", now="2025-06-01T00:00:00Z",
            theme="light", output_dir="charts", logging_level="warning",
        )

        assert updated.dataset.horizon_days == 30
        assert updated.dataset.seed == "XYZ"
        assert updated.dataset.now_ms == datetime_to_timestamp(parse_datetime("2025-06-01T00:00:00Z"))
        assert updated.display.theme == "light"
        assert updated.output.dir == "charts"
        assert updated.logging_level == "WARNING"
        assert base.dataset.horizon_days == 180
        assert base.display.theme == "dark"

    def test_none_overrides_ignored(self):
        base = DashboardConfig()
        assert apply_cli_overrides(base, horizon_days=None, seed=None) == base

    @pytest.mark.parametrize("overrides", [{"horizon_days": 0}, {"theme": "blue"}, {"logging_level": "LOUD"}])
    def test_invalid_overrides(self, overrides):
        with pytest.raises(ConfigError):
            apply_cli_overrides(DashboardConfig(), **overrides)


class TestDisplayConfig:
    """Test DisplayConfig"""

    def test_toggle_returns_new_value(self):
        dark = DisplayConfig()
        light = dark.toggled()

        assert dark.theme == "dark"
        assert light.theme == "light"
        assert light.toggled() == dark


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
