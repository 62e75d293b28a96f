#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration System for TokenDash
Handles YAML configuration loading, validation, and type conversion.
"""

import copy
import logging
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import InvalidParameterError
from .utils import parse_datetime, datetime_to_timestamp

VALID_WINDOW_LABELS = ("24H", "7D", "30D", "90D", "ALL")


@dataclass
class DatasetConfig:
    """Parameters of the synthetic dataset"""
    horizon_days: int = 180
    start_price: float = 0.75
    price_volatility: float = 0.03
    base_volume: float = 500000.0
    base_liquidity: float = 2000000.0
    initial_holders: int = 500
    initial_transactions: int = 80
    hourly_detail_hours: int = 72
    seed: str = "NBC"
    now_ms: Optional[int] = None  # series end; None means wall-clock time at generation

    def __post_init__(self):
        """Validate generation parameters"""
        if isinstance(self.horizon_days, bool) or not isinstance(self.horizon_days, int):
            raise InvalidParameterError("horizon_days must be an integer")
        if self.horizon_days < 1:
            raise InvalidParameterError("horizon_days must be >= 1")
        for name in ("start_price", "price_volatility", "base_volume", "base_liquidity"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value) or value <= 0:
                raise InvalidParameterError(f"{name} must be a positive number, got {value!r}")
            setattr(self, name, float(value))
        for name in ("initial_holders", "initial_transactions", "hourly_detail_hours"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.seed, str) or not self.seed.strip():
            raise InvalidParameterError("seed cannot be empty")


@dataclass
class TokenConfig:
    """Static token metadata"""
    name: str = "NebulaCoin"
    symbol: str = "NBC"
    description: str = ""
    website: str = ""
    contract_address: str = ""
    decimals: int = 18
    circulating_supply: float = 1_000_000_000.0
    total_supply: float = 5_000_000_000.0
    max_supply: float = 10_000_000_000.0

    def __post_init__(self):
        """Validate token metadata"""
        if not self.name or not self.name.strip():
            raise ValueError("token name cannot be empty")
        if not self.symbol or not self.symbol.strip():
            raise ValueError("token symbol cannot be empty")
        self.symbol = self.symbol.strip().upper()
        if self.decimals < 0:
            raise ValueError("decimals cannot be negative")
        if not (0 < self.circulating_supply <= self.total_supply <= self.max_supply):
            raise ValueError("supplies must satisfy 0 < circulating <= total <= max")


@dataclass(frozen=True)
class DisplayConfig:
    """
    Presentation options threaded explicitly into formatting calls

    Frozen: a theme toggle produces a new value via toggled().
    """
    theme: str = "dark"             # "dark" or "light"
    currency_symbol: str = "$"
    time_format: str = "human"      # "iso" or "human"
    default_window: str = "30D"

    def __post_init__(self):
        """Validate display options"""
        if self.theme not in ("dark", "light"):
            raise ValueError("theme must be 'dark' or 'light'")
        if self.time_format not in ("iso", "human"):
            raise ValueError("time_format must be 'iso' or 'human'")
        if self.default_window not in VALID_WINDOW_LABELS:
            raise ValueError(f"default_window must be one of {list(VALID_WINDOW_LABELS)}")

    def toggled(self) -> "DisplayConfig":
        return replace(self, theme="light" if self.theme == "dark" else "dark")


@dataclass
class OutputConfig:
    """Output configuration for charts"""
    dir: str = "output"
    dpi: int = 150
    chart_width: float = 12.0
    chart_height: float = 8.0
    include_charts: bool = False

    def __post_init__(self):
        """Validate output configuration"""
        if self.dpi <= 0:
            raise ValueError("DPI must be positive")
        if self.chart_width <= 0 or self.chart_height <= 0:
            raise ValueError("Chart dimensions must be positive")


@dataclass
class DashboardConfig:
    """Main configuration"""
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    token: TokenConfig = field(default_factory=TokenConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging_level: str = "INFO"

    def __post_init__(self):
        """Validate main configuration"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level.upper() not in valid_levels:
            raise ValueError(f"logging_level must be one of: {valid_levels}")
        self.logging_level = self.logging_level.upper()


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


def _parse_now(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return datetime_to_timestamp(parse_datetime(value))
    except ValueError as e:
        raise ConfigError(str(e))


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return section


def _load_raw_config(config_path: str) -> Dict[str, Any]:
    """
    Load raw configuration from YAML file

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Raw configuration dictionary

    Raises:
        ConfigError: If file cannot be loaded or parsed
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read {config_path}: {e}")

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(raw_config)}")

    return raw_config


def _build_config_from_dict(config_dict: Dict[str, Any]) -> DashboardConfig:
    """
    Build DashboardConfig from dictionary

    Missing keys fall back to the dataclass defaults.

    Raises:
        ConfigError: If configuration is invalid
    """
    try:
        dataset_raw = dict(_section(config_dict, "dataset"))
        now_ms = _parse_now(dataset_raw.pop("now", None))
        dataset = DatasetConfig(now_ms=now_ms, **dataset_raw)

        token = TokenConfig(**_section(config_dict, "token"))
        display = DisplayConfig(**_section(config_dict, "display"))
        output = OutputConfig(**_section(config_dict, "output"))

        return DashboardConfig(
            dataset=dataset,
            token=token,
            display=display,
            output=output,
            logging_level=str(_section(config_dict, "logging").get("level", "INFO")),
        )

    except (ValueError, TypeError) as e:
        raise ConfigError(f"Configuration validation failed: {e}")


def load_dashboard_config(config_path: str) -> DashboardConfig:
    """
    Load and validate configuration from YAML file

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated DashboardConfig instance

    Raises:
        ConfigError: If configuration cannot be loaded or is invalid
    """
    raw_config = _load_raw_config(config_path)
    config = _build_config_from_dict(raw_config)
    logging.getLogger(__name__).debug(f"Loaded configuration from {config_path}")
    return config


def apply_cli_overrides(config: DashboardConfig, **overrides) -> DashboardConfig:
    """
    Apply command-line overrides to configuration

    Args:
        config: Base configuration (left untouched)
        **overrides: horizon_days, seed, now, theme, output_dir, logging_level

    Returns:
        Updated and re-validated copy

    Raises:
        ConfigError: If overrides are invalid
    """
    try:
        updated = copy.deepcopy(config)

        if overrides.get("horizon_days") is not None:
            updated.dataset.horizon_days = int(overrides["horizon_days"])
        if overrides.get("seed"):
            updated.dataset.seed = str(overrides["seed"])
        if overrides.get("now"):
            updated.dataset.now_ms = _parse_now(overrides["now"])
        if overrides.get("theme"):
            updated.display = replace(updated.display, theme=str(overrides["theme"]))
        if overrides.get("output_dir"):
            updated.output.dir = str(overrides["output_dir"])
        if overrides.get("logging_level"):
            updated.logging_level = str(overrides["logging_level"])

        updated.__post_init__()
        updated.dataset.__post_init__()
        updated.output.__post_init__()

        return updated

    except ConfigError:
        raise
    except (ValueError, TypeError) as e:
        raise ConfigError(f"Failed to apply CLI overrides: {e}")
