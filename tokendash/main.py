#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
TokenDash command-line runner.
- Loads configuration
- Builds the synthetic dataset once
- Prints the summary and any requested window / drill-down views

Usage examples:
  python -m tokendash.main --help
  python -m tokendash.main --config path/to/dashboard_config.yaml
  python -m tokendash.main --series volume --window ALL
  python -m tokendash.main --drill-volume -1 --drill-segment "Top 10 wallets"
  python -m tokendash.main --metrics
  python -m tokendash.main --plot --output-dir output
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.aggregation import filter_and_aggregate
from .core.dataset import TRADE_SIZE_DISTRIBUTION, WALLET_CONCENTRATION, generate_dataset
from .core.drilldown import drill_down_segment, drill_down_volume
from .core.exporter import render_metrics
from .shared.colored_logging import setup_colored_logging
from .shared.config import ConfigError, DashboardConfig, apply_cli_overrides, load_dashboard_config
from .shared.errors import TokenDashError
from .shared.formatters import (
    format_currency,
    format_number,
    format_percent,
    format_timestamp,
    format_token_price,
)
from .shared.models import Dataset, SeriesKind, TradeSizeSegmentDetail, series_kinds

log = logging.getLogger(__name__)


def _summary_lines(dataset: Dataset, config: DashboardConfig) -> List[str]:
    d = config.display
    s = dataset.summary
    return [
        f"{dataset.token.name} ({dataset.token.symbol})",
        f"  price:      {format_token_price(s.current, d)}  24h {format_percent(s.change_24h)}  7d {format_percent(s.change_7d)}",
        f"  ATH:        {format_token_price(s.all_time_high.value, d)} on {format_timestamp(s.all_time_high.timestamp, d)}",
        f"  ATL:        {format_token_price(s.all_time_low.value, d)} on {format_timestamp(s.all_time_low.timestamp, d)}",
        f"  volume 24h: {format_currency(dataset.market.dex_volume_24h, display=d)} ({format_percent(dataset.market.dex_volume_change_24h)})",
        f"  liquidity:  {format_currency(dataset.market.total_liquidity, display=d)} ({format_percent(dataset.market.liquidity_change_24h)})",
        f"  market cap: {format_currency(dataset.supply.market_cap, display=d)}  FDV {format_currency(dataset.supply.fully_diluted_valuation, display=d)}",
        f"  holders:    {format_number(dataset.community.holders, 1)}  tx 24h {format_number(dataset.community.transactions_24h)}",
    ]


def _print_segment(dataset: Dataset, label: str, config: DashboardConfig) -> None:
    for name in (WALLET_CONCENTRATION, TRADE_SIZE_DISTRIBUTION):
        distribution = dataset.distributions[name]
        segment = distribution.find(label)
        if segment is None:
            continue
        detail = drill_down_segment(
            segment.label, segment.percentage, distribution.is_trade_size,
            distribution=distribution, symbol=dataset.token.symbol,
        )
        print(f"{label} ({segment.percentage}% of {name}):")
        if isinstance(detail, TradeSizeSegmentDetail):
            print(f"  transactions={detail.transactions} avg_trade={format_currency(detail.avg_trade_value, display=config.display)} "
                  f"wow={format_percent(detail.change_from_last_week)} top_traders={detail.top_traders}")
            shares = detail.popular_pairings
        else:
            print(f"  wallets={detail.num_wallets} avg_holding={format_number(detail.avg_holding, 2)} "
                  f"activity={detail.activity} holding_period={detail.holding_period_days} days")
            shares = detail.top_assets
        print("  " + ", ".join(f"{c.name} {c.percentage}%" for c in shares))
        return
    raise TokenDashError(f"Unknown segment '{label}'. Known: {', '.join(dataset.segment_labels())}")


def main(
    config_path: Optional[str] = None,
    series: str = "price",
    window: Optional[str] = None,
    drill_volume: Optional[int] = None,
    drill_segment: Optional[str] = None,
    metrics: bool = False,
    plot: bool = False,
    log_level: Optional[str] = None,
    **overrides,
) -> int:
    base = Path(__file__).resolve().parents[1]
    default_cfg = base / 'config' / 'dashboard_config.yaml'
    try:
        cfg_file = Path(config_path) if config_path else default_cfg
        config = load_dashboard_config(str(cfg_file)) if cfg_file.exists() or config_path else DashboardConfig()
        config = apply_cli_overrides(config, logging_level=log_level, **overrides)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_colored_logging(level=config.logging_level, theme=config.display.theme)

    try:
        dataset = generate_dataset(config.dataset, config.token)
        print("\n".join(_summary_lines(dataset, config)))

        if window or series != "price":
            kind = series_kinds([series])[0]
            view = filter_and_aggregate(dataset.get_series(kind), window or config.display.default_window, now_ms=dataset.now_ms)
            print(f"{kind.value} [{(window or config.display.default_window).upper()}]: {len(view)} points")
            for point in view:
                print(f"  {format_timestamp(point.timestamp, config.display)}  {point.value:,.4f}")

        if drill_volume is not None:
            volume = dataset.get_series(SeriesKind.VOLUME)
            point = volume[drill_volume]
            detail = drill_down_volume(point, parent=volume, symbol=dataset.token.symbol)
            m = detail.metrics
            print(f"Volume drill-down {format_timestamp(point.timestamp, config.display)}: "
                  f"{format_currency(point.value, display=config.display)}")
            print(f"  trades={m.trade_count} avg={format_currency(m.avg_trade_size, display=config.display)} "
                  f"largest={format_currency(m.largest_trade, display=config.display)} "
                  f"wallets={m.unique_wallets} new={m.new_wallets}")
            print("  pairs: " + ", ".join(f"{p.name} {p.percentage}%" for p in m.top_pairs))
            for hour_point in detail.hourly:
                print(f"  {format_timestamp(hour_point.timestamp, config.display)}  {hour_point.value:,.2f}")
            if plot:
                from .core.diagnostics import plot_volume_drilldown
                print(f"Wrote {plot_volume_drilldown(detail, config.output.dir, config.display, config.output)}")

        if drill_segment:
            _print_segment(dataset, drill_segment, config)

        if metrics:
            print(render_metrics(dataset).decode("utf-8"), end="")

        if plot or config.output.include_charts:
            from .core.diagnostics import plot_overview
            label = window or config.display.default_window
            print(f"Wrote {plot_overview(dataset, label, config.output.dir, config.display, config.output)}")

    except (TokenDashError, IndexError, ValueError) as e:
        log.error(f"{e}")
        return 1
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='TokenDash synthetic market dashboard data')
    parser.add_argument('--config', type=str, default=None, help='Path to dashboard_config.yaml')
    parser.add_argument('--series', type=str, default='price', choices=[k.value for k in SeriesKind], help='Series to print for --window')
    parser.add_argument('--window', type=str, default=None, choices=['24H', '7D', '30D', '90D', 'ALL'], help='Display window')
    parser.add_argument('--drill-volume', type=int, default=None, help='Index of the daily volume point to expand into hours (negative counts from the end)')
    parser.add_argument('--drill-segment', type=str, default=None, help='Distribution segment label to drill into')
    parser.add_argument('--metrics', action='store_true', help='Print Prometheus metrics for the dataset')
    parser.add_argument('--plot', action='store_true', help='Write PNG charts to the output directory')
    parser.add_argument('--horizon-days', type=int, default=None, help='Override dataset.horizon_days')
    parser.add_argument('--seed', type=str, default=None, help='Override dataset.seed')
    parser.add_argument('--now', type=str, default=None, help='Anchor the series end (e.g. 2025-06-01T00:00:00Z)')
    parser.add_argument('--theme', type=str, default=None, choices=['dark', 'light'], help='Override display.theme')
    parser.add_argument('--output-dir', type=str, default=None, help='Override output.dir')
    parser.add_argument('--log-level', type=str, default=None, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], help='Logging level')
    args = parser.parse_args()
    sys.exit(main(
        config_path=args.config,
        series=args.series,
        window=args.window,
        drill_volume=args.drill_volume,
        drill_segment=args.drill_segment,
        metrics=args.metrics,
        plot=args.plot,
        log_level=args.log_level,
        horizon_days=args.horizon_days,
        seed=args.seed,
        now=args.now,
        theme=args.theme,
        output_dir=args.output_dir,
    ))
