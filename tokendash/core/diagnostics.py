#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Diagnostics plotting utilities for TokenDash

Produces PNG snapshots of what the dashboard would display:
- Overview: price line for a window above the (possibly weekly) volume bars
- Volume drill-down: the 24 hourly bars of one selected volume point
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.dates as mdates
import numpy as np

from ..shared.config import DisplayConfig, OutputConfig
from ..shared.formatters import format_currency, format_timestamp
from ..shared.models import Dataset, Series, SeriesKind, VolumeDrillDown
from ..shared.utils import timestamp_to_datetime
from .aggregation import filter_and_aggregate

_THEME_COLORS = {
    "dark": {"face": "#0f1423", "text": "#99a0b0", "line": "#5588ff", "bar": "#65b2ff", "grid": "#2a2f3d"},
    "light": {"face": "#f5f7fa", "text": "#4a5568", "line": "#4263eb", "bar": "#4299e1", "grid": "#e2e8f0"},
}


def _dates(series: Series) -> np.ndarray:
    return np.array([timestamp_to_datetime(p.timestamp) for p in series])


def _style_axis(ax, colors: dict) -> None:
    ax.set_facecolor(colors["face"])
    ax.tick_params(colors=colors["text"], labelsize=7)
    ax.grid(True, color=colors["grid"], linewidth=0.5)
    for spine in ax.spines.values():
        spine.set_color(colors["grid"])


def plot_overview(
    dataset: Dataset,
    window_label: str,
    out_dir: str,
    display: DisplayConfig = DisplayConfig(),
    output: OutputConfig = OutputConfig(),
    now_ms: Optional[int] = None,
) -> str:
    """
    Save a two-panel overview chart (price on top, volume below)

    Returns:
        Path of the written PNG
    """
    colors = _THEME_COLORS[display.theme]
    now_ms = dataset.now_ms if now_ms is None else now_ms
    price = filter_and_aggregate(dataset.get_series(SeriesKind.PRICE), window_label, now_ms=now_ms)
    volume = filter_and_aggregate(dataset.get_series(SeriesKind.VOLUME), window_label, now_ms=now_ms)

    fig, (ax_price, ax_volume) = plt.subplots(
        2, 1, sharex=True, figsize=(output.chart_width, output.chart_height),
        gridspec_kw={"height_ratios": [2, 1]},
    )
    fig.patch.set_facecolor(colors["face"])
    try:
        _style_axis(ax_price, colors)
        _style_axis(ax_volume, colors)

        if len(price):
            ax_price.plot(_dates(price), price.values(), color=colors["line"], linewidth=1.5)
        ax_price.set_title(
            f"{dataset.token.name} ({dataset.token.symbol}) - {window_label.upper()}",
            color=colors["text"], fontsize=10,
        )
        ax_price.set_ylabel("Price", color=colors["text"], fontsize=8)

        if len(volume):
            bar_width = 5.0 if len(volume) > 1 and np.diff(volume.timestamps()).min() > 86_400_000 else 0.8
            ax_volume.bar(_dates(volume), volume.values(), width=bar_width, color=colors["bar"])
        ax_volume.set_ylabel("Volume", color=colors["text"], fontsize=8)
        ax_volume.xaxis.set_major_formatter(mdates.DateFormatter("%b %d"))

        out_path = Path(out_dir)
        out_path.mkdir(parents=True, exist_ok=True)
        target = out_path / f"{dataset.token.symbol.lower()}_overview_{window_label.lower()}.png"
        fig.tight_layout()
        fig.savefig(target, dpi=output.dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    return str(target)


def plot_volume_drilldown(
    detail: VolumeDrillDown,
    out_dir: str,
    display: DisplayConfig = DisplayConfig(),
    output: OutputConfig = OutputConfig(),
) -> str:
    """Save the hourly bars of one volume drill-down"""
    colors = _THEME_COLORS[display.theme]
    fig, ax = plt.subplots(figsize=(output.chart_width, output.chart_height / 2))
    fig.patch.set_facecolor(colors["face"])
    try:
        _style_axis(ax, colors)
        hours = np.arange(len(detail.hourly))
        ax.bar(hours, detail.hourly.values(), color=colors["bar"])
        ax.set_xticks(hours)
        ax.set_xlabel("Hour (UTC)", color=colors["text"], fontsize=8)
        ax.set_title(
            f"{format_timestamp(detail.parent.timestamp, display)} - total "
            f"{format_currency(detail.parent.value, display=display)}",
            color=colors["text"], fontsize=10,
        )

        out_path = Path(out_dir)
        out_path.mkdir(parents=True, exist_ok=True)
        target = out_path / f"volume_drilldown_{detail.parent.timestamp}.png"
        fig.tight_layout()
        fig.savefig(target, dpi=output.dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    return str(target)
