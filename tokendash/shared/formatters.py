#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Display formatting helpers.

The DisplayConfig is always passed in by the caller; nothing here reads
session state.
"""
from __future__ import annotations

from typing import Optional

from .config import DisplayConfig
from .utils import timestamp_to_datetime

_DEFAULT_DISPLAY = DisplayConfig()

_MAGNITUDES = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)


def _scaled(value: float, decimals: int) -> str:
    for threshold, suffix in _MAGNITUDES:
        if abs(value) >= threshold:
            return f"{value / threshold:.{decimals}f}{suffix}"
    return f"{value:.{decimals}f}"


def format_currency(value: Optional[float], decimals: int = 2, display: DisplayConfig = _DEFAULT_DISPLAY) -> str:
    """Currency with K/M/B suffix, e.g. $1.25M"""
    if value is None:
        return "-"
    return f"{display.currency_symbol}{_scaled(value, decimals)}"


def format_number(value: Optional[float], decimals: int = 0) -> str:
    """Plain number with K/M/B suffix, e.g. 12K"""
    if value is None:
        return "-"
    return _scaled(value, decimals)


def format_token_price(price: Optional[float], display: DisplayConfig = _DEFAULT_DISPLAY) -> str:
    """Token price with precision that grows as the price shrinks"""
    if price is None:
        return "-"
    symbol = display.currency_symbol
    if price < 0.00001:
        return f"{symbol}{price:.2e}"
    if price < 0.001:
        return f"{symbol}{price:.6f}"
    if price < 0.01:
        return f"{symbol}{price:.5f}"
    if price < 0.1:
        return f"{symbol}{price:.4f}"
    if price < 1:
        return f"{symbol}{price:.3f}"
    if price < 1000:
        return f"{symbol}{price:.2f}"
    return f"{symbol}{price:.0f}"


def format_percent(value: Optional[float], decimals: int = 2) -> str:
    """Signed percentage, e.g. +3.20%"""
    if value is None:
        return "-"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_timestamp(timestamp_ms: int, display: DisplayConfig = _DEFAULT_DISPLAY) -> str:
    dt = timestamp_to_datetime(timestamp_ms)
    if display.time_format == "iso":
        return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return dt.strftime("%b %d, %Y %H:%M")
