#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Prometheus exposition of a dataset's summary figures.

Builds a private CollectorRegistry per call so concurrent callers never share
gauge state.
"""
from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from ..shared.models import Dataset


@dataclass
class MetricHandles:
    current: Gauge
    change_24h: Gauge
    change_7d: Gauge
    all_time_high: Gauge
    all_time_low: Gauge
    segment_percentage: Gauge
    generated_timestamp_seconds: Gauge


def _build_handles(registry: CollectorRegistry, prefix: str) -> MetricHandles:
    labels = ['token', 'series']
    return MetricHandles(
        current=Gauge(f"{prefix}current_value", "Latest value of the series", labels, registry=registry),
        change_24h=Gauge(f"{prefix}change_24h_percent", "Change over 24h (%)", labels, registry=registry),
        change_7d=Gauge(f"{prefix}change_7d_percent", "Change over 7d (%)", labels, registry=registry),
        all_time_high=Gauge(f"{prefix}all_time_high", "All-time high value", labels, registry=registry),
        all_time_low=Gauge(f"{prefix}all_time_low", "All-time low value", labels, registry=registry),
        segment_percentage=Gauge(
            f"{prefix}segment_percentage", "Share of a distribution segment (%)",
            ['token', 'distribution', 'segment'], registry=registry,
        ),
        generated_timestamp_seconds=Gauge(
            f"{prefix}generated_timestamp_seconds", "Dataset anchor time (epoch seconds)", ['token'], registry=registry,
        ),
    )


def build_registry(dataset: Dataset, prefix: str = "tokendash_") -> CollectorRegistry:
    """Registry holding one gauge sample per series summary and distribution segment"""
    registry = CollectorRegistry()
    m = _build_handles(registry, prefix)
    symbol = dataset.token.symbol

    for kind, stats in dataset.summaries.items():
        lbl = dict(token=symbol, series=kind.value)
        m.current.labels(**lbl).set(stats.current)
        m.change_24h.labels(**lbl).set(stats.change_24h)
        m.change_7d.labels(**lbl).set(stats.change_7d)
        m.all_time_high.labels(**lbl).set(stats.all_time_high.value)
        m.all_time_low.labels(**lbl).set(stats.all_time_low.value)

    for name, distribution in dataset.distributions.items():
        for segment in distribution.segments:
            m.segment_percentage.labels(token=symbol, distribution=name, segment=segment.label).set(segment.percentage)

    m.generated_timestamp_seconds.labels(token=symbol).set(dataset.now_ms / 1000.0)
    return registry


def render_metrics(dataset: Dataset, prefix: str = "tokendash_") -> bytes:
    """Prometheus text exposition of the dataset summary"""
    return generate_latest(build_registry(dataset, prefix))
