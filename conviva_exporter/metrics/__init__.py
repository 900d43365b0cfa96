"""Metric definitions, selectors and result types."""

from __future__ import annotations

from conviva_exporter.metrics.base import (
    DimensionRow,
    MetricDefinition,
    MetricSample,
    NamedField,
    PositionalIndex,
    ScrapeResult,
    Selector,
)
from conviva_exporter.metrics.definitions import V2_DEFINITIONS, V3_DEFINITIONS

__all__ = [
    "DimensionRow",
    "MetricDefinition",
    "MetricSample",
    "NamedField",
    "PositionalIndex",
    "ScrapeResult",
    "Selector",
    "V2_DEFINITIONS",
    "V3_DEFINITIONS",
]
