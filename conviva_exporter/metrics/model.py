"""Fold parsed tables into a ScrapeResult."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from conviva_exporter.metrics.base import DimensionRow, MetricSample, ScrapeResult

logger = logging.getLogger(__name__)

Reading = tuple[str, float]


@dataclass
class ParsedTable:
    """Per-filter header titles and the readings extracted for each row."""
    filter_id: str
    dimension_values: list[str] = field(default_factory=list)
    readings: list[list[Reading]] = field(default_factory=list)


def build_result(
    filter_title: str,
    dimension_title: str,
    tables: list[ParsedTable],
) -> ScrapeResult:
    """Join header titles with metric rows by position.

    When a table's header and data regions differ in length the extra
    entries of the longer one are dropped.
    """
    result = ScrapeResult(filter_title=filter_title, dimension_title=dimension_title)

    for table in tables:
        if len(table.dimension_values) != len(table.readings):
            logger.warning(
                "Filter %s: %d dimension values but %d metric rows, "
                "truncating to %d",
                table.filter_id, len(table.dimension_values),
                len(table.readings),
                min(len(table.dimension_values), len(table.readings)),
            )
        for dimension_value, readings in zip(table.dimension_values, table.readings):
            result.rows.append(DimensionRow(
                dimension_value=dimension_value,
                filter_id=table.filter_id,
                samples=[
                    MetricSample(
                        metric_key=key,
                        grouping_value=dimension_value,
                        value=value,
                    )
                    for key, value in readings
                ],
            ))
            if dimension_value not in result.dimension_titles:
                result.dimension_titles.append(dimension_value)

    return result
