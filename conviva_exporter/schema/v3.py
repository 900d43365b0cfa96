"""Metrics API v3 — real-time custom selection grouped by one dimension."""

from __future__ import annotations

import logging
from typing import Mapping
from urllib.parse import quote

import httpx

from conviva_exporter.metrics.base import MetricDefinition, json_get, json_str
from conviva_exporter.metrics.definitions import V3_DEFINITIONS
from conviva_exporter.schema.base import ApiGeneration, RawTable

logger = logging.getLogger(__name__)

MINUTES = "2"
GRANULARITY = "PT1M"


class V3Generation(ApiGeneration):
    name = "v3"
    reason_field = "name"

    @property
    def definitions(self) -> Mapping[str, MetricDefinition]:
        return V3_DEFINITIONS

    def build_request(self) -> httpx.Request:
        url = self._endpoint(
            "real-time-metrics", "custom-selection", "group-by",
            quote(self.config.dimension, safe=""),
        )
        params: list[tuple[str, str]] = [
            ("minutes", MINUTES),
            ("granularity", GRANULARITY),
        ]
        params.extend(("filter_id", fid) for fid in self.config.filter_ids)
        params.extend(
            ("metric", d.request_name) for d in self.definitions.values()
        )
        return self._authorize(httpx.Request("GET", url, params=params))

    def metadata(self, payload: dict) -> tuple[str, str]:
        filter_title = json_str(payload, "_meta", "filter_info", "id")
        dimension_title = json_str(
            payload, "_meta", "group_by_dimension", "description",
        )
        return filter_title, dimension_title

    def tables(self, payload: dict) -> list[RawTable]:
        filter_title, _ = self.metadata(payload)
        table = RawTable(filter_id=filter_title)

        rows = json_get(payload, "time_series", 0, "dimensional_data")
        if not isinstance(rows, list):
            return [table]

        for row in rows:
            value = json_get(row, "dimension", "value")
            if not isinstance(value, str):
                logger.warning(
                    "Skipping row without dimension.value in filter %s",
                    filter_title,
                )
                continue
            metrics = json_get(row, "metrics")
            if isinstance(metrics, dict):
                unknown = [k for k in metrics if k not in self.definitions]
                if unknown:
                    logger.debug("Ignoring unrecognized metrics for %s: %s",
                                 value, ", ".join(unknown))
            table.dimension_values.append(value)
            table.regions.append(metrics)
        return [table]
