"""Metrics API v2 — quality metriclens tables with positional columns."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from conviva_exporter.metrics.base import (
    UNKNOWN,
    MetricDefinition,
    json_get,
    json_str,
)
from conviva_exporter.metrics.definitions import V2_DEFINITIONS
from conviva_exporter.schema.base import ApiGeneration, RawTable
from conviva_exporter.upstream.errors import NotReadyError, UpstreamError

ROOT = "quality_metriclens"


def _xvalue_title(xvalue: Any) -> str:
    if isinstance(xvalue, dict):
        return json_str(xvalue, "name")
    if isinstance(xvalue, (str, int, float)) and not isinstance(xvalue, bool):
        return str(xvalue)
    return UNKNOWN


def _id_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


class V2Generation(ApiGeneration):
    name = "v2"
    reason_field = "reason"

    @property
    def definitions(self) -> Mapping[str, MetricDefinition]:
        return V2_DEFINITIONS

    def build_request(self) -> httpx.Request:
        params: list[tuple[str, str]] = [
            ("metrics", ROOT),
            ("filter_ids", ",".join(self.config.filter_ids)),
            ("metriclens_dimension_id", self.config.dimension),
            ("metriclens_metrics", ",".join(
                d.request_name for d in self.definitions.values()
            )),
        ]
        url = self._endpoint("metrics.json")
        return self._authorize(httpx.Request("GET", url, params=params))

    def check_ready(self, payload: dict) -> None:
        warming = _id_list(json_get(payload, ROOT, "meta", "filters_warmup"))
        if warming:
            raise NotReadyError(warming)
        missing = _id_list(json_get(payload, ROOT, "meta", "filters_not_exist"))
        if missing:
            raise UpstreamError(f"filters do not exist: {', '.join(missing)}")

    def metadata(self, payload: dict) -> tuple[str, str]:
        dimension_title = json_str(payload, ROOT, "dimension", "description")
        tables = json_get(payload, ROOT, "tables")
        if isinstance(tables, dict) and tables:
            return ", ".join(str(fid) for fid in tables), dimension_title
        return UNKNOWN, dimension_title

    def tables(self, payload: dict) -> list[RawTable]:
        xvalues = json_get(payload, ROOT, "xvalues")
        titles = [_xvalue_title(x) for x in xvalues] if isinstance(xvalues, list) else []

        tables = json_get(payload, ROOT, "tables")
        if not isinstance(tables, dict):
            return []

        result: list[RawTable] = []
        for filter_id, table in tables.items():
            rows = json_get(table, "rows")
            result.append(RawTable(
                filter_id=str(filter_id),
                dimension_values=list(titles),
                regions=list(rows) if isinstance(rows, list) else [],
            ))
        return result
