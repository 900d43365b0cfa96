"""Turns an upstream response into a ScrapeResult."""

from __future__ import annotations

import json
import logging
from typing import Any

from conviva_exporter.metrics.base import ScrapeResult
from conviva_exporter.metrics.model import ParsedTable, Reading, build_result
from conviva_exporter.schema.base import ApiGeneration
from conviva_exporter.upstream.errors import UpstreamError

logger = logging.getLogger(__name__)


class ResponseParser:
    """Parses responses of any API generation.

    Holds no state besides the generation, so one instance can serve
    concurrent scrapes.
    """

    def __init__(self, generation: ApiGeneration) -> None:
        self.generation = generation

    def parse(self, status_code: int, body: bytes) -> ScrapeResult:
        if status_code != 200:
            raise UpstreamError(
                self.generation.error_reason(body), status_code=status_code,
            )

        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise UpstreamError(f"invalid JSON body: {exc}") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("invalid JSON body: expected an object")

        self.generation.check_ready(payload)

        filter_title, dimension_title = self.generation.metadata(payload)
        tables = [
            ParsedTable(
                filter_id=raw.filter_id,
                dimension_values=raw.dimension_values,
                readings=[self.extract(region) for region in raw.regions],
            )
            for raw in self.generation.tables(payload)
        ]
        return build_result(filter_title, dimension_title, tables)

    def extract(self, region: Any) -> list[Reading]:
        """Apply every declared selector to one row's metric region."""
        readings: list[Reading] = []
        for definition in self.generation.definitions.values():
            value = definition.selector.extract(region, definition.key)
            if value is None:
                logger.debug("No usable value for %s, dropping sample",
                             definition.key)
                continue
            readings.append((definition.key, value))
        return readings
