"""One fetch, parse and emit cycle per scrape."""

from __future__ import annotations

import logging
from typing import Iterable

import httpx
from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily

from conviva_exporter.config.settings import Settings
from conviva_exporter.metrics.emitter import GaugeSample, emit, emit_failure, to_families
from conviva_exporter.metrics.parser import ResponseParser
from conviva_exporter.schema import create_generation
from conviva_exporter.upstream.client import ConvivaClient, create_http_client
from conviva_exporter.upstream.errors import ScrapeError

logger = logging.getLogger(__name__)


class _ScrapeCollector:
    """Hands pre-built families to a per-scrape registry."""

    def __init__(self, families: list[GaugeMetricFamily]) -> None:
        self._families = families

    def collect(self) -> Iterable[GaugeMetricFamily]:
        return iter(self._families)


class ConvivaExporter:
    """Polls Conviva on demand and exposes the result as gauges.

    Only read-only configuration is shared between scrapes; every call to
    :meth:`scrape` builds its own result.
    """

    def __init__(self, settings: Settings,
                 http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self.namespace = settings.namespace
        self.generation = create_generation(settings.conviva)
        self.parser = ResponseParser(self.generation)
        self.client = ConvivaClient(
            self.generation,
            http_client or create_http_client(settings.conviva),
        )

    async def scrape(self) -> list[GaugeSample]:
        """Fetch, parse and emit. Never raises; failures yield up = 0."""
        try:
            status_code, body = await self.client.fetch()
            result = self.parser.parse(status_code, body)
        except ScrapeError as exc:
            logger.error("Got error from Conviva API: %s", exc)
            return emit_failure(self.namespace)
        except Exception:
            logger.exception("Unexpected error while scraping Conviva API")
            return emit_failure(self.namespace)

        logger.info("Scraped %d rows (%d samples) for filter %s, dimension %s",
                    len(result.rows), result.sample_count,
                    result.filter_title, result.dimension_title)
        return emit(result, self.generation.definitions, self.namespace)

    async def render(self) -> bytes:
        """Run one scrape and render it in the text exposition format."""
        samples = await self.scrape()
        registry = CollectorRegistry()
        registry.register(_ScrapeCollector(
            to_families(samples, self.generation.definitions, self.namespace),
        ))
        return generate_latest(registry)

    async def close(self) -> None:
        await self.client.close()
