"""HTTP client for the Conviva Experience Insights API."""

from __future__ import annotations

import logging

import httpx

from conviva_exporter.config.settings import ConvivaConfig
from conviva_exporter.schema.base import ApiGeneration
from conviva_exporter.upstream.errors import TransportError

logger = logging.getLogger(__name__)


def create_http_client(config: ConvivaConfig) -> httpx.AsyncClient:
    """Build the shared async client; TLS verification follows ``verify_tls``."""
    if not config.verify_tls:
        logger.warning("TLS certificate verification is disabled for %s",
                       config.base_url)
    return httpx.AsyncClient(verify=config.verify_tls)


class ConvivaClient:
    """Sends one request per scrape and hands back the raw response."""

    def __init__(self, generation: ApiGeneration, http: httpx.AsyncClient) -> None:
        self.generation = generation
        self._http = http

    async def fetch(self) -> tuple[int, bytes]:
        """Return (status code, body). Raises TransportError on I/O failure."""
        try:
            request = self.generation.build_request()
            response = await self._http.send(request)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Request to Conviva API failed: {exc}") from exc
        logger.debug("GET %s -> %d (%d bytes)", request.url.path,
                     response.status_code, len(response.content))
        return response.status_code, response.content

    async def close(self) -> None:
        await self._http.aclose()
