"""Application orchestrator — wires together all components."""

from __future__ import annotations

import logging
from pathlib import Path

import uvicorn

from conviva_exporter.api.server import create_api_app
from conviva_exporter.config.settings import Settings, load_config
from conviva_exporter.exporter import ConvivaExporter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Application:
    """Top-level application orchestrator."""

    def __init__(self, config_path: str | Path | None = None,
                 settings: Settings | None = None) -> None:
        self.settings = settings or load_config(config_path)
        self.exporter = ConvivaExporter(self.settings)
        self.api_app = create_api_app(
            self.exporter, telemetry_path=self.settings.web.telemetry_path,
        )
        self._server: uvicorn.Server | None = None

    async def start(self) -> None:
        """Serve scrapes until interrupted."""
        self._setup_logging()
        config = uvicorn.Config(
            self.api_app,
            host=self.settings.web.host,
            port=self.settings.web.port,
            log_level="warning",
        )
        self._server = uvicorn.Server(config)
        logger.info("Conviva API %s (%s), filters %s, dimension %s",
                    self.settings.conviva.api_version, self.exporter.generation.name,
                    ", ".join(self.settings.conviva.filter_ids) or "-",
                    self.settings.conviva.dimension or "-")
        logger.info("Listening on %s, metrics at %s",
                    self.settings.listen_address, self.settings.web.telemetry_path)
        try:
            await self._server.serve()
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Graceful shutdown."""
        logger.info("Shutting down...")
        await self.exporter.close()
        logger.info("Shutdown complete.")

    def _setup_logging(self) -> None:
        logging.basicConfig(level=self.settings.log_level.upper(), format=LOG_FORMAT)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
