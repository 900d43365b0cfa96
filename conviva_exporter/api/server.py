"""FastAPI server exposing the scrape endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from conviva_exporter.exporter import ConvivaExporter

LANDING_PAGE = """<html>
<head><title>Conviva Experience Insights Prometheus Exporter</title></head>
<body>
<h1>Conviva Experience Insights Quality Summary Exporter</h1>
<p><a href='{path}'>Metrics</a></p>
</body>
</html>"""


def create_api_app(exporter: ConvivaExporter, telemetry_path: str = "/metrics") -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Conviva Exporter",
        description="Prometheus exporter for the Conviva Experience Insights API",
        version="0.1.0",
    )

    async def metrics() -> Response:
        body = await exporter.render()
        return Response(content=body, media_type=CONTENT_TYPE_LATEST)

    app.add_api_route(telemetry_path, metrics, methods=["GET"],
                      include_in_schema=False)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index() -> str:
        return LANDING_PAGE.format(path=telemetry_path)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "api_version": exporter.settings.conviva.api_version,
            "generation": exporter.generation.name,
        }

    return app
