"""Tests for the HTTP surface."""

from __future__ import annotations

from fastapi.testclient import TestClient
from prometheus_client import CONTENT_TYPE_LATEST

from conviva_exporter.api.server import create_api_app
from conviva_exporter.exporter import ConvivaExporter

NS = "conviva_experience_insights"


def test_metrics_endpoint(v3_settings, v3_payload, mock_http):
    exporter = ConvivaExporter(v3_settings, http_client=mock_http(payload=v3_payload))
    client = TestClient(create_api_app(exporter))

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == CONTENT_TYPE_LATEST
    assert f"{NS}_up 1.0" in resp.text
    assert 'metriclens_dimension_value="firefox"' in resp.text


def test_metrics_endpoint_reports_failure_with_200(v3_settings, mock_http):
    http = mock_http(status_code=500, payload={"name": "rate_limited"})
    exporter = ConvivaExporter(v3_settings, http_client=http)
    client = TestClient(create_api_app(exporter))

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert f"{NS}_up 0.0" in resp.text


def test_custom_telemetry_path(v3_settings, v3_payload, mock_http):
    exporter = ConvivaExporter(v3_settings, http_client=mock_http(payload=v3_payload))
    client = TestClient(create_api_app(exporter, telemetry_path="/probe"))

    assert client.get("/probe").status_code == 200
    assert client.get("/metrics").status_code == 404
    assert "href='/probe'" in client.get("/").text


def test_landing_page(v3_settings, mock_http):
    exporter = ConvivaExporter(v3_settings, http_client=mock_http(payload={}))
    client = TestClient(create_api_app(exporter))

    resp = client.get("/")

    assert resp.status_code == 200
    assert "Conviva Experience Insights" in resp.text
    assert "href='/metrics'" in resp.text
    assert not exporter.client._http.requests  # no upstream call


def test_health(v2_settings, mock_http):
    exporter = ConvivaExporter(v2_settings, http_client=mock_http(payload={}))
    client = TestClient(create_api_app(exporter))

    data = client.get("/health").json()

    assert data == {"status": "ok", "api_version": "2.4", "generation": "v2"}


def test_application_wires_components(v3_settings):
    from conviva_exporter.app import Application

    app = Application(settings=v3_settings)

    paths = {route.path for route in app.api_app.routes}
    assert {"/", "/metrics", "/health"} <= paths
    assert app.exporter.generation.name == "v3"
