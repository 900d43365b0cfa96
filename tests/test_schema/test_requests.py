"""Tests for request building and generation selection."""

from __future__ import annotations

import base64

import pytest

from conviva_exporter.config.settings import ConvivaConfig
from conviva_exporter.schema import create_generation
from conviva_exporter.schema.factory import major_version
from conviva_exporter.schema.v2 import V2Generation
from conviva_exporter.schema.v3 import V3Generation


def _basic(user: str, password: str) -> str:
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return f"Basic {token}"


# ── Factory ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("version,major", [
    ("3.0", "3"), ("v3", "3"), ("V3.1", "3"), ("2.4", "2"), (" 2 ", "2"),
])
def test_major_version(version, major):
    assert major_version(version) == major


def test_factory_v3(v3_config):
    assert isinstance(create_generation(v3_config), V3Generation)


def test_factory_v2(v2_config):
    assert isinstance(create_generation(v2_config), V2Generation)


def test_factory_unknown_raises():
    config = ConvivaConfig(base_url="https://x", api_version="1.7")
    with pytest.raises(ValueError, match="Unsupported Conviva API version"):
        create_generation(config)


# ── v3 ───────────────────────────────────────────────────────────────

def test_v3_request(v3_config):
    request = V3Generation(v3_config).build_request()

    assert request.method == "GET"
    assert request.url.path == (
        "/insights/3.0/real-time-metrics/custom-selection/group-by/browser_name"
    )
    params = request.url.params
    assert params["minutes"] == "2"
    assert params["granularity"] == "PT1M"
    assert params.get_list("filter_id") == ["12345"]
    assert params.get_list("metric") == [
        "attempts",
        "video-start-failures",
        "exit-before-video-starts",
        "plays",
        "video-start-time",
        "rebuffering-ratio",
        "bitrate",
        "video-playback-failures",
        "ended-plays",
        "connection-induced-rebuffering-ratio",
    ]
    assert request.headers["Authorization"] == _basic("client", "secret")


def test_v3_request_encodes_dimension(v3_config):
    v3_config.dimension = "device name/os"
    request = V3Generation(v3_config).build_request()
    assert request.url.raw_path.decode().split("?")[0].endswith(
        "/group-by/device%20name%2Fos"
    )


def test_v3_request_repeats_filter_ids(v3_config):
    v3_config.filter_ids = ["1", "2"]
    request = V3Generation(v3_config).build_request()
    assert request.url.params.get_list("filter_id") == ["1", "2"]


# ── v2 ───────────────────────────────────────────────────────────────

def test_v2_request(v2_config):
    v2_config.filter_ids = ["12345", "67890"]
    request = V2Generation(v2_config).build_request()

    assert request.url.path == "/insights/2.4/metrics.json"
    params = request.url.params
    assert params["metrics"] == "quality_metriclens"
    assert params["filter_ids"] == "12345,67890"
    assert params["metriclens_dimension_id"] == "3"
    assert params["metriclens_metrics"].split(",")[:3] == [
        "attempts", "video-start-failures", "exit-before-video-starts",
    ]
    assert request.headers["Authorization"] == _basic("client", "secret")


def test_v2_error_reason_from_body(v2_config):
    generation = V2Generation(v2_config)
    assert generation.error_reason(b'{"reason": "bad account"}') == "bad account"
    assert generation.error_reason(b'{"name": "x"}') == '{"name": "x"}'
    assert generation.error_reason(b"  plain text  ") == "plain text"
