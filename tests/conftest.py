"""Shared test fixtures."""

from __future__ import annotations

import copy
import json
from typing import Callable

import httpx
import pytest

from conviva_exporter.config.settings import ConvivaConfig, Settings


def full_metrics(seed: float = 1.0) -> dict:
    """A v3 metrics object carrying every supported metric."""
    return {
        "attempts": {"count": 120 * seed},
        "video_start_failures": {"percentage": 0.5 * seed},
        "exit_before_video_starts": {"percentage": 1.5 * seed},
        "plays": {"percentage": 97.5},
        "video_start_time": {"value": 1.2 * seed},
        "rebuffering_ratio": {"ratio": 0.25 * seed},
        "bitrate": {"bps": 2_500_000 * seed},
        "video_playback_failures": {"percentage": 0.1 * seed},
        "ended_plays": {"count": 80 * seed},
        "connection_induced_rebuffering_ratio": {"ratio": 0.2 * seed},
    }


V3_PAYLOAD = {
    "_meta": {
        "group_by_dimension": {"description": "Browser Name"},
        "filter_info": {"id": "myfilter"},
    },
    "time_series": [
        {
            "dimensional_data": [
                {"dimension": {"value": "chrome"}, "metrics": full_metrics(1.0)},
                {"dimension": {"value": "firefox"}, "metrics": full_metrics(2.0)},
            ],
        },
    ],
}


V2_PAYLOAD = {
    "quality_metriclens": {
        "meta": {"status": 0, "filters_warmup": [], "filters_not_exist": []},
        "dimension": {"id": "3", "description": "Player Name"},
        "xvalues": [{"id": "1", "name": "web"}, {"id": "2", "name": "ios"}],
        "tables": {
            "12345": {
                "rows": [
                    [100, 1.0, 2.0, 95.0, 1.1, 0.3, 3000.0, 0.2, 90, 0.1],
                    [50, 0.5, 1.0, 98.0, 0.9, 0.1, 4000.0, 0.0, 45, 0.05],
                ],
            },
        },
    },
}


@pytest.fixture
def v3_payload() -> dict:
    return copy.deepcopy(V3_PAYLOAD)


@pytest.fixture
def v2_payload() -> dict:
    return copy.deepcopy(V2_PAYLOAD)


@pytest.fixture
def v3_config() -> ConvivaConfig:
    return ConvivaConfig(
        base_url="https://api.conviva.test",
        api_version="3.0",
        client_id="client",
        client_secret="secret",
        filter_ids=["12345"],
        dimension="browser_name",
    )


@pytest.fixture
def v2_config() -> ConvivaConfig:
    return ConvivaConfig(
        base_url="https://api.conviva.test",
        api_version="2.4",
        client_id="client",
        client_secret="secret",
        filter_ids=["12345"],
        dimension="3",
    )


@pytest.fixture
def v3_settings(v3_config: ConvivaConfig) -> Settings:
    return Settings(conviva=v3_config)


@pytest.fixture
def v2_settings(v2_config: ConvivaConfig) -> Settings:
    return Settings(conviva=v2_config)


@pytest.fixture
def mock_http() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose transport answers every request the same way.

    Requests seen by the transport are appended to ``client.requests``.
    """
    def _make(status_code: int = 200, payload: object = None,
              body: bytes | None = None,
              error: Exception | None = None) -> httpx.AsyncClient:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if error is not None:
                raise error
            content = body if body is not None else json.dumps(payload).encode()
            return httpx.Response(status_code, content=content)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client.requests = seen  # type: ignore[attr-defined]
        return client

    return _make
