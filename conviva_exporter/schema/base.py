"""Abstract API generation: request building and response layout."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from conviva_exporter.config.settings import ConvivaConfig
from conviva_exporter.metrics.base import MetricDefinition, json_get


@dataclass
class RawTable:
    """Header titles and metric regions for one filter, not yet joined."""
    filter_id: str
    dimension_values: list[str] = field(default_factory=list)
    regions: list[Any] = field(default_factory=list)


class ApiGeneration(ABC):
    """One generation of the Conviva Experience Insights API.

    Subclasses know where things live in their responses; the parser and
    the rest of the pipeline only go through this interface.
    """

    name: str = ""
    reason_field: str = "name"

    def __init__(self, config: ConvivaConfig) -> None:
        self.config = config

    @property
    @abstractmethod
    def definitions(self) -> Mapping[str, MetricDefinition]:
        """Supported metrics in declaration order."""

    @abstractmethod
    def build_request(self) -> httpx.Request:
        """Assemble the GET request for one scrape."""

    @abstractmethod
    def metadata(self, payload: dict) -> tuple[str, str]:
        """Return (filter title, dimension title) with "Unknown" defaults."""

    @abstractmethod
    def tables(self, payload: dict) -> list[RawTable]:
        """Split the data region into per-filter tables, in encounter order."""

    def check_ready(self, payload: dict) -> None:
        """Raise if the payload reports a precondition failure."""

    def error_reason(self, body: bytes) -> str:
        """Pull a readable reason out of an error body, or return the raw text."""
        text = body.decode("utf-8", errors="replace").strip()
        try:
            payload = json.loads(text)
        except ValueError:
            return text
        reason = json_get(payload, self.reason_field)
        if isinstance(reason, str) and reason:
            return reason
        return text

    def _authorize(self, request: httpx.Request) -> httpx.Request:
        auth = httpx.BasicAuth(self.config.client_id, self.config.client_secret)
        return next(auth.auth_flow(request))

    def _endpoint(self, *parts: str) -> str:
        base = f"{self.config.base_url}/insights/{self.config.api_version}"
        return "/".join([base, *parts])
