"""Factory for picking the API generation from the configured version."""

from __future__ import annotations

from conviva_exporter.config.settings import ConvivaConfig
from conviva_exporter.schema.base import ApiGeneration


def major_version(api_version: str) -> str:
    """``"v3.0"`` -> ``"3"``, ``"2.4"`` -> ``"2"``."""
    return api_version.strip().lower().lstrip("v").split(".", 1)[0]


def create_generation(config: ConvivaConfig) -> ApiGeneration:
    """Create the request/response handler for ``config.api_version``."""
    major = major_version(config.api_version)
    if major == "3":
        from conviva_exporter.schema.v3 import V3Generation
        return V3Generation(config)
    if major == "2":
        from conviva_exporter.schema.v2 import V2Generation
        return V2Generation(config)
    raise ValueError(f"Unsupported Conviva API version: {config.api_version}")
