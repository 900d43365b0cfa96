"""YAML config loader with environment variable expansion and overrides."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Environment variables understood by the exporter, mapped to conviva fields
ENV_OVERRIDES = {
    "CONVIVA_BASE_URL": "base_url",
    "CONVIVA_API_VERSION": "api_version",
    "CONVIVA_CLIENT_ID": "client_id",
    "CONVIVA_CLIENT_SECRET": "client_secret",
    "CONVIVA_FILTER_ID": "filter_ids",
    "CONVIVA_DIMENSION_NAME": "dimension",
}


def _expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r"\$\{([^}]+)\}")
    def replacer(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, match.group(0))
    return pattern.sub(replacer, value)


def _walk_and_expand(obj: object) -> object:
    """Recursively expand environment variables in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_expand(item) for item in obj]
    return obj


def _split_ids(value: object) -> object:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (int, float)):
        return [str(value)]
    return value


class ConvivaConfig(BaseModel):
    base_url: str = ""
    api_version: str = "3.0"
    client_id: str = ""
    client_secret: str = ""
    filter_ids: list[str] = Field(default_factory=list)
    dimension: str = ""
    verify_tls: bool = False   # upstream certificates are not checked by default

    @field_validator("filter_ids", mode="before")
    @classmethod
    def _coerce_filter_ids(cls, value: object) -> object:
        value = _split_ids(value)
        if isinstance(value, list):
            return [str(item) for item in value]
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class WebConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    telemetry_path: str = "/metrics"

    @field_validator("telemetry_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"


class Settings(BaseModel):
    conviva: ConvivaConfig = Field(default_factory=ConvivaConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    namespace: str = "conviva_experience_insights"
    log_level: str = "INFO"

    @property
    def listen_address(self) -> str:
        return f"{self.web.host}:{self.web.port}"


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address; an empty host means all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address '{address}', expected host:port")
    return host or "0.0.0.0", int(port)


def _apply_env_overrides(raw: dict) -> dict:
    """Layer CONVIVA_* environment variables over the file contents."""
    conviva = dict(raw.get("conviva") or {})
    for var, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            conviva[field_name] = value
    raw["conviva"] = conviva
    return raw


def load_config(path: str | Path | None = None, *, load_env_file: bool = True) -> Settings:
    """Load configuration from a YAML file and the environment.

    Raises ValueError if no Conviva base URL ends up configured.
    """
    if load_env_file and Path(".env").is_file():
        load_dotenv(".env", override=False)

    if path is None:
        candidates = [
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".conviva-exporter" / "config.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    raw: dict = {}
    if path is not None:
        path = Path(path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _walk_and_expand(raw)

    settings = Settings.model_validate(_apply_env_overrides(raw))

    if not settings.conviva.base_url:
        raise ValueError(
            "No Conviva base URL configured. Set conviva.base_url in the "
            "config file or the CONVIVA_BASE_URL environment variable."
        )
    return settings
