"""Shared types and JSON helpers for metric extraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

UNKNOWN = "Unknown"


# ── JSON helpers (tolerate missing keys and wrong shapes) ────────────

def json_get(obj: Any, *path: str | int) -> Any:
    """Walk a decoded JSON document, returning None when a step is missing.

    String steps index objects, integer steps index arrays.
    """
    current = obj
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return None
            current = current[step]
    return current


def json_str(obj: Any, *path: str | int, default: str = UNKNOWN) -> str:
    """Extract a string leaf, falling back to *default*."""
    value = json_get(obj, *path)
    if isinstance(value, str) and value:
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def as_float(value: Any) -> float | None:
    """Coerce a JSON number to float; anything else yields None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


# ── Selectors ────────────────────────────────────────────────────────

class Selector(ABC):
    """Where inside a metric's JSON representation the numeric reading lives."""

    @abstractmethod
    def extract(self, region: Any, key: str) -> float | None:
        """Pull the value for metric *key* out of a row's metric region.

        Returns None when the path is absent or the leaf is not a number.
        """


@dataclass(frozen=True)
class NamedField(Selector):
    """Reads ``region[key][field]`` from a keyed metrics object."""
    field: str
    scale: float = 1.0

    def extract(self, region: Any, key: str) -> float | None:
        value = as_float(json_get(region, key, self.field))
        if value is None:
            return None
        return value * self.scale


@dataclass(frozen=True)
class PositionalIndex(Selector):
    """Reads ``region[index]`` from a positional metrics array."""
    index: int

    def extract(self, region: Any, key: str) -> float | None:
        if self.index < 0:
            return None
        return as_float(json_get(region, self.index))


# ── Definitions and results ──────────────────────────────────────────

@dataclass(frozen=True)
class MetricDefinition:
    """A supported metric and the rule used to read it."""
    key: str
    name: str
    help: str
    selector: Selector

    @property
    def request_name(self) -> str:
        """Name used when requesting the metric upstream."""
        return self.key.replace("_", "-")


@dataclass
class MetricSample:
    metric_key: str
    grouping_value: str
    value: float


@dataclass
class DimensionRow:
    """One grouping value of the breakdown and the samples read for it."""
    dimension_value: str
    filter_id: str
    samples: list[MetricSample] = field(default_factory=list)


@dataclass
class ScrapeResult:
    """Everything parsed from one upstream response."""
    filter_title: str = UNKNOWN
    dimension_title: str = UNKNOWN
    dimension_titles: list[str] = field(default_factory=list)
    rows: list[DimensionRow] = field(default_factory=list)

    @property
    def sample_count(self) -> int:
        return sum(len(row.samples) for row in self.rows)
