"""Converts a ScrapeResult into gauge samples and Prometheus metric families."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from prometheus_client.core import GaugeMetricFamily

from conviva_exporter.metrics.base import MetricDefinition, ScrapeResult

LABELS = ("conviva_filter_id", "metriclens_dimension_value")
UP_HELP = "Indicates if the scrape is successful. 1=Success, 0=Fail"


@dataclass
class GaugeSample:
    name: str
    value: float
    labels: dict[str, str] = field(default_factory=dict)


def metric_name(namespace: str, name: str) -> str:
    return f"{namespace}_{name}" if namespace else name


def up_sample(namespace: str, success: bool) -> GaugeSample:
    return GaugeSample(
        name=metric_name(namespace, "up"), value=1.0 if success else 0.0,
    )


def emit(
    result: ScrapeResult,
    definitions: Mapping[str, MetricDefinition],
    namespace: str,
) -> list[GaugeSample]:
    """Liveness first, then one sample per row and recognized metric."""
    samples = [up_sample(namespace, True)]
    for row in result.rows:
        for sample in row.samples:
            definition = definitions.get(sample.metric_key)
            if definition is None:
                continue
            samples.append(GaugeSample(
                name=metric_name(namespace, definition.name),
                value=sample.value,
                labels={
                    LABELS[0]: row.filter_id,
                    LABELS[1]: row.dimension_value,
                },
            ))
    return samples


def emit_failure(namespace: str) -> list[GaugeSample]:
    return [up_sample(namespace, False)]


def to_families(
    samples: list[GaugeSample],
    definitions: Mapping[str, MetricDefinition],
    namespace: str,
) -> list[GaugeMetricFamily]:
    """Group samples by metric, in declaration order, for exposition."""
    up_name = metric_name(namespace, "up")
    families: dict[str, GaugeMetricFamily] = {
        up_name: GaugeMetricFamily(up_name, UP_HELP),
    }
    for definition in definitions.values():
        name = metric_name(namespace, definition.name)
        families[name] = GaugeMetricFamily(name, definition.help, labels=LABELS)

    for sample in samples:
        family = families.get(sample.name)
        if family is None:
            continue
        label_values = [sample.labels[label] for label in LABELS] if sample.labels else []
        family.add_metric(label_values, sample.value)

    return [f for f in families.values() if f.samples]
