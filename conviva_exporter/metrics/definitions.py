"""Catalog of supported Conviva metrics and per-generation extraction rules.

See https://developer.conviva.com/docs/metrics-api-v3/84ff2dc99dfeb-metrics
for the upstream metric reference.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from conviva_exporter.metrics.base import (
    MetricDefinition,
    NamedField,
    PositionalIndex,
    Selector,
)

# key -> (exported name, help); order is the request and column order
METRIC_CATALOG: Mapping[str, tuple[str, str]] = MappingProxyType({
    "attempts": (
        "attempts",
        "Attempts counts all attempts to play a video which are initiated "
        "when a viewer clicks play or a video auto-plays.",
    ),
    "video_start_failures": (
        "video_start_failures",
        "Video Start Failures (VSF) measures how often Attempts terminated "
        "during video startup before the first video frame was played, and "
        "a fatal error was reported.",
    ),
    "exit_before_video_starts": (
        "exits_before_video_start",
        "Exits Before Video Start (EBVS) measures the Attempts that "
        "terminated before the video started, without a reported fatal error.",
    ),
    "plays": (
        "plays",
        "Plays (Successful Attempts) is counted when the viewer sees the "
        "first frame of video.",
    ),
    "video_start_time": (
        "video_start_time",
        "Video Startup Time (VST) is the number of seconds between when the "
        "user clicks play or video auto-starts and when the first frame of a "
        "video is rendered.",
    ),
    "rebuffering_ratio": (
        "rebuffering_ratio",
        "Rebuffering Ratio measures the percentage of total video viewing "
        "time (playTime + rebufferingTime) during which viewers experienced "
        "rebuffering.",
    ),
    "bitrate": (
        "average_bitrate",
        "Average bitrate (kbps) calculates the bits played by the player. "
        "The bits played do not include bits in buffering or bits passed "
        "during paused video.",
    ),
    "video_playback_failures": (
        "video_playback_failures",
        "Video playback failure occurs when video play terminates due to a "
        "playback error, such as video file corruption, insufficient "
        "streaming resources, or a sudden interruption in the video stream.",
    ),
    "ended_plays": (
        "ended_plays",
        "An ended play is a play that ended during the selected interval. To "
        "count as an ended play, the viewing session must have at least one "
        "video frame that was viewed.",
    ),
    "connection_induced_rebuffering_ratio": (
        "connection_induced_rebuffering_ratio",
        "Connection Induced Rebuffering Ratio (CIRR) measures the percentage "
        "of total video viewing time (playTime plus all rebuffering) during "
        "which viewers experienced nonseek rebuffering.",
    ),
})

# v3 reports each metric as an object; the reading sits in a named field
V3_FIELDS: Mapping[str, Selector] = MappingProxyType({
    "attempts": NamedField("count"),
    "video_start_failures": NamedField("percentage"),
    "exit_before_video_starts": NamedField("percentage"),
    "plays": NamedField("percentage"),
    "video_start_time": NamedField("value"),
    "rebuffering_ratio": NamedField("ratio"),
    "bitrate": NamedField("bps", scale=0.001),
    "video_playback_failures": NamedField("percentage"),
    "ended_plays": NamedField("count"),
    "connection_induced_rebuffering_ratio": NamedField("ratio"),
})


def build_definitions(
    selectors: Mapping[str, Selector],
) -> Mapping[str, MetricDefinition]:
    """Combine the catalog with a rule table, keeping catalog order.

    Catalog entries without a rule are left out.
    """
    definitions: dict[str, MetricDefinition] = {}
    for key, (name, help_text) in METRIC_CATALOG.items():
        selector = selectors.get(key)
        if selector is None:
            continue
        definitions[key] = MetricDefinition(
            key=key, name=name, help=help_text, selector=selector,
        )
    return MappingProxyType(definitions)


def positional_selectors(keys: list[str]) -> Mapping[str, Selector]:
    """Column N of a row array holds the Nth key."""
    return MappingProxyType({
        key: PositionalIndex(index) for index, key in enumerate(keys)
    })


V3_DEFINITIONS = build_definitions(V3_FIELDS)
V2_DEFINITIONS = build_definitions(positional_selectors(list(METRIC_CATALOG)))
