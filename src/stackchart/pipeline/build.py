from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from stackchart.config import AppConfig, ChartSettings, ResolutionConfig
from stackchart.preprocess.time import normalize_dates, to_chart_zone
from stackchart.resample.buckets import field_keys_of, map_to_even_resolution
from stackchart.resample.granularity import IntervalSettings
from stackchart.series.colors import aggregate_by_color
from stackchart.series.extent import stack_value_max
from stackchart.series.ordering import order_keys

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StackedSeries:
    interval: IntervalSettings
    buckets: pd.DataFrame
    ordered_keys: list[str]
    color_keys: list[str]
    key_colors: dict[str, str]
    by_color: pd.DataFrame
    value_max: float


def build_stacked_series(
    records: pd.DataFrame,
    start: pd.Timestamp,
    end: pd.Timestamp,
    resolution: ResolutionConfig | None = None,
    settings: ChartSettings | None = None,
) -> StackedSeries:
    """Resample records onto an even bar grid and group their fields by color."""
    resolution = resolution or ResolutionConfig()
    buckets, interval = map_to_even_resolution(
        records=records,
        start=start,
        end=end,
        candidates=resolution.granularities,
        min_bars=resolution.min_bars,
        max_bars=resolution.max_bars,
    )
    LOGGER.info(
        "using %s buckets: %d bars from %s",
        interval.candidate.label,
        interval.bar_count,
        interval.interval_start,
    )

    ordered_keys = order_keys(field_keys_of(records), settings)
    aggregate = aggregate_by_color(ordered_keys, buckets, settings)
    return StackedSeries(
        interval=interval,
        buckets=buckets,
        ordered_keys=ordered_keys,
        color_keys=aggregate.color_keys,
        key_colors=aggregate.key_colors,
        by_color=aggregate.data,
        value_max=stack_value_max(buckets, ordered_keys),
    )


def build_from_config(
    records: pd.DataFrame,
    start: object,
    end: object,
    config: AppConfig,
) -> StackedSeries:
    return build_stacked_series(
        records=normalize_dates(records, config.time),
        start=to_chart_zone(start, config.time),
        end=to_chart_zone(end, config.time),
        resolution=config.resolution,
        settings=config.chart,
    )
