from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from stackchart.config import GranularityCandidate
from stackchart.resample.granularity import UNIT_DELTAS, IntervalSettings, select_interval

LOGGER = logging.getLogger(__name__)

DATE_COLUMN = "date"

TIMEDELTA_UNITS = {
    "minute": "min",
    "hour": "h",
}


def field_keys_of(records: pd.DataFrame) -> list[str]:
    return [column for column in records.columns if column != DATE_COLUMN]


def bucket_dates(
    interval_start: pd.Timestamp,
    bar_width: float,
    num_bars: int,
    unit: str,
) -> pd.DatetimeIndex:
    offsets = pd.to_timedelta(np.arange(num_bars) * bar_width, unit=TIMEDELTA_UNITS[unit])
    return pd.DatetimeIndex(pd.Timestamp(interval_start) + offsets)


def resample(
    records: pd.DataFrame,
    interval_start: pd.Timestamp,
    bar_width: float,
    num_bars: int,
    field_keys: Sequence[str],
    unit: str,
    span_bars: float | None = None,
) -> pd.DataFrame:
    """Sum record fields into ``num_bars`` buckets of ``bar_width`` units from ``interval_start``.

    Bucket ``i`` covers ``[interval_start + i * bar_width, interval_start + (i + 1) * bar_width)``.
    Records outside the buckets, or without a date, are dropped. When ``span_bars`` is
    fractional the last bucket is partial and only counts records before
    ``interval_start + span_bars * bar_width``.
    """
    keys = list(field_keys)
    num_bars = int(num_bars)
    totals = np.zeros((num_bars, len(keys)), dtype=float)

    if len(records) and num_bars:
        record_dates = pd.to_datetime(records[DATE_COLUMN])
        offsets = ((record_dates - pd.Timestamp(interval_start)) / UNIT_DELTAS[unit]).to_numpy(
            dtype=float
        )
        positions = np.floor(offsets / bar_width)
        in_window = np.isfinite(positions) & (positions >= 0) & (positions < num_bars)
        if span_bars is not None:
            in_window &= offsets < span_bars * bar_width

        values = records[keys].astype("float64").fillna(0.0).to_numpy(dtype=float)
        np.add.at(totals, positions[in_window].astype(int), values[in_window])

        dropped = int((~in_window).sum())
        if dropped:
            LOGGER.debug("dropped %d records outside %d buckets", dropped, num_bars)

    buckets = pd.DataFrame(totals, columns=keys)
    buckets.insert(0, DATE_COLUMN, bucket_dates(interval_start, bar_width, num_bars, unit))
    return buckets


def map_to_even_resolution(
    records: pd.DataFrame,
    start: pd.Timestamp,
    end: pd.Timestamp,
    candidates: Sequence[GranularityCandidate],
    min_bars: int,
    max_bars: int,
) -> tuple[pd.DataFrame, IntervalSettings]:
    settings = select_interval(
        candidates=candidates,
        start=start,
        end=end,
        min_bars=min_bars,
        max_bars=max_bars,
    )
    buckets = resample(
        records=records,
        interval_start=settings.interval_start,
        bar_width=settings.bar_width,
        num_bars=settings.bar_count,
        field_keys=field_keys_of(records),
        unit=settings.unit,
        span_bars=settings.num_bars,
    )
    return buckets, settings
