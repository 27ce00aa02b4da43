from __future__ import annotations

import pandas as pd

from stackchart.config import TimeConfig
from stackchart.resample.buckets import DATE_COLUMN


def to_chart_zone(value: object, config: TimeConfig) -> pd.Timestamp:
    """Parse one timestamp into the chart's zone; naive values are read as UTC."""
    timestamp = pd.Timestamp(value)
    if pd.isna(timestamp):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if timestamp.tz is None:
        timestamp = timestamp.tz_localize("UTC")
    return timestamp.tz_convert(config.zone_name)


def normalize_dates(df: pd.DataFrame, config: TimeConfig) -> pd.DataFrame:
    if DATE_COLUMN not in df.columns:
        raise ValueError(f"Records missing column: {DATE_COLUMN}")
    working = df.copy()
    timestamps = pd.to_datetime(working[DATE_COLUMN], utc=True, errors="coerce")
    if len(timestamps) and timestamps.isna().all():
        raise ValueError("No valid timestamps found in date column")
    working[DATE_COLUMN] = timestamps.dt.tz_convert(config.zone_name)
    return working
