from __future__ import annotations

import math
import sys

import pandas as pd

from stackchart.resample.buckets import DATE_COLUMN

SI_SCALE = (
    ("Y", 1e24),
    ("Z", 1e21),
    ("E", 1e18),
    ("P", 1e15),
    ("T", 1e12),
    ("G", 1e9),
    ("M", 1e6),
    ("k", 1e3),
    ("", 1.0),
)


def _plain_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def humanize_number(number: float, max_decimal_digits: int = 0) -> str:
    """Render ``number`` with an SI suffix, e.g. ``1500 -> "1.5k"`` with one decimal."""
    suffix, factor = next(
        ((key, threshold) for key, threshold in SI_SCALE if threshold <= number),
        ("", 1.0),
    )
    power = 10**max_decimal_digits
    # Round half up, matching how chart axis labels have always been rounded.
    rounded = math.floor((number / factor + sys.float_info.epsilon) * power + 0.5) / power
    return f"{_plain_number(float(rounded))}{suffix}"


def format_axis_date(value: pd.Timestamp) -> str:
    return f"{pd.Timestamp(value):%d/%m %H:%M}"


def format_bar_range(bar_start: pd.Timestamp, duration: pd.Timedelta) -> str:
    start = pd.Timestamp(bar_start)
    end = start + pd.Timedelta(duration)
    return f"{start:%d/%m %H:%M:%S}-{end:%H:%M:%S}"


def bar_duration(buckets: pd.DataFrame) -> pd.Timedelta:
    if len(buckets) < 2:
        return pd.Timedelta(minutes=1)
    dates = pd.to_datetime(buckets[DATE_COLUMN])
    return pd.Timedelta(dates.iloc[1] - dates.iloc[0])
