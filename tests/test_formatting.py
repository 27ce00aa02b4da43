from __future__ import annotations

import pandas as pd

from stackchart.formatting import bar_duration, format_axis_date, format_bar_range, humanize_number
from stackchart.series.extent import stack_value_max


def test_humanize_number_uses_si_suffixes() -> None:
    assert humanize_number(1500, 1) == "1.5k"
    assert humanize_number(999, 0) == "999"
    assert humanize_number(1e9, 0) == "1G"
    assert humanize_number(1_234_567, 2) == "1.23M"
    assert humanize_number(2.5e15) == "3P"


def test_humanize_number_handles_small_and_negative_values() -> None:
    assert humanize_number(0) == "0"
    assert humanize_number(0.25, 1) == "0.3"
    assert humanize_number(-1500) == "-1500"


def test_format_bar_range_spans_one_bar() -> None:
    start = pd.Timestamp("2026-02-03 08:05:00", tz="UTC")

    assert format_bar_range(start, pd.Timedelta(minutes=5)) == "03/02 08:05:00-08:10:00"
    assert format_axis_date(start) == "03/02 08:05"


def test_bar_duration_defaults_to_one_minute() -> None:
    dates = pd.date_range("2026-02-03", periods=3, freq="15min", tz="UTC")

    assert bar_duration(pd.DataFrame({"date": dates})) == pd.Timedelta(minutes=15)
    assert bar_duration(pd.DataFrame({"date": dates[:1]})) == pd.Timedelta(minutes=1)


def test_stack_value_max_takes_largest_row_total() -> None:
    data = pd.DataFrame({"a": [1, 5, 2], "b": [4, 1, 9], "c": [100, 100, 100]})

    assert stack_value_max(data, ["a", "b"]) == 11
    assert stack_value_max(data.iloc[0:0], ["a"]) == 0
    assert stack_value_max(data, []) == 0
