from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from stackchart.config import DEFAULT_GRANULARITIES, GranularityCandidate
from stackchart.resample.buckets import field_keys_of, map_to_even_resolution, resample

START = pd.Timestamp("2026-02-03 08:00", tz="UTC")
END = pd.Timestamp("2026-02-03 12:00", tz="UTC")


def _records(rows: list[tuple[str, float, float]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": pd.to_datetime([row[0] for row in rows], utc=True),
            "pro": [row[1] for row in rows],
            "con": [row[2] for row in rows],
        }
    )


def test_resample_returns_evenly_spaced_buckets() -> None:
    records = _records([("2026-02-03 08:00:30", 1, 0)])

    out = resample(records, START, 1.0, 240, ["pro", "con"], "minute")

    assert len(out) == 240
    assert list(out.columns) == ["date", "pro", "con"]
    assert out["date"].iloc[0] == START
    assert (out["date"].diff().dropna() == pd.Timedelta(minutes=1)).all()


def test_resample_accumulates_records_sharing_a_bucket() -> None:
    records = _records(
        [
            ("2026-02-03 08:03:00", 1, 2),
            ("2026-02-03 08:04:59", 3, 4),
            ("2026-02-03 08:05:00", 10, 0),
        ]
    )

    out = resample(records, START, 5.0, 48, ["pro", "con"], "minute")

    assert out.loc[0, "pro"] == 4
    assert out.loc[0, "con"] == 6
    assert out.loc[1, "pro"] == 10
    assert out.loc[2:, ["pro", "con"]].to_numpy().sum() == 0


def test_resample_drops_records_outside_window() -> None:
    records = _records(
        [
            ("2026-02-03 07:59:59", 100, 100),
            ("2026-02-03 09:00:00", 1, 1),
            ("2026-02-03 12:00:00", 100, 100),
        ]
    )

    out = resample(records, START, 60.0, 4, ["pro", "con"], "minute")

    assert out["pro"].tolist() == [0, 1, 0, 0]
    assert out["con"].sum() == 1


def test_resample_conserves_in_window_totals() -> None:
    rng = np.random.default_rng(7)
    offsets = rng.uniform(-60, 300, size=200)
    records = pd.DataFrame(
        {
            "date": START + pd.to_timedelta(offsets, unit="min"),
            "pro": rng.integers(0, 10, size=200),
            "con": rng.integers(0, 10, size=200),
        }
    )
    in_window = (records["date"] >= START) & (records["date"] < END)

    out = resample(records, START, 2.0, 120, ["pro", "con"], "minute")

    assert out["pro"].sum() == records.loc[in_window, "pro"].sum()
    assert out["con"].sum() == records.loc[in_window, "con"].sum()


def test_resample_ignores_input_order() -> None:
    records = _records(
        [
            ("2026-02-03 08:01:00", 1, 2),
            ("2026-02-03 10:31:00", 3, 4),
            ("2026-02-03 10:32:00", 5, 6),
        ]
    )
    shuffled = records.iloc[[2, 0, 1]].reset_index(drop=True)

    first = resample(records, START, 15.0, 16, ["pro", "con"], "minute")
    second = resample(shuffled, START, 15.0, 16, ["pro", "con"], "minute")

    pd.testing.assert_frame_equal(first, second)


def test_resample_does_not_modify_input() -> None:
    records = _records([("2026-02-03 08:01:00", 1, 2)])
    snapshot = records.copy()

    resample(records, START, 1.0, 240, ["pro", "con"], "minute")

    pd.testing.assert_frame_equal(records, snapshot)


def test_resample_treats_missing_dates_and_values_as_absent() -> None:
    records = pd.DataFrame(
        {
            "date": pd.to_datetime(["2026-02-03 08:10", None], utc=True),
            "pro": [np.nan, 5.0],
            "con": [2.0, 5.0],
        }
    )

    out = resample(records, START, 60.0, 4, ["pro", "con"], "minute")

    assert out["pro"].sum() == 0
    assert out["con"].tolist() == [2, 0, 0, 0]


def test_resample_supports_hour_buckets() -> None:
    records = _records([("2026-02-03 14:59:00", 1, 0), ("2026-02-03 15:00:00", 2, 0)])
    start = pd.Timestamp("2026-02-03 12:00", tz="UTC")

    out = resample(records, start, 3.0, 4, ["pro", "con"], "hour")

    assert out["date"].tolist() == [
        start + pd.Timedelta(hours=3 * index) for index in range(4)
    ]
    assert out["pro"].tolist() == [1, 2, 0, 0]


def test_map_to_even_resolution_with_empty_records_gives_zero_series() -> None:
    records = pd.DataFrame({"date": pd.Series(dtype="datetime64[ns, UTC]")})

    out, settings = map_to_even_resolution(records, START, END, DEFAULT_GRANULARITIES, 1, 300)

    assert settings.candidate.label == "1m"
    assert len(out) == 240
    assert list(out.columns) == ["date"]
    assert field_keys_of(records) == []


def test_map_to_even_resolution_resamples_with_selected_interval() -> None:
    records = _records([("2026-02-03 08:00:10", 1, 2), ("2026-02-03 11:59:50", 3, 4)])

    out, settings = map_to_even_resolution(records, START, END, DEFAULT_GRANULARITIES, 1, 300)

    assert len(out) == settings.bar_count == 240
    assert out.loc[0, "pro"] == 1
    assert out.loc[239, "con"] == 4
    assert out[["pro", "con"]].to_numpy().sum() == pytest.approx(10)


def test_map_to_even_resolution_stops_partial_last_bucket_at_aligned_end() -> None:
    seven_minutes = GranularityCandidate(amount=7, unit="minute")
    records = pd.DataFrame(
        {
            "date": pd.to_datetime(
                ["2026-02-03 13:04:00", "2026-02-03 13:06:59", "2026-02-03 13:09:00"], utc=True
            ),
            "n": [1.0, 2.0, 5.0],
        }
    )

    out, settings = map_to_even_resolution(
        records,
        pd.Timestamp("2026-02-03 12:00", tz="UTC"),
        pd.Timestamp("2026-02-03 13:05", tz="UTC"),
        [seven_minutes],
        1,
        300,
    )

    # 12:00 -> 13:07 is 67 minutes: nine full 7-minute bars plus a partial tenth.
    assert settings.interval_end == pd.Timestamp("2026-02-03 13:07", tz="UTC")
    assert len(out) == settings.bar_count == 10
    assert out["n"].tolist()[-1] == 3.0
    assert out["n"].sum() == 3.0
