from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

import pandas as pd

from stackchart.config import TimeConfig
from stackchart.preprocess.time import normalize_dates
from stackchart.resample.buckets import DATE_COLUMN, field_keys_of


def _validate_numeric_fields(df: pd.DataFrame) -> pd.DataFrame:
    working = df.copy()
    for column in field_keys_of(working):
        try:
            working[column] = pd.to_numeric(working[column])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Field column is not numeric: {column}") from exc
    return working


def records_to_frame(rows: Iterable[Mapping[str, object]]) -> pd.DataFrame:
    """Build a record frame from mappings; the first row fixes the field order."""
    frame = pd.DataFrame.from_records(list(rows))
    if frame.empty:
        return pd.DataFrame({DATE_COLUMN: pd.Series(dtype="datetime64[ns, UTC]")})
    if DATE_COLUMN not in frame.columns:
        raise ValueError(f"Records missing column: {DATE_COLUMN}")
    ordered = [DATE_COLUMN, *field_keys_of(frame)]
    return frame[ordered]


def read_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        # utf-8-sig strips BOM-prefixed headers from spreadsheet exports.
        return pd.read_csv(path, encoding="utf-8-sig")
    if path.suffix == ".json":
        rows = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(rows, list):
            raise ValueError("JSON records must be a list of objects")
        return records_to_frame(rows)
    raise ValueError(f"Unsupported table file type: {path.suffix}")


def load_records(path: Path, config: TimeConfig) -> pd.DataFrame:
    """Load records with a ``date`` column and numeric fields, dated in the chart zone."""
    frame = read_table(path)
    frame = normalize_dates(frame, config)
    return _validate_numeric_fields(frame)
