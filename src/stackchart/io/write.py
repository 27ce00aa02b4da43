from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from stackchart.resample.buckets import DATE_COLUMN


def _with_iso_dates(df: pd.DataFrame) -> pd.DataFrame:
    # ISO 8601 keeps the zone offset so read_table can load the file back.
    if DATE_COLUMN not in df.columns or not pd.api.types.is_datetime64_any_dtype(df[DATE_COLUMN]):
        return df
    working = df.copy()
    working[DATE_COLUMN] = working[DATE_COLUMN].map(lambda value: value.isoformat())
    return working


def write_table(df: pd.DataFrame, path: Path, fmt: str = "csv") -> Path:
    """Write a bucket table as parquet, CSV or a JSON list of records."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
        return path
    if fmt == "csv":
        _with_iso_dates(df).to_csv(path, index=False)
        return path
    if fmt == "json":
        rows = _with_iso_dates(df).to_dict(orient="records")
        path.write_text(json.dumps(rows, indent=2, default=str), encoding="utf-8")
        return path
    raise ValueError(f"Unsupported table format: {fmt}")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True, default=str), encoding="utf-8")
    return path
