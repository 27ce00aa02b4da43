from __future__ import annotations

from collections.abc import Sequence

import pandas as pd


def stack_value_max(data: pd.DataFrame, keys: Sequence[str]) -> float:
    """Largest per-row total of ``keys``; the top of a stacked value axis."""
    columns = list(keys)
    if data.empty or not columns:
        return 0.0
    totals = data[columns].astype("float64").fillna(0.0).sum(axis=1)
    return float(max(0.0, totals.max()))
