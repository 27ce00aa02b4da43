from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from stackchart.config import ChartSettings
from stackchart.resample.buckets import DATE_COLUMN

DEFAULT_PALETTE = (
    "rgb(32, 89, 140, 0.4)",
    "rgb(32, 89, 140, 0.8)",
    "rgb(32, 89, 140, 0.2)",
    "rgb(32, 89, 140, 1)",
    "rgb(32, 89, 140, 0.6)",
)


@dataclass(frozen=True)
class ColorAggregate:
    color_keys: list[str]
    key_colors: dict[str, str]
    data: pd.DataFrame


def default_color(index: int) -> str:
    return DEFAULT_PALETTE[index % len(DEFAULT_PALETTE)]


def resolve_key_colors(
    field_keys: Sequence[str],
    settings: ChartSettings | None = None,
) -> dict[str, str]:
    """Map every field key to a color; unmapped keys take palette colors in key order."""
    mapped = settings.category_colors() if settings is not None else {}
    key_colors: dict[str, str] = {}
    unmapped_seen = 0
    for key in field_keys:
        if key in key_colors:
            continue
        if key in mapped:
            key_colors[key] = mapped[key]
        else:
            key_colors[key] = default_color(unmapped_seen)
            unmapped_seen += 1
    return key_colors


def aggregate_by_color(
    field_keys: Sequence[str],
    records: pd.DataFrame,
    settings: ChartSettings | None = None,
) -> ColorAggregate:
    """Merge fields that share a color into one series per color.

    Segments with the same color are drawn as one, so adjacent same-colored
    segments do not show seams between them.
    """
    key_colors = resolve_key_colors(field_keys, settings)
    color_keys = list(dict.fromkeys(key_colors.values()))

    data = pd.DataFrame(index=records.index)
    if DATE_COLUMN in records.columns:
        data[DATE_COLUMN] = records[DATE_COLUMN]
    for color in color_keys:
        members = [key for key, key_color in key_colors.items() if key_color == color]
        data[color] = records[members].astype("float64").fillna(0.0).sum(axis=1)

    return ColorAggregate(color_keys=color_keys, key_colors=key_colors, data=data)
