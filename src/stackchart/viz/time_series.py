from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from stackchart.resample.buckets import DATE_COLUMN
from stackchart.viz.common import save_figure, style_stacked_axes, to_mpl_color


def plot_stacked_bars(
    by_color: pd.DataFrame,
    color_keys: Sequence[str],
    output_path: Path,
    title: str | None = None,
) -> Path | None:
    if by_color.empty:
        return None
    dates = list(pd.to_datetime(by_color[DATE_COLUMN]))
    positions = np.arange(len(by_color))
    bottom = np.zeros(len(by_color), dtype=float)

    fig, ax = plt.subplots(figsize=(12, 4))
    for color in color_keys:
        values = by_color[color].to_numpy(dtype=float)
        ax.bar(positions, values, bottom=bottom, width=0.9, color=to_mpl_color(color), linewidth=0)
        bottom += values
    style_stacked_axes(ax, dates, title)
    return save_figure(output_path)


def plot_stacked_area(
    by_color: pd.DataFrame,
    color_keys: Sequence[str],
    output_path: Path,
    title: str | None = None,
) -> Path | None:
    if by_color.empty or not color_keys:
        return None
    dates = list(pd.to_datetime(by_color[DATE_COLUMN]))
    positions = np.arange(len(by_color))

    fig, ax = plt.subplots(figsize=(12, 4))
    ax.stackplot(
        positions,
        *[by_color[color].to_numpy(dtype=float) for color in color_keys],
        colors=[to_mpl_color(color) for color in color_keys],
    )
    style_stacked_axes(ax, dates, title)
    return save_figure(output_path)
