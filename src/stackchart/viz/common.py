from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.ticker import FuncFormatter

from stackchart.formatting import format_axis_date, humanize_number

RGB_PATTERN = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)$"
)
AXIS_TICKS = 3


def save_figure(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path


def to_mpl_color(color: str) -> str | tuple[float, float, float, float]:
    """Translate CSS ``rgb()``/``rgba()`` strings; anything else goes to matplotlib as-is."""
    match = RGB_PATTERN.match(color.strip())
    if match is None:
        return color
    red, green, blue, alpha = match.groups()
    return (
        float(red) / 255.0,
        float(green) / 255.0,
        float(blue) / 255.0,
        float(alpha) if alpha is not None else 1.0,
    )


def style_stacked_axes(ax: Axes, dates: Sequence[pd.Timestamp], title: str | None) -> None:
    if title:
        ax.set_title(title, color="#666666")
    if len(dates):
        ticks = np.unique(np.linspace(0, len(dates) - 1, AXIS_TICKS).round().astype(int))
        ax.set_xticks(ticks)
        ax.set_xticklabels([format_axis_date(dates[int(tick)]) for tick in ticks])
    ax.yaxis.set_major_formatter(FuncFormatter(lambda value, _pos: humanize_number(value, 1)))
    ax.grid(axis="x", linestyle=":", alpha=0.2, color="#000000")
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)
