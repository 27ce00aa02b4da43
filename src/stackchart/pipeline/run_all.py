from __future__ import annotations

from pathlib import Path

from stackchart.config import AppConfig
from stackchart.formatting import bar_duration
from stackchart.io.read import load_records
from stackchart.io.write import write_summary, write_table
from stackchart.paths import build_output_paths
from stackchart.pipeline.build import StackedSeries, build_from_config
from stackchart.viz.time_series import plot_stacked_bars


def interval_summary(series: StackedSeries) -> dict[str, object]:
    interval = series.interval
    return {
        "granularity": interval.candidate.label,
        "unit": interval.unit,
        "num_bars": interval.num_bars,
        "bar_count": interval.bar_count,
        "bar_width": interval.bar_width,
        "bar_duration": str(bar_duration(series.buckets)),
        "interval_start": interval.interval_start.isoformat(),
        "interval_end": interval.interval_end.isoformat(),
        "ordered_keys": series.ordered_keys,
        "color_keys": series.color_keys,
        "key_colors": series.key_colors,
        "value_max": series.value_max,
    }


def run_all(
    input_path: Path,
    out_dir: Path,
    config: AppConfig,
    *,
    start: str,
    end: str,
) -> dict[str, Path]:
    """Resample one input file and write tables, summary and preview figure under out_dir."""
    paths = build_output_paths(out_dir)
    records = load_records(input_path, config.time)
    series = build_from_config(records=records, start=start, end=end, config=config)

    fmt = config.outputs.tables_format
    outputs = {
        "buckets": write_table(series.buckets, paths.table("buckets", fmt), fmt=fmt),
        "by_color": write_table(series.by_color, paths.table("by_color", fmt), fmt=fmt),
        "summary": write_summary(interval_summary(series), paths.summary_file("interval")),
    }
    if config.outputs.render_preview:
        figure_path = plot_stacked_bars(
            by_color=series.by_color,
            color_keys=series.color_keys,
            output_path=paths.figure("stacked_bars", config.outputs.figures_format),
        )
        if figure_path is not None:
            outputs["figure"] = figure_path
    return outputs
