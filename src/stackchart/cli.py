from __future__ import annotations

import json
from pathlib import Path

import typer

from stackchart.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from stackchart.formatting import humanize_number
from stackchart.logging import configure_logging
from stackchart.pipeline.run_all import run_all
from stackchart.preprocess.time import to_chart_zone
from stackchart.proportions import extract_donut_data, slice_shares
from stackchart.resample.granularity import select_interval

app = typer.Typer(no_args_is_help=True, add_completion=False)

LOG_LEVEL_OPTION = typer.Option(
    "INFO", "--log-level", help="Logging level, e.g. DEBUG or WARNING."
)


def _configure_logging(log_level: str) -> None:
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is not None:
        return load_config(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return AppConfig()


@app.command()
def resample(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    start: str = typer.Option(..., help="Window start timestamp (ISO 8601)."),
    end: str = typer.Option(..., help="Window end timestamp (ISO 8601)."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Resample records onto an even bar grid and write tables and a preview figure."""
    _configure_logging(log_level)
    cfg = _load_app_config(config)
    try:
        outputs = run_all(input_path=input_path, out_dir=out, config=cfg, start=start, end=end)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo("Resample complete")
    for name, path in outputs.items():
        typer.echo(f"- {name}: {path}")


@app.command()
def granularity(
    start: str = typer.Option(..., help="Window start timestamp (ISO 8601)."),
    end: str = typer.Option(..., help="Window end timestamp (ISO 8601)."),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Show which bucket width a window resolves to."""
    _configure_logging(log_level)
    cfg = _load_app_config(config)
    try:
        interval = select_interval(
            candidates=cfg.resolution.granularities,
            start=to_chart_zone(start, cfg.time),
            end=to_chart_zone(end, cfg.time),
            min_bars=cfg.resolution.min_bars,
            max_bars=cfg.resolution.max_bars,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"- granularity: {interval.candidate.label}")
    typer.echo(f"- bars: {interval.bar_count}")
    typer.echo(f"- interval_start: {interval.interval_start.isoformat()}")
    typer.echo(f"- interval_end: {interval.interval_end.isoformat()}")


@app.command()
def donut(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    decimals: int = typer.Option(1, min=0),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Summarize outer and inner donut rings from a JSON mapping."""
    _configure_logging(log_level)
    data = json.loads(input_path.read_text(encoding="utf-8"))
    try:
        donut_data = extract_donut_data(data)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    typer.echo(f"Total: {humanize_number(donut_data.total, decimals)}")
    for ring, slices in (("outer", donut_data.outer), ("inner", donut_data.inner)):
        for (label, value), (_, share) in zip(slices, slice_shares(slices, donut_data.total)):
            typer.echo(
                f"- {ring} {label}: {humanize_number(value, decimals)} ({share:.1%})"
            )


if __name__ == "__main__":
    app()
