from __future__ import annotations

import os
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MIN_BARS = 1
MAX_BARS = 300

UNIT_ALIASES = {
    "m": "minute",
    "min": "minute",
    "minute": "minute",
    "minutes": "minute",
    "h": "hour",
    "hour": "hour",
    "hours": "hour",
}


class GranularityCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: int = Field(ge=1)
    unit: Literal["minute", "hour"]

    @field_validator("unit", mode="before")
    @classmethod
    def _normalize_unit(cls, value: object) -> object:
        if isinstance(value, str):
            return UNIT_ALIASES.get(value.strip().lower(), value)
        return value

    @property
    def label(self) -> str:
        return f"{self.amount}{self.unit[0]}"


def default_granularities() -> list[GranularityCandidate]:
    return [
        GranularityCandidate(amount=amount, unit=unit)
        for amount, unit in (
            (1, "minute"),
            (2, "minute"),
            (5, "minute"),
            (10, "minute"),
            (15, "minute"),
            (30, "minute"),
            (1, "hour"),
            (2, "hour"),
            (3, "hour"),
            (6, "hour"),
            (12, "hour"),
        )
    ]


DEFAULT_GRANULARITIES = default_granularities()


class CategoryConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    stroke_color: str = Field(alias="strokeColor")


class ChartSettings(BaseModel):
    """Color categories and stacking rank for a chart's data keys."""

    model_config = ConfigDict(populate_by_name=True)

    color_order: list[str] | None = Field(default=None, alias="colorOrder")
    categories: list[CategoryConfig] | None = None

    def category_colors(self) -> dict[str, str]:
        # First category wins when a key is listed twice.
        colors: dict[str, str] = {}
        for category in self.categories or []:
            colors.setdefault(category.key, category.stroke_color)
        return colors


class ResolutionConfig(BaseModel):
    min_bars: int = Field(default=MIN_BARS, ge=1)
    max_bars: int = Field(default=MAX_BARS, ge=1)
    granularities: list[GranularityCandidate] = Field(default_factory=default_granularities)

    @model_validator(mode="after")
    def _check_bounds(self) -> ResolutionConfig:
        if self.min_bars > self.max_bars:
            raise ValueError("resolution.min_bars must be <= resolution.max_bars")
        if not self.granularities:
            raise ValueError("resolution.granularities must not be empty")
        return self


class TimeConfig(BaseModel):
    time_zone: Literal["UTC", "LOCAL"] = "UTC"
    local_timezone: str = Field(
        default_factory=lambda: os.getenv("STACKCHART_LOCAL_TZ") or "UTC"
    )

    @field_validator("local_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"invalid local timezone: {value}") from exc
        return value

    @property
    def zone_name(self) -> str:
        return "UTC" if self.time_zone == "UTC" else self.local_timezone


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv", "json"] = "csv"
    figures_format: str = "png"
    render_preview: bool = True


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    chart: ChartSettings = Field(default_factory=ChartSettings)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)
