from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from stackchart.config import GranularityCandidate

LOGGER = logging.getLogger(__name__)

UNIT_DELTAS = {
    "minute": pd.Timedelta(minutes=1),
    "hour": pd.Timedelta(hours=1),
}


class NoFeasibleGranularity(ValueError):
    """No candidate bucket width yields a bar count within bounds."""

    def __init__(
        self,
        start: pd.Timestamp,
        end: pd.Timestamp,
        min_bars: int,
        max_bars: int,
    ) -> None:
        super().__init__(
            f"No granularity gives {min_bars}..{max_bars} bars for window {start} -> {end}"
        )
        self.start = start
        self.end = end
        self.min_bars = min_bars
        self.max_bars = max_bars


@dataclass(frozen=True)
class IntervalSettings:
    candidate: GranularityCandidate
    num_bars: float
    bar_width: float
    interval_start: pd.Timestamp
    interval_end: pd.Timestamp

    @property
    def unit(self) -> str:
        return self.candidate.unit

    @property
    def bar_count(self) -> int:
        """Number of buckets to materialize; a fractional last bar still gets a bucket."""
        return max(0, math.ceil(round(self.num_bars, 9)))

    @property
    def bar_delta(self) -> pd.Timedelta:
        return UNIT_DELTAS[self.unit] * self.bar_width


def _floor_to_unit(ts: pd.Timestamp, unit: str) -> pd.Timestamp:
    # Subtracting the wall-clock remainder keeps tz-aware timestamps valid across DST.
    remainder = pd.Timedelta(
        seconds=ts.second,
        microseconds=ts.microsecond,
        nanoseconds=ts.nanosecond,
    )
    if unit == "hour":
        remainder += pd.Timedelta(minutes=ts.minute)
    return ts - remainder


def _unit_value(ts: pd.Timestamp, unit: str) -> int:
    return int(ts.hour if unit == "hour" else ts.minute)


def align_start(t: pd.Timestamp, candidate: GranularityCandidate) -> pd.Timestamp:
    """Round down to the nearest multiple of ``candidate.amount`` units past the hour/day."""
    ts = pd.Timestamp(t)
    unit = candidate.unit
    offset = _unit_value(ts, unit) % candidate.amount
    return _floor_to_unit(ts, unit) - UNIT_DELTAS[unit] * offset


def align_end(t: pd.Timestamp, candidate: GranularityCandidate) -> pd.Timestamp:
    """Round up to the nearest multiple of ``candidate.amount`` units; never earlier than ``t``."""
    ts = pd.Timestamp(t)
    unit = candidate.unit
    amount = candidate.amount
    step = (amount - _unit_value(ts, unit) % amount) % amount
    rounded = _floor_to_unit(ts, unit) + UNIT_DELTAS[unit] * step
    if rounded < ts:
        rounded += UNIT_DELTAS[unit] * amount
    return rounded


def interval_for(
    candidate: GranularityCandidate,
    start: pd.Timestamp,
    end: pd.Timestamp,
) -> IntervalSettings:
    interval_start = align_start(start, candidate)
    interval_end = align_end(end, candidate)
    interval_length = (interval_end - interval_start) / UNIT_DELTAS[candidate.unit]
    num_bars = interval_length / candidate.amount
    bar_width = interval_length / num_bars if num_bars else float(candidate.amount)
    return IntervalSettings(
        candidate=candidate,
        num_bars=num_bars,
        bar_width=bar_width,
        interval_start=interval_start,
        interval_end=interval_end,
    )


def select_interval(
    candidates: Sequence[GranularityCandidate],
    start: pd.Timestamp,
    end: pd.Timestamp,
    min_bars: int,
    max_bars: int,
) -> IntervalSettings:
    """Return the first candidate, in table order, whose bar count lies in [min_bars, max_bars]."""
    start = pd.Timestamp(start)
    end = pd.Timestamp(end)
    if start > end:
        raise ValueError(f"start must be <= end (got {start} > {end})")

    for candidate in candidates:
        settings = interval_for(candidate, start, end)
        if min_bars <= settings.num_bars <= max_bars:
            return settings

    LOGGER.error(
        "failed to generate interval settings start=%s end=%s min_bars=%s max_bars=%s",
        start,
        end,
        min_bars,
        max_bars,
    )
    raise NoFeasibleGranularity(start=start, end=end, min_bars=min_bars, max_bars=max_bars)
