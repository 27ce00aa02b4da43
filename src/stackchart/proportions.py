from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Union

NestedCounts = Mapping[str, Mapping[str, float]]
FlatCounts = Mapping[str, float]
PrecomputedCounts = tuple[FlatCounts, FlatCounts, float]
DonutInput = Union[NestedCounts, FlatCounts, PrecomputedCounts]


@dataclass(frozen=True)
class DonutData:
    total: float
    outer: list[tuple[str, float]]
    inner: list[tuple[str, float]] = field(default_factory=list)


def merge_counts(first: FlatCounts, second: FlatCounts) -> dict[str, float]:
    keys = dict.fromkeys([*first.keys(), *second.keys()])
    return {key: float(first.get(key, 0.0)) + float(second.get(key, 0.0)) for key in keys}


def _sum_values(values: Iterable[float]) -> float:
    return float(sum(float(value) for value in values))


def _is_precomputed(data: object) -> bool:
    return isinstance(data, (tuple, list)) and len(data) == 3


def _is_flat(data: Mapping) -> bool:
    first = next(iter(data.values()), None)
    return first is None or not isinstance(first, Mapping)


def extract_donut_data(data: DonutInput) -> DonutData:
    """Split donut input into outer ring, inner ring and grand total.

    Accepts a flat ``{label: value}`` mapping (single ring), a nested
    ``{outer: {inner: value}}`` mapping, or a pre-computed
    ``(outer, inner, total)`` triple.
    """
    if _is_precomputed(data):
        outer, inner, total = data
        return DonutData(
            total=float(total),
            outer=[(key, float(value)) for key, value in outer.items()],
            inner=[(key, float(value)) for key, value in inner.items()],
        )
    if not isinstance(data, Mapping):
        raise ValueError(f"Unsupported donut data type: {type(data).__name__}")

    if _is_flat(data):
        return DonutData(
            total=_sum_values(data.values()),
            outer=[(key, float(value)) for key, value in data.items()],
        )

    inner: dict[str, float] = {}
    for slices in data.values():
        inner = merge_counts(inner, slices)
    return DonutData(
        total=_sum_values(value for slices in data.values() for value in slices.values()),
        outer=[(key, _sum_values(slices.values())) for key, slices in data.items()],
        inner=list(inner.items()),
    )


def slice_shares(slices: list[tuple[str, float]], total: float) -> list[tuple[str, float]]:
    if not total:
        return [(key, 0.0) for key, _ in slices]
    return [(key, value / total) for key, value in slices]
