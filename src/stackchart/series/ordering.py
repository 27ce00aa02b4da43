from __future__ import annotations

from collections.abc import Sequence

from stackchart.config import ChartSettings


def order_keys(
    field_keys: Sequence[str],
    settings: ChartSettings | None = None,
) -> list[str]:
    """Order keys by the rank of their category color, highest rank first.

    Keys without a category, or whose color is not ranked, share rank 0 with
    the first color of ``color_order``. Ties keep their input order before the
    final reversal.
    """
    keys = list(field_keys)
    if settings is None or settings.color_order is None:
        return keys

    color_rank = {color: rank for rank, color in enumerate(settings.color_order)}
    # A key listed twice takes the rank of its last entry; coloring uses the first.
    key_rank = {
        category.key: color_rank.get(category.stroke_color, 0)
        for category in settings.categories or []
    }

    ordered = sorted(keys, key=lambda key: key_rank.get(key, 0))
    ordered.reverse()
    return ordered
