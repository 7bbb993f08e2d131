"""Chart-ready slices for ranked vendors and categories."""

from __future__ import annotations

from collections.abc import Sequence

from .aggregation import percentage_of
from .models import ChartSlice, RankedCategories, RankedVendors

PALETTE: tuple[str, ...] = (
    "#3B82F6",
    "#EF4444",
    "#10B981",
    "#F59E0B",
    "#8B5CF6",
    "#06B6D4",
    "#F97316",
    "#84CC16",
    "#EC4899",
    "#6366F1",
)

DEFAULT_SLICES = 10


def color_for(index: int, palette: Sequence[str] = PALETTE) -> str:
    return palette[index % len(palette)]


def to_chart_data(vendors: RankedVendors, limit: int = DEFAULT_SLICES) -> list[ChartSlice]:
    """Top ``limit`` vendors as colored slices.

    Each slice's percentage is its share of *all* vendors' spend, so the
    displayed slices need not add up to 100 when the input is truncated.
    """

    total = vendors.total()
    return [
        ChartSlice(
            name=v.name,
            amount=v.total_spent,
            percentage=percentage_of(v.total_spent, total),
            color=color_for(i),
        )
        for i, v in enumerate(vendors[:limit])
    ]


def category_chart_data(
    categories: RankedCategories, limit: int | None = None
) -> list[ChartSlice]:
    total = categories.total()
    shown = categories[:limit] if limit is not None else categories[:]
    return [
        ChartSlice(
            name=c.category.value,
            amount=c.total_amount,
            percentage=percentage_of(c.total_amount, total),
            color=color_for(i),
        )
        for i, c in enumerate(shown)
    ]


__all__ = ["DEFAULT_SLICES", "PALETTE", "category_chart_data", "color_for", "to_chart_data"]
