"""
Radial chart series from CTRL bands.

Two input modes:
  BandSet        -> 4 points, one per category, total / max total
  12-value list  -> per-category averages normalized the same way, emitted as
                    12 spokes (3 per category); only the middle spoke of each
                    triad carries the category label.
"""
from __future__ import annotations

from typing import Any, Sequence

from engine.bands import CATEGORY_NAMES, CATEGORY_PRIORITY, TIERS, aggregate
from models import BandSet, Category, ChartPoint

# Static palette: (low, mid, high) shade per category
PALETTE: dict[Category, tuple[str, str, str]] = {
    Category.C: ("#F4B6B6", "#E06666", "#A61C1C"),
    Category.T: ("#FCE5B0", "#F6B26B", "#B45F06"),
    Category.R: ("#B7E1CD", "#6AA84F", "#274E13"),
    Category.L: ("#B4C7E7", "#3D85C6", "#0B3D6B"),
}
MIDDLE_TIER_INDEX = 1


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def _normalize(values: dict[Category, float], ceiling: float | None) -> dict[Category, float]:
    positive = {c: max(0.0, v) for c, v in values.items()}
    divisor = ceiling if ceiling is not None and ceiling > 0 else max(positive.values(), default=0.0)
    if divisor <= 0:
        return {c: 0.0 for c in positive}
    return {c: _clamp01(v / divisor) for c, v in positive.items()}


def to_series(source: BandSet | Sequence[Any], ceiling: float | None = None) -> list[ChartPoint]:
    """Normalized, coloured, labelled chart points in category order C, T, R, L."""
    if isinstance(source, BandSet):
        normalized = _normalize(source.totals, ceiling)
        return [
            ChartPoint(
                label=CATEGORY_NAMES[c],
                normalized_value=normalized[c],
                color=PALETTE[c][MIDDLE_TIER_INDEX],
            )
            for c in CATEGORY_PRIORITY
        ]

    bands = aggregate(list(source))
    averages = {c: bands.total(c) / len(TIERS) for c in CATEGORY_PRIORITY}
    normalized = _normalize(averages, ceiling)
    points: list[ChartPoint] = []
    for c in CATEGORY_PRIORITY:
        for tier_index in range(len(TIERS)):
            points.append(
                ChartPoint(
                    label=CATEGORY_NAMES[c] if tier_index == MIDDLE_TIER_INDEX else "",
                    normalized_value=normalized[c],
                    color=PALETTE[c][tier_index],
                )
            )
    return points
