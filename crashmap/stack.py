"""
Stacked series builder
======================

Turns per-year, per-category counts into cumulative bands:

    y0 of the first band = 0
    y0_k = y1_{k-1}
    y1_k = y0_k + count(category_k, year)

The category order is supplied by the caller (see
`aggregation.category_order`) so that stack order and legend order agree.
Curve smoothing is left to the renderer.
"""

from __future__ import annotations
from typing import List, Mapping, Optional, Sequence, Tuple
from .models import Band, StackedSeriesPoint

def stack(points: Mapping[int, Mapping[str, int]], category_order: Sequence[str]) -> List[StackedSeriesPoint]:
    """Build one StackedSeriesPoint per x-value, sorted by x.

    Categories missing at a given x count as 0. Categories that are not in
    `category_order` are not stacked.
    """
    out: List[StackedSeriesPoint] = []
    for x in sorted(points):
        counts = points[x]
        bands: List[Band] = []
        y0 = 0
        for category in category_order:
            y1 = y0 + counts.get(category, 0)
            bands.append(Band(category=category, y0=y0, y1=y1))
            y0 = y1
        out.append(StackedSeriesPoint(x=x, bands=tuple(bands)))
    return out

def y_max(series: Sequence[StackedSeriesPoint]) -> float:
    """Top of the tallest stack, used for the y-axis domain."""
    return max((p.total for p in series), default=0)

def x_domain(series: Sequence[StackedSeriesPoint]) -> Optional[Tuple[int, int]]:
    if not series:
        return None
    xs = [p.x for p in series]
    return min(xs), max(xs)
