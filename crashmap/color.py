"""
Colour domain mapping
=====================

The renderer owns the actual colour ramp (e.g. matplotlib's `Reds`); this
module only maps a fatality count to a position in [0, 1] along that ramp.

`LinearScale` is the general data <-> pixel mapping used for axes and for
turning a pointer position back into a year.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
import math

from .models import TreemapNode

DEGENERATE_POSITION = 0.5

def build_domain(leaves: Iterable[TreemapNode]) -> Tuple[float, float]:
    """(min, max) of leaf fatalities; (0, 0) when no leaf carries a value."""
    values = [l.fatalities for l in leaves if l.fatalities is not None]
    if not values:
        return (0.0, 0.0)
    return (float(min(values)), float(max(values)))

def color_for(value: float, domain: Tuple[float, float]) -> float:
    """Normalised ramp position of `value` (clamped to [0, 1])."""
    lo, hi = domain
    if hi == lo or value is None or math.isnan(value):
        return DEGENERATE_POSITION
    t = (value - lo) / (hi - lo)
    return min(1.0, max(0.0, t))

def legend_stops(domain: Tuple[float, float], count: int = 11) -> List[Tuple[float, float, float]]:
    """Evenly spaced gradient stops as (offset, value, ramp position)."""
    lo, hi = domain
    out = []
    for i in range(count):
        offset = i / (count - 1) if count > 1 else 0.0
        value = lo + offset * (hi - lo)
        out.append((offset, value, color_for(value, domain)))
    return out

@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, v: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (v - d0) * (r1 - r0) / (d1 - d0)

    def invert(self, px: float) -> Optional[float]:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return None
        return d0 + (px - r0) * (d1 - d0) / (r1 - r0)
