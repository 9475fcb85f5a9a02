"""
Indices (precomputed lookup tables)
===================================

Maps from a field value to the sorted list of record positions having it.

Example:
- `by_cause["Human factor"]` gives the positions of all human-factor crashes.
- `year_to_ids[1972]` gives the positions of all crashes in 1972.

Sorted lists allow intersections with the two-pointer technique, which is
how per-interval, per-cause totals are computed for the series tooltip.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Sequence
from bisect import bisect_left, bisect_right
from .models import CrashRecord

@dataclass
class Indices:
    """Container of precomputed indices for fast grouping."""
    by_cause: Dict[str, List[int]]
    by_location: Dict[str, List[int]]
    year_to_ids: Dict[int, List[int]]
    years_sorted: List[int]

def build_indices(records: Sequence[CrashRecord]) -> Indices:
    """Build indices over record positions."""
    by_cause: Dict[str, List[int]] = {}
    by_location: Dict[str, List[int]] = {}
    year_to_ids: Dict[int, List[int]] = {}

    # positions are appended in increasing order, so every list is already sorted
    for i, r in enumerate(records):
        by_cause.setdefault(r.cause, []).append(i)
        by_location.setdefault(r.location, []).append(i)
        year_to_ids.setdefault(r.year, []).append(i)

    years_sorted = sorted(year_to_ids.keys())
    return Indices(by_cause=by_cause, by_location=by_location, year_to_ids=year_to_ids, years_sorted=years_sorted)

def year_range_ids(idx: Indices, y1: int, y2: int, *, inclusive: bool = True) -> List[int]:
    """Return sorted record positions with year in [y1, y2] (or [y1, y2) when not inclusive).

    We use binary search on `years_sorted` and then merge the ID lists.
    """
    lo = bisect_left(idx.years_sorted, y1)
    hi = bisect_right(idx.years_sorted, y2) if inclusive else bisect_left(idx.years_sorted, y2)
    out: List[int] = []
    for y in idx.years_sorted[lo:hi]:
        out.extend(idx.year_to_ids.get(y, []))
    out.sort()
    return out
