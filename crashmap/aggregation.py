"""
Aggregation pipeline
====================

Groups cleaned crash records into the shapes the layout code consumes:

1) `category_order`            -> causes, largest first (legend + stack order)
2) `count_by_year` / `build_series` -> per-year per-cause counts, stacked
3) `build_aggregate_hierarchy` -> Root -> cause -> survivor bucket
4) `build_detail_hierarchy`    -> Root -> crash site -> survivor bucket (one cause)
5) `interval_totals`           -> per-cause totals inside one x-interval (tooltips)

Every function builds fresh output; records are never modified.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Union
import logging

from .dsa import merge_sort, intersect_sorted
from .indices import Indices, build_indices, year_range_ids
from .models import (
    CrashRecord, DecadeInterval, HierarchyNode, NotFound, StackedSeriesPoint,
)
from .stack import stack

logger = logging.getLogger(__name__)

ROOT_NAME = "Root"

def category_order(records: Sequence[CrashRecord]) -> List[str]:
    """Causes sorted by total count (descending), ties by first-seen order."""
    counts: Dict[str, int] = {}
    for r in records:
        counts[r.cause] = counts.get(r.cause, 0) + 1
    # dicts keep insertion order, i.e. first-seen order
    return merge_sort(list(counts), key=lambda c: counts[c], reverse=True)

def count_by_year(records: Sequence[CrashRecord]) -> Dict[int, Dict[str, int]]:
    """year -> cause -> crash count. Years with no crash are simply absent."""
    out: Dict[int, Dict[str, int]] = {}
    for r in records:
        per_cause = out.setdefault(r.year, {})
        per_cause[r.cause] = per_cause.get(r.cause, 0) + 1
    return out

def build_series(records: Sequence[CrashRecord], categories: Optional[Sequence[str]] = None) -> List[StackedSeriesPoint]:
    if categories is None:
        categories = category_order(records)
    return stack(count_by_year(records), categories)

def _survivor_leaves(group: Sequence[CrashRecord]) -> tuple:
    """Split records into at most two leaves; empty buckets are omitted."""
    buckets: Dict[str, List[CrashRecord]] = {}
    for r in group:
        buckets.setdefault(r.survivor_bucket, []).append(r)
    return tuple(
        HierarchyNode(name=name, value=len(rs), fatalities=sum(r.fatalities for r in rs))
        for name, rs in buckets.items()
    )

def _branch(name: str, group: Sequence[CrashRecord]) -> HierarchyNode:
    leaves = _survivor_leaves(group)
    return HierarchyNode(name=name, value=sum(c.value for c in leaves), children=leaves)

def _root(children: List[HierarchyNode]) -> HierarchyNode:
    return HierarchyNode(name=ROOT_NAME, value=sum(c.value for c in children), children=tuple(children))

def build_aggregate_hierarchy(records: Sequence[CrashRecord]) -> HierarchyNode:
    """Root -> cause -> survivor bucket, causes in category order."""
    by_cause: Dict[str, List[CrashRecord]] = {}
    for r in records:
        by_cause.setdefault(r.cause, []).append(r)
    return _root([_branch(c, by_cause[c]) for c in category_order(records)])

def build_detail_hierarchy(records: Sequence[CrashRecord], cause: str) -> Union[HierarchyNode, NotFound]:
    """Root -> crash site -> survivor bucket for a single cause.

    Returns NotFound (never raises) when no record has this cause.
    """
    by_location: Dict[str, List[CrashRecord]] = {}
    for r in records:
        if r.cause == cause:
            by_location.setdefault(r.location, []).append(r)
    if not by_location:
        logger.info("No records for cause %r; detail view unavailable", cause)
        return NotFound(cause=cause)
    return _root([_branch(loc, rs) for loc, rs in by_location.items()])

def interval_totals(
    records: Sequence[CrashRecord],
    interval: DecadeInterval,
    order: Sequence[str],
    idx: Optional[Indices] = None,
) -> Dict[str, int]:
    """Crash totals per cause for years inside `interval`, keyed in `order`."""
    idx = idx or build_indices(records)
    ids = year_range_ids(idx, interval.start, interval.end, inclusive=interval.closed)
    return {c: len(intersect_sorted(ids, idx.by_cause.get(c, []))) for c in order}
