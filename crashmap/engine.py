"""
Core engine
===========

`recompute` is the single pure entry point a host calls whenever its inputs
change (records, selection, sizes):

1) records -> category order, stacked series, hover intervals
2) selection -> aggregate or per-cause hierarchy -> treemap geometry
3) treemap leaves -> colour domain

`CrashViz` wraps it for interactive use: it keeps the records, their indices,
the config and the InteractionController (the only mutable state), and turns
pointer positions into placed tooltips.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import json
import logging

from .aggregation import (
    build_aggregate_hierarchy, build_detail_hierarchy, build_series,
    category_order, interval_totals,
)
from .color import LinearScale, build_domain
from .config import VizConfig
from .indices import Indices, build_indices
from .interaction import (
    ClickEvent, InteractionController, build_tooltip, decade_intervals,
    resolve_series_hover, resolve_treemap_hover, series_tooltip_lines,
    treemap_tooltip_lines,
)
from .models import (
    CrashRecord, DecadeInterval, NotFound, Rectangle, SelectionState,
    StackedSeriesPoint, Tooltip, TreemapNode,
)
from .stack import x_domain, y_max
from .treemap import GroupRect, group_rectangles, layout

logger = logging.getLogger(__name__)

AGGREGATE_TITLE = "Crashes by Cause"

@dataclass(frozen=True)
class Scene:
    """Everything a renderer needs for one frame."""
    selection: SelectionState
    categories: Tuple[str, ...]
    series: Tuple[StackedSeriesPoint, ...]
    y_max: float
    x_domain: Optional[Tuple[int, int]]
    intervals: Tuple[DecadeInterval, ...]
    title: str
    tree: Optional[TreemapNode]
    groups: Tuple[GroupRect, ...]
    color_domain: Tuple[float, float]
    # set when the selected cause has no records
    empty_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cause": self.selection.selected_cause,
            "categories": list(self.categories),
            "series": [p.to_dict() for p in self.series],
            "y_max": self.y_max,
            "x_domain": list(self.x_domain) if self.x_domain else None,
            "intervals": [{"start": iv.start, "end": iv.end} for iv in self.intervals],
            "title": self.title,
            "treemap": self.tree.to_dict() if self.tree else None,
            "groups": [
                {"name": g.name, "value": g.value, "x0": g.rect.x0, "y0": g.rect.y0,
                 "x1": g.rect.x1, "y1": g.rect.y1}
                for g in self.groups
            ],
            "color_domain": list(self.color_domain),
            "message": self.empty_message,
        }

def recompute(records: Sequence[CrashRecord], selection: SelectionState, config: VizConfig) -> Scene:
    """Build a fresh Scene. Identical inputs give identical output."""
    order = category_order(records)
    series = build_series(records, order)
    dom = x_domain(series)
    intervals = decade_intervals(dom[0], dom[1], config.interval_width) if dom else []

    cause = selection.selected_cause
    if cause is None:
        hierarchy = build_aggregate_hierarchy(records)
        title = AGGREGATE_TITLE
    else:
        hierarchy = build_detail_hierarchy(records, cause)
        title = f"Crash Locations for Cause: {cause}"

    tree: Optional[TreemapNode] = None
    groups: List[GroupRect] = []
    color_domain = (0.0, 0.0)
    empty_message = None
    if isinstance(hierarchy, NotFound):
        empty_message = hierarchy.message
    else:
        bounds = Rectangle(0, 0, config.treemap_width, config.treemap_height)
        tree = layout(hierarchy, bounds, config.treemap_padding)
        groups = group_rectangles(tree)
        color_domain = build_domain(tree.leaves())

    return Scene(
        selection=selection,
        categories=tuple(order),
        series=tuple(series),
        y_max=y_max(series),
        x_domain=dom,
        intervals=tuple(intervals),
        title=title,
        tree=tree,
        groups=tuple(groups),
        color_domain=color_domain,
        empty_message=empty_message,
    )

@dataclass
class CrashViz:
    """Interactive wrapper around `recompute`.

    The engine stores:
    - records: all CrashRecord rows (never modified)
    - idx: precomputed indices (tooltip totals)
    - controller: the drill-down selection
    """
    records: List[CrashRecord]
    idx: Indices
    config: VizConfig = field(default_factory=VizConfig)
    dataset_path: Optional[str] = None
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)
    controller: InteractionController = field(default_factory=InteractionController)

    @classmethod
    def from_records(cls, records: List[CrashRecord], config: Optional[VizConfig] = None) -> "CrashViz":
        return cls(records=records, idx=build_indices(records), config=config or VizConfig())

    @property
    def selection(self) -> SelectionState:
        return self.controller.state

    def recompute(self) -> Scene:
        return recompute(self.records, self.selection, self.config)

    # ---------------- Selection ----------------
    def select(self, cause: str) -> SelectionState:
        return self.controller.select_category(cause)

    def reset(self) -> SelectionState:
        return self.controller.reset()

    def click(self, event: ClickEvent) -> bool:
        return self.controller.handle_click(event)

    # ---------------- Hover ----------------
    def series_x_scale(self, scene: Scene) -> Optional[LinearScale]:
        if scene.x_domain is None:
            return None
        return LinearScale(domain=scene.x_domain, range=self.config.stack_x_range())

    def hover_treemap(self, scene: Scene, pointer: Tuple[float, float]) -> Optional[Tooltip]:
        if scene.tree is None:
            return None
        path = resolve_treemap_hover(scene.tree, pointer[0], pointer[1])
        if path is None or len(path) < 2:
            return None
        lines = treemap_tooltip_lines(path)
        return build_tooltip(
            pointer, lines, self.config.estimate_tooltip_size(lines),
            (self.config.treemap_width, self.config.treemap_height), self.config.tooltip_margin,
        )

    def hover_series(self, scene: Scene, pointer: Tuple[float, float]) -> Optional[Tooltip]:
        """Tooltip for the interval under a pointer given in chart pixels."""
        scale = self.series_x_scale(scene)
        if scale is None:
            return None
        year = scale.invert(pointer[0])
        if year is None:
            return None
        interval = resolve_series_hover(scene.intervals, year)
        if interval is None:
            return None
        totals = interval_totals(self.records, interval, scene.categories, self.idx)
        lines = series_tooltip_lines(interval, totals)
        return build_tooltip(
            pointer, lines, self.config.estimate_tooltip_size(lines),
            (self.config.stack_width, self.config.stack_height), self.config.tooltip_margin,
        )

    # ---------------- Output ----------------
    def export_json(self, scene: Scene, path: str) -> None:
        """Write the scene in the renderer-facing JSON shape."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(scene.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info("Scene exported to %s", path)
