"""
Data model
==========

Every value handed between the pipeline stages is a frozen dataclass:
- `CrashRecord` is one cleaned input row,
- `HierarchyNode` / `TreemapNode` are the (geometry-free / laid out) trees,
- `Band` / `StackedSeriesPoint` are the stacked series,
- `SelectionState`, `Tooltip`, `DecadeInterval` belong to the interaction layer.

Nothing here is mutated after construction. A new selection or new data means
a new tree / series, never a patched one.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

SURVIVORS_PRESENT = "Survivors Present"
NO_SURVIVORS = "No Survivors"


@dataclass(frozen=True)
class CrashRecord:
    """One cleaned crash row."""
    year: int
    cause: str
    location: str
    fatalities: int
    has_survivors: bool

    @property
    def survivor_bucket(self) -> str:
        return SURVIVORS_PRESENT if self.has_survivors else NO_SURVIVORS


@dataclass(frozen=True)
class HierarchyNode:
    """Weighted tree node. `value` is the number of crashes below this node."""
    name: str
    value: int
    children: Tuple["HierarchyNode", ...] = ()
    # leaves only
    fatalities: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def leaves(self) -> List["HierarchyNode"]:
        if self.is_leaf:
            return [self]
        out: List[HierarchyNode] = []
        for c in self.children:
            out.extend(c.leaves())
        return out

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "value": self.value}
        if self.fatalities is not None:
            d["fatalities"] = self.fatalities
        d["children"] = [c.to_dict() for c in self.children]
        return d


@dataclass(frozen=True)
class Rectangle:
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2)

    def contains(self, x: float, y: float) -> bool:
        """Half-open containment, so rectangles sharing an edge never both match."""
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

    def overlaps(self, other: "Rectangle") -> bool:
        return (min(self.x1, other.x1) > max(self.x0, other.x0)
                and min(self.y1, other.y1) > max(self.y0, other.y0))

    @staticmethod
    def union(rects: List["Rectangle"]) -> "Rectangle":
        """Bounding box of a non-empty list of rectangles."""
        return Rectangle(
            x0=min(r.x0 for r in rects),
            y0=min(r.y0 for r in rects),
            x1=max(r.x1 for r in rects),
            y1=max(r.y1 for r in rects),
        )


@dataclass(frozen=True)
class TreemapNode:
    """A HierarchyNode with absolute geometry attached."""
    name: str
    value: int
    depth: int
    rect: Rectangle
    children: Tuple["TreemapNode", ...] = ()
    fatalities: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def descendants(self) -> Iterator["TreemapNode"]:
        """Pre-order walk, self first."""
        yield self
        for c in self.children:
            yield from c.descendants()

    def leaves(self) -> List["TreemapNode"]:
        return [n for n in self.descendants() if n.is_leaf]

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "value": self.value}
        if self.fatalities is not None:
            d["fatalities"] = self.fatalities
        d.update(x0=self.rect.x0, y0=self.rect.y0, x1=self.rect.x1, y1=self.rect.y1)
        d["children"] = [c.to_dict() for c in self.children]
        return d


@dataclass(frozen=True)
class Band:
    category: str
    y0: float
    y1: float


@dataclass(frozen=True)
class StackedSeriesPoint:
    x: int
    bands: Tuple[Band, ...]

    @property
    def total(self) -> float:
        return self.bands[-1].y1 if self.bands else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.x,
            "bands": [{"category": b.category, "y0": b.y0, "y1": b.y1} for b in self.bands],
        }


@dataclass(frozen=True)
class SelectionState:
    """Which cause (if any) the treemap is drilled into."""
    selected_cause: Optional[str] = None

    @property
    def mode(self) -> str:
        return "aggregate" if self.selected_cause is None else "detail"


@dataclass(frozen=True)
class DecadeInterval:
    """A hover bucket on the series x-axis. `closed` marks the final bucket."""
    start: int
    end: int
    closed: bool = False

    def contains(self, x: float) -> bool:
        if self.closed:
            return self.start <= x <= self.end
        return self.start <= x < self.end

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class Tooltip:
    x: float
    y: float
    lines: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "lines": list(self.lines)}


@dataclass(frozen=True)
class NotFound:
    """Returned (not raised) when a drill-down cause has no records."""
    cause: str

    @property
    def message(self) -> str:
        return f"No location data available for cause: {self.cause}"
