"""
Treemap layout engine
=====================

Recursive weighted rectangle partition ("slice and dice" by longer axis):

- children are sorted by value (descending), ties by name,
- the node's rectangle is cut along its longer side into one strip per child,
  each strip proportional to the child's share of the length left after the
  (n - 1) inter-sibling gaps,
- each child lays out its own children inside its strip inset by `padding`.

All arithmetic is done in floats first. Only leaves are rounded, and a parent
reports the union of its rounded children, so rounding never makes siblings
overlap.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
import math

from .dsa import merge_sort
from .models import HierarchyNode, Rectangle, TreemapNode

class GeometryError(ValueError):
    """Bounds or padding that cannot produce a valid layout."""

@dataclass(frozen=True)
class GroupRect:
    """Bounding box of one top-level group, for borders and centred labels."""
    name: str
    value: int
    rect: Rectangle

    @property
    def label_position(self) -> Tuple[float, float]:
        return self.rect.center

def _check_bounds(bounds: Rectangle, padding: float, weighted: bool) -> None:
    coords = (bounds.x0, bounds.y0, bounds.x1, bounds.y1)
    if not all(math.isfinite(v) for v in coords):
        raise GeometryError(f"Non-finite bounds: {bounds}")
    if bounds.x1 < bounds.x0 or bounds.y1 < bounds.y0:
        raise GeometryError(f"Inverted bounds: {bounds}")
    if not math.isfinite(padding) or padding < 0:
        raise GeometryError(f"Padding must be a finite number >= 0, got {padding!r}")
    if weighted and (bounds.width == 0 or bounds.height == 0):
        raise GeometryError(f"Zero-size bounds for a weighted hierarchy: {bounds}")

def _round(v: float) -> int:
    # monotonic half-up rounding (built-in round() is half-even)
    return math.floor(v + 0.5)

def _has_weight(node: HierarchyNode) -> bool:
    return any(c.value > 0 for c in node.children)

def _inset(rect: Rectangle, padding: float, name: str) -> Rectangle:
    if 2 * padding >= rect.width or 2 * padding >= rect.height:
        raise GeometryError(
            f"Padding {padding} leaves no room inside {name!r} ({rect.width:g} x {rect.height:g})"
        )
    return Rectangle(rect.x0 + padding, rect.y0 + padding, rect.x1 - padding, rect.y1 - padding)

def _partition(rect: Rectangle, weights: List[float], padding: float, name: str) -> List[Rectangle]:
    """Cut `rect` into len(weights) strips along its longer side.

    Only positive weights take length and are separated by `padding`; a
    zero weight gets a zero-length strip at the current edge.
    """
    total = sum(weights)
    k = sum(1 for w in weights if w > 0)
    horizontal = rect.width > rect.height
    length = rect.width if horizontal else rect.height
    if (k - 1) * padding >= length:
        raise GeometryError(
            f"{k} children of {name!r} need {(k - 1) * padding:g} of padding "
            f"but only {length:g} is available"
        )
    available = length - (k - 1) * padding
    start = rect.x0 if horizontal else rect.y0

    out: List[Rectangle] = []
    cum = 0.0
    offset = 0.0
    placed = 0
    for w in weights:
        if w > 0 and placed:
            offset += padding
        a = start + available * cum / total + offset
        cum += w
        b = start + available * cum / total + offset
        if w > 0:
            placed += 1
        if horizontal:
            out.append(Rectangle(a, rect.y0, b, rect.y1))
        else:
            out.append(Rectangle(rect.x0, a, rect.x1, b))
    return out

def _sorted_children(node: HierarchyNode) -> List[HierarchyNode]:
    return merge_sort(list(node.children), key=lambda c: (-c.value, c.name))

def _layout(node: HierarchyNode, rect: Rectangle, depth: int, padding: float) -> TreemapNode:
    if not _has_weight(node):
        r = Rectangle(_round(rect.x0), _round(rect.y0), _round(rect.x1), _round(rect.y1))
        return TreemapNode(name=node.name, value=node.value, depth=depth, rect=r,
                           fatalities=node.fatalities)

    children = _sorted_children(node)
    strips = _partition(rect, [float(c.value) for c in children], padding, node.name)
    laid_out = tuple(
        _layout(c, _inset(s, padding, c.name) if _has_weight(c) else s, depth + 1, padding)
        for c, s in zip(children, strips)
    )
    return TreemapNode(
        name=node.name,
        value=node.value,
        depth=depth,
        rect=Rectangle.union([c.rect for c in laid_out]),
        children=laid_out,
        fatalities=node.fatalities,
    )

def layout(root: HierarchyNode, bounds: Rectangle, padding: float = 2) -> TreemapNode:
    """Lay `root` out inside `bounds`.

    The result has the same shape as `root`, except that a node whose
    children all weigh zero is laid out as a leaf covering its whole strip.
    Zero-value children of a weighted node keep their place in the tree with
    a zero-area rectangle.

    Raises:
        GeometryError: for non-finite or inverted bounds, bad padding,
            zero-size bounds for a weighted hierarchy, or padding that uses
            up all the room of a node.
    """
    _check_bounds(bounds, padding, root.value > 0 or _has_weight(root))
    return _layout(root, bounds, 0, padding)

def group_rectangles(tree: TreemapNode) -> List[GroupRect]:
    """Depth-1 nodes with the bounding box of their leaves."""
    return [
        GroupRect(name=c.name, value=c.value, rect=Rectangle.union([l.rect for l in c.leaves()]))
        for c in tree.children
    ]
