"""
Interaction controller
======================

Everything that reacts to the pointer:

- the drill-down state machine over `SelectionState`
  (Aggregate --select(cause)--> Detail(cause), any --reset--> Aggregate),
- hit testing of a pointer against treemap leaves and series x-intervals,
- tooltip placement (up-right of the pointer, flipped when it would leave the
  viewport) and tooltip text.

Hovering never changes the selection.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging
import math

from .models import DecadeInterval, SelectionState, Tooltip, TreemapNode

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Size = Tuple[float, float]
Listener = Callable[[Optional[str]], None]

PRIMARY_BUTTON = 0
TARGET_CATEGORY = "category"
TARGET_TOOLTIP_AREA = "tooltip-area"

# ---------------- Reducers ----------------
def select_category(state: SelectionState, cause: str) -> SelectionState:
    return SelectionState(selected_cause=cause)

def reset(state: SelectionState) -> SelectionState:
    return SelectionState()

@dataclass(frozen=True)
class ClickEvent:
    """A click as delivered by the host UI."""
    target: str
    cause: Optional[str] = None
    button: int = PRIMARY_BUTTON

@dataclass
class InteractionController:
    """Owns the single SelectionState and notifies listeners on change.

    undo/redo only step back and forth through states reached by
    select_category and reset, so the machine still has exactly two states:
    Aggregate (no cause) and Detail(cause).
    """
    state: SelectionState = field(default_factory=SelectionState)
    _listeners: List[Listener] = field(default_factory=list, init=False)

    # Stacks for undo/redo (store previous states)
    _undo: List[SelectionState] = field(default_factory=list, init=False)
    _redo: List[SelectionState] = field(default_factory=list, init=False)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self) -> None:
        for listener in self._listeners:
            listener(self.state.selected_cause)

    def _apply(self, new_state: SelectionState) -> None:
        self._undo.append(self.state)
        self._redo.clear()
        self.state = new_state
        logger.debug("Selection -> %s", new_state)
        self._emit()

    def select_category(self, cause: str) -> SelectionState:
        self._apply(select_category(self.state, cause))
        return self.state

    def reset(self) -> SelectionState:
        self._apply(reset(self.state))
        return self.state

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.state)
        self.state = self._undo.pop()
        self._emit()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.state)
        self.state = self._redo.pop()
        self._emit()
        return True

    def handle_click(self, event: ClickEvent) -> bool:
        """Return True when the click was consumed here.

        Tooltip-area clicks and non-primary clicks are absorbed without
        touching the selection, so they never reach handlers underneath.
        """
        if event.target == TARGET_TOOLTIP_AREA:
            return True
        if event.button != PRIMARY_BUTTON:
            return True
        if event.target == TARGET_CATEGORY and event.cause is not None:
            self.select_category(event.cause)
            return True
        return False

# ---------------- Hit testing ----------------
def decade_intervals(x_min: int, x_max: int, width: int = 10) -> List[DecadeInterval]:
    """Disjoint buckets aligned to multiples of `width` covering [x_min, x_max].

    The last bucket is closed and ends at x_max.
    """
    if x_max < x_min:
        raise ValueError(f"x_max ({x_max}) < x_min ({x_min})")
    start = (x_min // width) * width
    starts = list(range(start, x_max, width)) or [start]
    out = [DecadeInterval(s, s + width) for s in starts[:-1]]
    out.append(DecadeInterval(starts[-1], x_max, closed=True))
    return out

def resolve_series_hover(intervals: Sequence[DecadeInterval], x: float) -> Optional[DecadeInterval]:
    for iv in intervals:
        if iv.contains(x):
            return iv
    return None

def resolve_treemap_hover(tree: TreemapNode, x: float, y: float) -> Optional[Tuple[TreemapNode, ...]]:
    """Root-to-leaf path of the leaf under (x, y), or None.

    Leaves are disjoint, so at most one path matches.
    """
    if math.isnan(x) or math.isnan(y):
        return None
    return _descend(tree, x, y)

def _descend(node: TreemapNode, x: float, y: float) -> Optional[Tuple[TreemapNode, ...]]:
    r = node.rect
    if node.is_leaf:
        return (node,) if r.contains(x, y) else None
    # a parent's rect is the bounding box of its children
    if not (r.x0 <= x <= r.x1 and r.y0 <= y <= r.y1):
        return None
    for c in node.children:
        hit = _descend(c, x, y)
        if hit is not None:
            return (node,) + hit
    return None

# ---------------- Tooltips ----------------
def place_tooltip(pointer: Point, tooltip_size: Size, viewport: Size, margin: float = 10) -> Point:
    """Top-left corner of the tooltip.

    Default is up-right of the pointer. Each edge is checked once against the
    default placement: overflowing the right edge flips it left of the
    pointer, overflowing the top flips it below. Tiny viewports may still
    overflow.
    """
    px, py = pointer
    w, h = tooltip_size
    vw, _vh = viewport
    x = px + margin
    y = py - h - margin
    if x + w > vw:
        x = px - w - margin
    if y < 0:
        y = py + margin
    return x, y

def treemap_tooltip_lines(path: Sequence[TreemapNode]) -> Tuple[str, ...]:
    names = [n.name for n in path[1:]]
    leaf = path[-1]
    return (
        " → ".join(names),
        f"Crashes: {leaf.value}",
        f"Fatalities: {leaf.fatalities if leaf.fatalities is not None else 0}",
    )

def series_tooltip_lines(interval: DecadeInterval, totals: Dict[str, int]) -> Tuple[str, ...]:
    return (interval.label,) + tuple(f"{c}: {n} crashes" for c, n in totals.items())

def build_tooltip(pointer: Point, lines: Sequence[str], tooltip_size: Size, viewport: Size, margin: float = 10) -> Tooltip:
    x, y = place_tooltip(pointer, tooltip_size, viewport, margin)
    return Tooltip(x=x, y=y, lines=tuple(lines))
