"""
Configuration
=============

All knobs live in one dataclass so the CLI (and tests) can override single
fields without touching the pipeline code. Defaults reproduce the original
dashboard: a 1000x400 stacked chart and a 1000x800 treemap with 2px padding.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple

def _default_aliases() -> Dict[str, str]:
    return {
        "Terrorism act, Hijacking, Sabotage": "Terrorism",
        "Hijacking": "Terrorism",
    }

@dataclass
class VizConfig:
    """High-level knobs for ingestion, layout and tooltips."""
    # Stacked series chart (pixels)
    stack_width: int = 1000
    stack_height: int = 400
    # left, right, top, bottom
    stack_margins: Tuple[int, int, int, int] = (50, 20, 20, 40)

    # Treemap (pixels)
    treemap_width: int = 1000
    treemap_height: int = 800
    treemap_padding: float = 2

    # Hover buckets on the series x-axis (years)
    interval_width: int = 10

    # Tooltips
    tooltip_margin: float = 10
    # used when the host cannot measure the rendered tooltip
    tooltip_char_width: float = 7
    tooltip_line_height: float = 18
    tooltip_padding: float = 10

    # Record cleaning
    cause_aliases: Dict[str, str] = field(default_factory=_default_aliases)
    rejected_causes: Sequence[str] = ("Unknown",)

    def estimate_tooltip_size(self, lines: Sequence[str]) -> Tuple[float, float]:
        longest = max((len(l) for l in lines), default=0)
        w = longest * self.tooltip_char_width + 2 * self.tooltip_padding
        h = len(lines) * self.tooltip_line_height + 2 * self.tooltip_padding
        return w, h

    def stack_x_range(self) -> Tuple[float, float]:
        left, right, _top, _bottom = self.stack_margins
        return (left, self.stack_width - right)

    def stack_y_range(self) -> Tuple[float, float]:
        _left, _right, top, bottom = self.stack_margins
        return (self.stack_height - bottom, top)
