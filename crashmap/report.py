from __future__ import annotations

"""
crashmap report generator
-------------------------
Draws a Scene with matplotlib and bundles the charts into a DOCX report.

Design goals:
- Keep crashmap usable even if report dependencies are missing (lazy imports).
- Draw only from the Scene: the bands, rectangles and colour positions are
  already computed, this module never re-derives geometry.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import os
import tempfile

from .color import color_for, legend_stops
from .models import CrashRecord


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Historical Airplane Crashes"
    subtitle: str = "Crashes over time by cause, and where they happened"
    dataset_name: str = "Plane crash export"
    dataset_file: Optional[str] = None
    dpi: int = 150
    # Optional: list of CLI commands used to reach the current selection
    command_log: Optional[List[str]] = None


def _pyplot():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib numpy"
        ) from e
    return plt


def render_stacked_area(scene, out_path: str, dpi: int = 150) -> str:
    """Stacked bands in category order, decade grid lines, legend."""
    plt = _pyplot()
    import numpy as np

    fig, ax = plt.subplots(figsize=(10, 4))
    if scene.series:
        xs = np.array([p.x for p in scene.series], dtype=float)
        cmap = plt.get_cmap("tab10")
        for k, category in enumerate(scene.categories):
            y0 = np.array([p.bands[k].y0 for p in scene.series], dtype=float)
            y1 = np.array([p.bands[k].y1 for p in scene.series], dtype=float)
            ax.fill_between(xs, y0, y1, color=cmap(k % 10), alpha=0.8, label=category, linewidth=0)
        for iv in scene.intervals:
            ax.axvline(iv.start, color="#ccc", linestyle="--", linewidth=0.8)
        ax.set_xlim(*scene.x_domain)
        ax.set_ylim(0, scene.y_max or 1)
        ax.legend(loc="upper left", fontsize=8)
    ax.set_xlabel("Year")
    ax.set_ylabel("Crashes")
    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi)
    plt.close(fig)
    return out_path


def render_treemap(scene, out_path: str, dpi: int = 150) -> str:
    """Leaves coloured on the Reds ramp, black group borders, centred labels."""
    plt = _pyplot()
    from matplotlib.patches import Rectangle as Patch

    if scene.tree is None:
        raise ValueError(scene.empty_message or "Nothing to draw")
    root = scene.tree.rect
    fig, ax = plt.subplots(figsize=(10, 8))
    cmap = plt.get_cmap("Reds")

    for leaf in scene.tree.leaves():
        r = leaf.rect
        ax.add_patch(Patch((r.x0, r.y0), r.width, r.height,
                           facecolor=cmap(color_for(leaf.fatalities, scene.color_domain)),
                           edgecolor="white", linewidth=1))
        if r.width > 40 and r.height > 16:
            ax.text(r.x0 + 5, r.y0 + 15, leaf.name, fontsize=6, fontweight="bold")

    for g in scene.groups:
        r = g.rect
        ax.add_patch(Patch((r.x0, r.y0), r.width, r.height, fill=False, edgecolor="black", linewidth=2))
        cx, cy = g.label_position
        ax.text(cx, cy, g.name, ha="center", va="center", fontsize=8, fontweight="bold",
                bbox=dict(facecolor="white", edgecolor="none", alpha=0.7, pad=1))

    ax.set_xlim(root.x0, root.x1)
    # screen coordinates: y grows downwards
    ax.set_ylim(root.y1, root.y0)
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(scene.title)

    sm = plt.cm.ScalarMappable(cmap=cmap, norm=plt.Normalize(*scene.color_domain))
    cbar = fig.colorbar(sm, ax=ax, orientation="horizontal", fraction=0.04, pad=0.02)
    cbar.set_label("Total Fatalities")
    cbar.set_ticks([v for _, v, _ in legend_stops(scene.color_domain, count=5)])

    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi)
    plt.close(fig)
    return out_path


def generate_docx_report(
    viz,
    scene,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """Generate a DOCX report with both charts and their summary tables."""
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    records: Sequence[CrashRecord] = viz.records
    if not records:
        raise ValueError("No records to report on.")

    tmpdir = tempfile.mkdtemp(prefix="crashmap_report_")
    # Each chart is: (title, file_path)
    charts: List[Tuple[str, str]] = [(
        "Stacked Area Chart: Crashes Over Time by Cause",
        render_stacked_area(scene, os.path.join(tmpdir, "stacked.png"), dpi=config.dpi),
    )]
    if scene.tree is not None:
        charts.append((scene.title, render_treemap(scene, os.path.join(tmpdir, "treemap.png"), dpi=config.dpi)))

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Dataset", config.dataset_file or config.dataset_name)
    _kv("Records", str(len(records)))
    if scene.x_domain:
        _kv("Years", f"{scene.x_domain[0]} to {scene.x_domain[1]}")
    _kv("Treemap view", scene.title)

    if config.command_log:
        doc.add_heading("Command log", level=1)
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    doc.add_heading("Visualizations", level=1)
    for title, path in charts:
        doc.add_paragraph(title)
        doc.add_picture(path, width=Inches(6.5))
    if scene.empty_message:
        doc.add_paragraph(scene.empty_message)

    # Crashes per cause, in legend order
    totals = {c: 0 for c in scene.categories}
    for r in records:
        totals[r.cause] += 1
    doc.add_heading("Crashes by cause", level=1)
    t = doc.add_table(rows=1, cols=2)
    t.rows[0].cells[0].text = "Cause"
    t.rows[0].cells[1].text = "Crashes"
    for cause, n in totals.items():
        row = t.add_row().cells
        row[0].text = cause
        row[1].text = str(n)

    # Same numbers the series tooltip shows, one row per interval
    from .aggregation import interval_totals
    doc.add_heading("Crashes by decade", level=1)
    t2 = doc.add_table(rows=1, cols=len(scene.categories) + 1)
    t2.rows[0].cells[0].text = "Years"
    for k, cause in enumerate(scene.categories):
        t2.rows[0].cells[k + 1].text = cause
    for iv in scene.intervals:
        row = t2.add_row().cells
        row[0].text = iv.label
        for k, n in enumerate(interval_totals(records, iv, scene.categories, viz.idx).values()):
            row[k + 1].text = str(n)

    from . import __version__
    from datetime import datetime as _dt
    doc.add_heading("Reproducibility footer", level=1)
    doc.add_paragraph(f"crashmap version: {__version__}")
    doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
