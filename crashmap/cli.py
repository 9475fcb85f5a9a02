"""
crashmap Command Line Interface (CLI)
=====================================

Interactive terminal front end:

    python -m crashmap.cli --data "path/to/plane_crashes.csv"

It loads the records once, then lets you drive the same selection / hover
logic a graphical host would: select a cause, reset, hover over the treemap
or the series, export the current scene or write a DOCX report.
"""

from __future__ import annotations
import argparse, shlex
import logging
from typing import Optional, Sequence

from .config import VizConfig
from .engine import CrashViz
from .loader import load_records

HELP = """
Commands:
  help
  stats
  causes                          (legend / stack order)
  series [n]                      (first n years of the stacked series)
  tree [n]                        (first n treemap leaves)

  select "<cause>"                (drill the treemap into one cause)
  reset
  undo
  redo

  hover tree <x> <y>              (treemap pixels)
  hover series <x>                (series chart pixels)

  export json "<path.json>"
  report "<path.docx>"
  quit
"""


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the crashmap CLI.

    1) Load records
    2) Build the engine
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(prog="crashmap")
    ap.add_argument("--data", required=True, help="Path to the crash CSV / XLSX export")
    ap.add_argument("--treemap-size", nargs=2, type=int, metavar=("W", "H"))
    ap.add_argument("--stack-size", nargs=2, type=int, metavar=("W", "H"))
    ap.add_argument("--padding", type=float)
    ap.add_argument("-v", "--verbose", action="count", default=0)
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    config = VizConfig()
    if args.treemap_size:
        config.treemap_width, config.treemap_height = args.treemap_size
    if args.stack_size:
        config.stack_width, config.stack_height = args.stack_size
    if args.padding is not None:
        config.treemap_padding = args.padding

    print("Loading dataset...")
    records = load_records(args.data, config)
    viz = CrashViz.from_records(records, config)
    viz.dataset_path = args.data

    print(f"Loaded {len(records)} records. Type 'help' for commands.")
    while True:
        try:
            line = input("crashmap> ")
            stripped = line.strip()
            if stripped:
                cmd0 = stripped.split()[0].lower()
                if cmd0 in ("select", "reset", "undo", "redo"):
                    viz.command_log.append(stripped)
        except EOFError:
            break
        if not line.strip():
            continue
        if line.strip().lower() in ("quit", "exit"):
            break
        try:
            handle(viz, line)
        except (ValueError, KeyError, IndexError, OSError, ImportError) as e:
            print(f"Error: {e}")


def handle(viz: CrashViz, line: str) -> None:
    """Handle one CLI command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        scene = viz.recompute()
        print(f"Records: {len(viz.records)} | Causes: {len(scene.categories)} | Years: {len(viz.idx.years_sorted)}")
        print(f"Selection: {viz.selection.selected_cause or '(all causes)'}")
        return

    if cmd == "causes":
        scene = viz.recompute()
        for i, c in enumerate(scene.categories, 1):
            print(f"{i:>2}. {c} ({len(viz.idx.by_cause.get(c, []))})")
        return

    if cmd == "series":
        n = int(parts[1]) if len(parts) >= 2 else 10
        scene = viz.recompute()
        for p in scene.series[:n]:
            bands = ", ".join(f"{b.category}:{b.y0:g}-{b.y1:g}" for b in p.bands if b.y1 > b.y0)
            print(f"{p.x}: {bands}")
        print(f"y max = {scene.y_max:g}")
        return

    if cmd == "tree":
        n = int(parts[1]) if len(parts) >= 2 else 10
        scene = viz.recompute()
        print(scene.title)
        if scene.tree is None:
            print(scene.empty_message)
            return
        for leaf in scene.tree.leaves()[:n]:
            r = leaf.rect
            print(f"{leaf.name}: crashes={leaf.value} fatalities={leaf.fatalities} [{r.x0}, {r.y0}, {r.x1}, {r.y1}]")
        return

    if cmd == "select":
        if len(parts) < 2:
            raise ValueError('Usage: select "<cause>"')
        cause = parts[1]
        viz.select(cause)
        scene = viz.recompute()
        print(scene.empty_message or f"Selected {cause}.")
        return

    if cmd == "reset":
        viz.reset()
        print("Selection reset.")
        return

    if cmd == "undo":
        print("Undone." if viz.controller.undo() else "Nothing to undo.")
        return

    if cmd == "redo":
        print("Redone." if viz.controller.redo() else "Nothing to redo.")
        return

    if cmd == "hover":
        kind = parts[1].lower() if len(parts) >= 2 else ""
        scene = viz.recompute()
        if kind == "tree":
            tip = viz.hover_treemap(scene, (float(parts[2]), float(parts[3])))
        elif kind == "series":
            tip = viz.hover_series(scene, (float(parts[2]), float(parts[3]) if len(parts) >= 4 else 0.0))
        else:
            raise ValueError("hover kind must be: tree | series")
        _print_tooltip(tip)
        return

    if cmd == "export":
        if len(parts) < 3 or parts[1].lower() != "json":
            print('Usage: export json "out.json"')
            return
        viz.export_json(viz.recompute(), parts[2])
        print(f"Exported JSON to {parts[2]}")
        return

    if cmd == "report":
        from .report import generate_docx_report, ReportConfig
        if len(parts) < 2:
            raise ValueError('Usage: report "<path.docx>"')
        cfg = ReportConfig(dataset_file=viz.dataset_path, command_log=viz.command_log)
        generate_docx_report(viz, viz.recompute(), parts[1], config=cfg)
        print(f"Report written to {parts[1]}")
        return

    print("Unknown command. Type 'help'.")


def _print_tooltip(tip) -> None:
    if tip is None:
        print("(nothing under the pointer)")
        return
    print(f"tooltip at ({tip.x:g}, {tip.y:g})")
    for line in tip.lines:
        print(f"  {line}")


if __name__ == "__main__":
    main()
