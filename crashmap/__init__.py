"""
crashmap package
================

Linked views over historical air-crash records: a stacked time-series of
crashes per cause and a drill-down treemap of causes / crash sites.

- Record loading is in `crashmap/loader.py`.
- Grouping records into series and hierarchies is in `crashmap/aggregation.py`.
- The layout engines are `crashmap/stack.py` and `crashmap/treemap.py`.
- Selection state, hit testing and tooltips are in `crashmap/interaction.py`.
- `crashmap/engine.py` ties them together; the CLI is in `crashmap/cli.py`.
"""

__version__ = '0.3.0'
