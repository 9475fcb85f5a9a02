"""
Dataset loader (CSV / Excel -> CrashRecord list)
================================================

Reads the plane-crash export and converts each usable row into a
`CrashRecord`.

Key ideas:
- Column names are matched tolerantly (case / punctuation insensitive).
- Rows missing a required field, with an unparsable date, or whose cause is
  rejected (e.g. "Unknown") are dropped and logged, never raised.
- Cause aliases are normalised here so the rest of the pipeline sees clean
  categories ("Hijacking" -> "Terrorism").
"""

from __future__ import annotations
from typing import List, Optional
import logging
import re

import pandas as pd

from .config import VizConfig
from .models import CrashRecord

logger = logging.getLogger(__name__)

def _to_int(x) -> Optional[int]:
    """Convert a cell to int, returning None if missing/invalid."""
    if pd.isna(x): return None
    try: return int(float(x))
    except (TypeError, ValueError): return None

def _to_str(x) -> str:
    if pd.isna(x): return ""
    return str(x).strip()

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _col(df: pd.DataFrame, *names: str) -> str:
    cols = list(df.columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    raise KeyError(f"Missing required column. Tried={names}. Available={cols}")

def _year(x) -> Optional[int]:
    if pd.isna(x):
        return None
    ts = pd.to_datetime(x, errors="coerce")
    if pd.isna(ts):
        return None
    return int(ts.year)

def records_from_frame(df: pd.DataFrame, config: Optional[VizConfig] = None) -> List[CrashRecord]:
    """Clean a raw frame into records. Rejected rows are logged and skipped."""
    config = config or VizConfig()
    df = df.rename(columns={c: str(c).strip() for c in df.columns})

    date_col = _col(df, "Date", "Crash date")
    cause_col = _col(df, "Crash cause", "Cause")
    site_col = _col(df, "Crash site", "Site", "Location")
    fat_col = _col(df, "Total fatalities", "Fatalities")
    surv_col = _col(df, "Survivors")

    records: List[CrashRecord] = []
    rejected = 0
    for i, row in df.iterrows():
        cause = _to_str(row[cause_col])
        location = _to_str(row[site_col])
        fatalities = _to_int(row[fat_col])
        survivors = _to_str(row[surv_col])
        if not cause or not location or fatalities is None or fatalities < 0 or not survivors or pd.isna(row[date_col]):
            logger.debug("Rejected row %s: missing field", i)
            rejected += 1
            continue
        year = _year(row[date_col])
        if year is None:
            logger.warning("Invalid year for row %s: %r", i, row[date_col])
            rejected += 1
            continue
        cause = config.cause_aliases.get(cause, cause)
        if cause in config.rejected_causes:
            logger.debug("Rejected row %s: cause %r", i, cause)
            rejected += 1
            continue
        records.append(CrashRecord(
            year=year,
            cause=cause,
            location=location,
            fatalities=fatalities,
            has_survivors=(survivors == "Yes"),
        ))

    logger.info("Loaded %d records (%d rows rejected)", len(records), rejected)
    return records

def load_records(path: str, config: Optional[VizConfig] = None) -> List[CrashRecord]:
    """Load a CSV or Excel export (Excel via openpyxl)."""
    if path.lower().endswith((".xlsx", ".xlsm")):
        df = pd.read_excel(path, engine="openpyxl")
    else:
        df = pd.read_csv(path)
    return records_from_frame(df, config)
