"""Tests for cleaning raw crash exports into records."""

import logging

import pandas as pd
import pytest

from crashmap.config import VizConfig
from crashmap.loader import load_records, records_from_frame
from crashmap.models import CrashRecord


def test_load_csv_cleans_rows(crash_csv):
    records = load_records(str(crash_csv))
    assert records == [
        CrashRecord(1950, "Human factor", "Mountains", 12, False),
        CrashRecord(1961, "Terrorism", "Airport", 0, True),
        CrashRecord(1962, "Terrorism", "City", 40, False),
    ]


def test_rejections_are_logged(crash_csv, caplog):
    with caplog.at_level(logging.DEBUG, logger="crashmap.loader"):
        load_records(str(crash_csv))
    assert "Invalid year" in caplog.text
    assert "Loaded 3 records (4 rows rejected)" in caplog.text


def test_load_excel(tmp_path):
    path = tmp_path / "crashes.xlsx"
    pd.DataFrame({
        "Date": ["2001-09-11"],
        "Crash cause": ["Hijacking"],
        "Crash site": ["City"],
        "Total fatalities": [65],
        "Survivors": ["No"],
    }).to_excel(path, index=False, engine="openpyxl")
    assert load_records(str(path)) == [CrashRecord(2001, "Terrorism", "City", 65, False)]


def test_column_names_matched_loosely():
    df = pd.DataFrame({
        " date ": ["1999-01-02"],
        "CRASH CAUSE": ["Weather"],
        "crash_site": ["Sea"],
        "total fatalities": ["3"],
        "survivors": ["Yes"],
    })
    assert records_from_frame(df) == [CrashRecord(1999, "Weather", "Sea", 3, True)]


def test_missing_column_raises():
    df = pd.DataFrame({"Date": [], "Crash cause": [], "Crash site": [], "Total fatalities": []})
    with pytest.raises(KeyError):
        records_from_frame(df)


def test_custom_rejected_causes():
    df = pd.DataFrame({
        "Date": ["1999-01-02", "2000-01-02"],
        "Crash cause": ["Weather", "Other causes"],
        "Crash site": ["Sea", "Sea"],
        "Total fatalities": [1, 2],
        "Survivors": ["No", "No"],
    })
    config = VizConfig(rejected_causes=("Unknown", "Other causes"))
    assert [r.cause for r in records_from_frame(df, config)] == ["Weather"]


def test_negative_fatalities_rejected():
    df = pd.DataFrame({
        "Date": ["1999-01-02"],
        "Crash cause": ["Weather"],
        "Crash site": ["Sea"],
        "Total fatalities": [-1],
        "Survivors": ["No"],
    })
    assert records_from_frame(df) == []
