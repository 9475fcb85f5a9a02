"""Shared test fixtures for crashmap tests."""

import pytest

from crashmap.config import VizConfig
from crashmap.engine import CrashViz
from crashmap.models import CrashRecord


@pytest.fixture()
def two_records():
    """The two-record dataset: causes A and B seen once each, A first."""
    return [
        CrashRecord(year=2000, cause="A", location="X", fatalities=5, has_survivors=False),
        CrashRecord(year=2000, cause="B", location="Y", fatalities=0, has_survivors=True),
    ]


@pytest.fixture()
def records():
    """Six crashes over three causes: Human factor (3), Technical failure (2), Weather (1)."""
    return [
        CrashRecord(1985, "Human factor", "Mountains", 10, False),
        CrashRecord(1987, "Technical failure", "Airport", 0, True),
        CrashRecord(1992, "Human factor", "Airport", 3, True),
        CrashRecord(2001, "Weather", "Sea", 50, False),
        CrashRecord(2003, "Technical failure", "Sea", 120, False),
        CrashRecord(2003, "Human factor", "Mountains", 7, False),
    ]


@pytest.fixture()
def viz(records):
    return CrashViz.from_records(records, VizConfig())


@pytest.fixture()
def crash_csv(tmp_path):
    """CSV export with three usable rows and four rows that must be rejected."""
    path = tmp_path / "crashes.csv"
    path.write_text(
        "Date,Crash cause,Crash site,Total fatalities,Survivors\n"
        "1950-03-04,Human factor,Mountains,12,No\n"
        "1961-07-01,Hijacking,Airport,0,Yes\n"
        '1962-01-01,"Terrorism act, Hijacking, Sabotage",City,40,No\n'
        "1970-05-05,Unknown,Sea,3,No\n"
        "not a date,Weather,Sea,3,No\n"
        "1980-01-01,Weather,,3,No\n"
        "1990-01-01,Weather,Sea,,No\n",
        encoding="utf-8",
    )
    return path
