"""Tests for grouping records into series and hierarchies."""

import logging

from crashmap.aggregation import (
    build_aggregate_hierarchy, build_detail_hierarchy, build_series,
    category_order, count_by_year, interval_totals,
)
from crashmap.models import (
    NO_SURVIVORS, SURVIVORS_PRESENT, CrashRecord, DecadeInterval, NotFound,
)


def test_category_order_by_count_desc(records):
    assert category_order(records) == ["Human factor", "Technical failure", "Weather"]


def test_category_order_ties_keep_first_seen(two_records):
    assert category_order(two_records) == ["A", "B"]
    assert category_order(list(reversed(two_records))) == ["B", "A"]


def test_category_order_is_stable_across_calls(records):
    assert category_order(records) == category_order(records)
    assert category_order([]) == []


def test_count_by_year_is_sparse(records):
    counts = count_by_year(records)
    assert sorted(counts) == [1985, 1987, 1992, 2001, 2003]
    assert 1986 not in counts
    assert counts[2003] == {"Technical failure": 1, "Human factor": 1}


def test_build_series_two_records(two_records):
    series = build_series(two_records, ["A", "B"])
    assert len(series) == 1
    point = series[0]
    assert point.x == 2000
    assert [(b.category, b.y0, b.y1) for b in point.bands] == [("A", 0, 1), ("B", 1, 2)]


def test_build_series_defaults_to_category_order(records):
    series = build_series(records)
    assert [b.category for b in series[0].bands] == category_order(records)
    # 2003 has one human factor and one technical failure crash
    last = series[-1]
    assert last.x == 2003
    assert last.total == 2


def test_aggregate_hierarchy_two_records(two_records):
    root = build_aggregate_hierarchy(two_records)
    assert root.value == 2
    a, b = root.children
    assert (a.name, a.value) == ("A", 1)
    assert [(l.name, l.value, l.fatalities) for l in a.children] == [(NO_SURVIVORS, 1, 5)]
    assert (b.name, b.value) == ("B", 1)
    assert [(l.name, l.value, l.fatalities) for l in b.children] == [(SURVIVORS_PRESENT, 1, 0)]


def test_aggregate_hierarchy_omits_empty_buckets(records):
    root = build_aggregate_hierarchy(records)
    assert [c.name for c in root.children] == ["Human factor", "Technical failure", "Weather"]
    human = root.children[0]
    assert [(l.name, l.value, l.fatalities) for l in human.children] == [
        (NO_SURVIVORS, 2, 17),
        (SURVIVORS_PRESENT, 1, 3),
    ]
    weather = root.children[2]
    assert len(weather.children) == 1
    assert sum(l.value for l in root.leaves()) == len(records)


def test_detail_hierarchy_leaf_counts_sum_to_matches(records):
    root = build_detail_hierarchy(records, "Human factor")
    assert [c.name for c in root.children] == ["Mountains", "Airport"]
    assert sum(l.value for l in root.leaves()) == 3
    mountains = root.children[0]
    assert [(l.name, l.value, l.fatalities) for l in mountains.children] == [(NO_SURVIVORS, 2, 17)]


def test_detail_hierarchy_not_found(records, caplog):
    with caplog.at_level(logging.INFO, logger="crashmap.aggregation"):
        result = build_detail_hierarchy(records, "Bird strike")
    assert isinstance(result, NotFound)
    assert result.cause == "Bird strike"
    assert result.message == "No location data available for cause: Bird strike"
    assert "Bird strike" in caplog.text


def test_hierarchy_to_dict_shape(two_records):
    d = build_aggregate_hierarchy(two_records).to_dict()
    assert d["name"] == "Root"
    assert "fatalities" not in d
    leaf = d["children"][0]["children"][0]
    assert leaf == {"name": NO_SURVIVORS, "value": 1, "fatalities": 5, "children": []}


def test_interval_totals_half_open_and_closed(records):
    order = category_order(records)
    first = interval_totals(records, DecadeInterval(1980, 1990), order)
    assert first == {"Human factor": 1, "Technical failure": 1, "Weather": 0}
    # 1990 itself belongs to the next bucket
    second = interval_totals(records, DecadeInterval(1990, 2000), order)
    assert second == {"Human factor": 1, "Technical failure": 0, "Weather": 0}
    last = interval_totals(records, DecadeInterval(2000, 2003, closed=True), order)
    assert last == {"Human factor": 1, "Technical failure": 1, "Weather": 1}


def test_inputs_are_not_modified(records):
    before = list(records)
    build_aggregate_hierarchy(records)
    build_detail_hierarchy(records, "Weather")
    build_series(records)
    assert records == before
    assert isinstance(records[0], CrashRecord)
