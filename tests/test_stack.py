"""Tests for the stacked series builder."""

from crashmap.stack import stack, x_domain, y_max


def _points():
    return {
        2001: {"a": 2, "b": 1},
        2000: {"b": 4},
        2005: {"a": 1, "b": 1, "c": 3},
    }


def test_stack_sorted_by_x_with_missing_as_zero():
    series = stack(_points(), ["a", "b", "c"])
    assert [p.x for p in series] == [2000, 2001, 2005]
    assert [(b.category, b.y0, b.y1) for b in series[0].bands] == [
        ("a", 0, 0), ("b", 0, 4), ("c", 4, 4),
    ]
    assert [(b.category, b.y0, b.y1) for b in series[1].bands] == [
        ("a", 0, 2), ("b", 2, 3), ("c", 3, 3),
    ]


def test_adjacent_bands_touch_and_top_is_total():
    points = _points()
    for p in stack(points, ["c", "b", "a"]):
        assert p.bands[0].y0 == 0
        for lower, upper in zip(p.bands, p.bands[1:]):
            assert lower.y1 == upper.y0
        assert p.bands[-1].y1 == sum(points[p.x].values())


def test_band_order_follows_category_order():
    series = stack(_points(), ["c", "a", "b"])
    for p in series:
        assert [b.category for b in p.bands] == ["c", "a", "b"]


def test_categories_outside_order_are_not_stacked():
    series = stack({2000: {"a": 1, "zzz": 10}}, ["a"])
    assert series[0].total == 1


def test_y_max_and_x_domain():
    series = stack(_points(), ["a", "b", "c"])
    assert y_max(series) == 5
    assert x_domain(series) == (2000, 2005)


def test_empty_series():
    assert stack({}, ["a"]) == []
    assert y_max([]) == 0
    assert x_domain([]) is None


def test_to_dict_shape():
    point = stack({1999: {"a": 2}}, ["a"])[0]
    assert point.to_dict() == {"year": 1999, "bands": [{"category": "a", "y0": 0, "y1": 2}]}
