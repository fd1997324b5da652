import math

import pytest

from chronoprop.core.intervals import TimeInterval, TimeIntervalCollection, parse_iso8601_interval


def test_contains_respects_inclusivity():
    closed = TimeInterval(0.0, 10.0)
    half_open = TimeInterval(0.0, 10.0, True, False)
    assert closed.contains(0.0) and closed.contains(10.0)
    assert half_open.contains(0.0)
    assert not half_open.contains(10.0)
    assert not TimeInterval(0.0, 10.0, False, True).contains(0.0)


def test_zero_length_interval_is_empty_unless_closed():
    assert TimeInterval(5.0, 5.0).contains(5.0)
    assert not TimeInterval(5.0, 5.0).is_empty
    assert TimeInterval(5.0, 5.0, True, False).is_empty


def test_reversed_bounds_rejected():
    with pytest.raises(ValueError):
        TimeInterval(10.0, 0.0)


def test_intersect():
    a = TimeInterval(0.0, 10.0, data="a")
    b = TimeInterval(5.0, 20.0, False, True, data="b")
    overlap = a.intersect(b)
    assert (overlap.start, overlap.stop) == (5.0, 10.0)
    assert not overlap.is_start_included
    assert overlap.is_stop_included
    assert overlap.data == "a"
    assert a.intersect(TimeInterval(11.0, 12.0)) is None
    # Touching at an instant only one side includes
    assert TimeInterval(0.0, 10.0, True, False).intersect(TimeInterval(10.0, 20.0)) is None


def test_infinite_intersect_clips():
    clipped = TimeInterval.infinite().intersect(TimeInterval(1.0, 2.0, True, False))
    assert (clipped.start, clipped.stop, clipped.is_stop_included) == (1.0, 2.0, False)
    assert math.isinf(TimeInterval.infinite().start)


def test_parse_iso8601_interval():
    interval = parse_iso8601_interval("2012-03-15T10:00:00Z/2012-03-15T11:00:00Z")
    assert interval.duration == pytest.approx(3600.0)
    assert interval.is_start_included and interval.is_stop_included
    with pytest.raises(ValueError):
        parse_iso8601_interval("2012-03-15T10:00:00Z")
    with pytest.raises(ValueError):
        parse_iso8601_interval("yesterday/today")


def test_collection_keeps_sorted_order_and_finds_containing():
    intervals = TimeIntervalCollection()
    intervals.add_interval(TimeInterval(20.0, 30.0, data="c"))
    intervals.add_interval(TimeInterval(0.0, 10.0, True, False, data="a"))
    intervals.add_interval(TimeInterval(10.0, 20.0, True, False, data="b"))
    assert [i.data for i in intervals] == ["a", "b", "c"]
    assert intervals.find_interval_containing(10.0).data == "b"
    assert intervals.find_interval_containing(20.0).data == "c"
    assert intervals.find_interval_containing(9.999).data == "a"
    assert intervals.find_interval_containing(-1.0) is None
    assert intervals.find_interval_containing(30.5) is None
    assert (intervals.start, intervals.stop) == (0.0, 30.0)


def test_excluded_start_falls_back_to_previous_interval():
    intervals = TimeIntervalCollection()
    intervals.add_interval(TimeInterval(0.0, 10.0, data="a"))
    intervals.add_interval(TimeInterval(10.0, 20.0, False, True, data="b"))
    assert intervals.find_interval_containing(10.0).data == "a"
    assert intervals.find_interval_containing(10.5).data == "b"


def test_instant_and_open_interval_sharing_a_start():
    intervals = TimeIntervalCollection()
    intervals.add_interval(TimeInterval(5.0, 10.0, False, True, data="open"))
    intervals.add_interval(TimeInterval(5.0, 5.0, data="instant"))
    assert intervals.find_interval_containing(5.0).data == "instant"
    assert intervals.find_interval_containing(7.0).data == "open"


def test_find_interval_exact_bounds():
    intervals = TimeIntervalCollection()
    intervals.add_interval(TimeInterval(0.0, 10.0, data="a"))
    assert intervals.find_interval(0.0, 10.0).data == "a"
    assert intervals.find_interval(0.0, 10.0, True, False) is None
    assert intervals.find_interval(0.0, 11.0) is None


def test_identical_bounds_replace_payload():
    intervals = TimeIntervalCollection()
    intervals.add_interval(TimeInterval(0.0, 10.0, data="old"))
    stored = intervals.add_interval(TimeInterval(0.0, 10.0, data="new"))
    assert len(intervals) == 1
    assert stored.data == "new"


def test_overlap_rejected_and_empty_ignored():
    intervals = TimeIntervalCollection()
    intervals.add_interval(TimeInterval(0.0, 10.0))
    with pytest.raises(ValueError):
        intervals.add_interval(TimeInterval(5.0, 15.0))
    intervals.add_interval(TimeInterval(3.0, 3.0, False, False))
    assert len(intervals) == 1


def test_collection_intersect():
    intervals = TimeIntervalCollection()
    intervals.add_interval(TimeInterval(0.0, 10.0, data="a"))
    intervals.add_interval(TimeInterval(20.0, 30.0, data="b"))
    clipped = intervals.intersect(TimeInterval(5.0, 25.0))
    assert [(i.start, i.stop, i.data) for i in clipped] == [(5.0, 10.0, "a"), (20.0, 25.0, "b")]
    assert intervals.contains(25.0)
    assert not clipped.contains(26.0)
