import logging
from datetime import datetime, timezone

import pytest

from chronoprop.utils.logging import get_logger
from chronoprop.utils.search import binary_search
from chronoprop.utils.timeparse import format_seconds, parse_duration, parse_iso8601, to_seconds


def test_parse_iso8601():
    assert parse_iso8601("1970-01-01T00:00:00Z") == 0.0
    assert parse_iso8601("1970-01-01T01:00:00+01:00") == 0.0
    assert parse_iso8601("1970-01-01T00:00:01.5") == pytest.approx(1.5)
    assert parse_iso8601("1970-01-02") == 86400.0
    with pytest.raises(ValueError):
        parse_iso8601("bad")
    with pytest.raises(ValueError):
        parse_iso8601("2012-13-40T00:00:00Z")


def test_to_seconds():
    assert to_seconds(5) == 5.0
    assert to_seconds(datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc)) == 60.0
    assert to_seconds(datetime(1970, 1, 1, 0, 1)) == 60.0
    assert to_seconds("1970-01-01T00:00:02Z") == 2.0
    with pytest.raises(TypeError):
        to_seconds(True)
    with pytest.raises(TypeError):
        to_seconds(None)


def test_format_seconds():
    assert format_seconds(0.0) == "1970-01-01T00:00:00Z"
    assert format_seconds(float("inf")) == "+inf"


def test_parse_duration():
    assert parse_duration("1:02:03.5") == pytest.approx(3723.5)
    assert parse_duration("02:03") == pytest.approx(123)
    assert parse_duration("45") == pytest.approx(45)
    with pytest.raises(ValueError):
        parse_duration("bad")


def test_binary_search():
    items = [1.0, 3.0, 5.0]
    assert binary_search(items, 3.0) == 1
    assert ~binary_search(items, 0.0) == 0
    assert ~binary_search(items, 4.0) == 2
    assert ~binary_search(items, 9.0) == 3
    assert binary_search([], 1.0) == ~0


def test_logger_singleton():
    logger1 = get_logger("test_logger")
    logger2 = get_logger("test_logger", level="debug")
    assert logger1 is logger2
    assert len(logger1.handlers) == 1
    assert logger1.level == logging.DEBUG
