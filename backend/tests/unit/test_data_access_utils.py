"""Unit tests for data access helpers."""
import pytest
from datetime import datetime, timedelta, timezone

from ivis_data.managers.data_access.utils import (
    for_aggs,
    format_duration,
    format_timestamp,
    parse_timestamp,
)


@pytest.mark.parametrize("duration,expected", [
    (timedelta(0), "P0D"),
    (timedelta(seconds=1), "PT1S"),
    (timedelta(minutes=1), "PT1M"),
    (timedelta(minutes=1, seconds=30), "PT1M30S"),
    (timedelta(hours=1), "PT1H"),
    (timedelta(days=1), "P1D"),
    (timedelta(days=1, hours=2), "P1DT2H"),
    (timedelta(milliseconds=500), "PT0.5S"),
    (timedelta(seconds=2, milliseconds=250), "PT2.25S"),
])
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


def test_format_duration_rejects_negative():
    with pytest.raises(ValueError):
        format_duration(timedelta(seconds=-1))


def test_format_timestamp_utc_millis():
    ts = datetime(2024, 3, 1, 13, 0, 5, 123456, tzinfo=timezone(timedelta(hours=1)))

    assert format_timestamp(ts) == "2024-03-01T12:00:05.123Z"


def test_format_timestamp_naive_is_utc():
    assert format_timestamp(datetime(2024, 3, 1, 12, 0)) == "2024-03-01T12:00:00.000Z"


@pytest.mark.parametrize("value", [
    "2024-03-01T12:00:00.000Z",
    "2024-03-01T12:00:00Z",
    "2024-03-01T13:00:00+01:00",
    1709294400000,
    1709294400000.0,
    datetime(2024, 3, 1, 12, 0),
])
def test_parse_timestamp_formats(value):
    assert parse_timestamp(value) == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, True, "yesterday", ["2024"]])
def test_parse_timestamp_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_for_aggs_combines_per_aggregation():
    a = {"min": 1, "avg": 5, "max": 9}
    b = {"min": 0, "avg": 2, "max": 4}

    assert for_aggs([a, b], lambda x, y: x + y) == {"min": 1, "avg": 7, "max": 13}


def test_for_aggs_uses_first_signal_aggs():
    assert for_aggs([{"avg": 1}, {"avg": 2, "max": 3}], max) == {"avg": 2}


def test_for_aggs_empty():
    assert for_aggs([], sum) == {}
