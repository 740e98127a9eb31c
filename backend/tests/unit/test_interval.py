"""Unit tests for AbsoluteInterval."""
import pytest
from datetime import datetime, timedelta, timezone
from pydantic import ValidationError

from ivis_data.models.interval import AbsoluteInterval, EPOCH


T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_zero_step_fetches_docs():
    interval = AbsoluteInterval(T0, T0 + timedelta(hours=1))

    assert interval.fetch_docs is True
    assert interval.phase_offset == timedelta(0)
    assert interval.duration == timedelta(hours=1)


def test_positive_step_fetches_aggregations():
    interval = AbsoluteInterval(T0, T0 + timedelta(hours=1), timedelta(minutes=5))

    assert interval.fetch_docs is False


def test_keyword_construction():
    interval = AbsoluteInterval(
        start=T0, end=T0 + timedelta(hours=1), aggregation_interval=timedelta(seconds=30)
    )

    assert interval.aggregation_interval == timedelta(seconds=30)


def test_naive_datetimes_are_utc():
    interval = AbsoluteInterval(datetime(2024, 3, 1, 12, 0), datetime(2024, 3, 1, 13, 0))

    assert interval.start == T0
    assert interval.start.tzinfo is not None


def test_negative_step_rejected():
    with pytest.raises(ValidationError):
        AbsoluteInterval(T0, T0 + timedelta(hours=1), timedelta(seconds=-1))


def test_zero_width_window_allowed():
    interval = AbsoluteInterval(T0, T0)

    assert interval.duration == timedelta(0)


def test_phase_offset_relative_to_epoch():
    step = timedelta(minutes=7)
    start = T0 + timedelta(seconds=45)

    interval = AbsoluteInterval(start, start + timedelta(hours=1), step)

    assert interval.phase_offset == (start - EPOCH) % step
    assert timedelta(0) <= interval.phase_offset < step


@pytest.mark.parametrize("k", [-10, -1, 0, 1, 3, 1000])
def test_phase_offset_invariant_under_whole_step_shifts(k):
    step = timedelta(seconds=40)
    interval = AbsoluteInterval(T0 + timedelta(seconds=13), T0 + timedelta(hours=2), step)

    assert interval.shifted(k * step).phase_offset == interval.phase_offset


def test_shift_by_partial_step_changes_offset():
    step = timedelta(minutes=1)
    interval = AbsoluteInterval(T0, T0 + timedelta(hours=1), step)

    assert interval.shifted(timedelta(seconds=20)).phase_offset == timedelta(seconds=20)


def test_intervals_are_comparable_and_hashable():
    a = AbsoluteInterval(T0, T0 + timedelta(hours=1), timedelta(minutes=1))
    b = AbsoluteInterval(T0, T0 + timedelta(hours=1), timedelta(minutes=1))

    assert a == b
    assert hash(a) == hash(b)
    assert a != a.with_aggregation(timedelta(minutes=5))
