"""Pytest configuration and fixtures for data access tests."""
import pytest

from ivis_data.managers.data_access import FetchScheduler, TimeBasedDataAccess

from signal_fakes import RecordingTransport


@pytest.fixture
def transport():
    """Recording transport answering with empty results."""
    return RecordingTransport()


@pytest.fixture
def held_transport():
    """Recording transport whose calls complete only when released."""
    return RecordingTransport(hold=True)


@pytest.fixture
def scheduler(transport):
    return FetchScheduler(transport, endpoint="rest/signals-query", flush_delay=0)


@pytest.fixture
def data_access(scheduler):
    """Fresh TimeBasedDataAccess per test."""
    return TimeBasedDataAccess(scheduler=scheduler, default_ts_signal="ts")
