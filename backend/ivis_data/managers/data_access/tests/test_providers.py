"""Unit tests for headless data providers."""
import asyncio
import pytest
from datetime import timedelta

from ivis_data.core.enums import DataPointType
from ivis_data.managers.data_access import (
    FetchScheduler,
    LatestDataPointProvider,
    TimeBasedDataAccess,
    TimeBasedDataProvider,
)
from ivis_data.models.interval import AbsoluteInterval
from ivis_data.models.signals import RawSignal, SignalSetRequest

from signal_fakes import InMemorySignalsServer, RecordingTransport, T0, make_docs


SIGNAL_SETS = {"temps": SignalSetRequest(signals={"value": RawSignal(["avg"])})}


@pytest.fixture
def server():
    return InMemorySignalsServer({"temps": make_docs(30, value=lambda i: float(i))})


@pytest.fixture
def transport(server):
    return RecordingTransport(handler=server)


@pytest.fixture
def data_access(transport):
    return TimeBasedDataAccess(scheduler=FetchScheduler(transport, flush_delay=0))


@pytest.mark.asyncio
async def test_provider_renders_fetched_data(data_access):
    rendered = []
    provider = TimeBasedDataProvider(data_access, SIGNAL_SETS, rendered.append)

    assert provider.render() is None

    updated = await provider.set_interval(AbsoluteInterval(T0, T0 + timedelta(minutes=3)))

    assert updated is True
    assert len(rendered) == 1
    assert [r.values["value"]["avg"] for r in rendered[0]["temps"].main] == [0.0, 1.0, 2.0]
    assert provider.signal_sets_data is rendered[0]


@pytest.mark.asyncio
async def test_provider_skips_unchanged_interval(data_access, transport):
    provider = TimeBasedDataProvider(data_access, SIGNAL_SETS, lambda data: None)
    interval = AbsoluteInterval(T0, T0 + timedelta(minutes=3))

    assert await provider.set_interval(interval) is True
    assert await provider.set_interval(AbsoluteInterval(T0, T0 + timedelta(minutes=3))) is False
    assert len(transport.calls) == 1

    assert await provider.refresh() is True
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_provider_applies_interval_fun(data_access, transport):
    widen = lambda interval: AbsoluteInterval(interval.start - timedelta(minutes=1), interval.end)
    provider = TimeBasedDataProvider(data_access, SIGNAL_SETS, lambda data: None, interval_fun=widen)

    await provider.set_interval(AbsoluteInterval(T0 + timedelta(minutes=5), T0 + timedelta(minutes=6)))

    main = provider.signal_sets_data["temps"].main
    assert [r.values["value"]["avg"] for r in main] == [4.0, 5.0]


@pytest.mark.asyncio
async def test_provider_renders_only_latest_interval(server):
    transport = RecordingTransport(handler=server, hold=True)
    data_access = TimeBasedDataAccess(scheduler=FetchScheduler(transport, flush_delay=0))
    rendered = []
    provider = TimeBasedDataProvider(data_access, SIGNAL_SETS, rendered.append)

    first = asyncio.create_task(provider.set_interval(AbsoluteInterval(T0, T0 + timedelta(minutes=1))))
    await transport.wait_for_calls(1)
    second = asyncio.create_task(
        provider.set_interval(AbsoluteInterval(T0 + timedelta(minutes=10), T0 + timedelta(minutes=11)))
    )
    await transport.wait_for_calls(2)

    transport.release(1)
    transport.release(0)
    results = await asyncio.gather(first, second)

    assert results == [False, True]
    assert len(rendered) == 1
    assert rendered[0]["temps"].main[0].values["value"]["avg"] == 10.0


@pytest.mark.asyncio
async def test_latest_data_point_provider(data_access, transport):
    rendered = []
    provider = LatestDataPointProvider(data_access, SIGNAL_SETS, rendered.append)

    await provider.set_interval(AbsoluteInterval(T0, T0 + timedelta(minutes=12, seconds=30)))

    assert rendered == [{"temps": {"value": {"avg": 12.0}}}]
    # Zero-width docs window at the interval end
    main_query = transport.bodies[0][1]
    assert main_query["ranges"][0]["gte"] == main_query["ranges"][0]["lt"]
    assert "docs" in main_query


@pytest.mark.asyncio
async def test_latest_data_point_without_data(data_access):
    rendered = []
    provider = LatestDataPointProvider(data_access, SIGNAL_SETS, rendered.append)

    await provider.set_interval(AbsoluteInterval(T0 - timedelta(days=2), T0 - timedelta(days=1)))

    assert rendered == [{"temps": None}]


def test_latest_data_point_rejects_unknown_type(data_access):
    with pytest.raises(ValueError):
        LatestDataPointProvider(data_access, SIGNAL_SETS, lambda data: None, point_type="oldest")


def test_latest_data_point_default_type(data_access):
    provider = LatestDataPointProvider(data_access, SIGNAL_SETS, lambda data: None)
    assert provider.point_type == DataPointType.LATEST
