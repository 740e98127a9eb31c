"""
Time Based Data Access API

Entry point for fetching signal sets over an absolute interval. Requests
from all consumers sharing one TimeBasedDataAccess are coalesced into one
network call per event loop iteration.
"""
from typing import Dict, Optional

from ivis_data.config import settings
from ivis_data.logger import logger
from ivis_data.managers.data_access.fetch_scheduler import FetchScheduler, SignalsTransport
from ivis_data.managers.data_access.query_builder import QueryBuilder
from ivis_data.managers.data_access.result_stitcher import ResultStitcher
from ivis_data.models.interval import AbsoluteInterval
from ivis_data.models.results import FetchResult
from ivis_data.models.signals import SignalSets


class TimeBasedDataAccess:
    """Batched access to time-indexed signal sets.

    Construct one per application (or per test) and share it between all
    consumers; sharing is what makes coalescing possible.

    Example:
        async with TimeBasedDataAccess() as data_access:
            session = data_access.create_session()
            data = await session.fetch(signal_sets, interval)
    """

    def __init__(
        self,
        client: Optional[SignalsTransport] = None,
        scheduler: Optional[FetchScheduler] = None,
        default_ts_signal: Optional[str] = None
    ):
        """Initialize data access.

        Args:
            client: Transport used when no scheduler is given (default: new SignalsClient)
            scheduler: Pre-built FetchScheduler (takes precedence over client)
            default_ts_signal: Timestamp field for signal sets that name none
        """
        self._owned_client = None
        if scheduler is None:
            if client is None:
                from ivis_data.integrations.signals_client import SignalsClient
                client = SignalsClient()
                self._owned_client = client
            scheduler = FetchScheduler(client)

        ts_signal = default_ts_signal or settings.DATA_ACCESS.default_ts_signal
        self.scheduler = scheduler
        self.query_builder = QueryBuilder(default_ts_signal=ts_signal)
        self.result_stitcher = ResultStitcher(default_ts_signal=ts_signal)

        logger.debug(f"TimeBasedDataAccess initialized (endpoint={scheduler.endpoint})")

    async def get_signal_sets(
        self,
        signal_sets: SignalSets,
        interval: AbsoluteInterval
    ) -> Dict[str, FetchResult]:
        """Fetch prev / main / next records for every requested signal set.

        Args:
            signal_sets: signal set id -> SignalSetRequest
            interval: Window and aggregation step

        Returns:
            signal set id -> FetchResult, in request order

        Raises:
            TransportError: If the batch carrying this request failed
        """
        if not signal_sets:
            return {}

        queries = self.query_builder.build(signal_sets, interval)
        start_idx, batch = self.scheduler.enqueue(queries)

        response = await self.scheduler.wait(batch)

        return self.result_stitcher.stitch(
            response, start_idx, signal_sets, fetch_docs=interval.fetch_docs
        )

    def create_session(self) -> "DataAccessSession":
        from ivis_data.managers.data_access.session import DataAccessSession
        return DataAccessSession(self)

    async def aclose(self) -> None:
        """Wait for in-flight batches, then close the client if we created it."""
        await self.scheduler.aclose()
        if self._owned_client is not None:
            await self._owned_client.aclose()

    async def __aenter__(self) -> "TimeBasedDataAccess":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
