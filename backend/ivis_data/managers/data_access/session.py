"""Data Access Session

Per-consumer wrapper that only delivers the result of the most recent
request. Older requests still complete (and still share their batch with
other consumers); their results are dropped.
"""
from typing import Dict, Optional

from ivis_data.logger import logger
from ivis_data.models.interval import AbsoluteInterval
from ivis_data.models.results import FetchResult
from ivis_data.models.signals import SignalSets


class DataAccessSession:
    """Staleness filter around TimeBasedDataAccess.get_signal_sets."""

    def __init__(self, data_access):
        self._data_access = data_access
        self.request_no = 0

    async def fetch(
        self,
        signal_sets: SignalSets,
        interval: AbsoluteInterval
    ) -> Optional[Dict[str, FetchResult]]:
        """Fetch signal sets, or None if a newer fetch was started meanwhile.

        None means "no update": keep whatever was rendered before.
        """
        self.request_no += 1
        request_no = self.request_no

        result = await self._data_access.get_signal_sets(signal_sets, interval)

        if request_no == self.request_no:
            return result

        logger.debug(
            f"Discarding stale result of request {request_no} (latest is {self.request_no})"
        )
        return None
