"""Data Providers

Headless counterparts of dashboard data components: they track the
interval a view is showing, re-fetch through their own session when it
changes and hand fresh data to a render callback.
"""
from typing import Any, Callable, Dict, Optional

from ivis_data.core.enums import DataPointType
from ivis_data.logger import logger
from ivis_data.models.interval import AbsoluteInterval
from ivis_data.models.results import FetchResult
from ivis_data.models.signals import SignalSets


IntervalFn = Callable[[AbsoluteInterval], AbsoluteInterval]
RenderFn = Callable[[Dict[str, Any]], Any]


def _identity(interval: AbsoluteInterval) -> AbsoluteInterval:
    return interval


class TimeBasedDataProvider:
    """Fetch signal sets for the current interval and render them.

    Only the latest requested interval is ever rendered; responses for
    intervals that were superseded while in flight are dropped by the
    session.
    """

    def __init__(
        self,
        data_access,
        signal_sets: SignalSets,
        render_fun: RenderFn,
        interval_fun: Optional[IntervalFn] = None
    ):
        """Initialize provider.

        Args:
            data_access: Shared TimeBasedDataAccess
            signal_sets: What to fetch
            render_fun: Called with {signal set id: data} after each fresh fetch
            interval_fun: Maps the view interval to the fetched interval (default: identity)
        """
        self.signal_sets = signal_sets
        self.render_fun = render_fun
        self.interval_fun = interval_fun or _identity

        self._session = data_access.create_session()
        self.interval: Optional[AbsoluteInterval] = None
        self.signal_sets_data: Optional[Dict[str, Any]] = None

    async def set_interval(self, interval: AbsoluteInterval) -> bool:
        """Fetch data for a new view interval.

        Returns:
            True if new data was rendered, False if the interval was unchanged
            or the result was superseded by a later call

        Raises:
            TransportError: If the fetch failed
        """
        if self.interval is not None and interval == self.interval:
            return False

        self.interval = interval
        return await self._fetch(interval)

    async def refresh(self) -> bool:
        """Re-fetch the current interval."""
        if self.interval is None:
            return False
        return await self._fetch(self.interval)

    async def _fetch(self, interval: AbsoluteInterval) -> bool:
        result = await self._session.fetch(self.signal_sets, self.interval_fun(interval))
        if result is None:
            return False

        self.signal_sets_data = self.transform(result)
        self.render_fun(self.signal_sets_data)
        return True

    def transform(self, result: Dict[str, FetchResult]) -> Dict[str, Any]:
        """Hook for subclasses to reshape fetched data before rendering."""
        return result

    def render(self) -> Any:
        """Render the last fetched data, or None if nothing was loaded yet."""
        if self.signal_sets_data is None:
            return None
        return self.render_fun(self.signal_sets_data)


def latest_interval(interval: AbsoluteInterval) -> AbsoluteInterval:
    """Zero-width docs window at the end of interval; its prev is the latest point."""
    return AbsoluteInterval(interval.end, interval.end)


class LatestDataPointProvider(TimeBasedDataProvider):
    """Provide the single latest record of each signal set.

    Renders {signal set id: values of the last record before interval.end}
    (None for signal sets without data).
    """

    def __init__(
        self,
        data_access,
        signal_sets: SignalSets,
        render_fun: RenderFn,
        point_type: DataPointType = DataPointType.LATEST
    ):
        if point_type != DataPointType.LATEST:
            raise ValueError(f"Unsupported data point type: {point_type}")

        super().__init__(data_access, signal_sets, render_fun, interval_fun=latest_interval)
        self.point_type = point_type

    def transform(self, result: Dict[str, FetchResult]) -> Dict[str, Any]:
        points = {}
        for sig_set_cid, fetch_result in result.items():
            points[sig_set_cid] = fetch_result.prev.values if fetch_result.prev else None
        logger.debug(f"Latest data points for {list(points)}")
        return points
