"""
Signal Data Access Module

Batched access to time-indexed signal sets for dashboard consumers.

Responsibilities:
- Build prev / main / next queries per signal set (docs or aggregations)
- Coalesce all queries issued in one loop iteration into one network call
- Stitch the flat response back into per-consumer results
- Apply client-side derived signals (mutate / generate)
- Drop results superseded by a newer request of the same consumer
"""

from ivis_data.managers.data_access.api import TimeBasedDataAccess
from ivis_data.managers.data_access.fetch_scheduler import FetchBatch, FetchScheduler
from ivis_data.managers.data_access.providers import LatestDataPointProvider, TimeBasedDataProvider
from ivis_data.managers.data_access.query_builder import QueryBuilder
from ivis_data.managers.data_access.result_stitcher import ResultStitcher
from ivis_data.managers.data_access.session import DataAccessSession
from ivis_data.managers.data_access.utils import for_aggs

__all__ = [
    'TimeBasedDataAccess',
    'FetchBatch',
    'FetchScheduler',
    'QueryBuilder',
    'ResultStitcher',
    'DataAccessSession',
    'TimeBasedDataProvider',
    'LatestDataPointProvider',
    'for_aggs',
]
