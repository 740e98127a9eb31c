"""
Data models for signal requests, intervals, wire queries and results
"""
from ivis_data.models.interval import AbsoluteInterval, EPOCH
from ivis_data.models.signals import (
    RawSignal,
    MutateSignal,
    GenerateSignal,
    SignalSpec,
    SignalSetRequest,
    SignalSets,
)
from ivis_data.models.queries import (
    TimeRange,
    SortSpec,
    DocsQuery,
    AggsQuery,
    QueryDescriptor,
)
from ivis_data.models.results import TimedRecord, FetchResult

__all__ = [
    "AbsoluteInterval",
    "EPOCH",
    "RawSignal",
    "MutateSignal",
    "GenerateSignal",
    "SignalSpec",
    "SignalSetRequest",
    "SignalSets",
    "TimeRange",
    "SortSpec",
    "DocsQuery",
    "AggsQuery",
    "QueryDescriptor",
    "TimedRecord",
    "FetchResult",
]
