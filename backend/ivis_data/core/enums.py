"""
Core enumerations used throughout signal data access.

These fundamental enums are used by multiple components and should be
imported from here (single source of truth).
"""

from enum import Enum


class SignalKind(Enum):
    """
    How a requested signal obtains its value.

    Values:
        RAW: Value fetched from the server as-is
        MUTATE: Value fetched, then transformed client-side
        GENERATE: Value computed client-side only (nothing fetched)
    """
    RAW = "raw"
    MUTATE = "mutate"
    GENERATE = "generate"


class QueryMode(Enum):
    """
    Query mode of a descriptor.

    Values:
        DOCS: Individual stored documents
        AGGS: Time-bucketed aggregates
    """
    DOCS = "docs"
    AGGS = "aggs"


class QuerySlot(Enum):
    """Position of a descriptor within its signal set's triple."""
    PREV = "prev"
    MAIN = "main"
    NEXT = "next"


class SortOrder(str, Enum):
    """Sort direction on the wire."""
    ASC = "asc"
    DESC = "desc"


class DataPointType(Enum):
    """Single data point selection for point providers."""
    LATEST = 0
