"""
Core enums and exceptions
"""
from ivis_data.core.enums import SignalKind, QueryMode, QuerySlot, SortOrder, DataPointType
from ivis_data.core.exceptions import (
    DataAccessError,
    ConfigurationError,
    TransportError,
    ResponseFormatError,
)

__all__ = [
    "SignalKind",
    "QueryMode",
    "QuerySlot",
    "SortOrder",
    "DataPointType",
    "DataAccessError",
    "ConfigurationError",
    "TransportError",
    "ResponseFormatError",
]
