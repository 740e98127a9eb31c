"""
Custom exceptions for signal data access.

All custom exceptions should be defined here for easy discovery
and consistent error handling throughout the application.
"""
from typing import Optional


class DataAccessError(Exception):
    """Base exception for all signal data access errors."""
    pass


class ConfigurationError(DataAccessError):
    """Raised when there's an error in configuration."""
    pass


class TransportError(DataAccessError):
    """Raised when the batched signals query fails on the network or HTTP level.

    A transport failure rejects every consumer waiting on the same batch.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(TransportError):
    """Raised when the server answers with a body that cannot be correlated to the request."""
    pass
