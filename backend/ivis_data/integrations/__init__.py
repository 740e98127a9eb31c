"""
External API integrations
"""
from ivis_data.integrations.signals_client import SignalsClient

__all__ = [
    "SignalsClient",
]
