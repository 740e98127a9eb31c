"""
IVIS signal data access

Batched, coalescing access to time-indexed signal sets for dashboard consumers.
"""
__version__ = "1.0.0"
