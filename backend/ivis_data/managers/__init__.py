"""
Managers package
"""
from ivis_data.managers.data_access import TimeBasedDataAccess, DataAccessSession

__all__ = ['TimeBasedDataAccess', 'DataAccessSession']
