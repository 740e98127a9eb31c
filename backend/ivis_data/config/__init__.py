"""
Configuration module
"""
from ivis_data.config.settings import settings, Settings, LoggerConfig, DataAccessConfig

__all__ = [
    "settings",
    "Settings",
    "LoggerConfig",
    "DataAccessConfig",
]
