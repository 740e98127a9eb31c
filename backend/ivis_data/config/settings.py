"""
Application configuration using pydantic-settings with nested structure
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path


# ============================================================================
# NESTED CONFIGURATION MODELS
# ============================================================================

# Get absolute path to .env file (backend directory)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BASE_DIR / ".env"


class LoggerConfig(BaseSettings):
    """Logger configuration settings."""
    default_level: str = "INFO"
    file_enabled: bool = True
    file_path: str = "./data/logs/ivis_data.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    filter_enabled: bool = True
    filter_max_history: int = 5
    filter_time_threshold_seconds: float = 1.0
    model_config = SettingsConfigDict(env_prefix="LOGGER__", extra="ignore")

    @field_validator("default_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class DataAccessConfig(BaseSettings):
    """Signal data access configuration.

    base_url: Root URL of the signals server
    signals_query_endpoint: Path of the batched query endpoint (relative to base_url)
    request_timeout_seconds: httpx timeout for one batched call
    flush_delay_seconds: 0 flushes on the next loop iteration, >0 waits that long
    default_ts_signal: Timestamp field used when a signal set does not name one
    """
    base_url: str = "http://127.0.0.1:8080"
    signals_query_endpoint: str = "rest/signals-query"
    request_timeout_seconds: float = 30.0
    flush_delay_seconds: float = 0.0
    default_ts_signal: str = "ts"
    model_config = SettingsConfigDict(env_prefix="DATA_ACCESS__", extra="ignore")

    @field_validator("flush_delay_seconds", "request_timeout_seconds")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be >= 0")
        return value


# ============================================================================
# MAIN SETTINGS CLASS
# ============================================================================

class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Configuration is organized into nested sections.
    Use double underscore (__) in env vars to access nested configs.

    Example:
        LOGGER__DEFAULT_LEVEL=DEBUG
        DATA_ACCESS__BASE_URL=https://ivis.example.org
        DATA_ACCESS__FLUSH_DELAY_SECONDS=0.05
    """

    # Application metadata
    APP_NAME: str = "IVIS Signal Data Access"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Nested configuration sections (constructed from environment)
    LOGGER: Optional[LoggerConfig] = None
    DATA_ACCESS: Optional[DataAccessConfig] = None

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Construct nested configs AFTER environment is loaded
        self.LOGGER = LoggerConfig()
        self.DATA_ACCESS = DataAccessConfig()

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        validate_default=True,
        env_prefix=""
    )


# Global settings instance
from dotenv import load_dotenv

# Load .env file into environment variables
if _ENV_FILE.exists():
    load_dotenv(str(_ENV_FILE), override=True)

settings = Settings()
