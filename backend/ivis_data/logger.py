"""
Loguru logger configuration with runtime level control and deduplication
"""
from loguru import logger
import sys
import time
import threading
from pathlib import Path
from collections import OrderedDict
from typing import Any, Dict, Tuple
from ivis_data.config import settings


VALID_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LogDeduplicationFilter:
    """Drop repeats of a log call site within a short window.

    A record is suppressed when the same file and line logged less than
    time_threshold_seconds ago and is still among the last max_history
    call sites seen. Records at or above min_level_exempt always pass, so
    consecutive batch failures each reach the console.

    Batch flushes happen once per loop iteration while a dashboard pans, so
    the per-flush debug lines would otherwise flood the log file.

    Example:
        12:00:00.001 | DEBUG | fetch_scheduler:_flush:152 - Flushing batch #41 (6 queries)
        12:00:00.016 | DEBUG | fetch_scheduler:_flush:152 - Flushing batch #42 (3 queries)  <- Suppressed
        12:00:00.020 | ERROR | fetch_scheduler:_execute:174 - Batch #42 failed: ...        <- Allowed
        12:00:00.031 | ERROR | fetch_scheduler:_execute:174 - Batch #43 failed: ...        <- Allowed
    """

    def __init__(
        self,
        max_history: int = 5,
        time_threshold_seconds: float = 1.0,
        min_level_exempt: str = "ERROR"
    ):
        self.max_history = max_history
        self.time_threshold = time_threshold_seconds
        self.exempt_level_no = logger.level(min_level_exempt).no
        # (file path, line) -> monotonic time it was last let through
        self._last_seen: "OrderedDict[Tuple[str, int], float]" = OrderedDict()
        # File sink is enqueued, so records may be filtered off the loop thread
        self._lock = threading.Lock()

    def __call__(self, record: Dict[str, Any]) -> bool:
        """Return True to let the record through."""
        if record["level"].no >= self.exempt_level_no:
            return True

        site = (record["file"].path, record["line"])
        now = time.monotonic()

        with self._lock:
            seen_at = self._last_seen.get(site)
            if seen_at is not None and now - seen_at < self.time_threshold:
                return False

            self._last_seen[site] = now
            self._last_seen.move_to_end(site)
            while len(self._last_seen) > self.max_history:
                self._last_seen.popitem(last=False)
            return True


class LoggerManager:
    """Manages application logging with runtime level control"""

    def __init__(self):
        self.current_level = settings.LOGGER.default_level
        self.file_enabled = settings.LOGGER.file_enabled
        self.log_file_path = Path(settings.LOGGER.file_path)
        self.log_rotation = settings.LOGGER.rotation
        self.log_retention = settings.LOGGER.retention

        self.dedup_filter = None
        if settings.LOGGER.filter_enabled:
            self.dedup_filter = LogDeduplicationFilter(
                max_history=settings.LOGGER.filter_max_history,
                time_threshold_seconds=settings.LOGGER.filter_time_threshold_seconds
            )

        self.setup_logger()

    def setup_logger(self):
        """Configure logger with console and file handlers"""
        logger.remove()

        # Console handler: only ERROR and above so CLI output stays clean
        logger.add(
            sys.stderr,
            level="ERROR",
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            colorize=True,
            backtrace=True,
            diagnose=False,
            filter=self.dedup_filter
        )

        if self.file_enabled:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)

            # File handler with rotation and retention
            logger.add(
                str(self.log_file_path),
                level=self.current_level,
                format=(
                    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                    "{level: <8} | "
                    "{name}:{function}:{line} - "
                    "{message}"
                ),
                rotation=self.log_rotation,
                retention=self.log_retention,
                compression="zip",
                backtrace=True,
                diagnose=False,
                enqueue=True,
                filter=self.dedup_filter
            )

        logger.debug(f"Logger initialized with level: {self.current_level}")

    def set_level(self, level: str) -> str:
        """
        Change log level at runtime

        Args:
            level: New log level (TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL)

        Returns:
            The new log level

        Raises:
            ValueError: If level is invalid
        """
        level_upper = level.upper()

        if level_upper not in VALID_LEVELS:
            raise ValueError(f"Invalid level '{level}'. Choose from: {', '.join(VALID_LEVELS)}")

        old_level = self.current_level
        self.current_level = level_upper

        self.setup_logger()

        logger.info(f"Log level changed from {old_level} to {level_upper}")
        return self.current_level

    def get_level(self) -> str:
        """Get current log level"""
        return self.current_level

    def get_available_levels(self) -> list[str]:
        """Get list of available log levels"""
        return list(VALID_LEVELS)


# Global logger manager instance
logger_manager = LoggerManager()

# Export logger for use throughout the application
__all__ = ["logger", "logger_manager", "LogDeduplicationFilter", "LoggerManager"]
