"""
Absolute time interval model
"""
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, field_validator


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class AbsoluteInterval(BaseModel):
    """Concrete [start, end) window plus an optional bucketing step.

    aggregation_interval == 0 selects raw documents, any positive step
    selects bucketed aggregates. end < start is not rejected here.
    """
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    aggregation_interval: timedelta = timedelta(0)

    def __init__(self, start=None, end=None, aggregation_interval=timedelta(0), **kwargs):
        # Positional form mirrors how callers think about windows: (start, end, step)
        super().__init__(start=start, end=end, aggregation_interval=aggregation_interval, **kwargs)

    @field_validator("start", "end")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("aggregation_interval")
    @classmethod
    def _non_negative_step(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("aggregation_interval must not be negative")
        return value

    @property
    def fetch_docs(self) -> bool:
        """True when raw documents are requested instead of buckets."""
        return self.aggregation_interval == timedelta(0)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def phase_offset(self) -> timedelta:
        """Bucket phase: (start - epoch) mod aggregation_interval.

        Keeps bucket boundaries anchored to the epoch so they do not move
        while the window pans.
        """
        if self.fetch_docs:
            return timedelta(0)
        return (self.start - EPOCH) % self.aggregation_interval

    def shifted(self, delta: timedelta) -> "AbsoluteInterval":
        """Same window and step moved by delta."""
        return AbsoluteInterval(self.start + delta, self.end + delta, self.aggregation_interval)

    def with_aggregation(self, aggregation_interval: timedelta) -> "AbsoluteInterval":
        return AbsoluteInterval(self.start, self.end, aggregation_interval)
