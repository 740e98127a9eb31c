"""Data access helpers

Timestamp / duration wire formatting and the for_aggs combinator used by
generated signals.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Union


def for_aggs(signals: List[Dict[str, Any]], fn: Callable[..., Any]) -> Dict[str, Any]:
    """Combine several signals aggregation by aggregation.

    The aggregation names are taken from the first signal. Typical use inside
    a GenerateSignal:

        GenerateSignal(lambda ts, data: for_aggs([data["a"], data["b"]], lambda a, b: a - b))

    Args:
        signals: Per-signal {agg: value} maps
        fn: Called with one value per signal for each aggregation

    Returns:
        {agg: fn(*values)}
    """
    if not signals:
        return {}

    result = {}
    for agg in signals[0]:
        result[agg] = fn(*(sig.get(agg) for sig in signals))
    return result


def format_timestamp(ts: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and Z suffix (2024-01-01T00:00:00.000Z)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Union[str, int, float, datetime]) -> datetime:
    """Parse a timestamp from a response row.

    Accepts ISO-8601 strings (with or without Z), epoch milliseconds and
    datetimes. Always returns an aware UTC datetime.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        ts = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str):
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Not a timestamp: {value!r}")

    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_duration(duration: timedelta) -> str:
    """ISO-8601 duration string: 1 minute -> PT1M, 26 hours -> P1DT2H, 0 -> P0D.

    Millisecond precision; larger units are days (no months/years).
    """
    total_ms = duration // timedelta(milliseconds=1)
    if total_ms < 0:
        raise ValueError("Negative durations are not supported")
    if total_ms == 0:
        return "P0D"

    days, rem = divmod(total_ms, 86_400_000)
    hours, rem = divmod(rem, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds, millis = divmod(rem, 1000)

    out = "P"
    if days:
        out += f"{days}D"

    time_part = ""
    if hours:
        time_part += f"{hours}H"
    if minutes:
        time_part += f"{minutes}M"
    if seconds or millis:
        if millis:
            time_part += f"{seconds}.{millis:03d}".rstrip("0") + "S"
        else:
            time_part += f"{seconds}S"

    if time_part:
        out += "T" + time_part
    return out
