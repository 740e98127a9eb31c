"""
Query CLI Commands
Commands for fetching signal sets from a signals server
"""
import asyncio
from datetime import timedelta
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table

from ivis_data.integrations.signals_client import SignalsClient
from ivis_data.logger import logger
from ivis_data.managers.data_access import TimeBasedDataAccess
from ivis_data.managers.data_access.utils import format_timestamp, parse_timestamp
from ivis_data.models.interval import AbsoluteInterval
from ivis_data.models.results import FetchResult, TimedRecord
from ivis_data.models.signals import RawSignal, SignalSetRequest


console = Console()

DEFAULT_AGG = "avg"


def parse_signal_specs(specs: List[str]) -> Dict[str, RawSignal]:
    """Parse 'signal' / 'signal:agg1,agg2' command line specs.

    Examples:
        ["value"]              -> {"value": RawSignal(["avg"])}
        ["value:min,max", "x"] -> {"value": RawSignal(["min", "max"]), "x": RawSignal(["avg"])}
    """
    signals: Dict[str, RawSignal] = {}
    for spec in specs:
        name, _, aggs = spec.partition(":")
        name = name.strip()
        if not name:
            raise ValueError(f"Invalid signal spec: '{spec}'")
        agg_list = [agg.strip() for agg in aggs.split(",") if agg.strip()] or [DEFAULT_AGG]
        signals[name] = RawSignal(agg_list)
    return signals


def format_values(record: TimedRecord, signal: str) -> str:
    aggs = record.values.get(signal)
    if isinstance(aggs, dict):
        return ", ".join(f"{agg}={value}" for agg, value in aggs.items())
    return "" if aggs is None else str(aggs)


def build_result_table(sig_set_cid: str, fetch_result: FetchResult, signals: List[str]) -> Table:
    """Rich table with one row per record, prev and next marked."""
    table = Table(title=f"Signal set: {sig_set_cid}", show_header=True)
    table.add_column("Slot", style="cyan")
    table.add_column("Timestamp", style="green")
    for signal in signals:
        table.add_column(signal)

    rows = []
    if fetch_result.prev is not None:
        rows.append(("prev", fetch_result.prev))
    rows.extend(("main", record) for record in fetch_result.main)
    if fetch_result.next is not None:
        rows.append(("next", fetch_result.next))

    for slot, record in rows:
        table.add_row(
            slot,
            format_timestamp(record.timestamp),
            *(format_values(record, signal) for signal in signals)
        )

    return table


async def fetch_signal_set(
    sig_set_cid: str,
    request: SignalSetRequest,
    interval: AbsoluteInterval,
    base_url: Optional[str] = None
) -> Dict[str, FetchResult]:
    async with SignalsClient(base_url=base_url) as client:
        async with TimeBasedDataAccess(client=client) as data_access:
            return await data_access.get_signal_sets({sig_set_cid: request}, interval)


def query_command(
    sig_set_cid: str,
    signal_specs: List[str],
    start: str,
    end: str,
    step_seconds: float = 0.0,
    ts_signal: Optional[str] = None,
    base_url: Optional[str] = None
) -> Dict[str, FetchResult]:
    """Fetch one signal set and print it

    Usage:
        query temps value:avg,max --start 2024-01-01T00:00:00Z --end 2024-01-02T00:00:00Z
        query temps value --start ... --end ... --step 3600
    """
    signals = parse_signal_specs(signal_specs)
    interval = AbsoluteInterval(
        parse_timestamp(start),
        parse_timestamp(end),
        timedelta(seconds=step_seconds),
    )
    request = SignalSetRequest(signals=signals, ts_signal=ts_signal)

    logger.info(
        f"CLI query {sig_set_cid} {list(signals)} "
        f"[{format_timestamp(interval.start)}, {format_timestamp(interval.end)}) step={step_seconds}s"
    )

    result = asyncio.run(fetch_signal_set(sig_set_cid, request, interval, base_url))

    fetch_result = result[sig_set_cid]
    if fetch_result.is_empty:
        console.print(f"[yellow]No data for {sig_set_cid} in the requested window[/yellow]")
    else:
        console.print(build_result_table(sig_set_cid, fetch_result, list(signals)))

    return result
