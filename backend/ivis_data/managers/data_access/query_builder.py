"""Query Builder

Turns one consumer's {signal set -> signals} request plus an absolute
interval into the prev / main / next query descriptors sent to the server.
"""
from typing import Dict, List, Optional

from ivis_data.config import settings
from ivis_data.core.enums import QuerySlot, SignalKind, SortOrder
from ivis_data.logger import logger
from ivis_data.managers.data_access.utils import format_duration, format_timestamp
from ivis_data.models.interval import AbsoluteInterval
from ivis_data.models.queries import (
    AggsQuery,
    DocsQuery,
    QueryDescriptor,
    SortSpec,
    TimeRange,
)
from ivis_data.models.signals import SignalSetRequest, SignalSets


QUERIES_PER_SIGNAL_SET = 3


class QueryBuilder:
    """Build query descriptors for a batch of signal sets.

    For every signal set exactly three descriptors are produced, in order:
    - prev: last record strictly before interval.start (newest first, limit 1)
    - main: records in [start, end), chronological, unlimited
    - next: first record at or after interval.end (oldest first, limit 1)

    Docs mode (aggregation_interval == 0) projects plain document fields.
    Aggregation mode issues date histograms with step = aggregation_interval
    and offset = interval.phase_offset so buckets stay epoch-aligned.

    Example:
        builder = QueryBuilder()
        queries = builder.build(
            {"temps": SignalSetRequest(signals={"value": RawSignal(["avg"])})},
            AbsoluteInterval(t0, t1, timedelta(minutes=1)),
        )
        assert len(queries) == 3
    """

    def __init__(self, default_ts_signal: Optional[str] = None):
        self.default_ts_signal = default_ts_signal or settings.DATA_ACCESS.default_ts_signal

    def ts_signal_of(self, signal_set: SignalSetRequest) -> str:
        return signal_set.ts_signal or self.default_ts_signal

    def build(self, signal_sets: SignalSets, interval: AbsoluteInterval) -> List[QueryDescriptor]:
        """Build 3 descriptors per signal set, in signal_sets order."""
        queries: List[QueryDescriptor] = []

        for sig_set_cid, signal_set in signal_sets.items():
            queries.extend(self.build_signal_set(sig_set_cid, signal_set, interval))

        logger.debug(
            f"Built {len(queries)} queries for {len(signal_sets)} signal sets "
            f"(mode={'docs' if interval.fetch_docs else 'aggs'})"
        )
        return queries

    def build_signal_set(
        self,
        sig_set_cid: str,
        signal_set: SignalSetRequest,
        interval: AbsoluteInterval
    ) -> List[QueryDescriptor]:
        """Build the [prev, main, next] triple for one signal set."""
        ts_sig = self.ts_signal_of(signal_set)
        start = format_timestamp(interval.start)
        end = format_timestamp(interval.end)

        prev_qry = QueryDescriptor(
            sig_set_cid=sig_set_cid,
            ranges=[TimeRange(sig_cid=ts_sig, lt=start)],
            slot=QuerySlot.PREV,
        )
        main_qry = QueryDescriptor(
            sig_set_cid=sig_set_cid,
            ranges=[TimeRange(sig_cid=ts_sig, gte=start, lt=end)],
            slot=QuerySlot.MAIN,
        )
        next_qry = QueryDescriptor(
            sig_set_cid=sig_set_cid,
            ranges=[TimeRange(sig_cid=ts_sig, gte=end)],
            slot=QuerySlot.NEXT,
        )

        if interval.fetch_docs:
            signals = [ts_sig, *signal_set.fetched_signals().keys()]

            prev_qry.docs = DocsQuery(
                signals=signals,
                sort=[SortSpec(sig_cid=ts_sig, order=SortOrder.DESC)],
                limit=1,
            )
            main_qry.docs = DocsQuery(signals=signals)
            next_qry.docs = DocsQuery(
                signals=signals,
                sort=[SortSpec(sig_cid=ts_sig, order=SortOrder.ASC)],
                limit=1,
            )

        else:
            sigs = self.aggregation_signals(signal_set)
            step = format_duration(interval.aggregation_interval)
            offset = format_duration(interval.phase_offset)

            def histogram(order: Optional[SortOrder] = None, limit: Optional[int] = None) -> AggsQuery:
                return AggsQuery(
                    sig_cid=ts_sig,
                    step=step,
                    offset=offset,
                    min_doc_count=1,
                    signals=sigs,
                    order=order,
                    limit=limit,
                )

            prev_qry.aggs = [histogram(order=SortOrder.DESC, limit=1)]
            main_qry.aggs = [histogram()]
            next_qry.aggs = [histogram(order=SortOrder.ASC, limit=1)]

        return [prev_qry, main_qry, next_qry]

    @staticmethod
    def aggregation_signals(signal_set: SignalSetRequest) -> Dict[str, List[str]]:
        """Per-signal aggregation lists for a histogram request.

        Raw and Mutate signals send their aggregations; Generate signals are
        purely client-side and are left out.
        """
        sigs: Dict[str, List[str]] = {}
        for sig_cid, spec in signal_set.signals.items():
            if spec.kind == SignalKind.RAW:
                sigs[sig_cid] = list(spec.aggs)
            elif spec.kind == SignalKind.MUTATE:
                sigs[sig_cid] = list(spec.aggs)
            elif spec.kind == SignalKind.GENERATE:
                continue
            else:
                raise ValueError(f"Unknown signal kind for '{sig_cid}': {spec.kind}")
        return sigs
