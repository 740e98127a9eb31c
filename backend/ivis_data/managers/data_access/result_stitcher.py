"""Result Stitcher

Rebuilds per signal set prev / main / next records from the flat batch
response and applies client-side derived signals.
"""
from typing import Any, Dict, List, Optional, Sequence

from ivis_data.config import settings
from ivis_data.core.enums import SignalKind
from ivis_data.core.exceptions import ResponseFormatError
from ivis_data.managers.data_access.query_builder import QUERIES_PER_SIGNAL_SET
from ivis_data.managers.data_access.utils import parse_timestamp
from ivis_data.models.results import FetchResult, TimedRecord
from ivis_data.models.signals import SignalSetRequest, SignalSets


class ResultStitcher:
    """Reshape a positional batch response into FetchResults.

    Signal set i of a request owns response entries
    start_idx + 3*i (prev), +1 (main), +2 (next).
    """

    def __init__(self, default_ts_signal: Optional[str] = None):
        """
        Args:
            default_ts_signal: Timestamp field for signal sets that name none
                (default: settings.DATA_ACCESS.default_ts_signal)
        """
        self.default_ts_signal = default_ts_signal or settings.DATA_ACCESS.default_ts_signal

    def stitch(
        self,
        response: Sequence[Dict[str, Any]],
        start_idx: int,
        signal_sets: SignalSets,
        fetch_docs: bool
    ) -> Dict[str, FetchResult]:
        """Build one FetchResult per signal set, in request order.

        Raises:
            ResponseFormatError: If an owned slot is missing or malformed
        """
        needed = start_idx + QUERIES_PER_SIGNAL_SET * len(signal_sets)
        if len(response) < needed:
            raise ResponseFormatError(
                f"Response has {len(response)} entries, need {needed}"
            )

        result: Dict[str, FetchResult] = {}
        idx = start_idx
        for sig_set_cid, signal_set in signal_sets.items():
            prev_res, main_res, next_res = response[idx:idx + QUERIES_PER_SIGNAL_SET]

            try:
                if fetch_docs:
                    fetch_result = self._from_docs(signal_set, prev_res, main_res, next_res)
                else:
                    fetch_result = self._from_aggs(prev_res, main_res, next_res)
            except (KeyError, IndexError, TypeError, ValueError) as exc:
                raise ResponseFormatError(
                    f"Malformed response for signal set '{sig_set_cid}': {exc!r}"
                ) from exc

            self.apply_derived(signal_set, fetch_result)

            result[sig_set_cid] = fetch_result
            idx += QUERIES_PER_SIGNAL_SET

        return result

    def _from_docs(
        self,
        signal_set: SignalSetRequest,
        prev_res: Dict[str, Any],
        main_res: Dict[str, Any],
        next_res: Dict[str, Any]
    ) -> FetchResult:
        ts_sig = signal_set.ts_signal or self.default_ts_signal
        fetch_result = FetchResult()

        prev_docs = prev_res["docs"]
        if prev_docs:
            fetch_result.prev = self.record_from_doc(signal_set, ts_sig, prev_docs[0])

        for doc in main_res["docs"]:
            fetch_result.main.append(self.record_from_doc(signal_set, ts_sig, doc))

        next_docs = next_res["docs"]
        if next_docs:
            fetch_result.next = self.record_from_doc(signal_set, ts_sig, next_docs[0])

        return fetch_result

    def _from_aggs(
        self,
        prev_res: Dict[str, Any],
        main_res: Dict[str, Any],
        next_res: Dict[str, Any]
    ) -> FetchResult:
        fetch_result = FetchResult()

        prev_buckets = prev_res["aggs"][0]
        if prev_buckets:
            fetch_result.prev = self.record_from_bucket(prev_buckets[0])

        for bucket in main_res["aggs"][0]:
            fetch_result.main.append(self.record_from_bucket(bucket))

        next_buckets = next_res["aggs"][0]
        if next_buckets:
            fetch_result.next = self.record_from_bucket(next_buckets[0])

        return fetch_result

    @staticmethod
    def record_from_doc(signal_set: SignalSetRequest, ts_sig: str, doc: Dict[str, Any]) -> TimedRecord:
        """Project a raw document into {signal: {agg: value}}.

        A document has one natural value per signal; it is replicated under
        every requested aggregation name.
        """
        values: Dict[str, Any] = {}
        for sig_cid, spec in signal_set.fetched_signals().items():
            doc_value = doc.get(sig_cid)
            values[sig_cid] = {agg: doc_value for agg in spec.wire_aggs}

        return TimedRecord(timestamp=parse_timestamp(doc[ts_sig]), values=values)

    @staticmethod
    def record_from_bucket(bucket: Dict[str, Any]) -> TimedRecord:
        values = {
            sig_cid: dict(aggs) if isinstance(aggs, dict) else aggs
            for sig_cid, aggs in (bucket.get("values") or {}).items()
        }
        return TimedRecord(timestamp=parse_timestamp(bucket["key"]), values=values)

    @staticmethod
    def apply_derived(signal_set: SignalSetRequest, fetch_result: FetchResult) -> None:
        """Compute Generate / Mutate signals in declaration order.

        Runs after every fetched value of a record exists, so a mutate sees its
        own raw value and a generate sees siblings resolved before it.
        """
        derived = signal_set.derived_signals()
        if not derived:
            return

        records: List[TimedRecord] = fetch_result.records()

        for sig_cid, spec in derived.items():
            for record in records:
                if spec.kind == SignalKind.GENERATE:
                    record.values[sig_cid] = spec.generate(record.timestamp, record.values)
                elif spec.kind == SignalKind.MUTATE:
                    record.values[sig_cid] = spec.mutate(
                        record.values.get(sig_cid), record.timestamp, record.values
                    )

