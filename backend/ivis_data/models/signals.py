"""
Signal request models

A consumer asks for a mapping of signal set id -> SignalSetRequest. Each
signal inside a set is one of three explicit kinds:

- RawSignal: aggregations fetched and delivered as-is
- MutateSignal: aggregations fetched, then passed through a transform
- GenerateSignal: computed from the record, nothing fetched

Example:
    signal_sets = {
        "temps": SignalSetRequest(
            signals={
                "value": RawSignal(["avg", "max"]),
                "value_f": MutateSignal(["avg"], lambda v, ts, data: {"avg": v["avg"] * 1.8 + 32}),
                "hour": GenerateSignal(lambda ts, data: ts.hour),
            },
        ),
    }
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from ivis_data.core.enums import SignalKind


# (raw_value, timestamp, record_values) -> value
MutateFn = Callable[[Any, datetime, Dict[str, Any]], Any]
# (timestamp, record_values) -> value
GenerateFn = Callable[[datetime, Dict[str, Any]], Any]


def _as_aggs(aggs: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    if isinstance(aggs, str):
        return (aggs,)
    return tuple(aggs)


@dataclass(frozen=True)
class RawSignal:
    """Signal whose aggregations are delivered unchanged."""
    aggs: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "aggs", _as_aggs(self.aggs))
        if not self.aggs:
            raise ValueError("RawSignal needs at least one aggregation")

    @property
    def kind(self) -> SignalKind:
        return SignalKind.RAW

    @property
    def wire_aggs(self) -> Tuple[str, ...]:
        return self.aggs


@dataclass(frozen=True)
class MutateSignal:
    """Signal fetched with `aggs`, then replaced by mutate(value, ts, record)."""
    aggs: Tuple[str, ...]
    mutate: MutateFn

    def __post_init__(self):
        object.__setattr__(self, "aggs", _as_aggs(self.aggs))
        if not self.aggs:
            raise ValueError("MutateSignal needs at least one aggregation")

    @property
    def kind(self) -> SignalKind:
        return SignalKind.MUTATE

    @property
    def wire_aggs(self) -> Tuple[str, ...]:
        return self.aggs


@dataclass(frozen=True)
class GenerateSignal:
    """Signal computed as generate(ts, record); never sent to the server."""
    generate: GenerateFn

    @property
    def kind(self) -> SignalKind:
        return SignalKind.GENERATE

    @property
    def wire_aggs(self) -> Tuple[str, ...]:
        return ()


SignalSpec = Union[RawSignal, MutateSignal, GenerateSignal]


@dataclass
class SignalSetRequest:
    """Signals requested from one signal set.

    Attributes:
        signals: signal id -> spec, in the order derived values are resolved
        ts_signal: Timestamp field of the set (None -> configured default)
    """
    signals: Dict[str, SignalSpec] = field(default_factory=dict)
    ts_signal: Optional[str] = None

    def fetched_signals(self) -> Dict[str, SignalSpec]:
        """Signals that have a wire request (Raw and Mutate)."""
        return {
            sig_cid: spec
            for sig_cid, spec in self.signals.items()
            if spec.kind != SignalKind.GENERATE
        }

    def derived_signals(self) -> Dict[str, SignalSpec]:
        """Signals that need client-side computation (Mutate and Generate)."""
        return {
            sig_cid: spec
            for sig_cid, spec in self.signals.items()
            if spec.kind != SignalKind.RAW
        }


SignalSets = Mapping[str, SignalSetRequest]
