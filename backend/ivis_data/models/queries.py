"""
Wire models for the batched signals query endpoint

Field names are snake_case in Python and camelCase on the wire
(sig_set_cid -> sigSetCid, min_doc_count -> minDocCount).
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ivis_data.core.enums import QueryMode, QuerySlot, SortOrder


class WireModel(BaseModel):
    """Base for models serialized into the request body."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TimeRange(WireModel):
    """Range filter on one signal: gte <= value < lt (either bound optional)."""
    sig_cid: str
    gte: Optional[str] = None
    lt: Optional[str] = None


class SortSpec(WireModel):
    sig_cid: str
    order: SortOrder


class DocsQuery(WireModel):
    """Raw document projection."""
    signals: List[str]
    sort: Optional[List[SortSpec]] = None
    limit: Optional[int] = None


class AggsQuery(WireModel):
    """Date histogram over sig_cid.

    step and offset are ISO-8601 durations. min_doc_count=1 drops empty buckets.
    """
    sig_cid: str
    step: str
    offset: str
    min_doc_count: int = 1
    signals: Dict[str, List[str]]
    order: Optional[SortOrder] = None
    limit: Optional[int] = None


class QueryDescriptor(WireModel):
    """One entry of the batched request body.

    Exactly one of docs / aggs is set. `slot` is bookkeeping only and is
    never serialized.
    """
    sig_set_cid: str
    ranges: List[TimeRange]
    docs: Optional[DocsQuery] = None
    aggs: Optional[List[AggsQuery]] = None
    slot: QuerySlot = Field(default=QuerySlot.MAIN, exclude=True)

    @property
    def mode(self) -> QueryMode:
        return QueryMode.DOCS if self.docs is not None else QueryMode.AGGS
