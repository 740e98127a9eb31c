"""
Per signal set fetch results
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class TimedRecord:
    """One document or bucket: timestamp plus values[signal][agg]."""
    timestamp: datetime
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FetchResult:
    """Records of one signal set for one window.

    prev: Last record strictly before the window (None if there is none)
    main: Records inside the window, chronological
    next: First record at or after the window end (None if there is none)
    """
    main: List[TimedRecord] = field(default_factory=list)
    prev: Optional[TimedRecord] = None
    next: Optional[TimedRecord] = None

    def records(self) -> List[TimedRecord]:
        """prev, main and next as one chronological list."""
        ordered = []
        if self.prev is not None:
            ordered.append(self.prev)
        ordered.extend(self.main)
        if self.next is not None:
            ordered.append(self.next)
        return ordered

    @property
    def is_empty(self) -> bool:
        return self.prev is None and self.next is None and not self.main
