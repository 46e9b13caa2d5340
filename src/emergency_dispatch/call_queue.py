from __future__ import annotations

import heapq
import itertools
import threading
from typing import List, Optional, Tuple

from emergency_dispatch.models import Call


class QueueFullError(Exception):
    """Raised when inserting into a call queue that has reached its capacity."""


def higher(a: Call, b: Call) -> bool:
    """True when ``a`` must be served before ``b``."""
    if a.severity != b.severity:
        return a.severity > b.severity
    return a.arrival < b.arrival


class CallQueue:
    """Incident calls ordered by severity (highest first), then arrival (earliest first).

    ``heapq`` is a min-heap, so entries are keyed on negated severity. The
    counter keeps entries totally ordered if two calls share an arrival
    number.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        self._heap: List[Tuple[int, int, int, Call]] = []
        self._counter = itertools.count()
        self._capacity = capacity
        self._lock = threading.Lock()

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    def insert(self, call: Call) -> None:
        with self._lock:
            if self._capacity is not None and len(self._heap) >= self._capacity:
                raise QueueFullError(f"call queue is full ({self._capacity} calls)")
            heapq.heappush(self._heap, (-call.severity, call.arrival, next(self._counter), call))

    def extract_max(self) -> Optional[Call]:
        with self._lock:
            if not self._heap:
                return None
            return heapq.heappop(self._heap)[-1]

    def peek(self) -> Optional[Call]:
        with self._lock:
            if not self._heap:
                return None
            return self._heap[0][-1]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
