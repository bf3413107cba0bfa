"""Bounded ring buffer queue with drop accounting."""

from __future__ import annotations

import collections
import threading
from typing import Callable, Deque, Dict, List, Mapping, Optional


class RingBufferQueue:
    """Thread-safe queue dropping oldest entries when full."""

    def __init__(
        self,
        capacity: int,
        *,
        on_drop: Callable[[Mapping[str, object]], None] | None = None,
    ) -> None:
        """Initialize the queue with a given capacity."""

        if capacity <= 0:
            raise ValueError("Queue capacity must be positive")

        self._capacity = capacity
        self._items: Deque[Mapping[str, object]] = collections.deque()
        self._lock = threading.RLock()
        self._dropped = 0
        self._on_drop = on_drop

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def dropped(self) -> int:
        """Get the number of dropped items."""

        with self._lock:
            return self._dropped

    def size(self) -> int:
        """Get the size of the queue."""

        with self._lock:
            return len(self._items)

    def put(self, item: Mapping[str, object]) -> Optional[Mapping[str, object]]:
        """Add an item, returning the evicted item when the queue was full."""

        with self._lock:
            dropped_item: Optional[Mapping[str, object]] = None

            if len(self._items) >= self._capacity:
                dropped_item = self._items.popleft()
                self._dropped += 1

            self._items.append(item)

        if dropped_item is not None and self._on_drop is not None:
            self._on_drop(dropped_item)

        return dropped_item

    def drain(self, max_items: int | None = None) -> List[Mapping[str, object]]:
        """Drain up to ``max_items`` records (all of them when omitted)."""

        with self._lock:
            batch: List[Mapping[str, object]] = []
            limit = len(self._items) if max_items is None else max_items

            while self._items and len(batch) < limit:
                batch.append(self._items.popleft())

            return batch

    def drop_event(self, dropped: Mapping[str, object]) -> Dict[str, object]:
        """Build metadata describing a drop event."""

        with self._lock:
            drop_count = self._dropped

        return {
            "drop_reason": "queue_full",
            "drop_count": drop_count,
            "dropped_level": dropped.get("level"),
            "dropped_component": dropped.get("component"),
        }
