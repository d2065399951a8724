"""Breadth-first and depth-first work queues for the crawler."""

from __future__ import annotations

import heapq
import itertools
import threading
from enum import Enum
from typing import Any


class QueueType(Enum):
    BREADTH_FIRST = "breadth-first"
    DEPTH_FIRST = "depth-first"


class PriorityQueue:
    """Queue that pops the lowest priority first."""

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, Any]] = []
        self._counter = itertools.count()

    def push(self, value: Any, priority: int) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), value))

    def pop(self) -> Any:
        """Pop the lowest-priority value, or None when empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def __len__(self) -> int:
        return len(self._heap)


class Stack:
    """Last-in first-out stack."""

    def __init__(self) -> None:
        self._items: list[Any] = []

    def push(self, value: Any) -> None:
        self._items.append(value)

    def pop(self) -> Any:
        """Pop the most recent value, or None when empty."""
        return self._items.pop() if self._items else None

    def __len__(self) -> int:
        return len(self._items)


class VarietyQueue:
    """Thread-safe queue that is breadth-first or depth-first.

    Unknown strategies fall back to depth-first.
    """

    def __init__(self, strategy: str = "") -> None:
        try:
            self.queue_type = QueueType(strategy)
        except ValueError:
            self.queue_type = QueueType.DEPTH_FIRST
        self._lock = threading.Lock()
        self._store: PriorityQueue | Stack = (
            PriorityQueue() if self.queue_type is QueueType.BREADTH_FIRST else Stack()
        )

    def push(self, item: Any, priority: int = 0) -> None:
        with self._lock:
            if isinstance(self._store, PriorityQueue):
                self._store.push(item, priority)
            else:
                self._store.push(item)

    def pop(self) -> Any:
        """Pop the next item, or None when empty."""
        with self._lock:
            return self._store.pop()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)