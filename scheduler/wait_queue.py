"""
FIFO wait queue for instances that couldn't get a lease.

Jobs get a lease in the order they started waiting: first in, first out.
No priorities, no shortest-first: a CI job that has been waiting longest is
the one closest to its wait timeout, so it goes next.

The queue holds arena INDICES (ints), not JobInstance objects. The engine
stores every instance exactly once in its arena; the active list and this
queue only point into it, so the same instance can never be mutated through
two different references.

Data structure: collections.deque
- enqueue: append to right  → O(1)
- dequeue: pop from left    → O(1)
- remove:  O(n), only used when a waiter times out
"""

from collections import deque
from typing import Iterator, Optional


class FIFOWaitQueue:

    def __init__(self, indices: Optional[Iterator[int]] = None):
        self._queue: deque[int] = deque(indices or ())

    def enqueue(self, index: int) -> None:
        self._queue.append(index)

    def dequeue(self) -> Optional[int]:
        return self._queue.popleft() if self._queue else None

    def peek(self) -> Optional[int]:
        return self._queue[0] if self._queue else None

    def remove(self, index: int) -> None:
        """Drop a waiter from anywhere in the queue (wait timeout)."""
        self._queue.remove(index)

    def size(self) -> int:
        return len(self._queue)

    def copy(self) -> "FIFOWaitQueue":
        return FIFOWaitQueue(iter(self._queue))

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._queue))

    def __len__(self) -> int:
        return len(self._queue)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FIFOWaitQueue):
            return NotImplemented
        return list(self._queue) == list(other._queue)
