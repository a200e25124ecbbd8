"""
Helpers shared by the shortest path finders.

- ``is_better_cost``: tolerant comparison of path costs
- ``PriorityQueue``: binary heap over vertex indices with decrease-key
- ``MemoryManager``: optional resident-memory ceiling checked during long searches
"""

import gc
import logging
import math
import time
from heapq import heappop, heappush
from typing import Dict, List, Optional, Tuple

import psutil

logger = logging.getLogger(__name__)

COST_TOLERANCE = 1e-10
# Seconds between two resident-memory samples
MEMORY_SAMPLE_INTERVAL = 0.1

_MB = 1024 * 1024


def is_better_cost(new_cost: float, old_cost: float) -> bool:
    """Check whether ``new_cost`` improves on ``old_cost`` beyond rounding noise.

    Any finite cost improves on an infinite one.
    """
    if old_cost == math.inf:
        return new_cost != math.inf
    return new_cost < old_cost - COST_TOLERANCE


class PriorityQueue:
    """
    Min-heap of vertex indices keyed by tentative distance.

    Lowering the key of a queued vertex pushes a fresh heap entry; the stale
    one is recognised by its sequence number and skipped when popped.

    Attributes:
        capacity (int): Largest number of distinct vertices queued at once
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._heap: List[Tuple[float, int, int]] = []
        self._live: Dict[int, int] = {}
        self._sequence = 0

    def add_or_update(self, vertex: int, key: float) -> None:
        """Queue ``vertex`` with ``key``, or lower its key if already queued."""
        if vertex not in self._live and len(self._live) >= self.capacity:
            raise OverflowError(f"Priority queue holds {self.capacity} vertices already")
        self._sequence += 1
        self._live[vertex] = self._sequence
        heappush(self._heap, (key, self._sequence, vertex))

    def pop(self) -> Optional[Tuple[float, int]]:
        """Remove the vertex with the smallest key; None when empty."""
        while self._heap:
            key, sequence, vertex = heappop(self._heap)
            if self._live.get(vertex) == sequence:
                del self._live[vertex]
                return key, vertex
        return None

    def empty(self) -> bool:
        return not self._live

    def __len__(self) -> int:
        return len(self._live)


def get_memory_usage() -> int:
    """Resident set size of this process in bytes."""
    return psutil.Process().memory_info().rss


class MemoryManager:
    """
    Watches the memory growth of a search against an optional ceiling.

    Without a ceiling the manager only tracks the peak, sampled at most every
    ``MEMORY_SAMPLE_INTERVAL`` seconds.
    """

    def __init__(self, max_memory_mb: Optional[float] = None):
        self.max_memory = max_memory_mb * _MB if max_memory_mb else None
        self.start_memory = get_memory_usage()
        self._peak_memory = self.start_memory
        self._last_sample = time.monotonic()

    def check_memory(self) -> None:
        """Sample memory use; raise MemoryError once growth exceeds the ceiling."""
        now = time.monotonic()
        if now - self._last_sample < MEMORY_SAMPLE_INTERVAL:
            return
        self._last_sample = now
        current = get_memory_usage()
        self._peak_memory = max(self._peak_memory, current)
        if self.max_memory is None or current - self.start_memory <= self.max_memory:
            return

        gc.collect()
        current = get_memory_usage()
        if current - self.start_memory > self.max_memory:
            logger.debug(f"Search grew by {(current - self.start_memory) / _MB:.1f}MB")
            raise MemoryError(
                f"Memory growth of {(current - self.start_memory) / _MB:.1f}MB exceeds "
                f"the limit of {self.max_memory / _MB:.1f}MB"
            )

    @property
    def peak_memory_mb(self) -> float:
        return self._peak_memory / _MB

    def reset_peak_memory(self) -> None:
        """Start a new measurement from the current memory use."""
        self.start_memory = self._peak_memory = get_memory_usage()
        self._last_sample = time.monotonic()
