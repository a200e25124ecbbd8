"""
Shortest path algorithms: BFS, Dijkstra and Floyd–Warshall.
"""

import logging
import math
from collections import deque
from contextlib import contextmanager
from time import time
from typing import Iterable, List, Optional

import numpy as np

from ...exceptions import WeightMismatchError
from ...graph import Graph
from ..base import PathFinder
from ..models import PathResult, PerformanceMetrics
from ..utils import MemoryManager, PriorityQueue, is_better_cost

logger = logging.getLogger(__name__)


class ShortestPathFinder(PathFinder[PathResult]):
    """Shortest path finder choosing BFS or Dijkstra by the weighted flag."""

    def __init__(self, graph: Graph, max_memory_mb: Optional[float] = None):
        """Initialize finder with optional memory limit."""
        super().__init__(graph)
        self.memory_manager = MemoryManager(max_memory_mb)
        self.metrics: Optional[PerformanceMetrics] = None

    @contextmanager
    def _search_context(self, operation: str):
        """Context manager for search state."""
        self.metrics = PerformanceMetrics(operation=operation, start_time=time())
        try:
            yield self.metrics
        finally:
            self.metrics.end_time = time()
            self.metrics.max_memory_used = int(self.memory_manager.peak_memory_mb * 1024 * 1024)
            self.memory_manager.reset_peak_memory()

    def find_path(self, source: int, target: int) -> PathResult:
        """Find a shortest path, weighted if the graph is weighted."""
        if self.graph.is_weighted():
            return self.dijkstra(source, [target])[0]
        return self.bfs_path(source, target)

    def bfs_parents(self, source: int) -> List[int]:
        """Run BFS from ``source``; unreached vertices keep parent -1."""
        self.validate_vertices(source)
        n = self.graph.vertex_count()
        parent = [-1] * n
        parent[source] = source
        queue = deque([source])
        while queue:
            v = queue.popleft()
            for w in self.graph.neighbors(v):
                if parent[w] < 0:
                    parent[w] = v
                    queue.append(w)
        return parent

    def bfs_distances(self, source: int) -> List[float]:
        """Get the number of edges on a shortest path to every vertex."""
        self.validate_vertices(source)
        n = self.graph.vertex_count()
        dist = [math.inf] * n
        dist[source] = 0
        queue = deque([source])
        while queue:
            v = queue.popleft()
            for w in self.graph.neighbors(v):
                if math.isinf(dist[w]):
                    dist[w] = dist[v] + 1
                    queue.append(w)
        return dist

    def bfs_path(self, source: int, target: int) -> PathResult:
        """Find a path with the fewest edges."""
        self.validate_vertices(source, target)
        with self._search_context("bfs_path"):
            parent = self.bfs_parents(source)
            if parent[target] < 0:
                return PathResult()
            path = [target]
            while path[-1] != source:
                path.append(parent[path[-1]])
            path.reverse()
            return PathResult(path, float(len(path) - 1))

    def dijkstra(self, source: int, targets: Optional[Iterable[int]] = None) -> List[PathResult]:
        """
        Single-source shortest paths with Dijkstra's algorithm.

        Args:
            source: Index of the source vertex
            targets: Target indices; all vertices when omitted

        Returns:
            One PathResult per target. Unreachable targets get an empty path
            and an infinite cost.

        Raises:
            WeightMismatchError: If some edge has a negative weight
        """
        targets = list(range(self.graph.vertex_count())) if targets is None else list(targets)
        self.validate_vertices(source, *targets)
        weighted = self.graph.is_weighted()
        if weighted:
            for edge in self.graph.get_edges():
                if edge.weight < 0:
                    raise WeightMismatchError(
                        f"Negative weight {edge.weight} found on edge "
                        f"{self.graph.label(edge.source)} -> {self.graph.label(edge.target)}"
                    )

        logger.debug(f"Starting Dijkstra's algorithm from {source}")
        n = self.graph.vertex_count()
        with self._search_context("dijkstra") as metrics:
            dist = [math.inf] * n
            parent = [-1] * n
            done = [False] * n
            dist[source] = 0.0
            remaining = set(targets)
            pq = PriorityQueue(max(n, 1))
            pq.add_or_update(source, 0.0)

            while not pq.empty() and remaining:
                self.memory_manager.check_memory()
                current = pq.pop()
                if current is None:
                    break
                d, v = current
                done[v] = True
                remaining.discard(v)
                metrics.nodes_explored += 1
                for w in self.graph.neighbors(v):
                    if done[w]:
                        continue
                    new_dist = d + (self.graph.weight(v, w) if weighted else 1)
                    if is_better_cost(new_dist, dist[w]):
                        dist[w] = new_dist
                        parent[w] = v
                        pq.add_or_update(w, new_dist)

            results = []
            for t in targets:
                if math.isinf(dist[t]):
                    results.append(PathResult())
                    continue
                path = [t]
                while path[-1] != source:
                    path.append(parent[path[-1]])
                path.reverse()
                results.append(PathResult(path, dist[t]))
            logger.debug(f"Dijkstra explored {metrics.nodes_explored} vertices")
            return results

    def floyd_warshall(self) -> np.ndarray:
        """
        All-pairs distances with the Floyd–Warshall recurrence.

        Negative weights are accepted; with a negative cycle the result is
        not meaningful.
        """
        n = self.graph.vertex_count()
        with self._search_context("floyd_warshall"):
            dist = np.full((n, n), np.inf)
            np.fill_diagonal(dist, 0.0)
            weighted = self.graph.is_weighted()
            for i, j in self.graph.edge_pairs():
                w = float(self.graph.weight(i, j)) if weighted else 1.0
                dist[i, j] = min(dist[i, j], w)
                if not self.graph.is_directed():
                    dist[j, i] = dist[i, j]
            for k in range(n):
                self.memory_manager.check_memory()
                dist = np.minimum(dist, dist[:, k, np.newaxis] + dist[np.newaxis, k, :])
            return dist
