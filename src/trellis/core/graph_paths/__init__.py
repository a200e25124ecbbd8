"""Graph path finding functionality."""

import math
from typing import Iterable, List, Optional, Union

import numpy as np

from ..exceptions import NotConnectedError
from ..graph import Graph
from .algorithms.shortest_path import ShortestPathFinder
from .base import PathFinder
from .models import PathResult, PerformanceMetrics

__all__ = [
    "PathFinding",
    "PathFinder",
    "PathResult",
    "PerformanceMetrics",
    "ShortestPathFinder",
]


class PathFinding:
    """Static interface for path finding operations."""

    @staticmethod
    def vertex_distance(
        graph: Graph, source: int, targets: Union[int, Iterable[int]]
    ) -> Union[float, List[float]]:
        """Get the number of edges on a shortest path (BFS).

        Returns ``math.inf`` for unreachable targets. A single target gives a
        single number, a sequence of targets a list.
        """
        dist = ShortestPathFinder(graph).bfs_distances(source)
        if isinstance(targets, int):
            graph.vertex(targets)
            return dist[targets]
        result = []
        for t in targets:
            graph.vertex(t)
            result.append(dist[t])
        return result

    @staticmethod
    def shortest_path(graph: Graph, source: int, target: int) -> Optional[List[int]]:
        """Find a path with the fewest edges, or None if unreachable."""
        result = ShortestPathFinder(graph).bfs_path(source, target)
        return result.vertices if result.reachable else None

    @staticmethod
    def shortest_paths(graph: Graph, source: int) -> List[Optional[List[int]]]:
        """Find a fewest-edges path to every vertex (a BFS tree)."""
        finder = ShortestPathFinder(graph)
        parent = finder.bfs_parents(source)
        paths: List[Optional[List[int]]] = []
        for t in range(graph.vertex_count()):
            if parent[t] < 0:
                paths.append(None)
                continue
            path = [t]
            while path[-1] != source:
                path.append(parent[path[-1]])
            path.reverse()
            paths.append(path)
        return paths

    @staticmethod
    def dijkstra(
        graph: Graph,
        source: int,
        targets: Optional[Union[int, Iterable[int]]] = None,
        max_memory_mb: Optional[float] = None,
    ) -> Union[PathResult, List[PathResult]]:
        """Cheapest paths from ``source``; one target gives one result."""
        finder = ShortestPathFinder(graph, max_memory_mb)
        if isinstance(targets, int):
            return finder.dijkstra(source, [targets])[0]
        return finder.dijkstra(source, targets)

    @staticmethod
    def allpairs_distance(graph: Graph, max_memory_mb: Optional[float] = None) -> np.ndarray:
        """Distance matrix of all vertex pairs (Floyd–Warshall)."""
        return ShortestPathFinder(graph, max_memory_mb).floyd_warshall()

    @staticmethod
    def graph_diameter(graph: Graph) -> float:
        """Get the largest distance between two vertices.

        Returns ``math.inf`` for disconnected graphs and 0 for graphs with
        fewer than two vertices.
        """
        if graph.vertex_count() < 2:
            return 0
        dist = PathFinding.allpairs_distance(graph)
        diameter = float(dist.max())
        return math.inf if math.isinf(diameter) else diameter

    @staticmethod
    def eccentricity(graph: Graph, source: int) -> float:
        """Get the largest distance from ``source`` to any other vertex."""
        if graph.is_weighted():
            costs = [r.total_weight for r in ShortestPathFinder(graph).dijkstra(source)]
        else:
            costs = ShortestPathFinder(graph).bfs_distances(source)
        return max(costs, default=0)

    @staticmethod
    def radius_center(graph: Graph) -> List[int]:
        """Get the vertices of minimum eccentricity.

        Raises:
            NotConnectedError: If the graph is disconnected
        """
        ecc = [PathFinding.eccentricity(graph, i) for i in range(graph.vertex_count())]
        if any(math.isinf(e) for e in ecc):
            raise NotConnectedError("Graph center requires a connected graph")
        radius = min(ecc, default=0)
        return [i for i, e in enumerate(ecc) if e == radius]
