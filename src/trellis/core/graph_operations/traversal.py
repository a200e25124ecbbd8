"""
Graph traversal system using iterator pattern.

This module provides the depth-first and breadth-first traversals every other
structural query builds on, together with the queries that are a single
traversal away: cycle and path search, topological order, tree and forest
recognition, girth, bipartiteness and Eulerian trails.

All per-vertex bookkeeping (visited flags, discovery order, parent links) is
kept in local lists indexed by vertex, never on the graph itself.
"""

import logging
import math
from abc import ABC, abstractmethod
from collections import deque
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..exceptions import DirectionMismatchError, NotAcyclicError, WeightMismatchError
from ..graph import Graph

logger = logging.getLogger(__name__)


class GraphIterator(ABC):
    """Base class for graph traversal iterators."""

    def __init__(self, graph: Graph, start: int, include_temp_edges: bool = False):
        """
        Initialize iterator.

        Args:
            graph: The graph to traverse
            start: Index of the starting vertex
            include_temp_edges: Whether temporary edges are followed
        """
        self.graph = graph
        self.start = start
        self.include_temp_edges = include_temp_edges
        self.visited: Set[int] = set()

    def _neighbors(self, v: int) -> List[int]:
        return self.graph.neighbors(v, self.include_temp_edges)

    @abstractmethod
    def __iter__(self) -> Iterator[Tuple[int, int]]:
        """
        Get iterator for traversal.

        Returns:
            Iterator yielding tuples of (vertex, depth)
        """
        pass


class BFSIterator(GraphIterator):
    """Breadth-first traversal iterator."""

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        """
        Traverse graph in breadth-first order.

        Yields:
            Tuples of (vertex, depth) in BFS order
        """
        self.graph.vertex(self.start)
        queue = deque([(self.start, 0)])
        self.visited.add(self.start)

        while queue:
            v, depth = queue.popleft()
            yield v, depth

            for w in self._neighbors(v):
                if w not in self.visited:
                    self.visited.add(w)
                    queue.append((w, depth + 1))


class DFSIterator(GraphIterator):
    """Depth-first traversal iterator."""

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        """
        Traverse graph in depth-first order.

        Yields:
            Tuples of (vertex, depth) in DFS discovery order
        """
        self.graph.vertex(self.start)
        stack = [(self.start, 0, iter(self._neighbors(self.start)))]
        self.visited.add(self.start)
        yield self.start, 0

        while stack:
            v, depth, neighbors = stack[-1]
            try:
                w = next(neighbors)
                if w not in self.visited:
                    self.visited.add(w)
                    yield w, depth + 1
                    stack.append((w, depth + 1, iter(self._neighbors(w))))
            except StopIteration:
                stack.pop()


def depth_first_search(graph: Graph, root: int, include_temp_edges: bool = False) -> List[int]:
    """Get the vertices reachable from ``root`` in DFS discovery order."""
    return [v for v, _ in DFSIterator(graph, root, include_temp_edges)]


def breadth_first_search(graph: Graph, root: int, include_temp_edges: bool = False) -> List[int]:
    """Get the vertices reachable from ``root`` in BFS discovery order."""
    return [v for v, _ in BFSIterator(graph, root, include_temp_edges)]


def find_cycle(graph: Graph, randomize: bool = True) -> Optional[List[int]]:
    """
    Find a cycle using DFS and return its vertices in order.

    The first back edge met by the search closes the cycle, which is
    reconstructed by following parent links. With ``randomize`` the search
    starts from a vertex drawn from ``graph.rng``.

    Returns:
        The cycle as a list of vertex indices, or None for an acyclic graph.
    """
    n = graph.vertex_count()
    if n == 0:
        return None
    directed = graph.is_directed()
    start = graph.rng.randrange(n) if randomize else 0
    order = list(range(start, n)) + list(range(start))
    # 0: unvisited, 1: on the DFS stack, 2: finished
    state = [0] * n
    parent = [-1] * n

    for root in order:
        if state[root]:
            continue
        state[root] = 1
        stack = [(root, iter(graph.neighbors(root)))]
        while stack:
            v, it = stack[-1]
            descended = False
            for w in it:
                if state[w] == 0:
                    state[w] = 1
                    parent[w] = v
                    stack.append((w, iter(graph.neighbors(w))))
                    descended = True
                    break
                if state[w] == 1 and (directed or w != parent[v]):
                    cycle = [v]
                    u = v
                    while u != w:
                        u = parent[u]
                        cycle.append(u)
                    cycle.reverse()
                    logger.debug(f"Found cycle of length {len(cycle)} through vertex {w}")
                    return cycle
            if not descended:
                state[v] = 2
                stack.pop()
    return None


def find_path(graph: Graph, source: int, target: int) -> Optional[List[int]]:
    """
    Find a path from ``source`` to ``target`` by DFS.

    The path is not necessarily shortest; use ``PathFinding.shortest_path``
    for that. Returns None when ``target`` is unreachable.
    """
    graph.vertex(source)
    graph.vertex(target)
    if source == target:
        return [source]
    parent: Dict[int, int] = {source: source}
    stack = [source]
    while stack:
        v = stack.pop()
        for w in graph.neighbors(v):
            if w in parent:
                continue
            parent[w] = v
            if w == target:
                path = [w]
                while path[-1] != source:
                    path.append(parent[path[-1]])
                path.reverse()
                return path
            stack.append(w)
    return None


def topological_sort(graph: Graph) -> List[int]:
    """
    Order the vertices of a DAG so every arc points forward.

    Kahn's method: vertices of in-degree zero are removed repeatedly.

    Raises:
        DirectionMismatchError: If the graph is undirected
        NotAcyclicError: If some vertices remain after the queue empties
    """
    if not graph.is_directed():
        raise DirectionMismatchError("Topological sort requires a directed graph")
    n = graph.vertex_count()
    indegree = [0] * n
    for _, j in graph.edge_pairs():
        indegree[j] += 1
    queue = deque(i for i in range(n) if indegree[i] == 0)
    order: List[int] = []
    while queue:
        v = queue.popleft()
        order.append(v)
        for w in graph.neighbors(v):
            indegree[w] -= 1
            if indegree[w] == 0:
                queue.append(w)
    if len(order) < n:
        raise NotAcyclicError(f"Graph has a directed cycle ({n - len(order)} vertices unordered)")
    return order


def is_acyclic(graph: Graph) -> bool:
    """Check for the absence of (directed) cycles."""
    if graph.is_directed():
        try:
            topological_sort(graph)
        except NotAcyclicError:
            return False
        return True
    return find_cycle(graph, randomize=False) is None


def _component_count(graph: Graph) -> int:
    n = graph.vertex_count()
    seen = [False] * n
    count = 0
    directed = graph.is_directed()
    for root in range(n):
        if seen[root]:
            continue
        count += 1
        seen[root] = True
        stack = [root]
        while stack:
            v = stack.pop()
            targets = graph.neighbors(v)
            if directed:
                targets = targets + graph.in_neighbors(v)
            for w in targets:
                if not seen[w]:
                    seen[w] = True
                    stack.append(w)
    return count


def is_forest(graph: Graph) -> bool:
    """Check whether the underlying graph has no cycles."""
    if graph.is_directed():
        graph = graph.underlying()
    return graph.edge_count() == graph.vertex_count() - _component_count(graph)


def is_tree(graph: Graph) -> bool:
    """Check whether the underlying graph is connected and acyclic."""
    if graph.is_directed():
        graph = graph.underlying()
    n = graph.vertex_count()
    return n > 0 and graph.edge_count() == n - 1 and _component_count(graph) == 1


def is_arborescence(graph: Graph) -> bool:
    """Check for a directed tree with all arcs pointing away from one root."""
    if not graph.is_directed():
        raise DirectionMismatchError("Arborescence test requires a directed graph")
    n = graph.vertex_count()
    if n == 0:
        return False
    indegree = [graph.in_degree(i) for i in range(n)]
    roots = [i for i in range(n) if indegree[i] == 0]
    if len(roots) != 1 or any(d > 1 for d in indegree):
        return False
    return len(depth_first_search(graph, roots[0])) == n


def is_tournament(graph: Graph) -> bool:
    """Check that every pair of vertices is joined by exactly one arc."""
    if not graph.is_directed():
        raise DirectionMismatchError("Tournament test requires a directed graph")
    n = graph.vertex_count()
    for i in range(n):
        for j in range(i + 1, n):
            if graph.has_edge(i, j) == graph.has_edge(j, i):
                return False
    return True


def tree_height(graph: Graph, root: int) -> int:
    """Get the depth of the deepest vertex below ``root``."""
    return max(depth for _, depth in BFSIterator(graph, root))


def girth(graph: Graph, odd: bool = False) -> float:
    """
    Get the length of the shortest cycle (or odd cycle with ``odd``).

    Runs one BFS per vertex; returns ``math.inf`` for acyclic graphs.

    Raises:
        WeightMismatchError: If the graph is weighted
    """
    if graph.is_weighted():
        raise WeightMismatchError("Girth is defined for unweighted graphs only")
    directed = graph.is_directed()
    if directed and odd:
        raise DirectionMismatchError("Odd girth requires an undirected graph")
    n = graph.vertex_count()
    best = math.inf
    for root in range(n):
        dist = [-1] * n
        parent = [-1] * n
        dist[root] = 0
        queue = deque([root])
        while queue:
            v = queue.popleft()
            for w in graph.neighbors(v):
                if dist[w] < 0:
                    dist[w] = dist[v] + 1
                    parent[w] = v
                    queue.append(w)
                elif directed:
                    if w == root:
                        best = min(best, dist[v] + 1)
                elif w != parent[v]:
                    length = dist[v] + dist[w] + 1
                    if not odd or dist[v] == dist[w]:
                        best = min(best, length)
    return best


def odd_girth(graph: Graph) -> float:
    """Get the length of the shortest odd cycle, ``math.inf`` if bipartite."""
    return girth(graph, odd=True)


def bipartition(graph: Graph) -> Optional[Tuple[List[int], List[int]]]:
    """Two-color the underlying graph, or return None if it has an odd cycle."""
    n = graph.vertex_count()
    side = [-1] * n
    directed = graph.is_directed()
    for root in range(n):
        if side[root] >= 0:
            continue
        side[root] = 0
        queue = deque([root])
        while queue:
            v = queue.popleft()
            targets = graph.neighbors(v)
            if directed:
                targets = targets + graph.in_neighbors(v)
            for w in targets:
                if side[w] < 0:
                    side[w] = 1 - side[v]
                    queue.append(w)
                elif side[w] == side[v]:
                    return None
    return [i for i in range(n) if side[i] == 0], [i for i in range(n) if side[i] == 1]


def is_bipartite(graph: Graph) -> bool:
    return bipartition(graph) is not None


def is_triangle_free(graph: Graph) -> bool:
    """Check the underlying graph for the absence of 3-cycles."""
    g = graph.underlying() if graph.is_directed() else graph
    adjacency = [set(g.neighbors(i)) for i in range(g.vertex_count())]
    for i, j in g.edge_pairs():
        if adjacency[i] & adjacency[j]:
            return False
    return True


def eulerian_trail(graph: Graph) -> Optional[List[int]]:
    """
    Find an Eulerian trail (or circuit) with Hierholzer's algorithm.

    Returns:
        The trail as a vertex list, or None if the graph is not Eulerian.
    """
    n = graph.vertex_count()
    m = graph.edge_count()
    if m == 0:
        return [0] if n else None
    directed = graph.is_directed()

    if directed:
        surplus = [graph.out_degree(i) - graph.in_degree(i) for i in range(n)]
        starts = [i for i in range(n) if surplus[i] == 1]
        ends = [i for i in range(n) if surplus[i] == -1]
        if any(abs(s) > 1 for s in surplus) or len(starts) != len(ends) or len(starts) > 1:
            return None
    else:
        starts = [i for i in range(n) if graph.degree(i) % 2 == 1]
        if len(starts) not in (0, 2):
            return None
    if not starts:
        starts = [next(i for i in range(n) if graph.out_degree(i) > 0)]

    remaining = [list(graph.neighbors(i)) for i in range(n)]
    used: Set[Tuple[int, int]] = set()
    stack = [starts[0]]
    trail: List[int] = []
    while stack:
        v = stack[-1]
        while remaining[v]:
            w = remaining[v].pop()
            key = (v, w) if directed else (min(v, w), max(v, w))
            if key in used:
                continue
            used.add(key)
            stack.append(w)
            break
        else:
            trail.append(stack.pop())
    if len(trail) != m + 1:
        return None
    trail.reverse()
    return trail


def is_eulerian(graph: Graph) -> bool:
    """Check whether the graph admits an Eulerian trail."""
    return eulerian_trail(graph) is not None
