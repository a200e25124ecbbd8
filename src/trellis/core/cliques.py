"""
Clique and independent set enumeration.

Maximal cliques are enumerated with Bron–Kerbosch using Tomita's pivot rule:
among the candidates and excluded vertices the pivot is the one with the most
neighbors among the candidates, and only candidates outside the pivot's
neighborhood are branched on. Everything else in this module is derived from
that enumeration: maximum clique, greedy clique cover and, through the
complement graph, maximum independent sets.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Set

from .graph import Graph

logger = logging.getLogger(__name__)


def _adjacency_sets(graph: Graph) -> List[Set[int]]:
    """Neighborhoods of the underlying undirected graph."""
    n = graph.vertex_count()
    adjacency: List[Set[int]] = [set() for _ in range(n)]
    for i, j in graph.edge_pairs():
        adjacency[i].add(j)
        adjacency[j].add(i)
    return adjacency


class CliqueFinder:
    """Bron–Kerbosch enumeration over a fixed adjacency."""

    def __init__(self, graph: Graph, vertices: Optional[Sequence[int]] = None):
        """
        Args:
            graph: The graph to search (arc directions are ignored)
            vertices: Restrict the search to the subgraph induced by these
        """
        self.graph = graph
        self.adjacency = _adjacency_sets(graph)
        self.vertices = set(range(graph.vertex_count()) if vertices is None else vertices)

    def cliques(self) -> Iterator[List[int]]:
        """Yield every maximal clique as a sorted index list."""
        if not self.vertices:
            return
        yield from self._expand([], set(self.vertices), set())

    def _expand(self, clique: List[int], candidates: Set[int], excluded: Set[int]) -> Iterator[List[int]]:
        if not candidates and not excluded:
            yield sorted(clique)
            return
        pivot = max(
            candidates | excluded, key=lambda u: len(candidates & self.adjacency[u])
        )
        for v in list(candidates - self.adjacency[pivot]):
            neighbors = self.adjacency[v] & self.vertices
            yield from self._expand(clique + [v], candidates & neighbors, excluded & neighbors)
            candidates.discard(v)
            excluded.add(v)

    def maximum(self) -> List[int]:
        """Return one largest clique (the first found among equals)."""
        best: List[int] = []
        for clique in self.cliques():
            if len(clique) > len(best):
                best = clique
        return best


def maximal_cliques(graph: Graph) -> List[List[int]]:
    """Enumerate all maximal cliques."""
    cliques = list(CliqueFinder(graph).cliques())
    logger.debug(f"Enumerated {len(cliques)} maximal cliques")
    return cliques


def maximum_clique(graph: Graph) -> List[int]:
    return CliqueFinder(graph).maximum()


def clique_number(graph: Graph) -> int:
    return len(maximum_clique(graph))


def is_clique(graph: Graph, indices: Sequence[int]) -> bool:
    """Check whether every two of the given vertices are adjacent."""
    indices = list(indices)
    for a in range(len(indices)):
        for b in range(a + 1, len(indices)):
            if not graph.adjacent(indices[a], indices[b]):
                return False
    return True


def clique_cover(graph: Graph, k: int = 0) -> List[List[int]]:
    """
    Cover the vertices by repeatedly extracting a largest clique from the
    uncovered part.

    Args:
        graph: The graph to cover
        k: Maximum number of cliques allowed; 0 means no limit

    Returns:
        The cliques of the cover, or an empty list if more than ``k``
        cliques would be needed.
    """
    uncovered = set(range(graph.vertex_count()))
    cover: List[List[int]] = []
    while uncovered:
        if k > 0 and len(cover) == k:
            logger.debug(f"No clique cover with at most {k} cliques found")
            return []
        clique = CliqueFinder(graph, sorted(uncovered)).maximum()
        cover.append(clique)
        uncovered.difference_update(clique)
    return cover


def chromatic_number(graph: Graph) -> int:
    """
    Get the least number of colors in a proper vertex coloring.

    Exact: starts from the clique number as lower bound and tries
    successively more colors with DSatur-ordered backtracking, capped by a
    greedy DSatur coloring.
    """
    adjacency = _adjacency_sets(graph)
    n = len(adjacency)
    if n == 0:
        return 0
    upper = max(_dsatur(adjacency)) + 1
    lower = max(clique_number(graph), 1)
    for colors in range(lower, upper):
        if _colorable(adjacency, colors):
            return colors
    return upper


def clique_cover_number(graph: Graph) -> int:
    """Get the least number of cliques covering the vertices."""
    return chromatic_number(graph.underlying().complement())


def _dsatur(adjacency: List[Set[int]]) -> List[int]:
    n = len(adjacency)
    coloring = [-1] * n
    for _ in range(n):
        v = max(
            (u for u in range(n) if coloring[u] < 0),
            key=lambda u: (len({coloring[w] for w in adjacency[u] if coloring[w] >= 0}), len(adjacency[u])),
        )
        used = {coloring[w] for w in adjacency[v]}
        coloring[v] = next(c for c in range(n) if c not in used)
    return coloring


def _colorable(adjacency: List[Set[int]], colors: int) -> bool:
    n = len(adjacency)
    coloring = [-1] * n

    def backtrack(colored: int) -> bool:
        if colored == n:
            return True
        v = max(
            (u for u in range(n) if coloring[u] < 0),
            key=lambda u: (len({coloring[w] for w in adjacency[u] if coloring[w] >= 0}), len(adjacency[u])),
        )
        used = {coloring[w] for w in adjacency[v]}
        highest = max(coloring) + 1
        for c in range(min(colors, highest + 1)):
            if c in used:
                continue
            coloring[v] = c
            if backtrack(colored + 1):
                return True
        coloring[v] = -1
        return False

    return backtrack(0)


def maximum_independent_set(graph: Graph) -> List[int]:
    """Find a largest set of pairwise non-adjacent vertices."""
    return maximum_clique(graph.underlying().complement())


def independence_number(graph: Graph) -> int:
    return len(maximum_independent_set(graph))


def maximal_independent_set(graph: Graph, order: Optional[Sequence[int]] = None) -> List[int]:
    """
    Greedily pick vertices not adjacent to an already picked one.

    Args:
        order: Visiting order; index order when omitted
    """
    adjacency = _adjacency_sets(graph)
    blocked = [False] * len(adjacency)
    chosen = []
    for v in range(len(adjacency)) if order is None else order:
        if blocked[v]:
            continue
        chosen.append(v)
        blocked[v] = True
        for w in adjacency[v]:
            blocked[w] = True
    return sorted(chosen)
