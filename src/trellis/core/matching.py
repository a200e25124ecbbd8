"""
Maximum matching in undirected graphs.

The engine grows a matching by augmenting paths found with an alternating
breadth-first search. When the search closes an odd cycle (a blossom), the
cycle is contracted to its base. Contraction is never applied to the graph
itself: a ``BlossomArena`` maps every vertex to the base of the outermost
blossom containing it and keeps one record per contracted blossom, so the
graph is only ever read. When an augmenting path is found, the tree-parent
links set up while marking the blossom petals route it through every
contracted blossom on the way back to the root.

Each augmentation increases the matching by one edge; the search from an
exposed vertex that fails once never succeeds later, so one sweep over the
exposed vertices yields a maximum matching (Edmonds' blossom theorem).
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .exceptions import DirectionMismatchError, EdgeNotFoundError
from .graph import Graph

logger = logging.getLogger(__name__)

IndexPair = Tuple[int, int]


@dataclass
class Blossom:
    """A contracted odd cycle: its base and its member vertices."""

    base: int
    members: List[int]


class BlossomArena:
    """Index-remapping layer over the vertices of one search."""

    def __init__(self, size: int):
        self.base = list(range(size))
        self.blossoms: List[Blossom] = []

    def representative(self, v: int) -> int:
        return self.base[v]

    def same_blossom(self, u: int, v: int) -> bool:
        return self.base[u] == self.base[v]

    def contract(self, base: int, members: Sequence[int]) -> Blossom:
        """Map every member to ``base`` and record the blossom."""
        for v in members:
            self.base[v] = base
        blossom = Blossom(base, sorted(members))
        self.blossoms.append(blossom)
        return blossom


class MatchingMaximizer:
    """
    Finds maximum matchings with Edmonds' blossom algorithm.

    Attributes:
        graph (Graph): The undirected graph being matched
        blossom_count (int): Number of blossoms contracted by the last run
    """

    def __init__(self, graph: Graph):
        """
        Raises:
            DirectionMismatchError: If the graph is directed
        """
        if graph.is_directed():
            raise DirectionMismatchError("Matching requires an undirected graph")
        self.graph = graph
        self.n = graph.vertex_count()
        self.adjacency = [graph.neighbors(i) for i in range(self.n)]
        self.blossom_count = 0

    def find_maximal_matching(self) -> List[IndexPair]:
        """Greedy maximal matching in index order."""
        mate = [-1] * self.n
        for v in range(self.n):
            if mate[v] >= 0:
                continue
            for w in self.adjacency[v]:
                if mate[w] < 0:
                    mate[v], mate[w] = w, v
                    break
        return self._pairs(mate)

    def find_maximum_matching(
        self, matching: Optional[Iterable[IndexPair]] = None
    ) -> List[IndexPair]:
        """
        Grow a matching to maximum size.

        Args:
            matching: Optional starting matching; a greedy maximal matching
                is used when omitted.

        Returns:
            The matched pairs ``(i, j)`` with ``i < j``, sorted.

        Raises:
            EdgeNotFoundError: If a starting pair is not an edge
            ValueError: If the starting pairs share a vertex
        """
        mate = [-1] * self.n
        start = self.find_maximal_matching() if matching is None else list(matching)
        for i, j in start:
            if not self.graph.has_edge(i, j):
                raise EdgeNotFoundError(f"Pair ({i}, {j}) is not an edge of the graph")
            if mate[i] >= 0 or mate[j] >= 0:
                raise ValueError(f"Pair ({i}, {j}) shares a vertex with another pair")
            mate[i], mate[j] = j, i

        self.blossom_count = 0
        augmentations = 0
        for root in range(self.n):
            if mate[root] >= 0:
                continue
            path = self._augmenting_path(root, mate)
            if path is None:
                continue
            for k in range(0, len(path), 2):
                u, v = path[k], path[k + 1]
                mate[u], mate[v] = v, u
            augmentations += 1
            logger.debug(f"Augmented along path of length {len(path) - 1} from vertex {root}")

        logger.debug(
            f"Maximum matching: {augmentations} augmentations, "
            f"{self.blossom_count} blossoms contracted"
        )
        return self._pairs(mate)

    def _augmenting_path(self, root: int, mate: List[int]) -> Optional[List[int]]:
        """Search an alternating tree rooted at ``root`` for an exposed vertex."""
        arena = BlossomArena(self.n)
        parent = [-1] * self.n
        in_tree = [False] * self.n
        in_tree[root] = True
        queue = deque([root])

        while queue:
            v = queue.popleft()
            for w in self.adjacency[v]:
                if arena.same_blossom(v, w) or mate[v] == w:
                    continue
                if w == root or (mate[w] >= 0 and parent[mate[w]] >= 0):
                    # v and w are both outer vertices: an odd cycle closes
                    base = self._common_base(v, w, mate, parent, arena)
                    marked = [False] * self.n
                    self._mark_petal(v, base, w, mate, parent, arena, marked)
                    self._mark_petal(w, base, v, mate, parent, arena, marked)
                    members = [u for u in range(self.n) if marked[arena.representative(u)]]
                    arena.contract(base, members)
                    self.blossom_count += 1
                    for u in members:
                        if not in_tree[u]:
                            in_tree[u] = True
                            queue.append(u)
                elif parent[w] < 0:
                    parent[w] = v
                    if mate[w] < 0:
                        return self._trace(w, mate, parent)
                    in_tree[mate[w]] = True
                    queue.append(mate[w])
        return None

    @staticmethod
    def _common_base(
        a: int, b: int, mate: List[int], parent: List[int], arena: BlossomArena
    ) -> int:
        """Find the base of the nearest common ancestor of two outer vertices."""
        seen = set()
        while True:
            a = arena.representative(a)
            seen.add(a)
            if mate[a] < 0:
                break
            a = parent[mate[a]]
        while True:
            b = arena.representative(b)
            if b in seen:
                return b
            b = parent[mate[b]]

    @staticmethod
    def _mark_petal(
        v: int,
        base: int,
        child: int,
        mate: List[int],
        parent: List[int],
        arena: BlossomArena,
        marked: List[bool],
    ) -> None:
        """Mark the blossoms on the tree path from ``v`` up to ``base``."""
        while arena.representative(v) != base:
            marked[arena.representative(v)] = True
            marked[arena.representative(mate[v])] = True
            parent[v] = child
            child = mate[v]
            v = parent[mate[v]]

    @staticmethod
    def _trace(end: int, mate: List[int], parent: List[int]) -> List[int]:
        """Walk parent/mate links back to the root, yielding the path."""
        path = []
        v = end
        while v >= 0:
            u = parent[v]
            path.extend((v, u))
            v = mate[u]
        return path

    @staticmethod
    def _pairs(mate: List[int]) -> List[IndexPair]:
        return [(i, j) for i, j in enumerate(mate) if i < j]


def maximum_matching(graph: Graph) -> List[IndexPair]:
    """Find a maximum matching of an undirected graph."""
    return MatchingMaximizer(graph).find_maximum_matching()


def maximal_matching(graph: Graph) -> List[IndexPair]:
    """Find a greedy maximal matching of an undirected graph."""
    return MatchingMaximizer(graph).find_maximal_matching()


def is_matching(graph: Graph, pairs: Iterable[IndexPair]) -> bool:
    """Check that every pair is an edge and no vertex repeats."""
    used = set()
    for i, j in pairs:
        if not graph.has_edge(i, j) or i in used or j in used:
            return False
        used.update((i, j))
    return True


def is_perfect_matching(graph: Graph, pairs: Iterable[IndexPair]) -> bool:
    pairs = list(pairs)
    return is_matching(graph, pairs) and 2 * len(pairs) == graph.vertex_count()
