"""Derived graph extraction functionality.

Every method returns a new, independent graph that shares only the random
source of the graph it was derived from.
"""

from typing import Iterable, List, Optional, Set

from ..exceptions import DirectionMismatchError, NotConnectedError, WeightMismatchError
from ..graph import Graph
from .components import ComponentAnalysis
from .traversal import BFSIterator


class SubgraphExtractor:
    """
    Extracts derived graphs from a graph.

    This class provides functionality to extract various kinds of subgraphs:
    - Induced subgraphs and vertex neighborhoods
    - Spanning trees (DFS, BFS or random)
    - Powers, complements and Seidel switches
    """

    def __init__(self, graph: Graph):
        """Initialize extractor with the source graph."""
        self.graph = graph

    def induced(self, indices: Iterable[int]) -> Graph:
        """Extract the subgraph induced by a vertex set."""
        return self.graph.induce_subgraph(indices)

    def edge_subgraph(self, pairs: Iterable[tuple]) -> Graph:
        """Extract the subgraph made of the given edges and their endpoints."""
        pairs = list(pairs)
        for i, j in pairs:
            self.graph.edge_attributes(i, j)
        chosen = sorted({v for pair in pairs for v in pair})
        sub = self.graph.induce_subgraph(chosen)
        position = {old: new for new, old in enumerate(chosen)}
        wanted = {(position[i], position[j]) for i, j in pairs}
        if not self.graph.is_directed():
            wanted |= {(j, i) for i, j in wanted}
        sub.remove_edges([(i, j) for i, j in sub.edge_pairs() if (i, j) not in wanted])
        return sub

    def neighborhood(self, center: int, radius: int = 1) -> Graph:
        """Extract the subgraph induced by vertices within ``radius`` of ``center``."""
        chosen = [v for v, depth in BFSIterator(self.graph, center) if depth <= radius]
        return self.graph.induce_subgraph(sorted(chosen))

    def spanning_tree(self, root: int = 0, method: str = "dfs") -> Graph:
        """
        Extract a spanning tree of a connected undirected graph.

        Args:
            root: Vertex the tree is grown from
            method: ``"dfs"``, ``"bfs"`` or ``"random"`` (random-walk
                construction drawing from ``graph.rng``)

        Raises:
            DirectionMismatchError: If the graph is directed
            NotConnectedError: If the graph is disconnected
        """
        g = self.graph
        if g.is_directed():
            raise DirectionMismatchError("Spanning trees require an undirected graph")
        if not ComponentAnalysis.is_connected(g):
            raise NotConnectedError("Graph has no spanning tree")
        n = g.vertex_count()
        g.vertex(root)
        tree_edges: List[tuple] = []
        if method == "random":
            # Aldous-Broder: the first entry into each vertex is a tree edge
            visited = [False] * n
            visited[root] = True
            count = 1
            v = root
            while count < n:
                w = g.rng.choice(g.neighbors(v))
                if not visited[w]:
                    visited[w] = True
                    count += 1
                    tree_edges.append((v, w))
                v = w
        else:
            parent = {root: root}
            frontier = [root]
            while frontier:
                v = frontier.pop() if method == "dfs" else frontier.pop(0)
                for w in g.neighbors(v):
                    if w not in parent:
                        parent[w] = v
                        tree_edges.append((v, w))
                        frontier.append(w)
        tree = Graph(weighted=g.is_weighted(), rng=g.rng)
        for i in range(n):
            tree.add_vertex(g.label(i), g.vertex_attributes(i))
        for i, j in tree_edges:
            tree.add_edge(i, j, attributes=g.edge_attributes(i, j))
        return tree

    def power(self, k: int) -> Graph:
        """Join every pair of vertices at distance at most ``k``."""
        if k < 1:
            raise ValueError("k must be a positive integer")
        g = self.graph
        result = Graph(g.is_directed(), rng=g.rng)
        for i in range(g.vertex_count()):
            result.add_vertex(g.label(i), g.vertex_attributes(i))
        for i in range(g.vertex_count()):
            for v, depth in BFSIterator(g, i):
                if 0 < depth <= k and not result.has_edge(i, v):
                    result.add_edge(i, v)
        return result

    def seidel_switch(self, indices: Iterable[int]) -> Graph:
        """
        Complement the adjacency between a vertex set and the rest.

        Raises:
            DirectionMismatchError: If the graph is directed
            WeightMismatchError: If the graph is weighted
        """
        g = self.graph
        if g.is_directed():
            raise DirectionMismatchError("Seidel switching requires an undirected graph")
        if g.is_weighted():
            raise WeightMismatchError("Seidel switching requires an unweighted graph")
        chosen: Set[int] = set()
        for i in indices:
            g.vertex(i)
            chosen.add(i)
        result = g.copy()
        for i in chosen:
            for j in range(g.vertex_count()):
                if j in chosen:
                    continue
                if g.has_edge(i, j):
                    result.remove_edge(i, j)
                else:
                    result.add_edge(i, j)
        return result

    def largest_component(self) -> Optional[Graph]:
        """Extract the largest connected component, None for an empty graph."""
        components = ComponentAnalysis.connected_components(self.graph)
        if not components:
            return None
        return self.graph.induce_subgraph(max(components, key=len))
