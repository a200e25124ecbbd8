"""Connected component analysis.

This module provides functionality for analyzing the structural components of a
graph. It includes methods for:
- Finding connected components (weakly connected for digraphs)
- Finding cut vertices and biconnected components (blocks) in one DFS pass
- Building the block-cut tree of a graph
- Finding strongly connected components of a digraph (Tarjan)

The biconnected decomposition is the backbone of planar embedding: every block
is embedded on its own and the embeddings are recombined along the block-cut
tree.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from ..exceptions import DirectionMismatchError
from ..graph import Graph

logger = logging.getLogger(__name__)

IndexPair = Tuple[int, int]


@dataclass
class Block:
    """A biconnected component: its vertices and its edges."""

    vertices: List[int]
    edges: List[IndexPair] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.vertices)


@dataclass
class BlockDecomposition:
    """Result of one low-point DFS over the underlying graph."""

    blocks: List[Block]
    cut_vertices: List[int]


class ComponentAnalysis:
    """Connected component analysis for graphs.

    This class provides static methods for analyzing structural properties of a
    graph. The methods keep their DFS numbering in local arrays and never touch
    the graph itself.
    """

    @staticmethod
    def _undirected_adjacency(graph: Graph) -> List[List[int]]:
        """Build the adjacency of the underlying undirected graph."""
        n = graph.vertex_count()
        if not graph.is_directed():
            return [graph.neighbors(i) for i in range(n)]
        adjacency: List[List[int]] = [[] for _ in range(n)]
        seen: Set[IndexPair] = set()
        for i, j in graph.edge_pairs():
            key = (min(i, j), max(i, j))
            if key not in seen:
                seen.add(key)
                adjacency[i].append(j)
                adjacency[j].append(i)
        return adjacency

    @staticmethod
    def connected_components(graph: Graph) -> List[List[int]]:
        """Find all connected components using breadth-first search.

        Edge directions are ignored, so for digraphs these are the weakly
        connected components.

        Args:
            graph (Graph): The graph instance to analyze.

        Returns:
            List[List[int]]: One sorted index list per component, ordered by
                smallest member. Isolated vertices form their own components.
        """
        adjacency = ComponentAnalysis._undirected_adjacency(graph)
        n = len(adjacency)
        visited = [False] * n
        components = []
        for start in range(n):
            if visited[start]:
                continue
            component = [start]
            visited[start] = True
            queue = deque([start])
            while queue:
                v = queue.popleft()
                for w in adjacency[v]:
                    if not visited[w]:
                        visited[w] = True
                        component.append(w)
                        queue.append(w)
            components.append(sorted(component))
        return components

    @staticmethod
    def is_connected(graph: Graph) -> bool:
        """Check whether the (underlying) graph has at most one component."""
        return len(ComponentAnalysis.connected_components(graph)) <= 1

    @staticmethod
    def decompose(graph: Graph) -> BlockDecomposition:
        """Find cut vertices and blocks with a single low-point DFS.

        A non-root vertex v is a cut vertex iff some child subtree has a
        low-point not smaller than v's discovery time; a root is a cut vertex
        iff it has two or more DFS children. Blocks are recovered from the
        edge stack whenever a cut point closes one. Isolated vertices are
        reported as single-vertex blocks so the blocks cover every vertex.
        """
        adjacency = ComponentAnalysis._undirected_adjacency(graph)
        n = len(adjacency)
        disc = [-1] * n
        low = [0] * n
        parent = [-1] * n
        cut: Set[int] = set()
        blocks: List[Block] = []
        clock = 0

        for root in range(n):
            if disc[root] >= 0:
                continue
            disc[root] = low[root] = clock
            clock += 1
            if not adjacency[root]:
                blocks.append(Block([root]))
                continue
            root_children = 0
            edge_stack: List[IndexPair] = []
            stack = [(root, iter(adjacency[root]))]
            while stack:
                v, it = stack[-1]
                descended = False
                for w in it:
                    if disc[w] < 0:
                        parent[w] = v
                        disc[w] = low[w] = clock
                        clock += 1
                        edge_stack.append((v, w))
                        stack.append((w, iter(adjacency[w])))
                        descended = True
                        break
                    if w != parent[v] and disc[w] < disc[v]:
                        low[v] = min(low[v], disc[w])
                        edge_stack.append((v, w))
                if descended:
                    continue
                stack.pop()
                if not stack:
                    break
                u = stack[-1][0]
                low[u] = min(low[u], low[v])
                if low[v] >= disc[u]:
                    if u == root:
                        root_children += 1
                    else:
                        cut.add(u)
                    edges: List[IndexPair] = []
                    while True:
                        e = edge_stack.pop()
                        edges.append(e)
                        if e == (u, v):
                            break
                    members = sorted({x for e in edges for x in e})
                    blocks.append(Block(members, edges))
            if root_children >= 2:
                cut.add(root)

        logger.debug(f"Found {len(blocks)} blocks and {len(cut)} cut vertices")
        return BlockDecomposition(blocks, sorted(cut))

    @staticmethod
    def articulation_points(graph: Graph) -> List[int]:
        """Get the cut vertices in increasing index order."""
        return ComponentAnalysis.decompose(graph).cut_vertices

    @staticmethod
    def biconnected_components(graph: Graph) -> List[List[int]]:
        """Get the vertex list of every block (bridges are blocks of size 2)."""
        return [b.vertices for b in ComponentAnalysis.decompose(graph).blocks]

    @staticmethod
    def is_biconnected(graph: Graph) -> bool:
        """Check for a connected graph without cut vertices."""
        if graph.vertex_count() < 2:
            return False
        return ComponentAnalysis.is_connected(graph) and not ComponentAnalysis.articulation_points(
            graph
        )

    @staticmethod
    def is_triconnected(graph: Graph) -> bool:
        """Check that deleting any single vertex leaves a biconnected graph."""
        if not ComponentAnalysis.is_biconnected(graph):
            return False
        g = graph.underlying() if graph.is_directed() else graph
        for i in range(g.vertex_count()):
            h = g.copy()
            h.remove_vertex(i)
            if not ComponentAnalysis.is_biconnected(h):
                return False
        return True

    @staticmethod
    def block_cut_tree(graph: Graph) -> Graph:
        """Build the block-cut tree.

        Returns:
            Graph: An undirected forest whose vertices are labelled
                ``("block", k)`` for the k-th block and ``("cut", v)`` for each
                cut vertex v, with an edge whenever v belongs to block k.
        """
        decomposition = ComponentAnalysis.decompose(graph)
        tree = Graph(rng=graph.rng)
        for k in range(len(decomposition.blocks)):
            tree.add_vertex(("block", k))
        cuts = set(decomposition.cut_vertices)
        for v in decomposition.cut_vertices:
            tree.add_vertex(("cut", v))
        for k, block in enumerate(decomposition.blocks):
            for v in block.vertices:
                if v in cuts:
                    tree.add_edge_by_label(("block", k), ("cut", v))
        return tree

    @staticmethod
    def strongly_connected_components(graph: Graph) -> List[List[int]]:
        """Find all strongly connected components of a digraph.

        Tarjan's algorithm with an explicit work stack: a component closes
        when a vertex's low-link equals its own discovery index.

        Returns:
            List[List[int]]: Components in reverse topological order, each
                sorted; every vertex appears in exactly one of them.

        Raises:
            DirectionMismatchError: If the graph is undirected.
        """
        if not graph.is_directed():
            raise DirectionMismatchError("Strongly connected components require a digraph")
        n = graph.vertex_count()
        index = [-1] * n
        lowlink = [0] * n
        on_stack = [False] * n
        stack: List[int] = []
        components: List[List[int]] = []
        counter = 0

        for root in range(n):
            if index[root] >= 0:
                continue
            index[root] = lowlink[root] = counter
            counter += 1
            stack.append(root)
            on_stack[root] = True
            work = [(root, iter(graph.neighbors(root)))]
            while work:
                v, successors = work[-1]
                for w in successors:
                    if index[w] < 0:
                        index[w] = lowlink[w] = counter
                        counter += 1
                        stack.append(w)
                        on_stack[w] = True
                        work.append((w, iter(graph.neighbors(w))))
                        break
                    if on_stack[w]:
                        lowlink[v] = min(lowlink[v], index[w])
                else:
                    work.pop()
                    if work:
                        u = work[-1][0]
                        lowlink[u] = min(lowlink[u], lowlink[v])
                    if lowlink[v] == index[v]:
                        component = []
                        while True:
                            w = stack.pop()
                            on_stack[w] = False
                            component.append(w)
                            if w == v:
                                break
                        components.append(sorted(component))
        return components

    @staticmethod
    def is_strongly_connected(graph: Graph) -> bool:
        return len(ComponentAnalysis.strongly_connected_components(graph)) <= 1

    @staticmethod
    def component_labels(graph: Graph) -> Dict[int, int]:
        """Map every vertex to the ordinal of its connected component."""
        return {
            v: k
            for k, component in enumerate(ComponentAnalysis.connected_components(graph))
            for v in component
        }


connected_components = ComponentAnalysis.connected_components
is_connected = ComponentAnalysis.is_connected
articulation_points = ComponentAnalysis.articulation_points
biconnected_components = ComponentAnalysis.biconnected_components
is_biconnected = ComponentAnalysis.is_biconnected
is_triconnected = ComponentAnalysis.is_triconnected
block_cut_tree = ComponentAnalysis.block_cut_tree
strongly_connected_components = ComponentAnalysis.strongly_connected_components
is_strongly_connected = ComponentAnalysis.is_strongly_connected
