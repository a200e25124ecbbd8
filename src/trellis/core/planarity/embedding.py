"""
Planarity testing and combinatorial embedding.

Every biconnected block is embedded on its own with the face-splitting
method of Demoucron, Malgrange and Pertuiset:

1. Embed any cycle of the block; it bounds two faces.
2. Compute the fragments of the block relative to the embedded part: single
   unembedded edges between embedded vertices, and connected pieces of the
   unembedded vertices together with their attaching edges.
3. A face is admissible for a fragment if it contains all of the fragment's
   attachment vertices. A fragment with no admissible face proves the block
   non-planar. Otherwise a fragment with the fewest admissible faces is
   chosen, a path through it joining two attachments is drawn into the
   face, and the face splits in two.
4. Stop when every edge is embedded.

Block embeddings are then recombined along the block-cut tree: a child block
is spliced into a face of the already embedded part at their shared cut
vertex. Faces are returned as closed walks (lists of vertex indices); for a
connected planar graph they satisfy Euler's formula n - m + f = 2.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..exceptions import NotPlanarError
from ..graph import Graph
from ..graph_operations.components import Block, ComponentAnalysis

logger = logging.getLogger(__name__)

Face = List[int]


@dataclass
class Fragment:
    """A piece of the block not yet embedded.

    Attributes:
        attachments: Embedded vertices the fragment touches
        interior: Unembedded vertices of the fragment (empty for a single edge)
    """

    attachments: Set[int]
    interior: Set[int] = field(default_factory=set)
    edge: Optional[Tuple[int, int]] = None


def _local_cycle(adjacency: List[Set[int]]) -> List[int]:
    """Find a cycle by DFS; the input is 2-connected with at least 3 vertices."""
    parent = {0: -1}
    order = [0]
    stack = [(0, iter(sorted(adjacency[0])))]
    depth = {0: 0}
    while stack:
        v, it = stack[-1]
        for w in it:
            if w not in parent:
                parent[w] = v
                depth[w] = depth[v] + 1
                order.append(w)
                stack.append((w, iter(sorted(adjacency[w]))))
                break
            if w != parent[v] and depth[w] < depth[v]:
                cycle = [v]
                while cycle[-1] != w:
                    cycle.append(parent[cycle[-1]])
                cycle.reverse()
                return cycle
        else:
            stack.pop()
    raise ValueError("block has no cycle")


def _fragments(
    adjacency: List[Set[int]], embedded: Set[int], embedded_edges: Set[frozenset]
) -> List[Fragment]:
    fragments = []
    for u in sorted(embedded):
        for w in adjacency[u]:
            if u < w and w in embedded and frozenset((u, w)) not in embedded_edges:
                fragments.append(Fragment({u, w}, edge=(u, w)))
    seen: Set[int] = set()
    for start in range(len(adjacency)):
        if start in embedded or start in seen:
            continue
        interior = {start}
        attachments: Set[int] = set()
        queue = deque([start])
        seen.add(start)
        while queue:
            v = queue.popleft()
            for w in adjacency[v]:
                if w in embedded:
                    attachments.add(w)
                elif w not in seen:
                    seen.add(w)
                    interior.add(w)
                    queue.append(w)
        fragments.append(Fragment(attachments, interior))
    return fragments


def _fragment_path(fragment: Fragment, adjacency: List[Set[int]]) -> List[int]:
    """Find a path through the fragment between two distinct attachments."""
    if fragment.edge is not None:
        return list(fragment.edge)
    a = min(fragment.attachments)
    parent: Dict[int, int] = {a: -1}
    queue = deque([a])
    while queue:
        v = queue.popleft()
        for w in sorted(adjacency[v]):
            if w in parent:
                continue
            if w in fragment.interior:
                parent[w] = v
                queue.append(w)
            elif v != a and w in fragment.attachments:
                path = [w, v]
                while path[-1] != a:
                    path.append(parent[path[-1]])
                path.reverse()
                return path
    raise ValueError("fragment has fewer than two attachments")


def _split_face(face: Face, path: List[int]) -> Tuple[Face, Face]:
    """Split a simple face along a path joining two of its vertices."""
    a, b = path[0], path[-1]
    i, j = face.index(a), face.index(b)
    k = len(face)
    forward = [face[(i + t) % k] for t in range((j - i) % k + 1)]
    backward = [face[(j + t) % k] for t in range((i - j) % k + 1)]
    interior = path[1:-1]
    return forward + interior[::-1], backward + interior


def demoucron(adjacency: List[Set[int]]) -> Optional[List[Face]]:
    """
    Embed a 2-connected graph given by local adjacency sets.

    Returns:
        The list of faces, or None if the graph is not planar.
    """
    n = len(adjacency)
    m = sum(len(a) for a in adjacency) // 2
    if n == 1:
        return [[0]]
    if n == 2:
        return [[0, 1]]
    if m > 3 * n - 6:
        return None

    cycle = _local_cycle(adjacency)
    faces: List[Face] = [cycle, cycle[::-1]]
    embedded = set(cycle)
    embedded_edges = {frozenset((cycle[t], cycle[t - 1])) for t in range(len(cycle))}

    while len(embedded_edges) < m:
        face_sets = [set(f) for f in faces]
        chosen: Optional[Tuple[Fragment, List[int]]] = None
        for fragment in _fragments(adjacency, embedded, embedded_edges):
            admissible = [k for k, fs in enumerate(face_sets) if fragment.attachments <= fs]
            if not admissible:
                logger.debug(
                    f"Fragment attached at {sorted(fragment.attachments)} fits no face"
                )
                return None
            if chosen is None or len(admissible) < len(chosen[1]):
                chosen = (fragment, admissible)
                if len(admissible) == 1:
                    break
        fragment, admissible = chosen
        path = _fragment_path(fragment, adjacency)
        k = admissible[0]
        first, second = _split_face(faces[k], path)
        faces[k] = first
        faces.append(second)
        embedded.update(path)
        embedded_edges.update(frozenset(e) for e in zip(path, path[1:]))
    return faces


def _splice(parent_face: Face, child_face: Face, cut: int) -> Face:
    """Insert the walk around ``child_face`` into ``parent_face`` at ``cut``."""
    i = parent_face.index(cut)
    j = child_face.index(cut)
    rotated = child_face[j:] + child_face[:j]
    return parent_face[: i + 1] + rotated[1:] + [cut] + parent_face[i + 1 :]


class PlanarEmbedder:
    """
    Computes combinatorial embeddings of planar graphs.

    Arc directions are ignored: a digraph is embedded through its underlying
    graph, whose vertex indices are the same.
    """

    def __init__(self, graph: Graph):
        self.graph = graph.underlying() if graph.is_directed() else graph

    def _embed_block(self, block: Block) -> Optional[List[Face]]:
        vertices = block.vertices
        position = {v: k for k, v in enumerate(vertices)}
        adjacency: List[Set[int]] = [set() for _ in vertices]
        for u, v in block.edges:
            adjacency[position[u]].add(position[v])
            adjacency[position[v]].add(position[u])
        faces = demoucron(adjacency)
        if faces is None:
            return None
        return [[vertices[k] for k in face] for face in faces]

    def _embed_component(self, blocks: List[Block]) -> Optional[List[Face]]:
        block_faces = []
        for block in blocks:
            faces = self._embed_block(block)
            if faces is None:
                return None
            block_faces.append(faces)

        merged = list(block_faces[0])
        placed = set(blocks[0].vertices)
        remaining = list(range(1, len(blocks)))
        while remaining:
            for idx in remaining:
                shared = placed.intersection(blocks[idx].vertices)
                if not shared:
                    continue
                cut = min(shared)
                host = next(k for k, f in enumerate(merged) if cut in f)
                child_faces = block_faces[idx]
                outer = max(
                    (k for k, f in enumerate(child_faces) if cut in f),
                    key=lambda k: len(child_faces[k]),
                )
                merged[host] = _splice(merged[host], child_faces[outer], cut)
                merged.extend(f for k, f in enumerate(child_faces) if k != outer)
                placed.update(blocks[idx].vertices)
                remaining.remove(idx)
                break
            else:
                raise ValueError("blocks of a component do not form a tree")
        return merged

    def embed(self) -> Optional[List[Face]]:
        """Embed every connected component; None if the graph is not planar."""
        decomposition = ComponentAnalysis.decompose(self.graph)
        component_of = ComponentAnalysis.component_labels(self.graph)
        grouped: Dict[int, List[Block]] = {}
        for block in decomposition.blocks:
            grouped.setdefault(component_of[block.vertices[0]], []).append(block)
        faces: List[Face] = []
        for key in sorted(grouped):
            component_faces = self._embed_component(grouped[key])
            if component_faces is None:
                return None
            faces.extend(component_faces)
        logger.debug(f"Embedded graph with {len(faces)} faces")
        return faces


def is_planar(graph: Graph) -> bool:
    """Check whether the graph has a planar embedding."""
    return PlanarEmbedder(graph).embed() is not None


def planar_embedding(graph: Graph) -> List[Face]:
    """
    Compute the faces of a planar embedding.

    Every connected component is embedded on its own, with its own outer
    face, so V - E + F = 2C for a graph with C components. An isolated
    vertex forms the single face ``[v]``.

    Raises:
        NotPlanarError: If the graph is not planar
    """
    faces = PlanarEmbedder(graph).embed()
    if faces is None:
        raise NotPlanarError("Graph is not planar")
    return faces


def choose_outer_face(faces: List[Face]) -> int:
    """Pick the face to draw as the outer one: the longest walk."""
    if not faces:
        raise ValueError("Embedding has no faces")
    return max(range(len(faces)), key=lambda k: len(faces[k]))
