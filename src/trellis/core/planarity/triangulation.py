"""
Triangulation of planar embeddings.

The triangulator refines the bounded faces of an embedding until each of them
is a triangle, adding only temporary edges so the graph's real edge set and
its attributes are never touched. A face is reduced by cutting off corners:
a corner (a, c, b) of the face walk is cut by the chord a-b, which leaves the
triangle a, c, b behind. Corners at repeated vertices of the walk (cut
vertices of the graph) are folded first; otherwise the cuts proceed along
the walk in a zigzag so that no single vertex collects all the chords.
"""

import logging
from typing import List, Optional

from ..graph import Graph
from .embedding import Face, choose_outer_face

logger = logging.getLogger(__name__)


class Triangulator:
    """
    Adds temporary edges until every bounded face is a triangle.

    Attributes:
        graph (Graph): Undirected graph the embedding belongs to
        faces (List[Face]): Faces of its planar embedding
    """

    def __init__(self, graph: Graph, faces: List[Face]):
        self.graph = graph
        self.faces = [list(f) for f in faces]

    def _joined(self, a: int, b: int) -> bool:
        return a == b or self.graph.has_edge(a, b, include_temp_edges=True) or self.graph.has_edge(
            b, a, include_temp_edges=True
        )

    def _cut_position(self, walk: Face, start: int) -> Optional[int]:
        k = len(walk)
        repeated = {v for v in walk if walk.count(v) > 1}
        candidates = [(start + t) % k for t in range(k)]
        if repeated:
            candidates.sort(key=lambda i: walk[i] not in repeated)
        for i in candidates:
            a, b = walk[i - 1], walk[(i + 1) % k]
            if not self._joined(a, b):
                return i
        return None

    def triangulate_face(self, face: Face) -> List[Face]:
        """Cut corners off one face; returns the triangles produced."""
        walk = list(face)
        triangles: List[Face] = []
        position = 1
        while len(walk) > 3:
            i = self._cut_position(walk, position)
            if i is None:
                logger.debug(f"Face of length {len(walk)} could not be reduced further")
                break
            k = len(walk)
            a, c, b = walk[i - 1], walk[i], walk[(i + 1) % k]
            self.graph.add_temporary_edge(a, b)
            triangles.append([a, c, b])
            del walk[i]
            # continue from the opposite end of the new chord
            position = (i + len(walk) // 2) % len(walk)
        triangles.append(walk)
        return triangles

    def triangulate(self, outer_face: Optional[int] = None) -> List[Face]:
        """
        Triangulate every face except the outer one.

        Args:
            outer_face: Index of the outer face; the longest face when omitted

        Returns:
            The refined face list, outer face first.
        """
        if not self.faces:
            return []
        if outer_face is None:
            outer_face = choose_outer_face(self.faces)
        result: List[Face] = [self.faces[outer_face]]
        for k, face in enumerate(self.faces):
            if k == outer_face:
                continue
            result.extend(self.triangulate_face(face))
        logger.debug(f"Triangulated {len(self.faces) - 1} bounded faces into {len(result) - 1}")
        return result
