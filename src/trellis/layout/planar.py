"""
Planar and circular layouts.

Both layouts pin a cycle of the graph to a regular polygon and place every
other vertex at the barycenter of its neighbors (Tutte's method). The
barycentric conditions form the sparse linear system L_ff x_f = B x_b,
where L_ff is the graph Laplacian restricted to the free vertices. For the
planar layout the system is solved over a triangulation of the embedding,
which makes the drawing free of crossings when the outer face is simple.
"""

import logging
from collections import deque
from typing import Dict, List, Optional, Sequence

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.linalg import spsolve

from ..core.exceptions import NotConnectedError
from ..core.graph import Graph
from ..core.graph_operations.components import ComponentAnalysis
from ..core.planarity import Triangulator, planar_embedding
from .geometry import circle_points

logger = logging.getLogger(__name__)


def _polygon_order(walk: Sequence[int]) -> List[int]:
    seen = set()
    order = []
    for v in walk:
        if v not in seen:
            seen.add(v)
            order.append(v)
    return order


def barycentric_layout(
    graph: Graph, fixed: Dict[int, np.ndarray], include_temp_edges: bool = True
) -> np.ndarray:
    """
    Place the free vertices at the barycenters of their neighbors.

    Args:
        graph: Graph whose (temporary) edges define the barycenters
        fixed: Positions of the pinned vertices

    Raises:
        NotConnectedError: If some free vertex cannot reach a pinned one
    """
    n = graph.vertex_count()
    layout = np.zeros((n, 2))
    for v, p in fixed.items():
        layout[v] = p
    free = [v for v in range(n) if v not in fixed]
    if not free:
        return layout

    adjacency = [set(graph.neighbors(v, include_temp_edges)) for v in range(n)]
    if graph.is_directed():
        for v in range(n):
            for w in adjacency[v].copy():
                adjacency[w].add(v)

    reached = set(fixed)
    queue = deque(fixed)
    while queue:
        v = queue.popleft()
        for w in adjacency[v]:
            if w not in reached:
                reached.add(w)
                queue.append(w)
    if len(reached) < n:
        raise NotConnectedError("Every vertex must be connected to the pinned cycle")

    column = {v: k for k, v in enumerate(free)}
    rows, cols, data = [], [], []
    rhs = np.zeros((len(free), 2))
    for v in free:
        r = column[v]
        rows.append(r)
        cols.append(r)
        data.append(float(len(adjacency[v])))
        for w in adjacency[v]:
            if w in column:
                rows.append(r)
                cols.append(column[w])
                data.append(-1.0)
            else:
                rhs[r] += fixed[w]
    laplacian = csr_matrix((data, (rows, cols)), shape=(len(free), len(free)))
    x = spsolve(laplacian, rhs[:, 0])
    y = spsolve(laplacian, rhs[:, 1])
    layout[free] = np.column_stack((np.atleast_1d(x), np.atleast_1d(y)))
    return layout


def circular_layout(
    graph: Graph, cycle: Optional[Sequence[int]] = None, radius: float = 1.0
) -> np.ndarray:
    """
    Place ``cycle`` on a circle and the remaining vertices inside it.

    Args:
        cycle: Vertices to put on the circle, in order; all vertices when omitted
    """
    n = graph.vertex_count()
    cycle = list(range(n)) if cycle is None else _polygon_order(cycle)
    points = circle_points(len(cycle), radius)
    fixed = {v: points[k] for k, v in enumerate(cycle)}
    return barycentric_layout(graph, fixed, include_temp_edges=False)


def planar_layout(graph: Graph, radius: float = 1.0) -> np.ndarray:
    """
    Draw a connected planar graph without crossings.

    The embedding is triangulated on a scratch copy, the longest face is
    pinned to a regular polygon and the rest is solved barycentrically.

    Raises:
        NotPlanarError: If the graph is not planar
        NotConnectedError: If the graph is not connected
    """
    n = graph.vertex_count()
    if n == 0:
        return np.zeros((0, 2))
    if not ComponentAnalysis.is_connected(graph):
        raise NotConnectedError("Planar layout requires a connected graph")
    faces = planar_embedding(graph)
    scratch = graph.underlying()
    triangulated = Triangulator(scratch, faces).triangulate()
    outer = _polygon_order(triangulated[0])
    logger.debug(
        f"Planar layout pins an outer face of {len(outer)} vertices, "
        f"{scratch.edge_count(include_temp_edges=True) - scratch.edge_count()} chords added"
    )
    points = circle_points(len(outer), radius)
    fixed = {v: points[k] for k, v in enumerate(outer)}
    return barycentric_layout(scratch, fixed, include_temp_edges=True)
