"""
Symmetry detection and orientation of 2D layouts.
"""

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from ..core.graph import Graph
from .geometry import (
    EPSILON,
    bounding_box,
    centroid,
    reflect,
    rotate,
    segment_intersection,
)

logger = logging.getLogger(__name__)

# Fraction of mean edge length within which a reflected point counts as a hit
MATCH_TOLERANCE = 0.1
# Score an axis must reach before it decides the orientation
SYMMETRY_THRESHOLD = 0.75
ROTATION_SAMPLES = 90
MAX_AXIS_CANDIDATES = 400
# Larger drawings skip the axis search and only minimize the bounding box
SYMMETRY_VERTEX_LIMIT = 200
SYMMETRY_EDGE_LIMIT = 400


def edge_crossings(graph: Graph, layout: np.ndarray) -> List[Tuple[int, int, np.ndarray]]:
    """
    Find the proper crossings of a straight-line drawing.

    Returns:
        ``(e, f, point)`` triples where ``e`` and ``f`` index ``graph.edge_pairs()``
    """
    pairs = graph.edge_pairs()
    crossings = []
    for e in range(len(pairs)):
        a, b = pairs[e]
        for f in range(e + 1, len(pairs)):
            c, d = pairs[f]
            if len({a, b, c, d}) < 4:
                continue
            point = segment_intersection(layout[a], layout[b], layout[c], layout[d])
            if point is not None:
                crossings.append((e, f, point))
    return crossings


def promote_edge_crossings(graph: Graph, layout: np.ndarray) -> Tuple[Graph, np.ndarray]:
    """
    Turn every edge crossing of a 2D drawing into a vertex.

    The graph is not modified. The returned copy has one extra vertex per
    crossing, labelled ``("crossing", k)``, and every crossed edge is split
    into a path through its crossing vertices.

    Returns:
        The planarized copy and its layout
    """
    base = graph.underlying() if graph.is_directed() else graph
    result = base.copy()
    pairs = base.edge_pairs()
    crossings = edge_crossings(base, layout)
    if not crossings:
        return result, np.array(layout, dtype=float)

    splits = {}
    points = []
    for k, (e, f, point) in enumerate(crossings):
        index = result.add_vertex(("crossing", k))
        points.append(point)
        for edge in (e, f):
            a = pairs[edge][0]
            t = float(np.linalg.norm(point - layout[a]))
            splits.setdefault(edge, []).append((t, index))

    with result.transaction():
        for edge, cuts in splits.items():
            a, b = pairs[edge]
            result.remove_edge(a, b)
            trail = [a] + [index for _, index in sorted(cuts)] + [b]
            for u, v in zip(trail, trail[1:]):
                result.add_edge(u, v)
    extended = np.vstack([np.asarray(layout, dtype=float), np.array(points)])
    logger.debug(f"Promoted {len(crossings)} edge crossings to vertices")
    return result, extended


def _mean_edge_length(graph: Graph, layout: np.ndarray) -> float:
    pairs = graph.edge_pairs()
    if not pairs:
        lo, hi = bounding_box(layout)
        return max(float(np.linalg.norm(hi - lo)), 1.0) / max(len(layout), 1)
    lengths = [np.linalg.norm(layout[i] - layout[j]) for i, j in pairs]
    return max(float(np.mean(lengths)), EPSILON)


def symmetry_score(
    layout: np.ndarray, point: np.ndarray, direction: np.ndarray, tolerance: float
) -> float:
    """Fraction of points whose mirror image lands on some point of the layout."""
    mirrored = reflect(layout, point, direction)
    delta = mirrored[:, None, :] - layout[None, :, :]
    nearest = np.sqrt(np.einsum("ijk,ijk->ij", delta, delta)).min(axis=1)
    return float(np.mean(nearest <= tolerance))


def _candidate_directions(layout: np.ndarray, center: np.ndarray) -> List[np.ndarray]:
    candidates = []
    for p in layout:
        d = p - center
        if np.linalg.norm(d) > EPSILON:
            candidates.append(d)
    n = len(layout)
    for i in range(n):
        for j in range(i + 1, n):
            d = layout[j] - layout[i]
            if np.linalg.norm(d) > EPSILON:
                candidates.append(np.array([-d[1], d[0]]))
            if len(candidates) >= MAX_AXIS_CANDIDATES:
                return candidates
    return candidates


def axis_of_symmetry(
    graph: Graph, layout: np.ndarray
) -> Optional[Tuple[np.ndarray, np.ndarray, float]]:
    """
    Find the mirror axis that best matches the drawing with itself.

    Edge crossings are promoted to points first so that the axis respects
    the picture and not only the vertex positions. Candidate axes pass
    through the centroid, either towards a point or perpendicular to the
    segment joining two points.

    Returns:
        ``(point, direction, score)`` of the best axis, None for fewer than two points
    """
    layout = np.asarray(layout, dtype=float)
    if len(layout) < 2 or layout.shape[1] != 2:
        return None
    planarized, extended = promote_edge_crossings(graph, layout)
    center = centroid(extended)
    tolerance = MATCH_TOLERANCE * _mean_edge_length(planarized, extended)

    best = None
    for direction in _candidate_directions(extended, center):
        direction = direction / np.linalg.norm(direction)
        score = symmetry_score(extended, center, direction, tolerance)
        if best is None or score > best[2] + EPSILON:
            best = (center, direction, score)
            if score >= 1.0:
                break
    return best


def bounding_area(layout: np.ndarray) -> float:
    lo, hi = bounding_box(layout)
    return float(np.prod(hi - lo))


def best_rotation(graph: Graph, layout: np.ndarray) -> np.ndarray:
    """
    Rotate a 2D layout into a canonical orientation.

    A clearly symmetric drawing is turned so that its axis of symmetry is
    vertical; any other drawing is turned to the orientation of smallest
    bounding box, wider than tall. 3D layouts are returned unchanged.
    """
    layout = np.asarray(layout, dtype=float)
    if len(layout) < 2 or layout.shape[1] != 2:
        return layout.copy()

    axis = None
    if len(layout) <= SYMMETRY_VERTEX_LIMIT and graph.edge_count() <= SYMMETRY_EDGE_LIMIT:
        axis = axis_of_symmetry(graph, layout)
    if axis is not None and axis[2] >= SYMMETRY_THRESHOLD:
        center, direction, score = axis
        angle = math.pi / 2 - math.atan2(direction[1], direction[0])
        logger.debug(f"Orienting layout along axis of symmetry with score {score:.2f}")
        return rotate(layout, angle, center)

    best_angle, best_area = 0.0, bounding_area(layout)
    for k in range(1, ROTATION_SAMPLES):
        angle = (math.pi / 2) * k / ROTATION_SAMPLES
        area = bounding_area(rotate(layout, angle))
        if area < best_area - EPSILON:
            best_angle, best_area = angle, area
    result = rotate(layout, best_angle)
    lo, hi = bounding_box(result)
    if hi[1] - lo[1] > hi[0] - lo[0] + EPSILON:
        result = rotate(result, math.pi / 2)
    return result
