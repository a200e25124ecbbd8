"""
Point and segment geometry on numpy coordinate arrays.

A layout is an ``(n, d)`` float array with one row per vertex index and
``d`` equal to 2 or 3.
"""

import math
import random
from typing import Optional, Tuple

import numpy as np

EPSILON = 1e-9


def centroid(layout: np.ndarray) -> np.ndarray:
    if len(layout) == 0:
        return np.zeros(layout.shape[1] if layout.ndim == 2 else 2)
    return layout.mean(axis=0)


def bounding_box(layout: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Get the lower-left and upper-right corners of the layout."""
    if len(layout) == 0:
        zero = np.zeros(layout.shape[1] if layout.ndim == 2 else 2)
        return zero, zero.copy()
    return layout.min(axis=0), layout.max(axis=0)


def rotation_matrix(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s], [s, c]])


def rotate(layout: np.ndarray, angle: float, center: Optional[np.ndarray] = None) -> np.ndarray:
    """Rotate a 2D layout counterclockwise about ``center`` (the centroid by default)."""
    if center is None:
        center = centroid(layout)
    return (layout - center) @ rotation_matrix(angle).T + center


def reflect(layout: np.ndarray, point: np.ndarray, direction: np.ndarray) -> np.ndarray:
    """Mirror a 2D layout in the line through ``point`` along ``direction``."""
    d = np.asarray(direction, dtype=float)
    d = d / np.linalg.norm(d)
    shifted = layout - point
    along = shifted @ d
    return point + 2 * np.outer(along, d) - shifted


def circle_points(count: int, radius: float = 1.0, start_angle: float = math.pi / 2) -> np.ndarray:
    """Vertices of a regular polygon, counterclockwise from ``start_angle``."""
    angles = start_angle + 2 * math.pi * np.arange(count) / max(count, 1)
    return radius * np.column_stack((np.cos(angles), np.sin(angles)))


def segment_intersection(
    p1: np.ndarray, p2: np.ndarray, q1: np.ndarray, q2: np.ndarray
) -> Optional[np.ndarray]:
    """
    Get the crossing point of segments p1p2 and q1q2.

    Only proper crossings count: touching at an endpoint, collinear overlap
    and parallel segments give None.
    """
    r = np.asarray(p2, dtype=float) - p1
    s = np.asarray(q2, dtype=float) - q1
    denominator = r[0] * s[1] - r[1] * s[0]
    if abs(denominator) < EPSILON:
        return None
    qp = np.asarray(q1, dtype=float) - p1
    t = (qp[0] * s[1] - qp[1] * s[0]) / denominator
    u = (qp[0] * r[1] - qp[1] * r[0]) / denominator
    if EPSILON < t < 1 - EPSILON and EPSILON < u < 1 - EPSILON:
        return np.asarray(p1, dtype=float) + t * r
    return None


def perturb_coincident(
    layout: np.ndarray, rng: random.Random, scale: float = 1e-3
) -> np.ndarray:
    """Move points sharing a position apart by a small random offset."""
    seen = set()
    result = layout.copy()
    for i, row in enumerate(layout):
        key = tuple(np.round(row, 12))
        if key in seen:
            result[i] = row + scale * np.array([rng.uniform(-1, 1) for _ in row])
        seen.add(key)
    return result


def scale_layout(layout: np.ndarray, diameter: float) -> np.ndarray:
    """Scale a layout about its centroid so its bounding box diagonal equals ``diameter``."""
    lo, hi = bounding_box(layout)
    extent = float(np.linalg.norm(hi - lo))
    if extent < EPSILON:
        return layout.copy()
    center = centroid(layout)
    return center + (layout - center) * (diameter / extent)
