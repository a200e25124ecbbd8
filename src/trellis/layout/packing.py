"""
Packing of component drawings.

Each component drawing is enclosed in its bounding rectangle plus a margin.
The rectangles are sorted by height, tallest first, and placed greedily on
shelves: a rectangle goes onto the first shelf with enough room left and a
new shelf is opened on top when none has. The strip width is chosen among
the widths the rectangles induce so that the packed area is closest to a
square.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .geometry import EPSILON, bounding_box

logger = logging.getLogger(__name__)

Offset = Tuple[float, float]


@dataclass
class Rectangle:
    """
    Axis-aligned rectangle given by its lower-left corner and size.

    Attributes:
        x (float): Left edge
        y (float): Bottom edge
        width (float): Horizontal extent
        height (float): Vertical extent
        index (Optional[int]): Position of the layout the rectangle encloses
    """

    x: float
    y: float
    width: float
    height: float
    index: Optional[int] = None

    @property
    def area(self) -> float:
        return self.width * self.height

    def intersects(self, other: "Rectangle") -> bool:
        """Check whether the interiors overlap."""
        return (
            self.x < other.x + other.width - EPSILON
            and other.x < self.x + self.width - EPSILON
            and self.y < other.y + other.height - EPSILON
            and other.y < self.y + self.height - EPSILON
        )


def layout_bounding_rect(layout: np.ndarray, margin: float = 0.0) -> Rectangle:
    """Get the bounding rectangle of a 2D layout, grown by ``margin`` on each side."""
    lo, hi = bounding_box(np.asarray(layout, dtype=float))
    return Rectangle(
        x=float(lo[0]) - margin,
        y=float(lo[1]) - margin,
        width=float(hi[0] - lo[0]) + 2 * margin,
        height=float(hi[1] - lo[1]) + 2 * margin,
    )


def _shelve(rects: Sequence[Rectangle], order: Sequence[int], width: float):
    """Shelf-pack ``rects`` in ``order`` into a strip of the given width."""
    shelves: List[List[float]] = []  # [bottom, height, filled width]
    placement: List[Offset] = [(0.0, 0.0)] * len(rects)
    top = 0.0
    for k in order:
        r = rects[k]
        for shelf in shelves:
            if shelf[2] + r.width <= width + EPSILON:
                placement[k] = (shelf[2], shelf[0])
                shelf[2] += r.width
                break
        else:
            shelves.append([top, r.height, r.width])
            placement[k] = (0.0, top)
            top += r.height
    used = max((s[2] for s in shelves), default=0.0)
    return placement, used, top


def pack_rectangles(rects: Sequence[Rectangle]) -> List[Offset]:
    """
    Place rectangles without overlap.

    Returns:
        The lower-left corner assigned to each rectangle, in input order
    """
    if not rects:
        return []
    order = sorted(range(len(rects)), key=lambda k: (-rects[k].height, -rects[k].width))
    widest = max(r.width for r in rects)
    total = 0.0
    candidates = set()
    for k in order:
        total += rects[k].width
        candidates.add(max(widest, total))

    best = None
    for width in sorted(candidates):
        placement, used, height = _shelve(rects, order, width)
        side = max(used, height)
        if best is None or side < best[0] - EPSILON:
            best = (side, placement)
    logger.debug(f"Packed {len(rects)} rectangles into a square of side {best[0]:.3f}")
    return best[1]


def translate_layout(layout: np.ndarray, offset: Sequence[float]) -> np.ndarray:
    return np.asarray(layout, dtype=float) + np.asarray(offset, dtype=float)


def compose_layouts(layouts: Sequence[np.ndarray], margin: float = 0.0) -> List[np.ndarray]:
    """
    Tile independent 2D layouts into shared coordinates.

    Every layout is translated so that its bounding rectangle lands on the
    corner assigned by the packer.
    """
    rects = []
    for k, x in enumerate(layouts):
        r = layout_bounding_rect(x, margin)
        r.index = k
        rects.append(r)
    placement = pack_rectangles(rects)
    return [
        translate_layout(x, (px - r.x, py - r.y))
        for x, r, (px, py) in zip(layouts, rects, placement)
    ]
