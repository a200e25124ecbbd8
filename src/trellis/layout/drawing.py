"""
Layout dispatch and rendering into drawing primitives.

``make_layout`` turns a graph into one position per vertex. Components are
laid out independently, each with the requested style or, by default, with
the style suggested by its structure (trees as trees, planar graphs planar,
anything else by springs). Every non-tree drawing is rotated into its
canonical orientation and scaled to a diameter proportional to the square
root of its size, and the component drawings are then packed together.

``draw_graph`` renders the composed layout into segments, points and
labels.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from ..config import DrawingConfig, LayoutConfig
from ..core.enums import LayoutStyle
from ..core.exceptions import (
    InvalidDrawingMethodError,
    InvalidRootError,
    NotATreeError,
    NotConnectedError,
)
from ..core.graph import COLOR, POSITION, Graph
from ..core.graph_operations.components import ComponentAnalysis
from ..core.graph_operations.traversal import find_cycle, is_tree
from ..core.planarity import is_planar
from .force_directed import multilevel_layout, spring_layout
from .geometry import scale_layout
from .packing import compose_layouts
from .planar import circular_layout, planar_layout
from .symmetry import best_rotation
from .tree import tree_layout

logger = logging.getLogger(__name__)

Coordinates = Tuple[float, ...]


@dataclass
class Segment:
    """An edge drawn as a straight segment."""

    start: Coordinates
    end: Coordinates
    color: int
    arrow: bool = False
    weight: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"start": list(self.start), "end": list(self.end), "color": self.color}
        if self.arrow:
            data["arrow"] = True
        if self.weight is not None:
            data["weight"] = self.weight
        return data


@dataclass
class Point:
    """A vertex drawn as a dot."""

    position: Coordinates
    color: int

    def to_dict(self) -> Dict[str, Any]:
        return {"position": list(self.position), "color": self.color}


@dataclass
class Label:
    """Text placed next to a vertex, in the quadrant with the fewest edges."""

    position: Coordinates
    text: str
    quadrant: int

    def to_dict(self) -> Dict[str, Any]:
        return {"position": list(self.position), "text": self.text, "quadrant": self.quadrant}


@dataclass
class Drawing:
    """Primitives of a rendered graph, together with the layout they came from."""

    layout: np.ndarray
    segments: List[Segment] = field(default_factory=list)
    points: List[Point] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": int(self.layout.shape[1]) if self.layout.ndim == 2 else 2,
            "segments": [s.to_dict() for s in self.segments],
            "points": [p.to_dict() for p in self.points],
            "labels": [lbl.to_dict() for lbl in self.labels],
        }


def guess_style(graph: Graph) -> LayoutStyle:
    """Suggest a style for a connected graph from its structure."""
    if is_tree(graph):
        return LayoutStyle.TREE
    if is_planar(graph):
        return LayoutStyle.PLANAR
    return LayoutStyle.SPRING


def _resolve_style(
    style: LayoutStyle, roots: Optional[Sequence[Hashable]], cycle: Optional[Sequence[Hashable]]
) -> LayoutStyle:
    if roots is not None and cycle is not None:
        raise InvalidDrawingMethodError("Tree roots and a circle cannot be combined")
    if roots is not None:
        if style not in (LayoutStyle.DEFAULT, LayoutStyle.TREE):
            raise InvalidDrawingMethodError(f"Tree roots given for style '{style.value}'")
        return LayoutStyle.TREE
    if cycle is not None:
        if style not in (LayoutStyle.DEFAULT, LayoutStyle.CIRCLE):
            raise InvalidDrawingMethodError(f"A circle given for style '{style.value}'")
        return LayoutStyle.CIRCLE
    return style


def _root_indices(
    graph: Graph, roots: Sequence[Hashable], components: List[List[int]]
) -> List[int]:
    """Match one root label to every component."""
    if len(roots) != len(components):
        raise InvalidRootError(
            f"Expected {len(components)} roots, one per component, got {len(roots)}"
        )
    remaining = [graph.vertex_index(r) for r in roots]
    chosen = []
    for component in components:
        members = set(component)
        hit = next((r for r in remaining if r in members), None)
        if hit is None:
            raise InvalidRootError("A component has no root")
        chosen.append(hit)
        remaining.remove(hit)
    return chosen


def _component_layout(
    component: Graph,
    style: LayoutStyle,
    explicit: bool,
    root: int,
    cycle: Optional[List[int]],
    config: LayoutConfig,
) -> np.ndarray:
    sep = config.separation
    if style == LayoutStyle.TREE:
        if explicit and not is_tree(component):
            raise NotATreeError("Tree style requires every component to be a tree")
        return tree_layout(component, root, sep)
    if style == LayoutStyle.PLANAR:
        x = planar_layout(component)
    elif style == LayoutStyle.CIRCLE:
        if cycle is None:
            cycle = find_cycle(component, randomize=False) or list(
                range(component.vertex_count())
            )
        x = circular_layout(component, cycle)
    elif style == LayoutStyle.MULTILEVEL:
        x = multilevel_layout(component, 2, config)
    else:
        x = spring_layout(component, 2, config)
    x = best_rotation(component, x)
    return scale_layout(x, sep * math.sqrt(component.vertex_count()))


def make_layout(
    graph: Graph,
    style: LayoutStyle = LayoutStyle.DEFAULT,
    roots: Optional[Sequence[Hashable]] = None,
    cycle: Optional[Sequence[Hashable]] = None,
    config: Optional[LayoutConfig] = None,
) -> np.ndarray:
    """
    Compute a layout of the whole graph.

    Args:
        graph: Graph to lay out; arc directions are ignored
        style: Layout strategy; chosen per component when DEFAULT
        roots: Labels of the tree roots, one per component (implies TREE)
        cycle: Labels of the cycle to draw on a circle (implies CIRCLE)
        config: Layout parameters

    Returns:
        An ``(n, 2)`` array, or ``(n, 3)`` for SPRING_3D, indexed like the graph

    Raises:
        InvalidDrawingMethodError: If the options contradict each other
        InvalidRootError: If the roots do not pick one vertex per component
        NotATreeError: If TREE is requested for a graph that is not a forest
        NotPlanarError: If PLANAR is requested for a non-planar graph
        NotConnectedError: For 3D drawings or explicit circles of disconnected graphs
        VertexNotFoundError: If a root or cycle label is unknown
    """
    if not isinstance(style, LayoutStyle):
        raise InvalidDrawingMethodError(f"Unknown drawing method: {style!r}")
    config = config or LayoutConfig()
    style = _resolve_style(style, roots, cycle)
    g = graph.underlying()
    n = g.vertex_count()

    if style == LayoutStyle.SPRING_3D:
        if not ComponentAnalysis.is_connected(g):
            raise NotConnectedError("3D drawing requires a connected graph")
        x = spring_layout(g, 3, config)
        return scale_layout(x, config.separation * math.sqrt(max(n, 1)))

    components = ComponentAnalysis.connected_components(g)
    root_indices = _root_indices(g, roots, components) if roots is not None else None
    cycle_indices = None
    if cycle is not None:
        if len(components) > 1:
            raise NotConnectedError("Circular drawing along a cycle requires a connected graph")
        cycle_indices = [g.vertex_index(v) for v in cycle]

    explicit = style != LayoutStyle.DEFAULT
    layouts = []
    for k, members in enumerate(components):
        component = g.induce_subgraph(members, copy_attributes=False)
        local = {v: i for i, v in enumerate(members)}
        comp_style = style if explicit else guess_style(component)
        root = local[root_indices[k]] if root_indices is not None else 0
        comp_cycle = [local[v] for v in cycle_indices] if cycle_indices is not None else None
        layouts.append(
            _component_layout(component, comp_style, explicit, root, comp_cycle, config)
        )
        logger.debug(f"Component {k} of {len(members)} vertices drawn as {comp_style.value}")

    result = np.zeros((n, 2))
    for members, x in zip(components, compose_layouts(layouts, config.separation / 4)):
        result[members] = x
    return result


def label_quadrant(graph: Graph, layout: np.ndarray, i: int) -> int:
    """
    Pick the quadrant around vertex ``i`` crossed by the fewest edges.

    Quadrants are numbered counterclockwise from the upper right (0) to
    the lower right (3).
    """
    counts = [0, 0, 0, 0]
    for j in set(graph.neighbors(i)) | set(graph.in_neighbors(i)):
        dx, dy = layout[j][0] - layout[i][0], layout[j][1] - layout[i][1]
        if dx == 0 and dy == 0:
            continue
        angle = math.atan2(dy, dx) % (2 * math.pi)
        counts[int(angle // (math.pi / 2)) % 4] += 1
    return min(range(4), key=lambda q: counts[q])


def _label_position(position: np.ndarray, quadrant: int, offset: float) -> Coordinates:
    angle = math.pi / 4 + quadrant * math.pi / 2
    p = np.array(position, dtype=float)
    p[0] += offset * math.cos(angle)
    p[1] += offset * math.sin(angle)
    return tuple(float(c) for c in p)


def _coords(p: np.ndarray) -> Coordinates:
    return tuple(float(c) for c in p)


def draw_graph(
    graph: Graph,
    style: LayoutStyle = LayoutStyle.DEFAULT,
    roots: Optional[Sequence[Hashable]] = None,
    cycle: Optional[Sequence[Hashable]] = None,
    config: Optional[DrawingConfig] = None,
    layout_config: Optional[LayoutConfig] = None,
) -> Drawing:
    """
    Lay out a graph and render it into drawing primitives.

    Stored vertex positions are used as they are when every vertex has one
    and neither a style nor roots or a cycle are requested.
    """
    config = config or DrawingConfig()
    stored = graph.positions()
    if stored is not None and style == LayoutStyle.DEFAULT and roots is None and cycle is None:
        layout = np.array(stored, dtype=float)
    else:
        layout = make_layout(graph, style, roots, cycle, layout_config)

    drawing = Drawing(layout=layout)
    directed = graph.is_directed()
    weighted = graph.is_weighted()
    for i, j in graph.edge_pairs():
        color = graph.get_edge_attribute(i, j, COLOR, config.edge_color)
        drawing.segments.append(
            Segment(
                start=_coords(layout[i]),
                end=_coords(layout[j]),
                color=int(color),
                arrow=directed and config.arrows,
                weight=graph.weight(i, j) if weighted and config.weights else None,
            )
        )
    for i in range(graph.vertex_count()):
        color = graph.get_vertex_attribute(i, COLOR, config.vertex_color)
        drawing.points.append(Point(_coords(layout[i]), int(color)))
        if config.labels:
            quadrant = label_quadrant(graph, layout, i)
            drawing.labels.append(
                Label(
                    _label_position(layout[i], quadrant, config.label_offset),
                    str(graph.label(i)),
                    quadrant,
                )
            )
    logger.debug(
        f"Drew {len(drawing.points)} vertices and {len(drawing.segments)} edges "
        f"in {layout.shape[1] if layout.ndim == 2 else 2}D"
    )
    return drawing


def store_layout(graph: Graph, layout: np.ndarray) -> None:
    """Save a layout as the position attribute of every vertex."""
    with graph.transaction():
        for i in range(graph.vertex_count()):
            graph.set_vertex_attribute(i, POSITION, [float(c) for c in layout[i]])
