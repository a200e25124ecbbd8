"""Layout algorithms and drawing dispatch."""

from .drawing import Drawing, Label, Point, Segment, draw_graph, make_layout, store_layout
from .force_directed import force_directed_placement, multilevel_layout, spring_layout
from .packing import Rectangle, compose_layouts, pack_rectangles
from .planar import circular_layout, planar_layout
from .symmetry import axis_of_symmetry, best_rotation, promote_edge_crossings
from .tree import forest_layout, tree_layout

__all__ = [
    "Drawing",
    "Segment",
    "Point",
    "Label",
    "Rectangle",
    "draw_graph",
    "make_layout",
    "store_layout",
    "force_directed_placement",
    "multilevel_layout",
    "spring_layout",
    "tree_layout",
    "forest_layout",
    "planar_layout",
    "circular_layout",
    "pack_rectangles",
    "compose_layouts",
    "best_rotation",
    "axis_of_symmetry",
    "promote_edge_crossings",
]
