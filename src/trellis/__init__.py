"""
Trellis - Graph Theory Engine

This package provides a graph store together with the classical algorithms
of graph theory and a drawing pipeline. It includes:

- Graph construction, attributes and transactional mutation
- Structural analysis (components, blocks, cycles, paths, matchings, cliques)
- Planarity testing, embedding and triangulation
- Spring, multilevel, tree, planar and circular layouts
- DOT and JSON import/export
- Graph templates and random graphs

For more information, please see the documentation.
"""

__version__ = "0.1.0"

from .config import DrawingConfig, LayoutConfig
from .core.enums import LayoutStyle
from .core.graph import Graph
from .core.models import Edge, Vertex
from .layout import draw_graph, make_layout

__all__ = [
    "Graph",
    "Vertex",
    "Edge",
    "LayoutStyle",
    "LayoutConfig",
    "DrawingConfig",
    "draw_graph",
    "make_layout",
]
