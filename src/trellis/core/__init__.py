"""
Core graph store and algorithms.

This module provides the graph data structure together with the analyses
built on it, including:
- Graph store with attributes and transactional mutation
- Traversal and component analysis
- Shortest paths
- Maximum matching
- Cliques, colorings and independent sets
- Planarity testing and embedding
"""

from .enums import AttributeTag, Color, LayoutStyle
from .exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    DirectionMismatchError,
    EdgeNotFoundError,
    GraphOperationError,
    InvalidDrawingMethodError,
    InvalidRootError,
    NotAcyclicError,
    NotAGraphError,
    NotAGraphicSequenceError,
    NotATreeError,
    NotConnectedError,
    NotPlanarError,
    ReadFailureError,
    ResourceNotFoundError,
    ValidationError,
    VertexNotFoundError,
    WeightMismatchError,
)
from .graph import Graph
from .graph_operations import ComponentAnalysis, SubgraphExtractor
from .graph_paths import PathFinding
from .matching import MatchingMaximizer
from .models import Edge, Vertex

__all__ = [
    # Enums
    "AttributeTag",
    "Color",
    "LayoutStyle",
    # Models
    "Vertex",
    "Edge",
    # Graph operations
    "Graph",
    "ComponentAnalysis",
    "SubgraphExtractor",
    "PathFinding",
    "MatchingMaximizer",
    # Exceptions
    "GraphOperationError",
    "NotAGraphError",
    "DirectionMismatchError",
    "WeightMismatchError",
    "ResourceNotFoundError",
    "VertexNotFoundError",
    "EdgeNotFoundError",
    "NotATreeError",
    "NotConnectedError",
    "NotPlanarError",
    "NotAcyclicError",
    "InvalidRootError",
    "InvalidDrawingMethodError",
    "DimensionMismatchError",
    "NotAGraphicSequenceError",
    "ReadFailureError",
    "ValidationError",
    "ConfigurationError",
]
