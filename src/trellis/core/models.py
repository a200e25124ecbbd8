"""
Vertex and edge models for the graph store.

A vertex owns its label, its attribute map and its outgoing adjacency. For
undirected graphs both endpoints of an edge reference the very same
edge-attribute dictionary, so an attribute written through (i, j) is seen
through (j, i).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional


@dataclass
class Vertex:
    """
    A vertex of the graph store.

    Attributes:
        label (Hashable): Opaque vertex label (integer, symbol or string)
        attributes (Dict[str, Any]): Per-vertex attribute map
        neighbors (List[int]): Indices of adjacent (out-)neighbors in insertion order
        edge_attributes (Dict[int, Dict[str, Any]]): Attribute map of each incident edge
        temp_neighbors (List[int]): Neighbors reached through temporary edges
    """

    label: Hashable
    attributes: Dict[str, Any] = field(default_factory=dict)
    neighbors: List[int] = field(default_factory=list)
    edge_attributes: Dict[int, Dict[str, Any]] = field(default_factory=dict)
    temp_neighbors: List[int] = field(default_factory=list)

    def __post_init__(self):
        """Validate vertex after initialization."""
        try:
            hash(self.label)
        except TypeError:
            raise TypeError(f"vertex label must be hashable, got {type(self.label).__name__}")

    def has_neighbor(self, index: int, include_temp_edges: bool = True) -> bool:
        """Check whether ``index`` is adjacent to this vertex."""
        if index in self.edge_attributes:
            return True
        return include_temp_edges and index in self.temp_neighbors

    def add_neighbor(self, index: int, attributes: Optional[Dict[str, Any]] = None) -> None:
        """Append a neighbor, or replace the attribute map of an existing one."""
        if index not in self.edge_attributes:
            self.neighbors.append(index)
        self.edge_attributes[index] = attributes if attributes is not None else {}

    def remove_neighbor(self, index: int) -> None:
        """Drop a neighbor together with its edge attributes."""
        if index in self.edge_attributes:
            self.neighbors.remove(index)
            del self.edge_attributes[index]

    def renumber(self, mapping: Dict[int, int]) -> None:
        """Rewrite neighbor references, dropping indices absent from ``mapping``."""
        self.neighbors = [mapping[j] for j in self.neighbors if j in mapping]
        self.edge_attributes = {
            mapping[j]: attr for j, attr in self.edge_attributes.items() if j in mapping
        }
        self.temp_neighbors = [mapping[j] for j in self.temp_neighbors if j in mapping]


@dataclass(frozen=True)
class Edge:
    """
    Read-only view of an edge, produced by ``Graph.get_edges``.

    Attributes:
        source (int): Index of the tail vertex
        target (int): Index of the head vertex
        attributes (Dict[str, Any]): The edge-attribute map (shared, not copied)
    """

    source: int
    target: int
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def weight(self) -> Any:
        """Edge weight, or 1 when the edge carries none."""
        return self.attributes.get("weight", 1)
