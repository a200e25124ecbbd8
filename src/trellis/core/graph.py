"""
Core graph data structure with dense vertex indexing.

This module provides the fundamental Graph class, the store every algorithm of
the engine reads and mutates. Vertices are kept in a dense, ordered list and
are addressed by index (0..n-1); each vertex carries an opaque label, an
attribute map and an adjacency list whose entries carry their own edge
attribute maps.

The graph is either directed or undirected and either weighted or unweighted.
For undirected graphs every edge is mirrored on both endpoints and both
entries share one attribute dictionary. For directed graphs an arc i -> j is
recorded on i only.

Primitive mutations validate their arguments before touching the state, and
multi-step operations run inside ``transaction()``, which backs the state up
and restores it if the operation fails. Either way a failed call never leaves
a partially modified graph behind.
"""

import logging
import random
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Generator,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
)

import numpy as np

from .enums import AttributeTag
from .exceptions import (
    DimensionMismatchError,
    DirectionMismatchError,
    EdgeNotFoundError,
    NotAGraphError,
    ValidationError,
    VertexNotFoundError,
    WeightMismatchError,
)
from .models import Edge, Vertex

logger = logging.getLogger(__name__)

WEIGHT = AttributeTag.WEIGHT.value
COLOR = AttributeTag.COLOR.value
POSITION = AttributeTag.POSITION.value
DIRECTED = AttributeTag.DIRECTED.value
WEIGHTED = AttributeTag.WEIGHTED.value

IndexPair = Tuple[int, int]


@dataclass
class GraphState:
    """Encapsulates the state of a graph."""

    vertices: List[Vertex] = field(default_factory=list)
    index: Dict[Hashable, int] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)
    name: str = ""
    marked: List[int] = field(default_factory=list)


class Graph:
    """
    Mutable graph store with dense vertex indices.

    Attributes:
        _state (GraphState): Internal state of the graph
        rng (random.Random): Pseudo-random source shared with derived graphs
    """

    def __init__(
        self,
        directed: bool = False,
        weighted: bool = False,
        name: str = "",
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize an empty graph.

        Args:
            directed (bool): Whether edges are arcs
            weighted (bool): Whether every edge carries a numeric weight
            name (str): Optional human-readable name
            rng (Optional[random.Random]): Random source; a fresh one is
                created when omitted
        """
        self._state = GraphState(name=name)
        self._state.attributes[DIRECTED] = bool(directed)
        self._state.attributes[WEIGHTED] = bool(weighted)
        self.rng = rng if rng is not None else random.Random()
        self._transaction_depth = 0

    # ------------------------------------------------------------------ state

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Context manager for atomic graph operations.

        Nested transactions share the backup taken by the outermost one.
        """
        if self._transaction_depth:
            yield
            return
        state_backup = deepcopy(self._state)
        self._transaction_depth += 1
        try:
            yield
        except Exception as e:
            self._state = state_backup
            raise e
        finally:
            self._transaction_depth -= 1

    def copy(self) -> "Graph":
        """Return a deep copy sharing only the random source."""
        other = Graph.__new__(Graph)
        other._state = deepcopy(self._state)
        other.rng = self.rng
        other._transaction_depth = 0
        return other

    def clear(self) -> None:
        """Remove all vertices and edges, keeping direction/weight flags."""
        directed, weighted = self.is_directed(), self.is_weighted()
        self._state = GraphState(name=self._state.name)
        self._state.attributes[DIRECTED] = directed
        self._state.attributes[WEIGHTED] = weighted

    @property
    def name(self) -> str:
        return self._state.name

    @name.setter
    def name(self, value: str) -> None:
        self._state.name = value

    def is_directed(self) -> bool:
        """Check whether the graph is directed."""
        return bool(self._state.attributes.get(DIRECTED, False))

    def is_weighted(self) -> bool:
        """Check whether the graph is weighted."""
        return bool(self._state.attributes.get(WEIGHTED, False))

    def is_empty(self) -> bool:
        return not self._state.vertices

    def vertex_count(self) -> int:
        """Get the number of vertices."""
        return len(self._state.vertices)

    def edge_count(self, include_temp_edges: bool = False) -> int:
        """Get the total number of edges (arcs for directed graphs)."""
        total = 0
        for v in self._state.vertices:
            total += len(v.neighbors)
            if include_temp_edges:
                total += len(v.temp_neighbors)
        return total if self.is_directed() else total // 2

    def __len__(self) -> int:
        return self.vertex_count()

    def __repr__(self) -> str:
        kind = "digraph" if self.is_directed() else "graph"
        weighted = " weighted" if self.is_weighted() else ""
        name = f" {self.name!r}" if self.name else ""
        return (
            f"<{kind}{weighted}{name}: {self.vertex_count()} vertices, "
            f"{self.edge_count()} edges>"
        )

    # --------------------------------------------------------------- vertices

    def _check_index(self, i: int) -> None:
        if not isinstance(i, (int, np.integer)) or not 0 <= i < len(self._state.vertices):
            raise VertexNotFoundError(f"Vertex index {i} is out of range")

    def vertex(self, i: int) -> Vertex:
        """Get the vertex record at index ``i``."""
        self._check_index(i)
        return self._state.vertices[i]

    def label(self, i: int) -> Hashable:
        """Get the label of the vertex at index ``i``."""
        return self.vertex(i).label

    def labels(self, indices: Iterable[int]) -> List[Hashable]:
        """Translate a sequence of indices into labels."""
        return [self.label(i) for i in indices]

    def vertices(self) -> List[Hashable]:
        """Get all vertex labels in index order."""
        return [v.label for v in self._state.vertices]

    def find_vertex(self, label: Hashable) -> Optional[int]:
        """Resolve a label to its index, or None if there is no such vertex."""
        try:
            return self._state.index.get(label)
        except TypeError:
            return None

    def has_vertex(self, label: Hashable) -> bool:
        return self.find_vertex(label) is not None

    def vertex_index(self, label: Hashable) -> int:
        """Resolve a label to its index, raising an error if it doesn't exist."""
        i = self.find_vertex(label)
        if i is None:
            raise VertexNotFoundError(f"Vertex '{label}' not found in the graph")
        return i

    def add_vertex(self, label: Hashable, attributes: Optional[Dict[str, Any]] = None) -> int:
        """
        Add a vertex and return its index.

        If a vertex with the same label already exists its index is returned
        and the given attributes are merged into its attribute map.
        """
        attributes = deepcopy(attributes) if attributes else None
        i = self.find_vertex(label)
        if i is None:
            i = len(self._state.vertices)
            self._state.vertices.append(Vertex(label=label))
            self._state.index[label] = i
        if attributes:
            self._state.vertices[i].attributes.update(attributes)
        return i

    def add_vertices(self, labels: Iterable[Hashable]) -> List[int]:
        """Add multiple vertices, returning their indices."""
        with self.transaction():
            return [self.add_vertex(label) for label in labels]

    def remove_vertex(self, i: int) -> None:
        """
        Remove the vertex at index ``i`` together with its incident edges.

        All higher-indexed vertices are renumbered down by one.
        """
        self.remove_vertices([i])

    def remove_vertex_by_label(self, label: Hashable) -> None:
        self.remove_vertices([self.vertex_index(label)])

    def remove_vertices(self, indices: Iterable[int]) -> None:
        """Remove a batch of vertices with a single renumbering pass."""
        doomed = set()
        for i in indices:
            self._check_index(i)
            doomed.add(i)
        if not doomed:
            return
        kept = [i for i in range(self.vertex_count()) if i not in doomed]
        mapping = {old: new for new, old in enumerate(kept)}
        vertices = [self._state.vertices[i] for i in kept]
        for v in vertices:
            v.renumber(mapping)
        self._state.vertices = vertices
        self._state.index = {v.label: k for k, v in enumerate(vertices)}
        self._state.marked = [mapping[i] for i in self._state.marked if i in mapping]
        logger.debug(f"Removed {len(doomed)} vertices, {len(kept)} remain")

    # ------------------------------------------------------------------ edges

    def _edge_attributes_for(
        self, weight: Optional[Any], attributes: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        attr = deepcopy(attributes) if attributes else {}
        if weight is not None:
            attr[WEIGHT] = weight
        if self.is_weighted():
            attr.setdefault(WEIGHT, 1)
        elif WEIGHT in attr:
            raise WeightMismatchError("Cannot assign a weight to an edge of an unweighted graph")
        return attr

    def add_edge(
        self,
        i: int,
        j: int,
        weight: Optional[Any] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Add an edge (or arc) between the vertices at indices ``i`` and ``j``.

        Adding an edge that already exists replaces its attribute map.

        Raises:
            VertexNotFoundError: If either index is out of range
            NotAGraphError: If ``i == j`` (loops are not supported)
            WeightMismatchError: If a weight is given for an unweighted graph
        """
        self._check_index(i)
        self._check_index(j)
        if i == j:
            raise NotAGraphError(f"Loops are not supported (vertex {self.label(i)})")
        attr = self._edge_attributes_for(weight, attributes)
        vertices = self._state.vertices
        vertices[i].add_neighbor(j, attr)
        if not self.is_directed():
            vertices[j].add_neighbor(i, attr)

    def add_edge_by_label(
        self,
        u: Hashable,
        v: Hashable,
        weight: Optional[Any] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> IndexPair:
        """Add an edge between two labels, creating missing vertices."""
        if u == v:
            raise NotAGraphError(f"Loops are not supported (vertex {u})")
        self._edge_attributes_for(weight, attributes)
        i = self.add_vertex(u)
        j = self.add_vertex(v)
        self.add_edge(i, j, weight, attributes)
        return i, j

    def add_edges(self, edges: Iterable[Sequence[Any]]) -> None:
        """Add a batch of ``(i, j)`` or ``(i, j, weight)`` index tuples."""
        with self.transaction():
            for edge in edges:
                if len(edge) == 3:
                    self.add_edge(edge[0], edge[1], edge[2])
                elif len(edge) == 2:
                    self.add_edge(edge[0], edge[1])
                else:
                    raise NotAGraphError(f"Invalid edge description: {edge!r}")

    def remove_edge(self, i: int, j: int) -> None:
        """Remove an edge from the graph."""
        if not self.has_edge(i, j):
            raise EdgeNotFoundError(
                f"No edge exists from '{self._safe_label(i)}' to '{self._safe_label(j)}'"
            )
        vertices = self._state.vertices
        vertices[i].remove_neighbor(j)
        if not self.is_directed():
            vertices[j].remove_neighbor(i)

    def remove_edge_by_label(self, u: Hashable, v: Hashable) -> None:
        self.remove_edge(self.vertex_index(u), self.vertex_index(v))

    def remove_edges(self, edges: Iterable[IndexPair]) -> None:
        """Remove multiple edges from the graph atomically."""
        with self.transaction():
            for i, j in edges:
                self.remove_edge(i, j)

    def _safe_label(self, i: int) -> Any:
        if isinstance(i, int) and 0 <= i < self.vertex_count():
            return self._state.vertices[i].label
        return i

    def has_edge(self, i: int, j: int, include_temp_edges: bool = False) -> bool:
        """Check if an edge (arc i -> j for digraphs) exists."""
        n = self.vertex_count()
        if not (isinstance(i, (int, np.integer)) and isinstance(j, (int, np.integer))):
            return False
        if not (0 <= i < n and 0 <= j < n):
            return False
        return self._state.vertices[i].has_neighbor(j, include_temp_edges)

    def has_edge_by_label(self, u: Hashable, v: Hashable) -> bool:
        i, j = self.find_vertex(u), self.find_vertex(v)
        return i is not None and j is not None and self.has_edge(i, j)

    def adjacent(self, i: int, j: int) -> bool:
        """Check whether ``i`` and ``j`` are joined in either direction."""
        return self.has_edge(i, j) or self.has_edge(j, i)

    def neighbors(self, i: int, include_temp_edges: bool = False) -> List[int]:
        """Get the (out-)neighbors of a vertex in insertion order."""
        v = self.vertex(i)
        if include_temp_edges and v.temp_neighbors:
            return v.neighbors + v.temp_neighbors
        return list(v.neighbors)

    def in_neighbors(self, i: int) -> List[int]:
        """Get the vertices with an arc into ``i``."""
        self._check_index(i)
        if not self.is_directed():
            return self.neighbors(i)
        return [k for k, v in enumerate(self._state.vertices) if i in v.edge_attributes]

    def out_degree(self, i: int, count_temp_edges: bool = False) -> int:
        v = self.vertex(i)
        return len(v.neighbors) + (len(v.temp_neighbors) if count_temp_edges else 0)

    def in_degree(self, i: int, count_temp_edges: bool = False) -> int:
        self._check_index(i)
        if not self.is_directed():
            return self.out_degree(i, count_temp_edges)
        count = 0
        for v in self._state.vertices:
            if i in v.edge_attributes:
                count += 1
            if count_temp_edges and i in v.temp_neighbors:
                count += 1
        return count

    def degree(self, i: int, count_temp_edges: bool = False) -> int:
        """Get the degree of a vertex (in + out for digraphs)."""
        if self.is_directed():
            return self.in_degree(i, count_temp_edges) + self.out_degree(i, count_temp_edges)
        return self.out_degree(i, count_temp_edges)

    def degree_sequence(self) -> List[int]:
        """Get the list of vertex degrees, arc directions ignored."""
        return [self.degree(i) for i in range(self.vertex_count())]

    def minimum_degree(self) -> int:
        return min(self.degree_sequence(), default=0)

    def maximum_degree(self) -> int:
        return max(self.degree_sequence(), default=0)

    def is_regular(self, d: Optional[int] = None) -> bool:
        """Check whether all vertices have the same degree (``d`` if given)."""
        degrees = set(self.degree_sequence())
        if not degrees:
            return True
        if len(degrees) > 1:
            return False
        return d is None or degrees.pop() == d

    def edge_pairs(self, include_temp_edges: bool = False) -> List[IndexPair]:
        """
        Get all edges as index pairs.

        Undirected edges are reported once, with the smaller index first.
        """
        directed = self.is_directed()
        pairs: List[IndexPair] = []
        for i, v in enumerate(self._state.vertices):
            targets: List[int] = v.neighbors
            if include_temp_edges and v.temp_neighbors:
                targets = targets + v.temp_neighbors
            for j in targets:
                if directed or i < j:
                    pairs.append((i, j))
        return pairs

    def get_edges(self) -> Iterator[Edge]:
        """Iterate over all edges as read-only Edge views."""
        for i, j in self.edge_pairs():
            yield Edge(i, j, self._state.vertices[i].edge_attributes[j])

    def edges(self, include_weights: bool = False) -> List[Any]:
        """Get all edges as label pairs, optionally as ``((u, v), weight)``."""
        if include_weights and not self.is_weighted():
            raise WeightMismatchError("Unweighted graph has no edge weights")
        result = []
        for i, j in self.edge_pairs():
            pair = (self.label(i), self.label(j))
            result.append((pair, self.weight(i, j)) if include_weights else pair)
        return result

    def incident_edges(self, indices: Iterable[int]) -> List[IndexPair]:
        """Get the edges with at least one endpoint in ``indices``."""
        chosen = set(indices)
        return [(i, j) for i, j in self.edge_pairs() if i in chosen or j in chosen]

    # ------------------------------------------------------- temporary edges

    def add_temporary_edge(self, i: int, j: int) -> None:
        """Add a scratch edge that carries no attributes."""
        self._check_index(i)
        self._check_index(j)
        vertices = self._state.vertices
        if vertices[i].has_neighbor(j):
            return
        vertices[i].temp_neighbors.append(j)
        if not self.is_directed():
            vertices[j].temp_neighbors.append(i)

    def remove_temporary_edges(self) -> None:
        """Drop every temporary edge at once."""
        for v in self._state.vertices:
            v.temp_neighbors.clear()

    def has_temporary_edges(self) -> bool:
        return any(v.temp_neighbors for v in self._state.vertices)

    def promote_temporary_edges(self) -> None:
        """Turn every temporary edge into a real edge."""
        with self.transaction():
            pairs = [
                (i, j)
                for i, v in enumerate(self._state.vertices)
                for j in v.temp_neighbors
                if self.is_directed() or i < j
            ]
            self.remove_temporary_edges()
            for i, j in pairs:
                self.add_edge(i, j)

    # ------------------------------------------------------------- attributes

    def set_graph_attribute(self, tag: str, value: Any) -> None:
        tag = _tag(tag)
        if tag in (DIRECTED, WEIGHTED):
            raise ValidationError(f"Use make_directed/make_weighted to change '{tag}'")
        self._state.attributes[tag] = value

    def get_graph_attribute(self, tag: str, default: Any = None) -> Any:
        return self._state.attributes.get(_tag(tag), default)

    def discard_graph_attribute(self, tag: str) -> None:
        tag = _tag(tag)
        if tag in (DIRECTED, WEIGHTED):
            raise ValidationError(f"Graph attribute '{tag}' cannot be discarded")
        self._state.attributes.pop(tag, None)

    def graph_attributes(self) -> Dict[str, Any]:
        return dict(self._state.attributes)

    def set_vertex_attribute(self, i: int, tag: str, value: Any) -> None:
        self.vertex(i).attributes[_tag(tag)] = value

    def get_vertex_attribute(self, i: int, tag: str, default: Any = None) -> Any:
        return self.vertex(i).attributes.get(_tag(tag), default)

    def discard_vertex_attribute(self, i: int, tag: str) -> None:
        self.vertex(i).attributes.pop(_tag(tag), None)

    def vertex_attributes(self, i: int) -> Dict[str, Any]:
        return dict(self.vertex(i).attributes)

    def edge_attributes(self, i: int, j: int) -> Dict[str, Any]:
        """Get the (live) attribute map of edge (i, j)."""
        if not self.has_edge(i, j):
            raise EdgeNotFoundError(
                f"No edge exists from '{self._safe_label(i)}' to '{self._safe_label(j)}'"
            )
        return self._state.vertices[i].edge_attributes[j]

    def set_edge_attribute(self, i: int, j: int, tag: str, value: Any) -> None:
        tag = _tag(tag)
        attr = self.edge_attributes(i, j)
        if tag == WEIGHT and not self.is_weighted():
            raise WeightMismatchError("Cannot assign a weight to an edge of an unweighted graph")
        attr[tag] = value

    def get_edge_attribute(self, i: int, j: int, tag: str, default: Any = None) -> Any:
        return self.edge_attributes(i, j).get(_tag(tag), default)

    def discard_edge_attribute(self, i: int, j: int, tag: str) -> None:
        tag = _tag(tag)
        if tag == WEIGHT and self.is_weighted():
            raise WeightMismatchError("Edges of a weighted graph must keep their weight")
        self.edge_attributes(i, j).pop(tag, None)

    def weight(self, i: int, j: int) -> Any:
        """Get the weight of edge (i, j); 1 for unweighted graphs."""
        return self.edge_attributes(i, j).get(WEIGHT, 1)

    def set_weight(self, i: int, j: int, value: Any) -> None:
        self.set_edge_attribute(i, j, WEIGHT, value)

    def color_vertices(self, color: Union[int, Sequence[int]], indices: Optional[Iterable[int]] = None) -> None:
        """Assign one color (or one color per vertex) to the given vertices."""
        chosen = list(range(self.vertex_count())) if indices is None else list(indices)
        if isinstance(color, (list, tuple)):
            if len(color) != len(chosen):
                raise DimensionMismatchError(
                    f"Got {len(color)} colors for {len(chosen)} vertices"
                )
            colors = list(color)
        else:
            colors = [color] * len(chosen)
        with self.transaction():
            for i, c in zip(chosen, colors):
                self.set_vertex_attribute(i, COLOR, c)

    def highlight_edges(self, pairs: Iterable[IndexPair], color: int = 1) -> None:
        """Set the color attribute of the given edges."""
        with self.transaction():
            for i, j in pairs:
                self.edge_attributes(i, j)[COLOR] = color

    def highlight_subgraph(self, sub: "Graph", edge_color: int = 1, vertex_color: int = 2) -> None:
        """Color the vertices and edges of ``sub`` (matched by label) in this graph."""
        with self.transaction():
            for u in sub.vertices():
                self.set_vertex_attribute(self.vertex_index(u), COLOR, vertex_color)
            for u, v in sub.edges():
                i, j = self.vertex_index(u), self.vertex_index(v)
                self.edge_attributes(i, j)[COLOR] = edge_color

    def mark_vertex(self, i: int) -> None:
        self._check_index(i)
        if i not in self._state.marked:
            self._state.marked.append(i)

    def unmark_vertex(self, i: int) -> bool:
        if i in self._state.marked:
            self._state.marked.remove(i)
            return True
        return False

    def marked_vertices(self) -> List[int]:
        return list(self._state.marked)

    def clear_marked_vertices(self) -> None:
        self._state.marked.clear()

    def positions(self) -> Optional[List[Tuple[float, ...]]]:
        """Get the stored vertex positions, or None unless every vertex has one."""
        result = []
        for v in self._state.vertices:
            pos = v.attributes.get(POSITION)
            if pos is None:
                return None
            result.append(tuple(float(c) for c in pos))
        return result

    # ---------------------------------------------------------- graph flags

    def make_directed(self) -> None:
        """Turn every undirected edge into a pair of opposite arcs."""
        if self.is_directed():
            return
        with self.transaction():
            for v in self._state.vertices:
                v.edge_attributes = {j: deepcopy(a) for j, a in v.edge_attributes.items()}
            self._state.attributes[DIRECTED] = True

    def make_weighted(self, matrix: Optional[Any] = None) -> None:
        """Make the graph weighted, taking weights from ``matrix`` when given."""
        with self.transaction():
            n = self.vertex_count()
            if matrix is not None:
                m = np.asarray(matrix, dtype=float)
                if m.shape != (n, n):
                    raise DimensionMismatchError(
                        f"Weight matrix of shape {m.shape} does not match {n} vertices"
                    )
            self._state.attributes[WEIGHTED] = True
            for i, j in self.edge_pairs():
                w = 1 if matrix is None else _number(np.asarray(matrix)[i][j])
                self.edge_attributes(i, j)[WEIGHT] = w

    def make_unweighted(self) -> None:
        for i, j in self.edge_pairs():
            self.edge_attributes(i, j).pop(WEIGHT, None)
        self._state.attributes[WEIGHTED] = False

    def randomize_edge_weights(self, a: float, b: float, integral: bool = False) -> None:
        """Assign uniformly random weights from [a, b] to every edge."""
        with self.transaction():
            self._state.attributes[WEIGHTED] = True
            for i, j in self.edge_pairs():
                w = self.rng.randint(int(a), int(b)) if integral else self.rng.uniform(a, b)
                self.edge_attributes(i, j)[WEIGHT] = w

    # -------------------------------------------------------------- matrices

    def adjacency_matrix(self) -> np.ndarray:
        n = self.vertex_count()
        m = np.zeros((n, n), dtype=int)
        for i, j in self.edge_pairs():
            m[i, j] = 1
            if not self.is_directed():
                m[j, i] = 1
        return m

    def weight_matrix(self) -> np.ndarray:
        if not self.is_weighted():
            raise WeightMismatchError("Weight matrix requires a weighted graph")
        n = self.vertex_count()
        m = np.zeros((n, n), dtype=float)
        for i, j in self.edge_pairs():
            m[i, j] = self.weight(i, j)
            if not self.is_directed():
                m[j, i] = m[i, j]
        return m

    def incidence_matrix(self) -> np.ndarray:
        """Vertex/edge incidence matrix; -1 marks the tail of an arc."""
        pairs = self.edge_pairs()
        m = np.zeros((self.vertex_count(), len(pairs)), dtype=int)
        for k, (i, j) in enumerate(pairs):
            m[i, k] = -1 if self.is_directed() else 1
            m[j, k] = 1
        return m

    # ------------------------------------------------------- derived graphs

    def induce_subgraph(self, indices: Iterable[int], copy_attributes: bool = True) -> "Graph":
        """Extract the subgraph induced by the given vertex indices."""
        chosen: List[int] = []
        seen = set()
        for i in indices:
            self._check_index(i)
            if i not in seen:
                seen.add(i)
                chosen.append(i)
        sub = Graph(self.is_directed(), self.is_weighted(), rng=self.rng)
        pos = {old: new for new, old in enumerate(chosen)}
        for i in chosen:
            v = self._state.vertices[i]
            sub.add_vertex(v.label, v.attributes if copy_attributes else None)
        for i, j in self.edge_pairs():
            if i in pos and j in pos:
                attr = self.edge_attributes(i, j)
                if not copy_attributes:
                    attr = {WEIGHT: attr[WEIGHT]} if WEIGHT in attr else {}
                sub.add_edge(pos[i], pos[j], attributes=attr)
        return sub

    def underlying(self) -> "Graph":
        """Strip direction and weights, merging antiparallel arcs."""
        u = Graph(rng=self.rng)
        for v in self._state.vertices:
            u.add_vertex(v.label, v.attributes)
        for i, j in self.edge_pairs(include_temp_edges=False):
            if not u.has_edge(i, j):
                attr = {k: a for k, a in self.edge_attributes(i, j).items() if k != WEIGHT}
                u.add_edge(i, j, attributes=attr)
        return u

    def complement(self) -> "Graph":
        """Return the complement graph on the same vertex set."""
        c = Graph(self.is_directed(), rng=self.rng)
        for v in self._state.vertices:
            c.add_vertex(v.label, v.attributes)
        n = self.vertex_count()
        for i in range(n):
            for j in range(n) if self.is_directed() else range(i + 1, n):
                if i != j and not self.has_edge(i, j):
                    c.add_edge(i, j)
        return c

    def reverse(self) -> "Graph":
        """Return the digraph with every arc reversed."""
        if not self.is_directed():
            raise DirectionMismatchError("Reversing requires a directed graph")
        r = Graph(True, self.is_weighted(), rng=self.rng)
        for v in self._state.vertices:
            r.add_vertex(v.label, v.attributes)
        for i, j in self.edge_pairs():
            r.add_edge(j, i, attributes=self.edge_attributes(i, j))
        return r

    def isomorphic_copy(self, sigma: Sequence[int]) -> "Graph":
        """
        Return a copy in which vertex ``i`` becomes vertex ``sigma[i]``.

        Raises:
            DimensionMismatchError: If ``sigma`` has the wrong length
            ValueError: If ``sigma`` is not a permutation
        """
        n = self.vertex_count()
        if len(sigma) != n:
            raise DimensionMismatchError(f"Permutation of length {len(sigma)} for {n} vertices")
        if sorted(sigma) != list(range(n)):
            raise ValueError("sigma must be a permutation of vertex indices")
        inverse = [0] * n
        for i, s in enumerate(sigma):
            inverse[s] = i
        g = Graph(self.is_directed(), self.is_weighted(), self.name, rng=self.rng)
        g._state.attributes = deepcopy(self._state.attributes)
        for k in range(n):
            v = self._state.vertices[inverse[k]]
            g.add_vertex(v.label, v.attributes)
        for i, j in self.edge_pairs():
            g.add_edge(sigma[i], sigma[j], attributes=self.edge_attributes(i, j))
        return g

    def permute_vertices(self, labels: Sequence[Hashable]) -> "Graph":
        """Return a copy whose vertex order follows ``labels``."""
        if len(labels) != self.vertex_count() or set(labels) != set(self.vertices()):
            raise DimensionMismatchError("labels must be a permutation of the vertex labels")
        sigma = [0] * self.vertex_count()
        for k, label in enumerate(labels):
            sigma[self.vertex_index(label)] = k
        return self.isomorphic_copy(sigma)

    def relabel_vertices(self, labels: Sequence[Hashable]) -> None:
        """Replace all labels in index order."""
        if len(labels) != self.vertex_count():
            raise DimensionMismatchError(
                f"Got {len(labels)} labels for {self.vertex_count()} vertices"
            )
        if len(set(labels)) != len(labels):
            raise ValidationError("Vertex labels must be unique")
        with self.transaction():
            for v, label in zip(self._state.vertices, labels):
                v.label = label
            self._state.index = {label: k for k, label in enumerate(labels)}

    # ---------------------------------------------------- local operations

    def contract_edge(self, i: int, j: int) -> None:
        """Merge vertex ``j`` into ``i`` and delete ``j``."""
        with self.transaction():
            if not self.adjacent(i, j):
                raise EdgeNotFoundError(
                    f"No edge exists between '{self._safe_label(i)}' and '{self._safe_label(j)}'"
                )
            for k in self.neighbors(j):
                if k != i and not self.has_edge(i, k):
                    self.add_edge(i, k, attributes=self.edge_attributes(j, k))
            if self.is_directed():
                for k in self.in_neighbors(j):
                    if k != i and not self.has_edge(k, i):
                        self.add_edge(k, i, attributes=self.edge_attributes(k, j))
            self.remove_vertex(j)

    def subdivide_edges(self, pairs: Iterable[IndexPair], r: int = 1) -> None:
        """
        Insert ``r`` new vertices into each of the given edges.

        New vertices get the smallest integer labels larger than every
        integer label in use.
        """
        if r < 1:
            raise ValueError("r must be a positive integer")
        with self.transaction():
            pairs = list(pairs)
            next_label = max(
                (lbl for lbl in self.vertices() if isinstance(lbl, int) and not isinstance(lbl, bool)),
                default=-1,
            )
            for i, j in pairs:
                if not self.has_edge(i, j):
                    raise EdgeNotFoundError(
                        f"No edge exists from '{self._safe_label(i)}' to '{self._safe_label(j)}'"
                    )
            for i, j in pairs:
                w = self.weight(i, j) if self.is_weighted() else None
                self.remove_edge(i, j)
                v = i
                for _ in range(r):
                    next_label += 1
                    k = self.add_vertex(next_label)
                    self.add_edge(v, k, w)
                    v = k
                self.add_edge(v, j, w)

    def is_equal(self, other: "Graph") -> bool:
        """Same flags, vertex order, edges and weights."""
        if self.is_directed() != other.is_directed() or self.is_weighted() != other.is_weighted():
            return False
        if self.vertices() != other.vertices():
            return False
        if set(self.edge_pairs()) != set(other.edge_pairs()):
            return False
        if self.is_weighted():
            return all(self.weight(i, j) == other.weight(i, j) for i, j in self.edge_pairs())
        return True

    # ---------------------------------------------------------- construction

    @classmethod
    def from_vertices(cls, labels: Iterable[Hashable], **kwargs) -> "Graph":
        g = cls(**kwargs)
        g.add_vertices(labels)
        return g

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[Any],
        vertices: Optional[Iterable[Hashable]] = None,
        directed: bool = False,
        weighted: Optional[bool] = None,
        **kwargs,
    ) -> "Graph":
        """
        Create a graph from label pairs.

        Each edge is ``(u, v)``, ``(u, v, w)`` or ``((u, v), w)``. The graph is
        weighted when ``weighted`` is True or, if unspecified, when any edge
        carries a weight.
        """
        parsed = [_parse_edge(e) for e in edges]
        if weighted is None:
            weighted = any(w is not None for _, _, w in parsed)
        g = cls(directed=directed, weighted=weighted, **kwargs)
        with g.transaction():
            if vertices is not None:
                g.add_vertices(vertices)
            for u, v, w in parsed:
                g.add_edge_by_label(u, v, w)
        return g

    @classmethod
    def from_matrix(
        cls,
        matrix: Any,
        labels: Optional[Sequence[Hashable]] = None,
        directed: bool = False,
        weighted: bool = False,
        **kwargs,
    ) -> "Graph":
        """
        Create a graph from an adjacency or weight matrix.

        Raises:
            DimensionMismatchError: If the matrix is not square or does not match labels
            NotAGraphError: If an undirected graph is requested from an asymmetric matrix
                or the diagonal is nonzero
        """
        m = np.asarray(matrix)
        if m.ndim != 2 or m.shape[0] != m.shape[1]:
            raise DimensionMismatchError(f"Matrix of shape {m.shape} is not square")
        n = m.shape[0]
        if labels is None:
            labels = list(range(n))
        if len(labels) != n:
            raise DimensionMismatchError(f"Got {len(labels)} labels for a {n}x{n} matrix")
        if not directed and not np.array_equal(m, m.T):
            raise NotAGraphError("Matrix of an undirected graph must be symmetric")
        if np.any(np.diagonal(m)):
            raise NotAGraphError("Matrix has nonzero diagonal entries")
        g = cls(directed=directed, weighted=weighted, **kwargs)
        g.add_vertices(labels)
        for i in range(n):
            for j in range(n) if directed else range(i + 1, n):
                if i != j and m[i, j] != 0:
                    g.add_edge(i, j, _number(m[i, j]) if weighted else None)
        return g

    @classmethod
    def from_trail(cls, *trails: Sequence[Hashable], **kwargs) -> "Graph":
        """Create a graph from one or more walks through labels."""
        g = cls(**kwargs)
        for trail in trails:
            g.add_trail(trail)
        return g

    def add_trail(self, trail: Sequence[Hashable]) -> None:
        """Add the edges of a walk, creating missing vertices."""
        with self.transaction():
            if len(trail) == 1:
                self.add_vertex(trail[0])
            for u, v in zip(trail, trail[1:]):
                self.add_edge_by_label(u, v)

    def add_cycle(self, labels: Sequence[Hashable]) -> None:
        if len(labels) < 3:
            raise ValueError("A cycle needs at least three vertices")
        self.add_trail(list(labels) + [labels[0]])

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **kwargs) -> "Graph":
        """Create a graph from a validated bulk description."""
        from ..utils.validation.schema import validate_graph_description

        validate_graph_description(data)
        g = cls(
            directed=data.get("directed", False),
            weighted=data.get("weighted", False),
            name=data.get("name", ""),
            **kwargs,
        )
        with g.transaction():
            for tag, value in data.get("attributes", {}).items():
                g.set_graph_attribute(tag, value)
            for entry in data.get("vertices", []):
                if isinstance(entry, dict):
                    g.add_vertex(_hashable(entry["label"]), entry.get("attributes"))
                else:
                    g.add_vertex(_hashable(entry))
            for entry in data.get("edges", []):
                if isinstance(entry, dict):
                    u, v = _hashable(entry["source"]), _hashable(entry["target"])
                    attr = dict(entry.get("attributes", {}))
                    g.add_edge_by_label(u, v, entry.get("weight"), attr)
                else:
                    u, v, w = _parse_edge(entry)
                    g.add_edge_by_label(_hashable(u), _hashable(v), w)
        return g

    def to_dict(self) -> Dict[str, Any]:
        """Convert the graph to a bulk description accepted by ``from_dict``."""
        attrs = {
            k: v for k, v in self._state.attributes.items() if k not in (DIRECTED, WEIGHTED)
        }
        return {
            "name": self.name,
            "directed": self.is_directed(),
            "weighted": self.is_weighted(),
            "attributes": deepcopy(attrs),
            "vertices": [
                {"label": _plain(v.label), "attributes": deepcopy(v.attributes)}
                for v in self._state.vertices
            ],
            "edges": [
                {
                    "source": _plain(self.label(i)),
                    "target": _plain(self.label(j)),
                    "attributes": {
                        k: a for k, a in self.edge_attributes(i, j).items() if k != WEIGHT
                    },
                    **({"weight": self.weight(i, j)} if self.is_weighted() else {}),
                }
                for i, j in self.edge_pairs()
            ],
        }


def _tag(tag: Union[str, AttributeTag]) -> str:
    return tag.value if isinstance(tag, AttributeTag) else str(tag)


def _number(value: Any) -> Union[int, float]:
    value = value.item() if hasattr(value, "item") else value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _hashable(value: Any) -> Hashable:
    return tuple(value) if isinstance(value, list) else value


def _plain(label: Hashable) -> Any:
    return list(label) if isinstance(label, tuple) else label


def _parse_edge(edge: Any) -> Tuple[Hashable, Hashable, Optional[Any]]:
    if isinstance(edge, (list, tuple)):
        if len(edge) == 2 and isinstance(edge[0], (list, tuple)) and len(edge[0]) == 2:
            return edge[0][0], edge[0][1], edge[1]
        if len(edge) == 2:
            return edge[0], edge[1], None
        if len(edge) == 3:
            return edge[0], edge[1], edge[2]
    raise NotAGraphError(f"Invalid edge description: {edge!r}")
