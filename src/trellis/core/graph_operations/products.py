"""Graph unions, joins and products.

Every combining operation requires its inputs to agree on direction and on
weighting. Vertices of disjoint unions and joins are labelled ``"k:v"`` where
``k`` is the 1-based position of the input graph and ``v`` the original label;
vertices of products are labelled ``"u:v"``.
"""

import logging
from typing import Hashable, Sequence

from ..exceptions import DirectionMismatchError, WeightMismatchError
from ..graph import Graph

logger = logging.getLogger(__name__)


def _check_compatible(graphs: Sequence[Graph]) -> None:
    if not graphs:
        raise ValueError("At least one graph is required")
    if len({g.is_directed() for g in graphs}) > 1:
        raise DirectionMismatchError("Graphs must all be directed or all undirected")
    if len({g.is_weighted() for g in graphs}) > 1:
        raise WeightMismatchError("Graphs must all be weighted or all unweighted")


def prefixed_label(prefix: int, label: Hashable) -> str:
    return f"{prefix}:{label}"


def disjoint_union(*graphs: Graph) -> Graph:
    """Place copies of the graphs side by side with prefixed labels."""
    _check_compatible(graphs)
    first = graphs[0]
    result = Graph(first.is_directed(), first.is_weighted(), rng=first.rng)
    for k, g in enumerate(graphs, start=1):
        offset = result.vertex_count()
        for i in range(g.vertex_count()):
            result.add_vertex(prefixed_label(k, g.label(i)), g.vertex_attributes(i))
        for i, j in g.edge_pairs():
            result.add_edge(offset + i, offset + j, attributes=g.edge_attributes(i, j))
    return result


def union(*graphs: Graph) -> Graph:
    """
    Merge graphs by label.

    The vertex set is the union of the vertex sets and the edge set the union
    of the edge sets. Weights of edges present in several graphs are summed.
    """
    _check_compatible(graphs)
    first = graphs[0]
    result = Graph(first.is_directed(), first.is_weighted(), rng=first.rng)
    with result.transaction():
        for g in graphs:
            for i in range(g.vertex_count()):
                result.add_vertex(g.label(i), g.vertex_attributes(i))
            for i, j in g.edge_pairs():
                a = result.vertex_index(g.label(i))
                b = result.vertex_index(g.label(j))
                attributes = dict(g.edge_attributes(i, j))
                if result.has_edge(a, b):
                    if result.is_weighted():
                        attributes["weight"] = result.weight(a, b) + g.weight(i, j)
                    merged = dict(result.edge_attributes(a, b))
                    merged.update(attributes)
                    attributes = merged
                result.add_edge(a, b, attributes=attributes)
    return result


def join(g1: Graph, g2: Graph) -> Graph:
    """
    Disjoint union of two undirected unweighted graphs plus every edge
    between them.
    """
    for g in (g1, g2):
        if g.is_directed():
            raise DirectionMismatchError("Graph join requires undirected graphs")
        if g.is_weighted():
            raise WeightMismatchError("Graph join requires unweighted graphs")
    result = disjoint_union(g1, g2)
    n1 = g1.vertex_count()
    for i in range(n1):
        for j in range(g2.vertex_count()):
            result.add_edge(i, n1 + j)
    return result


def _product_frame(g: Graph, h: Graph) -> Graph:
    _check_compatible((g, h))
    if g.is_weighted():
        raise WeightMismatchError("Graph products require unweighted graphs")
    result = Graph(g.is_directed(), rng=g.rng)
    for i in range(g.vertex_count()):
        for j in range(h.vertex_count()):
            result.add_vertex(f"{g.label(i)}:{h.label(j)}")
    return result


def _product(graphs: Sequence[Graph], step) -> Graph:
    if not graphs:
        raise ValueError("At least one graph is required")
    result = graphs[-1].copy()
    for g in reversed(graphs[:-1]):
        result = step(g, result)
    return result


def _cartesian(g: Graph, h: Graph) -> Graph:
    result = _product_frame(g, h)
    m = h.vertex_count()
    for i in range(g.vertex_count()):
        for a, b in h.edge_pairs():
            result.add_edge(i * m + a, i * m + b)
    for a, b in g.edge_pairs():
        for j in range(m):
            result.add_edge(a * m + j, b * m + j)
    return result


def _tensor(g: Graph, h: Graph) -> Graph:
    result = _product_frame(g, h)
    m = h.vertex_count()
    directed = g.is_directed()
    for a, b in g.edge_pairs():
        for c, d in h.edge_pairs():
            result.add_edge(a * m + c, b * m + d)
            if not directed:
                result.add_edge(a * m + d, b * m + c)
    return result


def cartesian_product(*graphs: Graph) -> Graph:
    """
    Cartesian product: (u, v) ~ (u', v') iff u = u' and v ~ v', or v = v'
    and u ~ u'.
    """
    return _product(graphs, _cartesian)


def tensor_product(*graphs: Graph) -> Graph:
    """Tensor product: (u, v) ~ (u', v') iff u ~ u' and v ~ v'."""
    return _product(graphs, _tensor)

