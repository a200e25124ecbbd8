"""
Tests for core graph functionality.
"""

import numpy as np
import pytest

from trellis.core.enums import AttributeTag
from trellis.core.exceptions import (
    DimensionMismatchError,
    DirectionMismatchError,
    EdgeNotFoundError,
    NotAGraphError,
    ValidationError,
    VertexNotFoundError,
    WeightMismatchError,
)
from trellis.core.graph import COLOR, Graph


def test_add_vertex_returns_existing_index():
    """Test that re-adding a label merges attributes instead of duplicating."""
    g = Graph()
    first = g.add_vertex("a", {"size": 1})
    again = g.add_vertex("a", {"shape": "box"})

    assert first == again == 0
    assert g.vertex_count() == 1
    assert g.vertex_attributes(0) == {"size": 1, "shape": "box"}


def test_vertex_lookup():
    """Test label/index resolution."""
    g = Graph.from_vertices(["p", "q", "r"])

    assert g.vertex_index("q") == 1
    assert g.label(2) == "r"
    assert g.find_vertex("missing") is None
    with pytest.raises(VertexNotFoundError):
        g.vertex_index("missing")
    with pytest.raises(VertexNotFoundError):
        g.label(3)


def test_edges_are_mirrored_with_shared_attributes():
    """Test that an undirected edge is one record seen from both ends."""
    g = Graph.from_edges([(1, 2)])
    g.set_edge_attribute(0, 1, "style", "dashed")

    assert g.has_edge(1, 0)
    assert g.get_edge_attribute(1, 0, "style") == "dashed"
    assert g.edge_count() == 1


def test_directed_degrees(sample_digraph):
    """Test in- and out-degrees of a digraph."""
    z = sample_digraph.vertex_index("z")
    x = sample_digraph.vertex_index("x")

    assert sample_digraph.out_degree(z) == 2
    assert sample_digraph.in_degree(z) == 1
    assert sample_digraph.degree(z) == 3
    assert sample_digraph.has_edge(z, x)
    assert not sample_digraph.has_edge(x, z)
    assert sorted(sample_digraph.labels(sample_digraph.in_neighbors(x))) == ["z"]


def test_loops_are_rejected():
    """Test that loops raise NotAGraphError."""
    g = Graph.from_vertices([1, 2])
    with pytest.raises(NotAGraphError):
        g.add_edge(0, 0)
    with pytest.raises(NotAGraphError):
        g.add_edge_by_label(5, 5)
    assert g.vertex_count() == 2


def test_weight_on_unweighted_graph_is_rejected():
    """Test that unweighted graphs refuse weights."""
    g = Graph.from_vertices([1, 2])
    with pytest.raises(WeightMismatchError):
        g.add_edge(0, 1, 3)
    assert g.edge_count() == 0


def test_weighted_edges_default_to_unit_weight(weighted_graph):
    """Test weights of a weighted graph."""
    a, b = weighted_graph.vertex_index("a"), weighted_graph.vertex_index("b")
    assert weighted_graph.is_weighted()
    assert weighted_graph.weight(a, b) == 1

    weighted_graph.add_edge_by_label("a", "d")
    assert weighted_graph.weight(a, weighted_graph.vertex_index("d")) == 1
    with pytest.raises(WeightMismatchError):
        weighted_graph.discard_edge_attribute(a, b, AttributeTag.WEIGHT)


def test_failed_mutations_leave_graph_unmodified(two_triangles):
    """Test that failing operations do not partially apply."""
    before = two_triangles.to_dict()

    with pytest.raises(NotAGraphError):
        two_triangles.add_edge_by_label(7, 7)
    with pytest.raises(EdgeNotFoundError):
        two_triangles.remove_edges([(0, 1), (0, 5)])
    with pytest.raises(VertexNotFoundError):
        two_triangles.add_edges([(0, 4), (0, 42)])
    with pytest.raises(EdgeNotFoundError):
        two_triangles.subdivide_edges([(0, 1), (0, 4)])

    assert two_triangles.to_dict() == before


def test_transaction_rolls_back_on_error(two_triangles):
    """Test that an explicit transaction restores the state after an error."""
    before = two_triangles.to_dict()
    with pytest.raises(RuntimeError):
        with two_triangles.transaction():
            two_triangles.add_vertex("extra")
            two_triangles.remove_edge(0, 1)
            raise RuntimeError("abort")

    assert two_triangles.to_dict() == before
    assert not two_triangles.has_vertex("extra")


def test_remove_vertex_renumbers(two_triangles):
    """Test that removing a vertex shifts higher indices down."""
    two_triangles.remove_vertex_by_label(3)

    assert two_triangles.vertices() == [1, 2, 4, 5, 6]
    assert two_triangles.vertex_index(4) == 2
    assert two_triangles.edge_count() == 4
    assert two_triangles.has_edge_by_label(4, 5)


def test_removed_vertex_does_not_recover_edges(two_triangles):
    """Test that re-adding a removed label gives an isolated vertex."""
    two_triangles.remove_vertex_by_label(4)
    i = two_triangles.add_vertex(4)

    assert two_triangles.degree(i) == 0
    assert not two_triangles.has_edge_by_label(3, 4)


def test_temporary_edges(two_triangles):
    """Test that temporary edges stay out of the edge set until promoted."""
    two_triangles.add_temporary_edge(0, 5)

    assert two_triangles.edge_count() == 7
    assert two_triangles.edge_count(include_temp_edges=True) == 8
    assert not two_triangles.has_edge(0, 5)
    assert two_triangles.has_edge(0, 5, include_temp_edges=True)
    assert 5 in two_triangles.neighbors(0, include_temp_edges=True)

    two_triangles.promote_temporary_edges()
    assert two_triangles.has_edge(0, 5)
    assert not two_triangles.has_temporary_edges()


def test_remove_temporary_edges(two_triangles):
    """Test that temporary edges are dropped all at once."""
    two_triangles.add_temporary_edge(0, 5)
    two_triangles.add_temporary_edge(1, 4)
    two_triangles.remove_temporary_edges()

    assert two_triangles.edge_count(include_temp_edges=True) == 7


def test_reserved_graph_attributes():
    """Test that direction and weighting are not plain attributes."""
    g = Graph()
    g.set_graph_attribute("author", "me")

    assert g.get_graph_attribute("author") == "me"
    with pytest.raises(ValidationError):
        g.set_graph_attribute("directed", True)


def test_from_matrix():
    """Test construction from adjacency and weight matrices."""
    g = Graph.from_matrix([[0, 2, 0], [2, 0, 3], [0, 3, 0]], labels="abc", weighted=True)

    assert g.edges(include_weights=True) == [(("a", "b"), 2), (("b", "c"), 3)]
    np.testing.assert_array_equal(g.adjacency_matrix(), [[0, 1, 0], [1, 0, 1], [0, 1, 0]])

    with pytest.raises(DimensionMismatchError):
        Graph.from_matrix([[0, 1, 0], [1, 0, 1]])
    with pytest.raises(NotAGraphError):
        Graph.from_matrix([[0, 1], [0, 0]])


@pytest.mark.parametrize("directed", [False, True])
def test_from_matrix_rejects_loops(directed):
    """Test that a nonzero diagonal is refused for both kinds of graph."""
    with pytest.raises(NotAGraphError, match="diagonal"):
        Graph.from_matrix([[1, 1], [1, 0]], directed=directed)


def test_from_trail():
    """Test construction from a closed walk."""
    g = Graph.from_trail([1, 2, 3, 4, 1, 3])

    assert g.vertex_count() == 4
    assert g.edge_count() == 5


def test_dict_round_trip_preserves_labels_and_attributes():
    """Test that to_dict/from_dict preserve labels, weights and attributes."""
    g = Graph(weighted=True, name="sample")
    g.add_edge_by_label((0, 1), "b", 2.5, {"style": "bold"})
    g.set_vertex_attribute(1, COLOR, 3)
    g.set_graph_attribute("author", "tester")

    copy = Graph.from_dict(g.to_dict())

    assert copy.is_equal(g)
    assert copy.vertices() == [(0, 1), "b"]
    assert copy.get_edge_attribute(0, 1, "style") == "bold"
    assert copy.get_vertex_attribute(1, COLOR) == 3
    assert copy.get_graph_attribute("author") == "tester"
    assert copy.name == "sample"


def test_from_dict_rejects_invalid_description():
    """Test schema validation of bulk descriptions."""
    with pytest.raises(ValidationError):
        Graph.from_dict({"edges": [[1, 2, 3]]})
    with pytest.raises(ValidationError):
        Graph.from_dict({"vertices": [{"name": 1}]})


def test_underlying_and_reverse(sample_digraph):
    """Test derived graphs of a digraph."""
    reversed_graph = sample_digraph.reverse()
    x, y = sample_digraph.vertex_index("x"), sample_digraph.vertex_index("y")
    assert reversed_graph.has_edge(y, x)

    u = sample_digraph.underlying()
    assert not u.is_directed()
    assert u.edge_count() == 4
    assert u.rng is sample_digraph.rng

    with pytest.raises(DirectionMismatchError):
        u.reverse()


def test_complement(two_triangles):
    """Test that a graph and its complement partition the pairs."""
    c = two_triangles.complement()
    assert c.edge_count() + two_triangles.edge_count() == 15
    assert not c.has_edge_by_label(1, 2)
    assert c.has_edge_by_label(1, 6)


def test_contract_edge(two_triangles):
    """Test merging two adjacent vertices."""
    two_triangles.contract_edge(two_triangles.vertex_index(3), two_triangles.vertex_index(4))

    assert two_triangles.vertex_count() == 5
    three = two_triangles.vertex_index(3)
    assert sorted(two_triangles.labels(two_triangles.neighbors(three))) == [1, 2, 5, 6]


def test_subdivide_edges():
    """Test that subdivision inserts fresh integer-labelled vertices."""
    g = Graph.from_edges([(0, 1)])
    g.subdivide_edges([(0, 1)], r=2)

    assert g.vertices() == [0, 1, 2, 3]
    assert g.edges() == [(0, 2), (1, 3), (2, 3)]


def test_isomorphic_copy():
    """Test relabelling by a permutation."""
    g = Graph.from_edges([("a", "b"), ("b", "c")])
    h = g.isomorphic_copy([2, 0, 1])

    assert h.vertices() == ["b", "c", "a"]
    assert h.has_edge_by_label("a", "b")
    assert h.edge_count() == 2
    with pytest.raises(ValueError):
        g.isomorphic_copy([0, 0, 1])


def test_relabel_requires_unique_labels():
    """Test that relabelling rejects duplicates."""
    g = Graph.from_vertices([1, 2])
    with pytest.raises(ValidationError):
        g.relabel_vertices(["a", "a"])
    g.relabel_vertices(["a", "b"])
    assert g.vertex_index("b") == 1


def test_positions_require_every_vertex():
    """Test stored positions."""
    g = Graph.from_vertices([1, 2])
    g.set_vertex_attribute(0, "position", [0.0, 1.0])
    assert g.positions() is None

    g.set_vertex_attribute(1, "position", [2, 3])
    assert g.positions() == [(0.0, 1.0), (2.0, 3.0)]


def test_color_vertices_checks_length():
    """Test per-vertex coloring."""
    g = Graph.from_vertices([1, 2, 3])
    with pytest.raises(DimensionMismatchError):
        g.color_vertices([1, 2])
    g.color_vertices([1, 2, 3])
    assert [g.get_vertex_attribute(i, COLOR) for i in range(3)] == [1, 2, 3]
