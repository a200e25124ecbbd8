"""
Tests for planarity testing, embedding and triangulation.
"""

from itertools import combinations

import pytest

from trellis.core.exceptions import NotPlanarError
from trellis.core.graph import Graph
from trellis.core.graph_operations.components import ComponentAnalysis
from trellis.core.graph_operations.templates import (
    complete_bipartite,
    complete_graph,
    hypercube_graph,
    random_tree,
    special_graph,
)
from trellis.core.planarity import Triangulator, choose_outer_face, is_planar, planar_embedding


def assert_euler(graph: Graph, faces) -> None:
    """Check V - E + F = 2C and that every edge is walked twice.

    Each connected component is embedded with its own outer face.
    """
    components = len(ComponentAnalysis.connected_components(graph))
    assert graph.vertex_count() - graph.edge_count() + len(faces) == 2 * components
    if graph.edge_count():
        assert sum(len(f) for f in faces) == 2 * graph.edge_count()


@pytest.mark.parametrize("graph", [complete_graph(5), complete_bipartite(3, 3)])
def test_kuratowski_graphs_are_not_planar(graph):
    """Test K5 and K3,3."""
    assert not is_planar(graph)
    with pytest.raises(NotPlanarError):
        planar_embedding(graph)


def test_petersen_is_not_planar(petersen):
    """Test a non-planar cubic graph."""
    assert not is_planar(petersen)


def test_removing_an_edge_from_k33_makes_it_planar():
    """Test that K3,3 minus an edge is planar."""
    g = complete_bipartite(3, 3)
    g.remove_edge(0, 3)
    assert_euler(g, planar_embedding(g))


def test_trivial_embeddings():
    """Test the embeddings of K1, K2 and the empty graph."""
    assert planar_embedding(Graph.from_vertices([0])) == [[0]]
    assert planar_embedding(Graph.from_edges([(0, 1)])) == [[0, 1]]
    assert planar_embedding(Graph()) == []


@pytest.mark.parametrize("n", [3, 4])
def test_complete_graphs_satisfy_euler(n):
    """Test K3 and K4."""
    g = complete_graph(n)
    faces = planar_embedding(g)
    assert_euler(g, faces)
    assert all(len(f) == 3 for f in faces)


def test_tree_has_one_face(rng):
    """Test that a tree embeds with a single face walking every edge twice."""
    tree = random_tree(12, rng=rng)
    faces = planar_embedding(tree)

    assert len(faces) == 1
    assert_euler(tree, faces)


def test_outerplanar_fan():
    """Test a fan: a path with a hub joined to every path vertex."""
    fan = Graph.from_trail([1, 2, 3, 4, 5])
    for v in range(1, 6):
        fan.add_edge_by_label(0, v)
    assert_euler(fan, planar_embedding(fan))


@pytest.mark.parametrize("name", ["cube", "octahedron", "dodecahedron", "icosahedron"])
def test_platonic_solids(name):
    """Test the embeddings of polyhedral graphs."""
    g = special_graph(name)
    assert_euler(g, planar_embedding(g))


def test_blocks_are_combined(two_triangles):
    """Test an embedding recombined along cut vertices."""
    faces = planar_embedding(two_triangles)
    assert len(faces) == 3
    assert_euler(two_triangles, faces)


def test_disconnected_graph():
    """Test that each component contributes its own faces."""
    g = Graph.from_edges([(0, 1), (1, 2), (0, 2), (3, 4), (4, 5), (3, 5)])
    faces = planar_embedding(g)
    assert len(faces) == 4
    assert_euler(g, faces)


def test_digraph_uses_underlying_graph(sample_digraph):
    """Test that arc directions are ignored."""
    assert len(planar_embedding(sample_digraph)) == 2


def test_choose_outer_face():
    """Test that the longest face is drawn outside."""
    assert choose_outer_face([[0, 1, 2], [0, 1, 2, 3], [1, 2, 3]]) == 1
    with pytest.raises(ValueError):
        choose_outer_face([])


def test_triangulate_cube():
    """Test that every bounded face of the cube is cut into triangles."""
    cube = hypercube_graph(3)
    faces = Triangulator(cube, planar_embedding(cube)).triangulate()

    assert len(faces[0]) == 4
    assert len(faces) == 11
    for face in faces[1:]:
        assert len(face) == 3
        for a, b in combinations(face, 2):
            assert cube.has_edge(a, b, include_temp_edges=True)
    assert cube.edge_count() == 12
    assert cube.edge_count(include_temp_edges=True) == 17


def test_triangulation_keeps_real_edges(two_triangles):
    """Test that triangulating only adds temporary edges."""
    before = two_triangles.to_dict()
    Triangulator(two_triangles, planar_embedding(two_triangles)).triangulate()
    two_triangles.remove_temporary_edges()
    assert two_triangles.to_dict() == before
