"""
Tests for shortest path computations.
"""

import math

import numpy as np
import pytest

from trellis.core.exceptions import NotConnectedError, VertexNotFoundError, WeightMismatchError
from trellis.core.graph import Graph
from trellis.core.graph_paths import PathFinding, PathResult


def test_vertex_distance(two_triangles):
    """Test BFS distances for one and many targets."""
    assert PathFinding.vertex_distance(two_triangles, 0, 5) == 3
    assert PathFinding.vertex_distance(two_triangles, 0, [0, 1, 3]) == [0, 1, 2]


def test_vertex_distance_unreachable():
    """Test that unreachable vertices are infinitely far away."""
    g = Graph.from_edges([(0, 1)], vertices=[0, 1, 2])
    assert math.isinf(PathFinding.vertex_distance(g, 0, 2))
    assert PathFinding.shortest_path(g, 0, 2) is None


def test_shortest_path(two_triangles):
    """Test that the path crosses the bridge with the fewest edges."""
    path = PathFinding.shortest_path(two_triangles, 0, 5)
    assert two_triangles.labels(path) == [1, 3, 4, 6]


def test_shortest_paths_tree(two_triangles):
    """Test one path per vertex from a common source."""
    paths = PathFinding.shortest_paths(two_triangles, 0)
    assert paths[0] == [0]
    assert all(p[0] == 0 and p[-1] == t for t, p in enumerate(paths))
    assert len(paths[5]) == 4


def test_dijkstra_prefers_cheap_detour(weighted_graph):
    """Test that Dijkstra follows weights rather than hop counts."""
    a = weighted_graph.vertex_index("a")
    d = weighted_graph.vertex_index("d")
    result = PathFinding.dijkstra(weighted_graph, a, d)

    assert isinstance(result, PathResult)
    assert weighted_graph.labels(result.vertices) == ["a", "b", "c", "d"]
    assert result.total_weight == 4
    assert len(result) == 3
    assert result.edges[0] == (a, weighted_graph.vertex_index("b"))


def test_dijkstra_all_targets(weighted_graph):
    """Test results for every vertex."""
    results = PathFinding.dijkstra(weighted_graph, 0)
    assert [r.total_weight for r in results] == [0, 1, 3, 4]
    assert all(r.reachable for r in results)


def test_dijkstra_rejects_negative_weights(weighted_graph):
    """Test that negative weights are refused."""
    weighted_graph.set_weight(0, 1, -2)
    with pytest.raises(WeightMismatchError):
        PathFinding.dijkstra(weighted_graph, 0)


def test_dijkstra_invalid_vertex(weighted_graph):
    """Test validation of vertex indices."""
    with pytest.raises(VertexNotFoundError):
        PathFinding.dijkstra(weighted_graph, 0, 17)


def test_allpairs_distance(weighted_graph):
    """Test the Floyd-Warshall distance matrix."""
    dist = PathFinding.allpairs_distance(weighted_graph)

    assert dist.shape == (4, 4)
    np.testing.assert_allclose(dist, dist.T)
    assert dist[0, 3] == 4
    assert dist[0, 2] == 3


def test_allpairs_distance_disconnected():
    """Test infinite entries between components."""
    g = Graph.from_edges([(0, 1), (2, 3)])
    dist = PathFinding.allpairs_distance(g)
    assert np.isinf(dist[0, 2])
    assert math.isinf(PathFinding.graph_diameter(g))


def test_diameter_radius_and_center(petersen, two_triangles):
    """Test eccentricity based measures."""
    assert PathFinding.graph_diameter(petersen) == 2
    assert PathFinding.eccentricity(petersen, 0) == 2
    assert PathFinding.radius_center(petersen) == list(range(10))

    center = PathFinding.radius_center(two_triangles)
    assert two_triangles.labels(center) == [3, 4]


def test_center_of_disconnected_graph():
    """Test that the center needs a connected graph."""
    g = Graph.from_vertices([1, 2])
    with pytest.raises(NotConnectedError):
        PathFinding.radius_center(g)


def test_directed_distances(sample_digraph):
    """Test that arcs are followed in their direction only."""
    x = sample_digraph.vertex_index("x")
    w = sample_digraph.vertex_index("w")
    assert PathFinding.vertex_distance(sample_digraph, x, w) == 3
    assert math.isinf(PathFinding.vertex_distance(sample_digraph, w, x))
