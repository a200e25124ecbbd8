"""
Tests for the spring and multilevel layouts.
"""

import numpy as np
import pytest
from scipy import sparse

from trellis.config import LayoutConfig
from trellis.core.graph import Graph
from trellis.layout.force_directed import (
    Coarsener,
    SpringEmbedder,
    adjacency_operator,
    force_directed_placement,
    multilevel_layout,
    spring_layout,
)


def mean_edge_length(graph, layout):
    return np.mean([np.linalg.norm(layout[i] - layout[j]) for i, j in graph.edge_pairs()])


def mean_pair_distance(layout):
    n = len(layout)
    return np.mean(
        [np.linalg.norm(layout[i] - layout[j]) for i in range(n) for j in range(i + 1, n)]
    )


@pytest.fixture
def sample_digraph_like():
    """Fixture providing a digraph with a pair of antiparallel arcs."""
    return Graph.from_edges([(0, 1), (1, 0), (1, 2), (2, 3), (3, 0)], directed=True)


def test_adjacency_operator(sample_digraph_like):
    """Test that the operator is symmetric, binary and loop free."""
    a = adjacency_operator(sample_digraph_like)

    assert (a != a.T).nnz == 0
    assert set(a.data) == {1.0}
    assert a.diagonal().sum() == 0
    assert a.nnz == 8


def test_force_directed_placement_is_reproducible(binary_tree, layout_config):
    """Test that a seeded configuration gives identical layouts."""
    first = force_directed_placement(binary_tree, config=layout_config)
    second = force_directed_placement(binary_tree, config=layout_config)

    assert first.shape == (15, 2)
    assert np.all(np.isfinite(first))
    np.testing.assert_allclose(first, second)


def test_force_directed_placement_in_3d(binary_tree, layout_config):
    """Test three-dimensional output."""
    layout = force_directed_placement(binary_tree, dim=3, config=layout_config)
    assert layout.shape == (15, 3)
    with pytest.raises(ValueError):
        force_directed_placement(binary_tree, dim=4)


def test_starting_layout_is_refined(layout_config):
    """Test that a given start is used and no two vertices coincide afterwards."""
    g = Graph.from_trail([0, 1, 2, 3, 0])
    start = np.zeros((4, 2))
    layout = force_directed_placement(g, layout=start, config=layout_config)

    assert len(np.unique(np.round(layout, 6), axis=0)) == 4
    assert np.all(start == 0)


def test_spring_embedder_iteration_cap():
    """Test that the embedder honours max_iterations."""
    g = Graph.from_trail([0, 1, 2, 0])
    config = LayoutConfig(max_iterations=3, tolerance=0.0)
    embedder = SpringEmbedder(adjacency_operator(g), config, g.rng)
    embedder.run(np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]))
    assert embedder.iterations == 3


def test_multilevel_layout_keeps_neighbors_close(grid, layout_config):
    """Test that grid neighbors end up closer than an average pair."""
    layout = multilevel_layout(grid, config=layout_config)

    assert layout.shape == (25, 2)
    assert mean_edge_length(grid, layout) < mean_pair_distance(layout)


def test_spring_layout_single_vertex(layout_config):
    """Test that a lone vertex is laid out."""
    single = spring_layout(Graph.from_vertices(["only"]), config=layout_config)
    assert single.shape == (1, 2)


@pytest.mark.parametrize("method", ["mis", "matching"])
def test_coarsening(grid, rng, method):
    """Test that one coarsening level shrinks the graph with a proper prolongation."""
    config = LayoutConfig(coarsening_method=method)
    adjacency = adjacency_operator(grid)
    p, coarse = Coarsener(config, rng).coarsen(adjacency)

    assert p.shape[0] == 25
    assert p.shape[1] < 25
    np.testing.assert_allclose(np.asarray(p.sum(axis=1)).ravel(), np.ones(25))
    assert coarse.shape == (p.shape[1], p.shape[1])
    assert coarse.diagonal().sum() == 0


def test_mis_prolongation_rows_sum_to_one(grid, rng):
    """Test that interpolation weights of every fine vertex add up to one."""
    p = Coarsener(LayoutConfig(), rng).mis_prolongation(adjacency_operator(grid))
    np.testing.assert_allclose(np.asarray(p.sum(axis=1)).ravel(), np.ones(25))


def test_hierarchy_stops_at_coarsest_size(grid, rng):
    """Test that coarsening ends at the configured size."""
    config = LayoutConfig(coarsest_size=4, coarsening_ratio=1.0)
    levels, coarsest = Coarsener(config, rng).hierarchy(adjacency_operator(grid))

    assert levels
    assert levels[0][1].shape == (25, 25)
    assert coarsest.shape[0] <= levels[-1][0].shape[1]
    assert all(isinstance(p, sparse.csr_matrix) for p, _ in levels)
