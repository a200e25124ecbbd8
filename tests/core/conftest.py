"""Shared test fixtures."""

import random

import pytest

from trellis.core.graph import Graph


@pytest.fixture
def rng() -> random.Random:
    """Fixture providing a seeded random source."""
    return random.Random(12345)


@pytest.fixture
def two_triangles() -> Graph:
    """Fixture providing two triangles joined by the bridge 3-4."""
    return Graph.from_edges([(1, 2), (2, 3), (1, 3), (3, 4), (4, 5), (5, 6), (4, 6)])


@pytest.fixture
def weighted_graph() -> Graph:
    """Fixture providing a small weighted graph with a cheap detour."""
    return Graph.from_edges(
        [("a", "b", 1), ("b", "c", 2), ("a", "c", 5), ("c", "d", 1)], weighted=True
    )


@pytest.fixture
def sample_digraph() -> Graph:
    """Fixture providing a digraph with one 3-cycle and a tail."""
    return Graph.from_edges([("x", "y"), ("y", "z"), ("z", "x"), ("z", "w")], directed=True)


@pytest.fixture
def petersen() -> Graph:
    """Fixture providing the Petersen graph."""
    g = Graph()
    with g.transaction():
        for i in range(5):
            g.add_edge_by_label(i, (i + 1) % 5)
            g.add_edge_by_label(i, i + 5)
            g.add_edge_by_label(i + 5, (i + 2) % 5 + 5)
    return g
