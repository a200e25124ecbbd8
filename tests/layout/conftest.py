"""Shared test fixtures."""

import random

import pytest

from trellis.config import LayoutConfig
from trellis.core.graph import Graph


@pytest.fixture
def rng() -> random.Random:
    """Fixture providing a seeded random source."""
    return random.Random(2024)


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Fixture providing a seeded, fast layout configuration."""
    return LayoutConfig(seed=7, max_iterations=200)


@pytest.fixture
def binary_tree() -> Graph:
    """Fixture providing the complete binary tree of depth 3."""
    g = Graph.from_vertices(range(15))
    for child in range(1, 15):
        g.add_edge((child - 1) // 2, child)
    return g


@pytest.fixture
def grid() -> Graph:
    """Fixture providing a 5 x 5 grid graph."""
    g = Graph()
    with g.transaction():
        for r in range(5):
            for c in range(5):
                if r < 4:
                    g.add_edge_by_label((r, c), (r + 1, c))
                if c < 4:
                    g.add_edge_by_label((r, c), (r, c + 1))
    return g


@pytest.fixture
def forest() -> Graph:
    """Fixture providing a path, a star and an isolated vertex."""
    g = Graph.from_edges([(0, 1), (1, 2), (10, 11), (10, 12), (10, 13)], vertices=[99])
    return g
