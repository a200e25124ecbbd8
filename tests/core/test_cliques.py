"""
Tests for clique enumeration, coloring and independent sets.
"""

from itertools import combinations

import pytest

from trellis.core.cliques import (
    chromatic_number,
    clique_cover,
    clique_cover_number,
    clique_number,
    independence_number,
    is_clique,
    maximal_cliques,
    maximal_independent_set,
    maximum_clique,
)
from trellis.core.graph import Graph


def complete_graph(n: int) -> Graph:
    return Graph.from_edges(list(combinations(range(n), 2)), vertices=range(n))


def test_complete_graph_has_one_maximal_clique():
    """Test that K5 is its own only maximal clique."""
    assert maximal_cliques(complete_graph(5)) == [[0, 1, 2, 3, 4]]


def test_maximal_cliques_of_bridged_triangles(two_triangles):
    """Test that the bridge is a maximal clique of its own."""
    cliques = sorted(sorted(two_triangles.labels(c)) for c in maximal_cliques(two_triangles))
    assert cliques == [[1, 2, 3], [3, 4], [4, 5, 6]]


def test_triangle_free_cliques_are_edges(petersen):
    """Test that the maximal cliques of the Petersen graph are its edges."""
    cliques = maximal_cliques(petersen)

    assert len(cliques) == 15
    assert all(len(c) == 2 and is_clique(petersen, c) for c in cliques)
    assert clique_number(petersen) == 2


def test_isolated_vertices_are_cliques():
    """Test that an edgeless graph has singleton cliques."""
    g = Graph.from_vertices([1, 2, 3])
    assert sorted(maximal_cliques(g)) == [[0], [1], [2]]
    assert maximal_cliques(Graph()) == []


def test_maximum_clique(two_triangles):
    """Test that a largest clique is one of the triangles."""
    clique = maximum_clique(two_triangles)
    assert sorted(two_triangles.labels(clique)) in ([1, 2, 3], [4, 5, 6])


@pytest.mark.parametrize(
    "edges,expected",
    [
        ([(0, 1), (1, 2), (2, 3), (3, 4), (4, 0)], 3),
        ([(0, 1), (1, 2), (2, 3), (3, 0)], 2),
        (list(combinations(range(4), 2)), 4),
    ],
)
def test_chromatic_number(edges, expected):
    """Test exact coloring of small graphs."""
    assert chromatic_number(Graph.from_edges(edges)) == expected


def test_chromatic_number_edge_cases(petersen):
    """Test graphs without edges and the Petersen graph."""
    assert chromatic_number(Graph()) == 0
    assert chromatic_number(Graph.from_vertices([1, 2])) == 1
    assert chromatic_number(petersen) == 3


def test_clique_cover(two_triangles):
    """Test the greedy cover and its size limit."""
    cover = clique_cover(two_triangles)

    assert len(cover) == 2
    assert sorted(v for c in cover for v in c) == list(range(6))
    assert all(is_clique(two_triangles, c) for c in cover)
    assert clique_cover(two_triangles, k=1) == []
    assert clique_cover_number(two_triangles) == 2


def test_independent_sets(petersen):
    """Test maximum and maximal independent sets."""
    assert independence_number(petersen) == 4

    chosen = maximal_independent_set(petersen)
    assert all(not petersen.adjacent(a, b) for a, b in combinations(chosen, 2))
    assert all(
        v in chosen or any(petersen.adjacent(v, c) for c in chosen) for v in range(10)
    )
