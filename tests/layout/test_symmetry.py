"""
Tests for crossing detection and canonical orientation.
"""

import numpy as np
import pytest

from trellis.core.graph import Graph
from trellis.layout.geometry import bounding_box
from trellis.layout.symmetry import (
    axis_of_symmetry,
    best_rotation,
    edge_crossings,
    promote_edge_crossings,
    symmetry_score,
)

SQUARE = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])


@pytest.fixture
def square_with_diagonals():
    """Fixture providing K4 drawn as a square with both diagonals."""
    return Graph.from_edges([(0, 1), (1, 2), (2, 3), (3, 0), (0, 2), (1, 3)])


def pairwise_distances(layout):
    delta = layout[:, None, :] - layout[None, :, :]
    return np.linalg.norm(delta, axis=2)


def test_edge_crossings(square_with_diagonals):
    """Test that only the two diagonals cross, at the center."""
    crossings = edge_crossings(square_with_diagonals, SQUARE)

    assert len(crossings) == 1
    e, f, point = crossings[0]
    pairs = square_with_diagonals.edge_pairs()
    assert {pairs[e], pairs[f]} == {(0, 2), (1, 3)}
    np.testing.assert_allclose(point, [0.5, 0.5])


def test_promote_edge_crossings(square_with_diagonals):
    """Test that a crossing becomes a vertex splitting both edges."""
    planar, extended = promote_edge_crossings(square_with_diagonals, SQUARE)

    assert planar.vertex_count() == 5
    assert planar.edge_count() == 8
    assert planar.label(4) == ("crossing", 0)
    assert sorted(planar.neighbors(4)) == [0, 1, 2, 3]
    np.testing.assert_allclose(extended[4], [0.5, 0.5])
    assert square_with_diagonals.edge_count() == 6
    assert edge_crossings(planar, extended) == []


def test_symmetry_score_of_a_square():
    """Test a perfect and an imperfect mirror axis."""
    center = np.array([0.5, 0.5])
    assert symmetry_score(SQUARE, center, np.array([0.0, 1.0]), 0.01) == 1.0
    assert symmetry_score(SQUARE, np.array([0.0, 0.2]), np.array([0.0, 1.0]), 0.01) < 1.0


def test_axis_of_symmetry():
    """Test the axis found for an isosceles triangle."""
    g = Graph.from_trail([0, 1, 2, 0])
    layout = np.array([[-1.0, 0.0], [1.0, 0.0], [0.0, 3.0]])
    center, direction, score = axis_of_symmetry(g, layout)

    assert score == 1.0
    assert abs(direction[0]) == pytest.approx(0.0, abs=1e-9)
    assert axis_of_symmetry(g, layout[:1]) is None


def test_best_rotation_turns_axis_vertical():
    """Test that a symmetric drawing ends up with a vertical mirror axis."""
    g = Graph.from_edges([(0, 1), (1, 2)])
    layout = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
    rotated = best_rotation(g, layout)

    np.testing.assert_allclose(rotated[:, 0], rotated[0, 0], atol=1e-9)
    np.testing.assert_allclose(pairwise_distances(rotated), pairwise_distances(layout))


def test_best_rotation_of_an_asymmetric_drawing():
    """Test that an asymmetric drawing is made wider than tall."""
    g = Graph.from_trail([0, 1, 2, 0])
    layout = np.array([[0.0, 0.0], [0.5, 4.0], [-1.0, 1.0]])
    rotated = best_rotation(g, layout)

    lo, hi = bounding_box(rotated)
    assert hi[0] - lo[0] >= hi[1] - lo[1]
    np.testing.assert_allclose(pairwise_distances(rotated), pairwise_distances(layout))


def test_best_rotation_leaves_3d_unchanged():
    """Test that 3D layouts are not rotated."""
    g = Graph.from_edges([(0, 1)])
    layout = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]])
    np.testing.assert_array_equal(best_rotation(g, layout), layout)
