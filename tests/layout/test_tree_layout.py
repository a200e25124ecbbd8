"""
Tests for the layered tree and forest layouts.
"""

import numpy as np
import pytest

from trellis.core.exceptions import InvalidRootError, VertexNotFoundError
from trellis.core.graph import Graph
from trellis.core.graph_operations.components import ComponentAnalysis
from trellis.layout.tree import TreeNodePositioner, forest_layout, tree_layout


def test_binary_tree_levels(binary_tree):
    """Test that depth sets the y coordinate with the root on top."""
    layout = tree_layout(binary_tree)

    np.testing.assert_allclose(layout[0], [0.0, 0.0])
    for v in range(15):
        depth = int(np.log2(v + 1))
        assert layout[v, 1] == pytest.approx(-depth)


def test_binary_tree_leaves_are_ordered_and_separated(binary_tree):
    """Test that leaves keep child order and at least the minimum spacing."""
    layout = tree_layout(binary_tree)
    xs = layout[7:15, 0]

    assert np.all(np.diff(xs) >= 1.0 - 1e-9)


def test_parents_are_centred_over_children(binary_tree):
    """Test Walker's centring rule."""
    layout = tree_layout(binary_tree)
    for parent in range(7):
        left, right = 2 * parent + 1, 2 * parent + 2
        assert layout[parent, 0] == pytest.approx((layout[left, 0] + layout[right, 0]) / 2)


def test_separations_scale_the_layout(binary_tree):
    """Test custom horizontal and vertical separations."""
    unit = tree_layout(binary_tree)
    scaled = tree_layout(binary_tree, hsep=2.0, vsep=3.0)

    np.testing.assert_allclose(scaled[:, 0], 2.0 * unit[:, 0])
    np.testing.assert_allclose(scaled[:, 1], 3.0 * unit[:, 1])


def test_root_in_the_middle_of_a_path():
    """Test rooting a path at its middle vertex."""
    g = Graph.from_edges([(0, 1), (1, 2)])
    layout = tree_layout(g, root=1)

    np.testing.assert_allclose(layout, [[-0.5, -1.0], [0.0, 0.0], [0.5, -1.0]])


def test_unbalanced_subtrees_do_not_overlap():
    """Test that contours of neighboring subtrees are pushed apart."""
    # two caterpillars hanging from a common root
    g = Graph.from_edges(
        [(0, 1), (0, 2), (1, 3), (1, 4), (3, 5), (3, 6), (2, 7), (2, 8), (7, 9), (7, 10)]
    )
    layout = tree_layout(g)
    for depth in range(4):
        level = sorted(layout[np.isclose(layout[:, 1], -depth), 0])
        assert np.all(np.diff(level) >= 1.0 - 1e-9)


def test_deep_path_is_positioned_iteratively():
    """Test a path deeper than the default recursion limit."""
    g = Graph.from_trail(list(range(1500)))
    layout = TreeNodePositioner(g).position(0)

    assert layout[1499, 1] == pytest.approx(-1499.0)
    np.testing.assert_allclose(layout[:, 0], 0.0)


def test_invalid_root_index(binary_tree):
    """Test that an out-of-range root is rejected."""
    with pytest.raises(VertexNotFoundError):
        tree_layout(binary_tree, root=20)


def test_forest_components_are_side_by_side(forest):
    """Test that the trees of a forest occupy disjoint horizontal ranges."""
    layout = forest_layout(forest)
    ranges = sorted(
        (layout[c, 0].min(), layout[c, 0].max())
        for c in ComponentAnalysis.connected_components(forest)
    )

    assert len(ranges) == 3
    for (_, right), (left, _) in zip(ranges, ranges[1:]):
        assert left - right == pytest.approx(1.0)
    assert np.all(layout[[0, 1, 4], 1] == 0.0)


def test_forest_with_chosen_roots(forest):
    """Test that given roots end up on the top level."""
    roots = [forest.vertex_index(99), forest.vertex_index(1), forest.vertex_index(12)]
    layout = forest_layout(forest, roots=roots)

    assert all(layout[r, 1] == 0.0 for r in roots)
    assert layout[forest.vertex_index(10), 1] == pytest.approx(-1.0)
    assert layout[forest.vertex_index(11), 1] == pytest.approx(-2.0)


@pytest.mark.parametrize("roots", [[0, 1], [0, 1, 2, 4], [0, 1, 2]])
def test_forest_rejects_bad_roots(forest, roots):
    """Test that roots must pick one vertex from every component."""
    with pytest.raises(InvalidRootError):
        forest_layout(forest, roots=roots)
