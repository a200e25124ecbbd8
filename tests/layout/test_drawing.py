"""
Tests for layout dispatch and drawing primitives.
"""

import numpy as np
import pytest

from trellis.config import DrawingConfig, LayoutConfig
from trellis.core.enums import LayoutStyle
from trellis.core.exceptions import (
    InvalidDrawingMethodError,
    InvalidRootError,
    NotATreeError,
    NotConnectedError,
    NotPlanarError,
)
from trellis.core.graph import COLOR, Graph
from trellis.core.graph_operations.components import ComponentAnalysis
from trellis.core.graph_operations.templates import complete_graph, special_graph, wheel_graph
from trellis.layout.drawing import (
    draw_graph,
    guess_style,
    label_quadrant,
    make_layout,
    store_layout,
)
from trellis.layout.packing import layout_bounding_rect


@pytest.fixture
def placed_path():
    """Fixture providing a path with stored positions on the x axis."""
    g = Graph.from_edges([("a", "b"), ("b", "c")])
    store_layout(g, np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]]))
    return g


def test_guess_style():
    """Test style suggestions from structure."""
    assert guess_style(special_graph("cube")) == LayoutStyle.PLANAR
    assert guess_style(special_graph("petersen")) == LayoutStyle.SPRING
    assert guess_style(Graph.from_edges([(0, 1), (1, 2)])) == LayoutStyle.TREE


@pytest.mark.parametrize(
    "style, roots, cycle",
    [
        ("tree", None, None),
        (LayoutStyle.DEFAULT, [0], [0, 1, 2]),
        (LayoutStyle.PLANAR, [0], None),
        (LayoutStyle.SPRING, None, [0, 1, 2]),
    ],
)
def test_contradictory_options(style, roots, cycle):
    """Test that unknown styles and clashing options are rejected."""
    g = Graph.from_trail([0, 1, 2, 0])
    with pytest.raises(InvalidDrawingMethodError):
        make_layout(g, style, roots=roots, cycle=cycle)


def test_layout_errors(forest, layout_config):
    """Test the structural preconditions of the styles."""
    with pytest.raises(InvalidRootError):
        make_layout(forest, roots=[0])
    with pytest.raises(NotATreeError):
        make_layout(special_graph("petersen"), LayoutStyle.TREE)
    with pytest.raises(NotPlanarError):
        make_layout(complete_graph(5), LayoutStyle.PLANAR)
    with pytest.raises(NotConnectedError):
        make_layout(forest, LayoutStyle.SPRING_3D, config=layout_config)
    with pytest.raises(NotConnectedError):
        make_layout(forest, cycle=[0, 1, 2])


def test_default_layout_packs_components(forest, layout_config):
    """Test that component drawings do not overlap."""
    layout = make_layout(forest, config=layout_config)
    boxes = [
        layout_bounding_rect(layout[c]) for c in ComponentAnalysis.connected_components(forest)
    ]

    assert layout.shape == (8, 2)
    for i, a in enumerate(boxes):
        for b in boxes[i + 1 :]:
            assert not a.intersects(b)


def test_roots_put_trees_upright(binary_tree, layout_config):
    """Test that a chosen root is drawn on top."""
    layout = make_layout(binary_tree, roots=[3], config=layout_config)
    assert layout[3, 1] == pytest.approx(layout[:, 1].max())
    assert np.sum(np.isclose(layout[:, 1], layout[:, 1].max())) == 1


def test_cycle_is_drawn_on_a_circle(layout_config):
    """Test that the rim of a wheel is equidistant from its hub."""
    g = wheel_graph(6)
    layout = make_layout(g, cycle=[0, 1, 2, 3, 4, 5], config=layout_config)
    radii = np.linalg.norm(layout[:6] - layout[6], axis=1)

    np.testing.assert_allclose(radii, radii[0])


def test_spring_layouts(grid, layout_config):
    """Test 2D and 3D spring drawings of a connected graph."""
    flat = make_layout(grid, LayoutStyle.SPRING, config=layout_config)
    deep = make_layout(grid, LayoutStyle.SPRING_3D, config=layout_config)
    multilevel = make_layout(grid, LayoutStyle.MULTILEVEL, config=layout_config)

    assert flat.shape == multilevel.shape == (25, 2)
    assert deep.shape == (25, 3)
    assert np.all(np.isfinite(deep))


def test_label_quadrant():
    """Test that labels go where no edge leaves the vertex."""
    g = Graph.from_edges([(0, 1), (0, 2), (0, 3)])
    layout = np.array([[0.0, 0.0], [1.0, 1.0], [-1.0, 1.0], [-1.0, -1.0]])
    assert label_quadrant(g, layout, 0) == 3
    assert label_quadrant(g, layout, 1) == 0


def test_stored_positions_are_used(placed_path):
    """Test that a fully positioned graph is drawn where it stands."""
    drawing = draw_graph(placed_path)

    np.testing.assert_array_equal(drawing.layout[:, 0], [0.0, 1.0, 2.0])
    assert drawing.segments[0].start == (0.0, 0.0)
    assert drawing.segments[0].end == (1.0, 0.0)
    assert [lbl.text for lbl in drawing.labels] == ["a", "b", "c"]
    first = drawing.labels[0]
    assert first.quadrant == 1
    assert first.position == pytest.approx((-0.1 / np.sqrt(2), 0.1 / np.sqrt(2)))


def test_colors_and_labels(placed_path):
    """Test vertex colors, default edge colors and the label switch."""
    placed_path.set_vertex_attribute(0, COLOR, 3)
    drawing = draw_graph(placed_path, config=DrawingConfig(labels=False))

    assert [p.color for p in drawing.points] == [3, 0, 0]
    assert {s.color for s in drawing.segments} == {4}
    assert drawing.labels == []


def test_arrows_follow_direction():
    """Test that arcs of a digraph carry arrows unless disabled."""
    g = Graph.from_edges([(0, 1), (1, 2)], directed=True)
    store_layout(g, np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]]))

    assert all(s.arrow for s in draw_graph(g).segments)
    assert not any(s.arrow for s in draw_graph(g, config=DrawingConfig(arrows=False)).segments)


def test_weights_follow_weighting():
    """Test that segments of weighted graphs carry weights unless disabled."""
    g = Graph(weighted=True)
    g.add_edge_by_label("u", "v", 2.5)
    store_layout(g, np.array([[0.0, 0.0], [1.0, 0.0]]))

    assert draw_graph(g).segments[0].weight == 2.5
    assert draw_graph(g, config=DrawingConfig(weights=False)).segments[0].weight is None
    assert "weight" in draw_graph(g).to_dict()["segments"][0]


def test_3d_drawing_to_dict(layout_config):
    """Test the serializable form of a 3D drawing."""
    g = special_graph("petersen")
    data = draw_graph(g, LayoutStyle.SPRING_3D, layout_config=layout_config).to_dict()

    assert set(data) == {"dimension", "segments", "points", "labels"}
    assert data["dimension"] == 3
    assert len(data["points"]) == 10
    assert len(data["segments"]) == 15
    assert len(data["points"][0]["position"]) == 3


def test_explicit_style_overrides_stored_positions(placed_path):
    """Test that requesting a style recomputes the layout."""
    drawing = draw_graph(placed_path, LayoutStyle.TREE, layout_config=LayoutConfig(seed=1))
    assert drawing.layout[0, 1] == pytest.approx(drawing.layout[:, 1].max())
    assert drawing.layout[0, 1] != drawing.layout[1, 1]


def test_store_layout(placed_path):
    """Test that a layout is written to the position attributes."""
    assert placed_path.positions() == [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]
