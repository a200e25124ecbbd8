"""
Tests for layout and drawing configuration.
"""

import pytest

from trellis.config import DrawingConfig, LayoutConfig
from trellis.core.exceptions import ConfigurationError


def test_layout_defaults():
    """Test default layout parameters."""
    config = LayoutConfig()
    assert config.spring_constant == 1.0
    assert config.coarsening_method == "mis"
    assert config.coarsest_size == 10
    assert config.seed is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"spring_constant": 0},
        {"tolerance": -1e-3},
        {"max_iterations": 0},
        {"cooling": 1.0},
        {"cooling": 0.0},
        {"coarsening_method": "metis"},
        {"coarsest_size": 1},
        {"coarsening_ratio": 0},
        {"coarsening_ratio": 1.5},
        {"separation": -2},
    ],
)
def test_invalid_layout_parameters(kwargs):
    """Test that out-of-range parameters raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        LayoutConfig(**kwargs)


def test_drawing_config():
    """Test drawing options."""
    config = DrawingConfig(labels=False, edge_color=2)
    assert not config.labels
    assert config.arrows
    assert config.edge_color == 2
    with pytest.raises(ConfigurationError):
        DrawingConfig(label_offset=-0.5)
