"""
Configuration objects for layout and drawing.
"""

from typing import Optional

from .core.exceptions import ConfigurationError

COARSENING_METHODS = ("mis", "matching")


class LayoutConfig:
    """
    Configuration for the layout engines.

    This class defines parameters for controlling layout behavior:
    - Force model and cooling schedule of the spring layout
    - When multilevel coarsening stops
    - Spacing of tree levels and of packed components

    Attributes:
        spring_constant: Natural edge length of the spring model
        tolerance: Relative displacement below which iteration stops
        max_iterations: Iteration cap of one single-level run
        cooling: Factor in (0, 1) by which the step shrinks when energy rises
        coarsening_method: ``"mis"`` or ``"matching"``
        coarsest_size: Stop coarsening at graphs this small
        coarsening_ratio: Stop coarsening when a level shrinks less than this
        separation: Distance between tree levels and between components
        seed: Seed applied to the graph's random source before layout, if any
    """

    def __init__(
        self,
        spring_constant: float = 1.0,
        tolerance: float = 1e-3,
        max_iterations: int = 500,
        cooling: float = 0.9,
        coarsening_method: str = "mis",
        coarsest_size: int = 10,
        coarsening_ratio: float = 0.75,
        separation: float = 1.0,
        seed: Optional[int] = None,
    ):
        if spring_constant <= 0:
            raise ConfigurationError("spring_constant must be positive")
        if tolerance < 0:
            raise ConfigurationError("tolerance must be non-negative")
        if max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")
        if not 0 < cooling < 1:
            raise ConfigurationError("cooling must lie strictly between 0 and 1")
        if coarsening_method not in COARSENING_METHODS:
            raise ConfigurationError(
                f"coarsening_method must be one of {', '.join(COARSENING_METHODS)}"
            )
        if coarsest_size < 2:
            raise ConfigurationError("coarsest_size must be at least 2")
        if not 0 < coarsening_ratio <= 1:
            raise ConfigurationError("coarsening_ratio must lie in (0, 1]")
        if separation <= 0:
            raise ConfigurationError("separation must be positive")
        self.spring_constant = spring_constant
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.cooling = cooling
        self.coarsening_method = coarsening_method
        self.coarsest_size = coarsest_size
        self.coarsening_ratio = coarsening_ratio
        self.separation = separation
        self.seed = seed


class DrawingConfig:
    """
    Configuration for rendering layouts into drawing primitives.

    Attributes:
        labels: Emit a label record per vertex
        arrows: Mark arcs of digraphs with arrowheads
        weights: Emit the weight of every edge of a weighted graph
        vertex_color: Color of vertices without a color attribute
        edge_color: Color of edges without a color attribute
        label_offset: Distance between a vertex and its label
    """

    def __init__(
        self,
        labels: bool = True,
        arrows: bool = True,
        weights: bool = True,
        vertex_color: int = 0,
        edge_color: int = 4,
        label_offset: float = 0.1,
    ):
        if label_offset < 0:
            raise ConfigurationError("label_offset must be non-negative")
        self.labels = labels
        self.arrows = arrows
        self.weights = weights
        self.vertex_color = vertex_color
        self.edge_color = edge_color
        self.label_offset = label_offset
