"""
Data models for graph path finding.

- PathResult: a path as a sequence of vertex indices with its total cost
- PerformanceMetrics: counters recorded by the path finders

Example:
    >>> result = PathResult(vertices=[0, 3, 4], total_weight=2.5)
    >>> result.edges
    [(0, 3), (3, 4)]
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class PathResult:
    """
    Container for path finding results.

    Attributes:
        vertices: Vertex indices from source to target; empty if unreachable
        total_weight: Cost of the path, ``math.inf`` if unreachable
    """

    vertices: List[int] = field(default_factory=list)
    total_weight: float = math.inf

    def __post_init__(self):
        """Validate initialization parameters."""
        if not isinstance(self.vertices, list):
            raise TypeError("vertices must be a list")
        if not isinstance(self.total_weight, (int, float)):
            raise TypeError("total_weight must be a numeric value")

    def __len__(self) -> int:
        """Return the number of edges in the path."""
        return max(len(self.vertices) - 1, 0)

    def __iter__(self):
        return iter(self.vertices)

    @property
    def reachable(self) -> bool:
        return bool(self.vertices)

    @property
    def edges(self) -> List[Tuple[int, int]]:
        """Get the consecutive vertex pairs of the path."""
        return list(zip(self.vertices, self.vertices[1:]))

    def as_pair(self) -> Tuple[List[int], float]:
        """Return the ``[path, cost]`` pair reported to callers."""
        return list(self.vertices), self.total_weight


@dataclass
class PerformanceMetrics:
    """Performance counters of a single path finding operation."""

    operation: str
    start_time: float
    end_time: Optional[float] = None
    nodes_explored: int = 0
    max_memory_used: int = 0

    @property
    def duration_ms(self) -> float:
        """Get operation duration in milliseconds."""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000
