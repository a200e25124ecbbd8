from abc import ABC, abstractmethod
from typing import Generic, Iterable, Iterator, TypeVar

from ..exceptions import VertexNotFoundError
from ..graph import Graph
from .models import PathResult

# Type variable for path finding results
T = TypeVar("T", bound=PathResult)


class PathFinder(ABC, Generic[T]):
    """Abstract base class for path finding algorithms."""

    def __init__(self, graph: Graph):
        """Initialize finder with graph."""
        self.graph = graph

    @abstractmethod
    def find_path(self, source: int, target: int) -> T:
        """Find path between vertices."""
        pass

    def find_paths(self, source: int, targets: Iterable[int]) -> Iterator[T]:
        """Find one path per target.

        Default implementation calls find_path once per target.
        Subclasses may override this to provide more efficient implementations.
        """
        for target in targets:
            yield self.find_path(source, target)

    def validate_vertices(self, *indices: int) -> None:
        """Validate that vertices exist in graph."""
        n = self.graph.vertex_count()
        for i in indices:
            if not 0 <= i < n:
                raise VertexNotFoundError(f"Vertex index {i} is out of range")
