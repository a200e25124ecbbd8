"""Path finding algorithm implementations."""

from .shortest_path import ShortestPathFinder

__all__ = ["ShortestPathFinder"]
