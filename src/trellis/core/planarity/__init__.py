"""Planarity testing, embedding and triangulation."""

from .embedding import (
    PlanarEmbedder,
    choose_outer_face,
    demoucron,
    is_planar,
    planar_embedding,
)
from .triangulation import Triangulator

__all__ = [
    "PlanarEmbedder",
    "Triangulator",
    "choose_outer_face",
    "demoucron",
    "is_planar",
    "planar_embedding",
]
