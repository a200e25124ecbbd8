"""Degree sequence recognition and realisation."""

import logging
from typing import Hashable, List, Optional, Sequence

from ..exceptions import NotAGraphicSequenceError
from ..graph import Graph

logger = logging.getLogger(__name__)


def is_graphic_sequence(degrees: Sequence[int]) -> bool:
    """
    Check the Erdős–Gallai conditions.

    Every entry must satisfy 0 <= d < n, the sum must be even and for every
    k the k largest degrees must satisfy
    sum(d_1..d_k) <= k(k-1) + sum(min(d_i, k) for i > k).
    """
    n = len(degrees)
    if any(not isinstance(d, int) or d < 0 or d >= max(n, 1) for d in degrees):
        return False
    if sum(degrees) % 2:
        return False
    d = sorted(degrees, reverse=True)
    head = 0
    for k in range(1, n + 1):
        head += d[k - 1]
        tail = sum(min(x, k) for x in d[k:])
        if head > k * (k - 1) + tail:
            return False
    return True


def sequence_graph(degrees: Sequence[int], labels: Optional[Sequence[Hashable]] = None) -> Graph:
    """
    Build a simple graph with the given degree sequence (Havel–Hakimi).

    Vertex ``i`` of the result has degree ``degrees[i]``.

    Raises:
        NotAGraphicSequenceError: If no simple graph has this degree sequence
    """
    if not is_graphic_sequence(degrees):
        raise NotAGraphicSequenceError(f"Sequence {list(degrees)} is not graphic")
    n = len(degrees)
    graph = Graph.from_vertices(range(n) if labels is None else labels)
    residual: List[List[int]] = [[d, i] for i, d in enumerate(degrees)]
    while residual:
        residual.sort(key=lambda item: (-item[0], item[1]))
        d, v = residual[0]
        if d == 0:
            break
        if d >= len(residual):
            raise NotAGraphicSequenceError(f"Sequence {list(degrees)} is not graphic")
        residual[0][0] = 0
        for item in residual[1 : d + 1]:
            if item[0] == 0:
                raise NotAGraphicSequenceError(f"Sequence {list(degrees)} is not graphic")
            item[0] -= 1
            graph.add_edge(v, item[1])
    logger.debug(f"Realised degree sequence with {graph.edge_count()} edges")
    return graph
