"""
Layered drawing of rooted trees and forests.

Positions are computed by Walker's algorithm in the linear-time form of
Buchheim, Juenger and Leipert. The first walk assigns every node a
preliminary x relative to its parent, centring parents over their children
and pushing sibling subtrees apart along their contours; threads link the
contours so that each comparison is done once. The second walk accumulates
the modifiers top-down. Depth sets the y coordinate, root on top.

Both walks are iterative so that deep trees do not hit the recursion limit.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core.exceptions import InvalidRootError
from ..core.graph import Graph
from ..core.graph_operations.components import ComponentAnalysis

logger = logging.getLogger(__name__)


class TreeNodePositioner:
    """
    Computes a tidy layout of the tree spanned from a root.

    The graph is expected to be a tree or forest; only the component of
    the root is positioned, through a BFS tree if it has cycles.

    Attributes:
        graph (Graph): Graph holding the tree
        hsep (float): Minimum horizontal distance between neighboring nodes
        vsep (float): Distance between consecutive levels
    """

    def __init__(self, graph: Graph, hsep: float = 1.0, vsep: Optional[float] = None):
        self.graph = graph
        self.hsep = hsep
        self.vsep = hsep if vsep is None else vsep
        self._reset()

    def _reset(self) -> None:
        self.children: Dict[int, List[int]] = {}
        self.parent: Dict[int, int] = {}
        self.number: Dict[int, int] = {}
        self.prelim: Dict[int, float] = {}
        self.modifier: Dict[int, float] = {}
        self.shift: Dict[int, float] = {}
        self.change: Dict[int, float] = {}
        self.thread: Dict[int, Optional[int]] = {}
        self.ancestor: Dict[int, int] = {}

    def _build(self, root: int) -> List[int]:
        g = self.graph
        order = [root]
        self.parent[root] = -1
        for v in order:
            kids = []
            for w in sorted(set(g.neighbors(v)) | set(g.in_neighbors(v))):
                if w not in self.parent:
                    self.parent[w] = v
                    kids.append(w)
                    order.append(w)
            self.children[v] = kids
            for k, w in enumerate(kids, start=1):
                self.number[w] = k
        self.number[root] = 1
        for v in order:
            self.prelim[v] = self.modifier[v] = 0.0
            self.shift[v] = self.change[v] = 0.0
            self.thread[v] = None
            self.ancestor[v] = v
        return order

    def _left_sibling(self, v: int) -> Optional[int]:
        p = self.parent[v]
        if p == -1 or self.number[v] == 1:
            return None
        return self.children[p][self.number[v] - 2]

    def _leftmost_sibling(self, v: int) -> int:
        p = self.parent[v]
        return v if p == -1 else self.children[p][0]

    def _next_left(self, v: int) -> Optional[int]:
        kids = self.children[v]
        return kids[0] if kids else self.thread[v]

    def _next_right(self, v: int) -> Optional[int]:
        kids = self.children[v]
        return kids[-1] if kids else self.thread[v]

    def _move_subtree(self, wm: int, wp: int, shift: float) -> None:
        subtrees = self.number[wp] - self.number[wm]
        self.change[wp] -= shift / subtrees
        self.shift[wp] += shift
        self.change[wm] += shift / subtrees
        self.prelim[wp] += shift
        self.modifier[wp] += shift

    def _execute_shifts(self, v: int) -> None:
        shift = change = 0.0
        for w in reversed(self.children[v]):
            self.prelim[w] += shift
            self.modifier[w] += shift
            change += self.change[w]
            shift += self.shift[w] + change

    def _ancestor_of(self, vim: int, v: int, default: int) -> int:
        a = self.ancestor[vim]
        return a if self.parent.get(a) == self.parent[v] else default

    def _apportion(self, v: int, default: int) -> int:
        w = self._left_sibling(v)
        if w is None:
            return default
        vip = vop = v
        vim = w
        vom = self._leftmost_sibling(vip)
        sip, sop = self.modifier[vip], self.modifier[vop]
        sim, som = self.modifier[vim], self.modifier[vom]
        while self._next_right(vim) is not None and self._next_left(vip) is not None:
            vim = self._next_right(vim)
            vip = self._next_left(vip)
            vom = self._next_left(vom)
            vop = self._next_right(vop)
            self.ancestor[vop] = v
            shift = (self.prelim[vim] + sim) - (self.prelim[vip] + sip) + self.hsep
            if shift > 0:
                self._move_subtree(self._ancestor_of(vim, v, default), v, shift)
                sip += shift
                sop += shift
            sim += self.modifier[vim]
            sip += self.modifier[vip]
            som += self.modifier[vom]
            sop += self.modifier[vop]
        if self._next_right(vim) is not None and self._next_right(vop) is None:
            self.thread[vop] = self._next_right(vim)
            self.modifier[vop] += sim - sop
        if self._next_left(vip) is not None and self._next_left(vom) is None:
            self.thread[vom] = self._next_left(vip)
            self.modifier[vom] += sip - som
            default = v
        return default

    def _finish(self, v: int) -> None:
        kids = self.children[v]
        w = self._left_sibling(v)
        if not kids:
            self.prelim[v] = self.prelim[w] + self.hsep if w is not None else 0.0
            return
        self._execute_shifts(v)
        midpoint = (self.prelim[kids[0]] + self.prelim[kids[-1]]) / 2
        if w is not None:
            self.prelim[v] = self.prelim[w] + self.hsep
            self.modifier[v] = self.prelim[v] - midpoint
        else:
            self.prelim[v] = midpoint

    def _first_walk(self, root: int) -> None:
        default: Dict[int, int] = {}
        stack = [(root, 0)]
        while stack:
            v, k = stack.pop()
            kids = self.children[v]
            if k == 0 and kids:
                default[v] = kids[0]
            if k > 0:
                default[v] = self._apportion(kids[k - 1], default[v])
            if k < len(kids):
                stack.append((v, k + 1))
                stack.append((kids[k], 0))
            else:
                self._finish(v)

    def _second_walk(self, root: int, layout: np.ndarray) -> None:
        stack = [(root, -self.prelim[root], 0)]
        while stack:
            v, m, depth = stack.pop()
            layout[v] = (self.prelim[v] + m, -depth * self.vsep)
            for w in self.children[v]:
                stack.append((w, m + self.modifier[v], depth + 1))

    def position(self, root: int, layout: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Position the tree of ``root`` with the root at the origin.

        Args:
            root: Index of the root vertex
            layout: Array to write into; a zero layout when omitted

        Returns:
            The layout, rows of the root's component filled in
        """
        self.graph._check_index(root)
        if layout is None:
            layout = np.zeros((self.graph.vertex_count(), 2))
        self._reset()
        order = self._build(root)
        self._first_walk(root)
        self._second_walk(root, layout)
        logger.debug(f"Positioned tree of {len(order)} nodes rooted at {root}")
        return layout


def tree_layout(
    graph: Graph, root: int = 0, hsep: float = 1.0, vsep: Optional[float] = None
) -> np.ndarray:
    """Lay out a tree with ``root`` on top."""
    return TreeNodePositioner(graph, hsep, vsep).position(root)


def forest_layout(
    graph: Graph,
    roots: Optional[Sequence[int]] = None,
    hsep: float = 1.0,
    vsep: Optional[float] = None,
) -> np.ndarray:
    """
    Lay out every tree of a forest and place them side by side.

    Args:
        roots: One root per connected component; the smallest index of
            each component when omitted

    Raises:
        InvalidRootError: If the roots do not pick exactly one vertex per component
    """
    components = ComponentAnalysis.connected_components(graph)
    if roots is None:
        roots = [c[0] for c in components]
    else:
        labels = ComponentAnalysis.component_labels(graph)
        if (
            len(roots) != len(components)
            or any(r not in labels for r in roots)
            or len({labels[r] for r in roots}) != len(components)
        ):
            raise InvalidRootError(
                f"Expected one root in each of the {len(components)} components"
            )
    positioner = TreeNodePositioner(graph, hsep, vsep)
    layout = np.zeros((graph.vertex_count(), 2))
    offset = 0.0
    for root in roots:
        positioner.position(root, layout)
        members = list(positioner.parent)
        xs = layout[members, 0]
        layout[members, 0] += offset - xs.min()
        offset += xs.max() - xs.min() + hsep
    return layout
