"""
Force-directed placement.

The single-level engine is a spring embedder in the manner of Fruchterman
and Reingold: every pair of vertices repels with a force proportional to
K^2/d and every edge attracts its endpoints with a force proportional to
d^2/K, where K is the natural spring length. Each iteration moves every
vertex one step along its resulting force; the step shrinks by the cooling
factor whenever the total energy grows and recovers after a run of
improvements. Iteration stops when the layout moves less than
``tolerance * K`` or the iteration cap is reached.

The multilevel engine coarsens the graph into a hierarchy of smaller proxy
graphs, each described by a sparse prolongation matrix P (fine x coarse):

- ``mis``: a maximal independent set becomes the coarse vertex set; every
  other vertex is interpolated as the mean of its chosen neighbors.
- ``matching``: a maximal matching is contracted; each coarse vertex stands
  for one matched pair or one unmatched vertex.

The coarse adjacency is P^T (A + I) P without its diagonal. The coarsest
graph is laid out from a random seed and every finer level starts from
X = P X_coarse, refined by the single-level engine.
"""

import logging
import random
from typing import List, Optional, Tuple

import numpy as np
from scipy import sparse

from ..config import LayoutConfig
from ..core.graph import Graph
from .geometry import EPSILON, perturb_coincident

logger = logging.getLogger(__name__)

REPULSION_STRENGTH = 0.2
IMPROVEMENT_STREAK = 5
BLOCK_ROWS = 512


def adjacency_operator(graph: Graph) -> sparse.csr_matrix:
    """Get the symmetric 0/1 sparse adjacency matrix of the underlying graph."""
    n = graph.vertex_count()
    pairs = graph.edge_pairs()
    if not pairs:
        return sparse.csr_matrix((n, n))
    rows, cols = zip(*pairs)
    a = sparse.coo_matrix((np.ones(len(pairs)), (rows, cols)), shape=(n, n)).tocsr()
    return _binarized(a + a.T)


def _binarized(matrix: sparse.spmatrix) -> sparse.csr_matrix:
    m = sparse.csr_matrix(matrix, dtype=float)
    m = sparse.csr_matrix(m - sparse.diags(m.diagonal()))
    m.eliminate_zeros()
    m.data[:] = 1.0
    return m


def random_layout(n: int, dim: int, rng: random.Random, radius: float = 1.0) -> np.ndarray:
    """Scatter ``n`` points uniformly in a cube of the given half-width."""
    return np.array(
        [[rng.uniform(-radius, radius) for _ in range(dim)] for _ in range(n)]
    ).reshape(n, dim)


class SpringEmbedder:
    """
    Single-level spring embedder over a sparse adjacency matrix.

    Attributes:
        adjacency (sparse.csr_matrix): Symmetric 0/1 adjacency
        config (LayoutConfig): Force model and cooling schedule
        rng (random.Random): Source of the offsets separating coincident points
        iterations (int): Iterations used by the last run
    """

    def __init__(self, adjacency: sparse.csr_matrix, config: LayoutConfig, rng: random.Random):
        self.adjacency = sparse.csr_matrix(adjacency)
        self.config = config
        self.rng = rng
        self.iterations = 0
        coo = sparse.triu(self.adjacency, k=1).tocoo()
        self._rows = coo.row
        self._cols = coo.col

    def _repulsion(self, x: np.ndarray) -> np.ndarray:
        k2 = REPULSION_STRENGTH * self.config.spring_constant**2
        force = np.zeros_like(x)
        n = len(x)
        for start in range(0, n, BLOCK_ROWS):
            stop = min(start + BLOCK_ROWS, n)
            delta = x[start:stop, None, :] - x[None, :, :]
            dist2 = np.einsum("ijk,ijk->ij", delta, delta)
            dist2[dist2 < EPSILON] = np.inf
            force[start:stop] = k2 * (delta / dist2[:, :, None]).sum(axis=1)
        return force

    def _attraction(self, x: np.ndarray) -> np.ndarray:
        force = np.zeros_like(x)
        if len(self._rows) == 0:
            return force
        delta = x[self._cols] - x[self._rows]
        pull = delta * np.linalg.norm(delta, axis=1)[:, None] / self.config.spring_constant
        np.add.at(force, self._rows, pull)
        np.add.at(force, self._cols, -pull)
        return force

    def forces(self, x: np.ndarray) -> np.ndarray:
        """Net force on every vertex of layout ``x``."""
        return self._repulsion(x) + self._attraction(x)

    def _has_coincident(self, x: np.ndarray) -> bool:
        return len(np.unique(np.round(x, 12), axis=0)) < len(x)

    def run(self, x: np.ndarray, step: Optional[float] = None) -> np.ndarray:
        """
        Relax layout ``x`` and return the result.

        Args:
            x: Initial positions, one row per vertex
            step: Initial step length; the spring constant when omitted
        """
        cfg = self.config
        x = np.array(x, dtype=float)
        if len(x) < 2:
            self.iterations = 0
            return x
        if step is None:
            step = cfg.spring_constant
        energy = np.inf
        progress = 0
        threshold = cfg.tolerance * cfg.spring_constant
        for iteration in range(1, cfg.max_iterations + 1):
            if self._has_coincident(x):
                x = perturb_coincident(x, self.rng, scale=1e-3 * cfg.spring_constant)
            previous = x.copy()
            force = self.forces(x)
            norms = np.linalg.norm(force, axis=1)
            moving = norms > EPSILON
            x[moving] += step * force[moving] / norms[moving, None]

            new_energy = float(np.dot(norms, norms))
            if new_energy < energy:
                progress += 1
                if progress >= IMPROVEMENT_STREAK:
                    progress = 0
                    step /= cfg.cooling
            else:
                progress = 0
                step *= cfg.cooling
            energy = new_energy

            self.iterations = iteration
            if np.linalg.norm(x - previous) < threshold:
                break
        logger.debug(f"Spring embedder stopped after {self.iterations} iterations")
        return x


class Coarsener:
    """
    Builds the multilevel hierarchy of prolongation matrices.

    Attributes:
        config (LayoutConfig): Coarsening method and stopping thresholds
        rng (random.Random): Source of the visiting orders
    """

    def __init__(self, config: LayoutConfig, rng: random.Random):
        self.config = config
        self.rng = rng

    def _order(self, n: int) -> List[int]:
        order = list(range(n))
        self.rng.shuffle(order)
        return order

    def mis_prolongation(self, adjacency: sparse.csr_matrix) -> sparse.csr_matrix:
        """Interpolate every vertex from a maximal independent set."""
        n = adjacency.shape[0]
        blocked = np.zeros(n, dtype=bool)
        chosen = []
        for v in self._order(n):
            if blocked[v]:
                continue
            chosen.append(v)
            blocked[v] = True
            blocked[adjacency.indices[adjacency.indptr[v] : adjacency.indptr[v + 1]]] = True
        chosen.sort()
        column = {v: c for c, v in enumerate(chosen)}

        rows, cols, vals = [], [], []
        for v in range(n):
            if v in column:
                rows.append(v)
                cols.append(column[v])
                vals.append(1.0)
                continue
            nbrs = adjacency.indices[adjacency.indptr[v] : adjacency.indptr[v + 1]]
            parents = [column[w] for w in nbrs if w in column]
            for c in parents:
                rows.append(v)
                cols.append(c)
                vals.append(1.0 / len(parents))
        return sparse.csr_matrix((vals, (rows, cols)), shape=(n, len(chosen)))

    def matching_prolongation(self, adjacency: sparse.csr_matrix) -> sparse.csr_matrix:
        """Merge the endpoints of a maximal matching."""
        n = adjacency.shape[0]
        target = [-1] * n
        count = 0
        for v in self._order(n):
            if target[v] != -1:
                continue
            target[v] = count
            nbrs = list(adjacency.indices[adjacency.indptr[v] : adjacency.indptr[v + 1]])
            self.rng.shuffle(nbrs)
            for w in nbrs:
                if target[w] == -1:
                    target[w] = count
                    break
            count += 1
        return sparse.csr_matrix((np.ones(n), (np.arange(n), target)), shape=(n, count))

    def coarsen(
        self, adjacency: sparse.csr_matrix
    ) -> Tuple[sparse.csr_matrix, sparse.csr_matrix]:
        """Get the prolongation matrix and the coarse adjacency of one level."""
        if self.config.coarsening_method == "matching":
            p = self.matching_prolongation(adjacency)
        else:
            p = self.mis_prolongation(adjacency)
        n = adjacency.shape[0]
        coarse = p.T @ (adjacency + sparse.identity(n, format="csr")) @ p
        return p, _binarized(coarse)

    def hierarchy(
        self, adjacency: sparse.csr_matrix
    ) -> Tuple[List[Tuple[sparse.csr_matrix, sparse.csr_matrix]], sparse.csr_matrix]:
        """
        Coarsen until the graph is small enough or stops shrinking.

        Returns:
            ``(prolongation, fine adjacency)`` pairs from finest to coarsest,
            and the coarsest adjacency
        """
        cfg = self.config
        levels: List[Tuple[sparse.csr_matrix, sparse.csr_matrix]] = []
        current = adjacency
        while current.shape[0] > cfg.coarsest_size:
            p, coarse = self.coarsen(current)
            if p.shape[1] >= cfg.coarsening_ratio * current.shape[0]:
                break
            levels.append((p, current))
            current = coarse
            logger.debug(f"Coarsened to level {len(levels)} with {current.shape[0]} vertices")
        return levels, current


def _prepare(graph: Graph, config: Optional[LayoutConfig]) -> LayoutConfig:
    config = config or LayoutConfig()
    if config.seed is not None:
        graph.rng.seed(config.seed)
    return config


def force_directed_placement(
    graph: Graph,
    layout: Optional[np.ndarray] = None,
    dim: int = 2,
    config: Optional[LayoutConfig] = None,
) -> np.ndarray:
    """
    Lay out a graph with the single-level spring embedder.

    Args:
        graph: Graph to lay out; arc directions are ignored
        layout: Starting positions; a random scatter when omitted
        dim: 2 or 3
        config: Layout parameters

    Returns:
        An ``(n, dim)`` array of positions indexed like the graph's vertices
    """
    if dim not in (2, 3):
        raise ValueError("Layout dimension must be 2 or 3")
    config = _prepare(graph, config)
    n = graph.vertex_count()
    if layout is None:
        radius = config.spring_constant * max(1.0, np.sqrt(n))
        layout = random_layout(n, dim, graph.rng, radius)
    embedder = SpringEmbedder(adjacency_operator(graph), config, graph.rng)
    return embedder.run(layout)


def multilevel_layout(
    graph: Graph, dim: int = 2, config: Optional[LayoutConfig] = None
) -> np.ndarray:
    """Lay out a graph by coarsening, solving the coarsest level and refining."""
    if dim not in (2, 3):
        raise ValueError("Layout dimension must be 2 or 3")
    config = _prepare(graph, config)
    rng = graph.rng
    adjacency = adjacency_operator(graph)
    levels, coarsest = Coarsener(config, rng).hierarchy(adjacency)

    nc = coarsest.shape[0]
    x = random_layout(nc, dim, rng, config.spring_constant * max(1.0, np.sqrt(nc)))
    x = SpringEmbedder(coarsest, config, rng).run(x)

    for p, fine in reversed(levels):
        x = p @ x
        x = perturb_coincident(x, rng, scale=1e-2 * config.spring_constant)
        x = SpringEmbedder(fine, config, rng).run(x, step=0.5 * config.spring_constant)
    logger.debug(f"Multilevel layout of {graph.vertex_count()} vertices used {len(levels)} levels")
    return x


def spring_layout(graph: Graph, dim: int = 2, config: Optional[LayoutConfig] = None) -> np.ndarray:
    """Spring layout, multilevel once the graph exceeds the coarsest level size."""
    cfg = config or LayoutConfig()
    if graph.vertex_count() > cfg.coarsest_size:
        return multilevel_layout(graph, dim, cfg)
    return force_directed_placement(graph, dim=dim, config=cfg)
