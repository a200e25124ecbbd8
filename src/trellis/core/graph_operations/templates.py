"""
Ready-made graphs.

Families are built from their parameters, special graphs by name through
``special_graph``. Vertices are labelled by integers unless the family has a
natural naming (bit strings for hypercubes, ``"u:v"`` pairs for grids and
other products). Random constructions draw from the ``rng`` of the graph
they create, so passing a seeded ``random.Random`` makes them reproducible.
"""

import logging
import random
from itertools import combinations, product
from typing import Callable, Dict, Hashable, List, Optional, Sequence, Tuple, Union

from ..exceptions import NotAGraphicSequenceError, ValidationError
from ..graph import Graph
from .components import ComponentAnalysis
from .products import cartesian_product

logger = logging.getLogger(__name__)

LabelsOrCount = Union[int, Sequence[Hashable]]

MAX_REGULAR_ATTEMPTS = 100


def _labels(spec: LabelsOrCount) -> List[Hashable]:
    if isinstance(spec, int):
        if spec < 0:
            raise ValidationError(f"Vertex count must be non-negative, got {spec}")
        return list(range(spec))
    return list(spec)


# ------------------------------------------------------------------ families


def complete_graph(vertices: LabelsOrCount, directed: bool = False) -> Graph:
    """Create K_n, or the complete digraph when ``directed`` is set."""
    labels = _labels(vertices)
    g = Graph.from_vertices(labels, directed=directed)
    n = len(labels)
    with g.transaction():
        for i, j in combinations(range(n), 2):
            g.add_edge(i, j)
            if directed:
                g.add_edge(j, i)
    return g


def complete_multipartite(*sizes: int) -> Graph:
    """
    Create the complete multipartite graph K_{n1,n2,...}.

    Vertices are numbered consecutively part after part.
    """
    if any(s < 1 for s in sizes):
        raise ValidationError("Every part must have at least one vertex")
    n = sum(sizes)
    g = Graph.from_vertices(range(n))
    part = []
    for k, s in enumerate(sizes):
        part.extend([k] * s)
    with g.transaction():
        for i, j in combinations(range(n), 2):
            if part[i] != part[j]:
                g.add_edge(i, j)
    return g


def complete_bipartite(a: int, b: int) -> Graph:
    return complete_multipartite(a, b)


def cycle_graph(vertices: LabelsOrCount) -> Graph:
    labels = _labels(vertices)
    if len(labels) < 3:
        raise ValidationError("A cycle needs at least three vertices")
    g = Graph()
    g.add_cycle(labels)
    return g


def path_graph(vertices: LabelsOrCount) -> Graph:
    labels = _labels(vertices)
    g = Graph.from_vertices(labels)
    with g.transaction():
        for i in range(len(labels) - 1):
            g.add_edge(i, i + 1)
    return g


def star_graph(n: int) -> Graph:
    """Create K_{1,n}: vertex 0 joined to vertices 1..n."""
    g = Graph.from_vertices(range(n + 1))
    with g.transaction():
        for i in range(1, n + 1):
            g.add_edge(0, i)
    return g


def wheel_graph(n: int) -> Graph:
    """Create the wheel with a rim of ``n`` vertices and hub ``n``."""
    g = cycle_graph(n)
    hub = g.add_vertex(n)
    with g.transaction():
        for i in range(n):
            g.add_edge(hub, i)
    return g


def grid_graph(m: int, n: int) -> Graph:
    """Create the m x n grid, the Cartesian product of two paths."""
    return cartesian_product(path_graph(m), path_graph(n))


def torus_grid_graph(m: int, n: int) -> Graph:
    """Create the m x n torus grid, the Cartesian product of two cycles."""
    return cartesian_product(cycle_graph(m), cycle_graph(n))


def web_graph(a: int, b: int) -> Graph:
    """Create the web graph, the Cartesian product of C_a and P_b."""
    return cartesian_product(cycle_graph(a), path_graph(b))


def hypercube_graph(n: int) -> Graph:
    """Create Q_n with vertices labelled by bit strings of length ``n``."""
    if n < 1:
        raise ValidationError("Hypercube dimension must be positive")
    labels = [format(k, f"0{n}b") for k in range(2 ** n)]
    g = Graph.from_vertices(labels)
    with g.transaction():
        for k in range(2 ** n):
            for bit in range(n):
                other = k ^ (1 << bit)
                if other > k:
                    g.add_edge(k, other)
    return g


def kneser_graph(n: int, k: int) -> Graph:
    """
    Create the Kneser graph K(n, k).

    Vertex ``i`` stands for the i-th k-subset of {1..n} in lexicographic
    order; two vertices are adjacent when their subsets are disjoint.
    """
    if not 0 < k <= n:
        raise ValidationError(f"Kneser graph needs 0 < k <= n, got n={n}, k={k}")
    subsets = [frozenset(c) for c in combinations(range(1, n + 1), k)]
    g = Graph.from_vertices(range(len(subsets)))
    with g.transaction():
        for i, j in combinations(range(len(subsets)), 2):
            if not subsets[i] & subsets[j]:
                g.add_edge(i, j)
    logger.debug(f"Kneser graph K({n},{k}) has {g.edge_count()} edges")
    return g


def odd_graph(n: int) -> Graph:
    """Create O_n = K(2n - 1, n - 1)."""
    if n < 2:
        raise ValidationError("Odd graph index must be at least 2")
    return kneser_graph(2 * n - 1, n - 1)


def generalized_petersen(n: int, k: int) -> Graph:
    """
    Create GP(n, k).

    Outer vertices 0..n-1 form a cycle, inner vertex n+i is joined to outer
    vertex i and to inner vertex n+(i+k) mod n.
    """
    if n < 3 or not 0 < k < n:
        raise ValidationError(
            f"Generalized Petersen graph needs n >= 3 and 0 < k < n, got n={n}, k={k}"
        )
    g = Graph.from_vertices(range(2 * n))
    with g.transaction():
        for i in range(n):
            g.add_edge(i, (i + 1) % n)
            g.add_edge(i, n + i)
            j = n + (i + k) % n
            if not g.has_edge(n + i, j):
                g.add_edge(n + i, j)
    return g


def prism_graph(n: int) -> Graph:
    return generalized_petersen(n, 1)


def antiprism_graph(n: int) -> Graph:
    """Create the antiprism: two n-cycles where u_i is joined to v_i and v_{i+1}."""
    if n < 3:
        raise ValidationError("Antiprism needs at least three vertices per cycle")
    g = Graph.from_vertices(range(2 * n))
    with g.transaction():
        for i in range(n):
            g.add_edge(i, (i + 1) % n)
            g.add_edge(n + i, n + (i + 1) % n)
            g.add_edge(i, n + i)
            g.add_edge(i, n + (i + 1) % n)
    return g


def complete_kary_tree(k: int, depth: int) -> Graph:
    """
    Create the complete k-ary tree of the given depth.

    The root is 0 and the children of vertex i are k*i+1 .. k*i+k.
    """
    if k < 1 or depth < 0:
        raise ValidationError("Tree arity must be positive and depth non-negative")
    n = sum(k ** d for d in range(depth + 1))
    g = Graph.from_vertices(range(n))
    with g.transaction():
        for child in range(1, n):
            g.add_edge((child - 1) // k, child)
    return g


def complete_binary_tree(depth: int) -> Graph:
    return complete_kary_tree(2, depth)


def _word_index(word: Sequence[int], k: int) -> int:
    index = 0
    for digit in word:
        index = index * k + digit
    return index


def sierpinski_graph(n: int, k: int) -> Graph:
    """
    Create the Sierpinski graph S(n, k) on the k^n words of length n.

    Words u and v are adjacent when, for some position h, they agree before
    h, differ at h and continue with the other's letter at h after it.
    """
    if n < 1 or k < 2:
        raise ValidationError("Sierpinski graph needs n >= 1 and k >= 2")
    g = Graph.from_vertices(range(k ** n))
    with g.transaction():
        for word in product(range(k), repeat=n):
            u = _word_index(word, k)
            for h in range(n):
                tail = set(word[h + 1:])
                if len(tail) > 1:
                    continue
                for j in range(k):
                    if j == word[h] or (tail and j not in tail):
                        continue
                    v = _word_index(word[:h] + (j,) + (word[h],) * (n - h - 1), k)
                    if u < v:
                        g.add_edge(u, v)
    return g


def sierpinski_triangle(n: int) -> Graph:
    """
    Create the Sierpinski triangle graph of order ``n``.

    It is S(n, 3) with the edges joining copies of S(n-1, 3) contracted,
    so it has 3(3^(n-1) + 1)/2 vertices.
    """
    if n < 1:
        raise ValidationError("Sierpinski triangle order must be positive")
    g = Graph()
    index: Dict[Tuple[int, int], int] = {}

    def corner(p: Tuple[int, int]) -> int:
        if p not in index:
            index[p] = g.add_vertex(len(index))
        return index[p]

    stack = [(0, 0, 2 ** (n - 1))]
    with g.transaction():
        while stack:
            x, y, size = stack.pop()
            if size == 1:
                a, b, c = corner((x, y)), corner((x + 1, y)), corner((x, y + 1))
                g.add_edge(a, b)
                g.add_edge(b, c)
                g.add_edge(a, c)
                continue
            half = size // 2
            stack.extend([(x, y + half, half), (x + half, y, half), (x, y, half)])
    return g


def lcf_graph(jumps: Sequence[int], exponent: int = 1) -> Graph:
    """
    Create a cubic Hamiltonian graph from LCF notation ``jumps^exponent``.

    The Hamiltonian cycle is 0..n-1 and vertex i is additionally joined to
    i + jumps[i mod len(jumps)] (mod n).
    """
    if not jumps or exponent < 1:
        raise ValidationError("LCF notation needs jumps and a positive exponent")
    n = len(jumps) * exponent
    g = cycle_graph(n)
    with g.transaction():
        for i in range(n):
            j = (i + jumps[i % len(jumps)]) % n
            if j == i:
                raise ValidationError(f"Jump {jumps[i % len(jumps)]} maps vertex {i} onto itself")
            if not g.has_edge(i, j):
                g.add_edge(i, j)
    return g


def interval_graph(intervals: Sequence[Tuple[float, float]]) -> Graph:
    """
    Create the intersection graph of closed real intervals.

    Vertices are labelled by the ``(a, b)`` intervals themselves.
    """
    spans = []
    for a, b in intervals:
        if a > b:
            raise ValidationError(f"Interval ({a}, {b}) is empty")
        spans.append((a, b))
    g = Graph.from_vertices(spans)
    with g.transaction():
        for i, j in combinations(range(len(spans)), 2):
            (a, b), (c, d) = spans[i], spans[j]
            if a <= d and c <= b:
                g.add_edge(i, j)
    return g


# ------------------------------------------------------------ special graphs


def _from_edge_list(n: int, edges: Sequence[Tuple[int, int]]) -> Graph:
    g = Graph.from_vertices(range(n))
    g.add_edges(edges)
    return g


def _icosahedron() -> Graph:
    edges = []
    for k in range(5):
        upper, lower = 1 + k, 6 + k
        edges.append((0, upper))
        edges.append((upper, 1 + (k + 1) % 5))
        edges.append((upper, lower))
        edges.append((upper, 6 + (k + 1) % 5))
        edges.append((lower, 6 + (k + 1) % 5))
        edges.append((lower, 11))
    return _from_edge_list(12, edges)


def _grotzsch() -> Graph:
    # Mycielskian of C5
    edges = []
    for i in range(5):
        edges.append((i, (i + 1) % 5))
        edges.append((5 + i, (i + 1) % 5))
        edges.append((5 + i, (i - 1) % 5))
        edges.append((10, 5 + i))
    return _from_edge_list(11, edges)


def _clebsch() -> Graph:
    # folded 5-cube
    edges = [(i, j) for i, j in combinations(range(16), 2) if bin(i ^ j).count("1") == 1 or i ^ j == 15]
    return _from_edge_list(16, edges)


def _herschel() -> Graph:
    adjacency = {
        0: [1, 3, 4], 1: [2, 5, 6], 2: [3, 7], 3: [8, 9], 4: [5, 9],
        5: [10], 6: [7, 10], 7: [8], 8: [10], 9: [10],
    }
    return _from_edge_list(11, [(u, v) for u, vs in adjacency.items() for v in vs])


SPECIAL_GRAPHS: Dict[str, Callable[[], Graph]] = {
    "petersen": lambda: generalized_petersen(5, 2),
    "tetrahedron": lambda: complete_graph(4),
    "octahedron": lambda: complete_multipartite(2, 2, 2),
    "cube": lambda: hypercube_graph(3),
    "dodecahedron": lambda: generalized_petersen(10, 2),
    "icosahedron": _icosahedron,
    "heawood": lambda: lcf_graph([5, -5], 7),
    "mobius-kantor": lambda: generalized_petersen(8, 3),
    "pappus": lambda: lcf_graph([5, 7, -7, 7, -7, -5], 3),
    "desargues": lambda: generalized_petersen(10, 3),
    "durer": lambda: generalized_petersen(6, 2),
    "nauru": lambda: generalized_petersen(12, 5),
    "grotzsch": _grotzsch,
    "clebsch": _clebsch,
    "herschel": _herschel,
    "k33": lambda: complete_bipartite(3, 3),
    "utility": lambda: complete_bipartite(3, 3),
    "k5": lambda: complete_graph(5),
    "franklin": lambda: lcf_graph([5, -5], 6),
    "mcgee": lambda: lcf_graph([12, 7, -7], 8),
    "tutte-coxeter": lambda: lcf_graph([-13, -9, 7, -7, 9, 13], 5),
}


def special_graph(name: str) -> Graph:
    """
    Create a named graph.

    Raises:
        ValidationError: If the name is not in ``SPECIAL_GRAPHS``
    """
    key = name.lower().replace("_", "-").replace(" ", "-")
    builder = SPECIAL_GRAPHS.get(key)
    if builder is None:
        raise ValidationError(f"Unknown special graph '{name}'")
    g = builder()
    g.name = key
    return g


# ------------------------------------------------------------------- random


def random_graph(
    n: LabelsOrCount, p: float, directed: bool = False, rng: Optional[random.Random] = None
) -> Graph:
    """
    Create a random graph on ``n`` vertices.

    With ``0 <= p < 1`` every edge is present independently with probability
    ``p`` (Erdős–Rényi G(n, p)); with ``p >= 1`` exactly ``int(p)`` edges are
    chosen uniformly (G(n, m)).
    """
    if p < 0:
        raise ValidationError("Edge probability must be non-negative")
    labels = _labels(n)
    g = Graph.from_vertices(labels, directed=directed, rng=rng)
    count = len(labels)
    if directed:
        pairs = [(i, j) for i in range(count) for j in range(count) if i != j]
    else:
        pairs = list(combinations(range(count), 2))
    with g.transaction():
        if p < 1:
            for i, j in pairs:
                if g.rng.random() < p:
                    g.add_edge(i, j)
        else:
            m = int(p)
            if m > len(pairs):
                raise ValidationError(f"Cannot place {m} edges on {count} vertices")
            for i, j in g.rng.sample(pairs, m):
                g.add_edge(i, j)
    return g


def random_digraph(n: LabelsOrCount, p: float, rng: Optional[random.Random] = None) -> Graph:
    return random_graph(n, p, directed=True, rng=rng)


def random_bipartite_graph(
    a: int, b: int, p: float, rng: Optional[random.Random] = None
) -> Graph:
    """Create a random subgraph of K_{a,b}; parts are 0..a-1 and a..a+b-1."""
    g = Graph.from_vertices(range(a + b), rng=rng)
    pairs = [(i, a + j) for i in range(a) for j in range(b)]
    with g.transaction():
        if p < 1:
            for i, j in pairs:
                if g.rng.random() < p:
                    g.add_edge(i, j)
        else:
            for i, j in g.rng.sample(pairs, min(int(p), len(pairs))):
                g.add_edge(i, j)
    return g


def random_tree(
    n: LabelsOrCount, max_degree: Optional[int] = None, rng: Optional[random.Random] = None
) -> Graph:
    """
    Create a random tree.

    Without a degree bound the tree is uniform, decoded from a random Prüfer
    sequence. With ``max_degree`` vertices are attached one by one to a
    random earlier vertex that still has room.
    """
    labels = _labels(n)
    count = len(labels)
    g = Graph.from_vertices(labels, rng=rng)
    if count < 2:
        return g
    if max_degree is not None and max_degree < 2 and count > 2:
        raise ValidationError("A tree on more than two vertices needs max_degree >= 2")
    with g.transaction():
        if max_degree is None:
            code = [g.rng.randrange(count) for _ in range(count - 2)]
            degree = [1] * count
            for v in code:
                degree[v] += 1
            for v in code:
                leaf = min(u for u in range(count) if degree[u] == 1)
                g.add_edge(leaf, v)
                degree[leaf] -= 1
                degree[v] -= 1
            u, w = [x for x in range(count) if degree[x] == 1]
            g.add_edge(u, w)
        else:
            order = list(range(count))
            g.rng.shuffle(order)
            open_vertices = [order[0]]
            for v in order[1:]:
                parent = g.rng.choice(open_vertices)
                g.add_edge(parent, v)
                if g.degree(parent) >= max_degree:
                    open_vertices.remove(parent)
                if max_degree > 1:
                    open_vertices.append(v)
    return g


def random_regular_graph(
    n: LabelsOrCount, d: int, connected: bool = False, rng: Optional[random.Random] = None
) -> Graph:
    """
    Create a random d-regular graph with the pairing model.

    Points of the vertices are matched at random among the pairs that
    still keep the graph simple; a dead end restarts the process.

    Raises:
        NotAGraphicSequenceError: If no d-regular graph on n vertices exists
    """
    labels = _labels(n)
    count = len(labels)
    if d < 0 or d >= max(count, 1) or (count * d) % 2:
        raise NotAGraphicSequenceError(f"No {d}-regular graph on {count} vertices")
    rng = rng if rng is not None else random.Random()
    for attempt in range(1, MAX_REGULAR_ATTEMPTS + 1):
        edges = _pairing(count, d, rng)
        if edges is None:
            continue
        candidate = Graph.from_vertices(labels, rng=rng)
        candidate.add_edges(edges)
        if connected and not ComponentAnalysis.is_connected(candidate):
            continue
        logger.debug(f"Random {d}-regular graph found after {attempt} attempts")
        return candidate
    raise NotAGraphicSequenceError(
        f"Failed to generate a {d}-regular graph on {count} vertices"
    )


def _pairing(n: int, d: int, rng: random.Random) -> Optional[List[Tuple[int, int]]]:
    points = [v for v in range(n) for _ in range(d)]
    edges = set()
    while points:
        rng.shuffle(points)
        leftover = []
        progress = False
        for k in range(0, len(points), 2):
            u, v = points[k], points[k + 1]
            pair = (min(u, v), max(u, v))
            if u != v and pair not in edges:
                edges.add(pair)
                progress = True
            else:
                leftover.extend((u, v))
        if not progress:
            return None
        points = leftover
    return sorted(edges)


def random_tournament(n: LabelsOrCount, rng: Optional[random.Random] = None) -> Graph:
    """Orient every edge of K_n uniformly at random."""
    labels = _labels(n)
    g = Graph.from_vertices(labels, directed=True, rng=rng)
    with g.transaction():
        for i, j in combinations(range(len(labels)), 2):
            if g.rng.random() < 0.5:
                g.add_edge(i, j)
            else:
                g.add_edge(j, i)
    return g


def random_planar_graph(
    n: LabelsOrCount, p: float = 0.5, rng: Optional[random.Random] = None
) -> Graph:
    """
    Create a random connected planar graph.

    A random stacked triangulation is grown by inserting each new vertex
    into a random triangular face; afterwards every edge is deleted with
    probability ``p`` unless that would disconnect the graph.
    """
    if not 0 <= p <= 1:
        raise ValidationError("Deletion probability must lie in [0, 1]")
    labels = _labels(n)
    count = len(labels)
    g = Graph.from_vertices(labels, rng=rng)
    if count < 2:
        return g
    with g.transaction():
        g.add_edge(0, 1)
        faces = []
        if count > 2:
            g.add_edge(1, 2)
            g.add_edge(0, 2)
            faces = [(0, 1, 2), (0, 1, 2)]
        for v in range(3, count):
            k = g.rng.randrange(len(faces))
            a, b, c = faces[k]
            g.add_edge(v, a)
            g.add_edge(v, b)
            g.add_edge(v, c)
            faces[k] = (a, b, v)
            faces.extend([(b, c, v), (a, c, v)])
        edges = g.edge_pairs()
        g.rng.shuffle(edges)
        for i, j in edges:
            if g.rng.random() < p:
                g.remove_edge(i, j)
                if not ComponentAnalysis.is_connected(g):
                    g.add_edge(i, j)
    return g
