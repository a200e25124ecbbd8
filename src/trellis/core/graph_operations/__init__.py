"""
Structural operations on graphs.

This package groups the algorithms that inspect or derive graphs:
- Traversal, cycles, bipartiteness and acyclicity
- Connected, biconnected and strongly connected components
- Subgraph extraction and spanning trees
- Unions, joins and products
- Degree sequences
- Graph templates and random graphs
- DOT and JSON serialization
"""

from .components import Block, BlockDecomposition, ComponentAnalysis
from .serialization import GraphSerializer, export_graph, import_graph, read_dot, write_dot
from .subgraphs import SubgraphExtractor
from .traversal import BFSIterator, DFSIterator, GraphIterator

__all__ = [
    "Block",
    "BlockDecomposition",
    "ComponentAnalysis",
    "SubgraphExtractor",
    "GraphIterator",
    "BFSIterator",
    "DFSIterator",
    "GraphSerializer",
    "read_dot",
    "write_dot",
    "export_graph",
    "import_graph",
]
