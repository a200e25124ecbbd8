"""Command Line Interface for the graph theory engine.

This module provides a CLI for inspecting, drawing and converting graphs stored
in files. Graph files are either JSON bulk descriptions (``.json``) or documents
in the DOT subset (``.dot`` or ``.gv``).

The CLI supports the following commands:
    - info: Print structural properties of a graph
    - draw: Lay out a graph and write its drawing primitives as JSON
    - convert: Convert a graph file between JSON and DOT
    - special: Write one of the named special graphs to a file

Example Usage:
    python -m trellis cli info data/petersen.dot
    python -m trellis cli draw data/petersen.dot --style planar -o drawing.json
    python -m trellis cli convert data/graph.json data/graph.dot
    python -m trellis cli special heawood heawood.dot
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional

from .config import DrawingConfig, LayoutConfig
from .core.enums import LayoutStyle
from .core.exceptions import ConfigurationError, GraphOperationError, ValidationError
from .core.graph import Graph
from .core.graph_operations.components import ComponentAnalysis
from .core.graph_operations.serialization import GraphSerializer, read_dot, write_dot
from .core.graph_operations.templates import SPECIAL_GRAPHS, special_graph
from .core.graph_operations.traversal import is_bipartite, is_tree
from .core.planarity import is_planar
from .layout.drawing import draw_graph

logger = logging.getLogger(__name__)

DOT_SUFFIXES = (".dot", ".gv")


def load_graph(path: str) -> Graph:
    """Load a graph from a JSON or DOT file.

    Args:
        path (str): File to read; the format is chosen by its suffix.

    Returns:
        Graph: The graph described by the file.

    Raises:
        ValueError: If the file does not exist or is not valid UTF-8.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise ValueError(f"File not found: {path}")
    with open(file_path, "r", encoding="utf-8") as f:
        if file_path.suffix.lower() in DOT_SUFFIXES:
            return read_dot(f)
        try:
            text = f.read()
        except UnicodeDecodeError as e:
            raise ValueError(f"File is not valid UTF-8: {path}") from e
    return GraphSerializer.from_json(text)


def save_graph(graph: Graph, path: str) -> None:
    """Write a graph to a JSON or DOT file chosen by suffix."""
    file_path = Path(path)
    with open(file_path, "w", encoding="utf-8") as f:
        if file_path.suffix.lower() in DOT_SUFFIXES:
            write_dot(graph, f)
        else:
            f.write(GraphSerializer(graph).to_json(indent=2))


def parse_label(text: str) -> Hashable:
    """Interpret a vertex label given on the command line.

    JSON scalars (``3``, ``"a"``, ``true``) keep their type and JSON arrays
    become tuples; anything else is taken as a plain string.
    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, dict):
        return text
    return value


def describe(graph: Graph) -> Dict[str, Any]:
    """Collect the structural summary printed by ``info``."""
    components = ComponentAnalysis.connected_components(graph)
    summary = {
        "name": graph.name,
        "vertices": graph.vertex_count(),
        "edges": graph.edge_count(),
        "directed": graph.is_directed(),
        "weighted": graph.is_weighted(),
        "components": len(components),
        "degree_sequence": graph.degree_sequence(),
    }
    if graph.vertex_count():
        summary["tree"] = is_tree(graph)
        summary["bipartite"] = is_bipartite(graph)
        summary["planar"] = is_planar(graph)
    return summary


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(description="Graph Theory CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    info = subparsers.add_parser("info", help="Print structural properties of a graph")
    info.add_argument("graph", help="JSON or DOT file containing the graph")

    draw = subparsers.add_parser("draw", help="Write the drawing primitives of a graph")
    draw.add_argument("graph", help="JSON or DOT file containing the graph")
    draw.add_argument(
        "--style",
        choices=[s.value for s in LayoutStyle],
        default=LayoutStyle.DEFAULT.value,
        help="Layout style",
    )
    draw.add_argument("--root", action="append", help="Tree root, one per component")
    draw.add_argument("--cycle", nargs="+", help="Vertices to place on a circle")
    draw.add_argument("--seed", type=int, help="Seed for the spring layouts")
    draw.add_argument("--separation", type=float, default=1.0, help="Distance between components")
    draw.add_argument("--no-labels", action="store_true", help="Omit vertex labels")
    draw.add_argument("-o", "--output", help="Output file (defaults to stdout)")

    convert = subparsers.add_parser("convert", help="Convert a graph between JSON and DOT")
    convert.add_argument("source", help="Input file")
    convert.add_argument("target", help="Output file")

    special = subparsers.add_parser("special", help="Write a named special graph")
    special.add_argument("name", choices=sorted(SPECIAL_GRAPHS), help="Graph name")
    special.add_argument("target", help="Output file")

    return parser


def run_draw(args: argparse.Namespace) -> str:
    graph = load_graph(args.graph)
    roots: Optional[List[Hashable]] = [parse_label(r) for r in args.root] if args.root else None
    cycle = [parse_label(c) for c in args.cycle] if args.cycle else None
    layout_config = LayoutConfig(separation=args.separation, seed=args.seed)
    drawing = draw_graph(
        graph,
        LayoutStyle(args.style),
        roots=roots,
        cycle=cycle,
        config=DrawingConfig(labels=not args.no_labels),
        layout_config=layout_config,
    )
    return json.dumps(drawing.to_dict(), indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application.

    Handles command-line argument parsing and executes the requested command.

    Returns:
        int: Process exit status.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "info":
            summary = describe(load_graph(args.graph))
            for key, value in summary.items():
                print(f"{key}: {value}")

        elif args.command == "draw":
            output = run_draw(args)
            if args.output:
                Path(args.output).write_text(output, encoding="utf-8")
            else:
                print(output)

        elif args.command == "convert":
            save_graph(load_graph(args.source), args.target)
            print(f"Converted {args.source} to {args.target}")

        elif args.command == "special":
            graph = special_graph(args.name)
            save_graph(graph, args.target)
            print(f"Wrote {graph.name} ({graph.vertex_count()} vertices) to {args.target}")

    except (GraphOperationError, ValidationError, ConfigurationError, ValueError, OSError) as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
