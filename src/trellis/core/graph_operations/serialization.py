"""Graph serialization and deserialization operations.

This module provides functionality for importing/exporting graphs:
- A textual attributed-graph notation (a subset of DOT)
- JSON serialization of bulk descriptions
- Boolean wrappers that report failure instead of raising

The DOT subset reads and writes documents of the form::

    graph "name" {
        weighted=true;
        author="me";
        1 [color=2, position=<[0.0, 1.5]>];
        1 -- 2 -- 3 [weight=4];
    }

``digraph`` and ``->`` declare a directed graph. Statements are graph
attributes ``key=value``, ``graph``/``node``/``edge`` default lists, vertex
statements and edge chains, each optionally followed by ``[key=value, ...]``.
Values are numerals, quoted strings, bare identifiers (``true`` and
``false`` are booleans) or ``<...>`` holding JSON for anything else (lists,
maps, tuple labels, non-finite floats). A graph is weighted when it says so
with ``weighted=true`` or, failing that, when any edge carries a weight.
Labels written as JSON arrays are read back as tuples so they stay
hashable. Attribute values are not: a tuple attribute comes back as a list.
Subgraphs and ports are not supported.
"""

import json
import logging
import math
import re
from io import StringIO
from typing import IO, Any, Dict, List, Optional, Tuple

from ..exceptions import GraphOperationError, ReadFailureError, ValidationError
from ..graph import DIRECTED, WEIGHT, WEIGHTED, Graph

logger = logging.getLogger(__name__)

_TOKEN = re.compile(
    r"""
    (?P<skip>\s+|//[^\n]*|\#[^\n]*|/\*.*?\*/)
   |(?P<edgeop>--|->)
   |(?P<punct>[{}\[\]=;,])
   |(?P<string>"(?:[^"\\]|\\.)*")
   |(?P<html><[^<>]*>)
   |(?P<number>-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)
   |(?P<ident>[A-Za-z_\x80-\uffff][\w\x80-\uffff.]*)
    """,
    re.VERBOSE | re.DOTALL,
)
_INTEGER = re.compile(r"-?\d+")
_BARE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_KEYWORDS = {"graph", "digraph", "strict", "node", "edge", "subgraph", "true", "false"}

Token = Tuple[str, Any]


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r'\\(.)', lambda m: "\n" if m.group(1) == "n" else m.group(1), body)


def _frozen(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_frozen(v) for v in value)
    return value


def tokenize(text: str) -> List[Token]:
    """
    Split DOT text into ``(kind, value)`` tokens.

    Kinds are ``edgeop``, ``punct``, ``keyword`` and ``id``; identifiers
    carry their decoded Python value.

    Raises:
        ReadFailureError: On characters that start no token
    """
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN.match(text, pos)
        if m is None:
            line = text.count("\n", 0, pos) + 1
            raise ReadFailureError(f"Unexpected character {text[pos]!r} on line {line}")
        pos = m.end()
        kind = m.lastgroup
        raw = m.group(kind)
        if kind == "skip":
            continue
        if kind in ("edgeop", "punct"):
            tokens.append((kind, raw))
        elif kind == "string":
            tokens.append(("id", _unquote(raw)))
        elif kind == "html":
            try:
                tokens.append(("id", json.loads(raw[1:-1])))
            except ValueError as e:
                raise ReadFailureError(f"Malformed JSON value {raw}") from e
        elif kind == "number":
            tokens.append(("id", int(raw) if _INTEGER.fullmatch(raw) else float(raw)))
        elif raw.lower() in ("true", "false"):
            tokens.append(("id", raw.lower() == "true"))
        elif raw.lower() in _KEYWORDS:
            tokens.append(("keyword", raw.lower()))
        else:
            tokens.append(("id", raw))
    return tokens


class DotReader:
    """
    Recursive-descent reader for the DOT subset.

    Attributes:
        tokens (List[Token]): Token stream of the document
    """

    def __init__(self, text: str):
        self.tokens = tokenize(text)
        self.pos = 0
        self.name = ""
        self.directed = False
        self.graph_attributes: Dict[str, Any] = {}
        self.vertices: Dict[Any, Dict[str, Any]] = {}
        self.edges: List[Tuple[Any, Any, Dict[str, Any]]] = []
        self._node_defaults: Dict[str, Any] = {}
        self._edge_defaults: Dict[str, Any] = {}

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise ReadFailureError("Unexpected end of input")
        self.pos += 1
        return token

    def _expect(self, kind: str, value: Any = None) -> Any:
        token = self._next()
        if token[0] != kind or (value is not None and token[1] != value):
            expected = value if value is not None else kind
            raise ReadFailureError(f"Expected {expected!r}, got {token[1]!r}")
        return token[1]

    def _accept(self, kind: str, value: Any = None) -> bool:
        token = self._peek()
        if token is not None and token[0] == kind and (value is None or token[1] == value):
            self.pos += 1
            return True
        return False

    def _attribute_lists(self) -> Dict[str, Any]:
        attrs: Dict[str, Any] = {}
        while self._accept("punct", "["):
            while not self._accept("punct", "]"):
                key = self._expect("id")
                self._expect("punct", "=")
                attrs[str(key)] = self._expect("id")
                if not self._accept("punct", ","):
                    self._accept("punct", ";")
        return attrs

    def _vertex(self, label: Any) -> Any:
        label = _frozen(label)
        if label not in self.vertices:
            self.vertices[label] = dict(self._node_defaults)
        return label

    def _statement(self) -> None:
        kind, value = self._next()
        if kind == "keyword":
            if value == "graph":
                self.graph_attributes.update(self._attribute_lists())
            elif value == "node":
                self._node_defaults.update(self._attribute_lists())
            elif value == "edge":
                self._edge_defaults.update(self._attribute_lists())
            else:
                raise ReadFailureError(f"Unsupported statement '{value}'")
            return
        if kind != "id":
            raise ReadFailureError(f"Unexpected {value!r}")

        if self._accept("punct", "="):
            self.graph_attributes[str(value)] = self._expect("id")
            return

        chain = [self._vertex(value)]
        while self._peek() is not None and self._peek()[0] == "edgeop":
            op = self._next()[1]
            if (op == "->") != self.directed:
                raise ReadFailureError(f"Edge operator '{op}' does not match the graph kind")
            chain.append(self._vertex(self._expect("id")))
        attrs = self._attribute_lists()
        if len(chain) == 1:
            self.vertices[chain[0]].update(attrs)
            return
        for u, v in zip(chain, chain[1:]):
            edge_attrs = dict(self._edge_defaults)
            edge_attrs.update(attrs)
            self.edges.append((u, v, edge_attrs))

    def parse(self) -> "DotReader":
        self._accept("keyword", "strict")
        kind = self._expect("keyword")
        if kind not in ("graph", "digraph"):
            raise ReadFailureError(f"Expected 'graph' or 'digraph', got '{kind}'")
        self.directed = kind == "digraph"
        token = self._peek()
        if token is not None and token[0] == "id":
            self.name = str(self._next()[1])
        self._expect("punct", "{")
        while not self._accept("punct", "}"):
            self._statement()
            self._accept("punct", ";")
        if self._peek() is not None:
            raise ReadFailureError(f"Trailing input after the graph: {self._peek()[1]!r}")
        return self

    def build(self) -> Graph:
        """Create the graph described by the parsed document."""
        attributes = dict(self.graph_attributes)
        attributes.pop(DIRECTED, None)
        weighted = attributes.pop(WEIGHTED, None)
        if weighted is None:
            weighted = any(WEIGHT in attrs for _, _, attrs in self.edges)
        g = Graph(directed=self.directed, weighted=bool(weighted), name=self.name)
        with g.transaction():
            for tag, value in attributes.items():
                g.set_graph_attribute(tag, value)
            for label, attrs in self.vertices.items():
                g.add_vertex(label, attrs)
            for u, v, attrs in self.edges:
                weight = attrs.pop(WEIGHT, None)
                g.add_edge_by_label(u, v, weight, attrs)
        return g


def _encode_id(value: Any) -> str:
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and math.isfinite(value):
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'
    if isinstance(value, tuple):
        value = list(value)
    text = json.dumps(value, default=lambda o: o.tolist() if hasattr(o, "tolist") else str(o))
    return "<" + text.replace("<", "\\u003c").replace(">", "\\u003e") + ">"


def _encode_key(key: str) -> str:
    if _BARE.fullmatch(key) and key.lower() not in _KEYWORDS:
        return key
    return _encode_id(key)


def _encode_attributes(attrs: Dict[str, Any]) -> str:
    if not attrs:
        return ""
    body = ", ".join(f"{_encode_key(k)}={_encode_id(v)}" for k, v in attrs.items())
    return f" [{body}]"


def write_dot(graph: Graph, stream: IO[str]) -> None:
    """Write a graph in the DOT subset.

    Tuple attribute values are written as JSON arrays and read back as lists.
    """
    directed = graph.is_directed()
    header = "digraph" if directed else "graph"
    name = f" {_encode_id(graph.name)}" if graph.name else ""
    op = "->" if directed else "--"
    stream.write(f"{header}{name} {{\n")
    if graph.is_weighted():
        stream.write("  weighted=true;\n")
    for tag, value in graph.graph_attributes().items():
        if tag not in (DIRECTED, WEIGHTED):
            stream.write(f"  {_encode_key(tag)}={_encode_id(value)};\n")
    for i in range(graph.vertex_count()):
        attrs = graph.vertex_attributes(i)
        stream.write(f"  {_encode_id(graph.label(i))}{_encode_attributes(attrs)};\n")
    for i, j in graph.edge_pairs():
        attrs = graph.edge_attributes(i, j)
        u, v = _encode_id(graph.label(i)), _encode_id(graph.label(j))
        stream.write(f"  {u} {op} {v}{_encode_attributes(attrs)};\n")
    stream.write("}\n")


def read_dot(stream: IO[str]) -> Graph:
    """
    Read a graph in the DOT subset.

    Raises:
        ReadFailureError: If the text is malformed or describes an invalid graph
    """
    try:
        return DotReader(stream.read()).parse().build()
    except ReadFailureError:
        raise
    except UnicodeDecodeError as e:
        raise ReadFailureError(f"Input is not valid UTF-8: {e}") from e
    except (GraphOperationError, ValidationError, TypeError) as e:
        raise ReadFailureError(f"Invalid graph description: {e}") from e


def export_graph(graph: Graph, path: str) -> bool:
    """Write a graph to a DOT file, returning False on failure."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            write_dot(graph, f)
    except OSError as e:
        logger.warning(f"Failed to export graph to {path}: {e}")
        return False
    return True


def import_graph(path: str) -> Optional[Graph]:
    """Read a graph from a DOT file, returning None on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return read_dot(f)
    except (OSError, ReadFailureError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to import graph from {path}: {e}")
        return None


class GraphSerializer:
    """Handles graph serialization operations."""

    def __init__(self, graph: Graph):
        """Initialize serializer.

        Args:
            graph: Graph to serialize
        """
        self.graph = graph

    def to_dict(self) -> Dict[str, Any]:
        """Convert the graph to its bulk description.

        Returns:
            Dictionary accepted by ``from_dict``
        """
        data = self.graph.to_dict()
        data["schema_version"] = "1.0"
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        """Convert graph to JSON string.

        Args:
            indent: Number of spaces for pretty printing (default: None)
        """
        return json.dumps(self.to_dict(), indent=indent, default=_json_default)

    def to_dot(self) -> str:
        buffer = StringIO()
        write_dot(self.graph, buffer)
        return buffer.getvalue()

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Graph:
        """Create a graph from a bulk description.

        Raises:
            ValidationError: If the description does not match the schema
            GraphOperationError: If it describes an invalid graph
        """
        data = {k: v for k, v in data.items() if k != "schema_version"}
        return Graph.from_dict(data)

    @staticmethod
    def from_json(text: str) -> Graph:
        """Create a graph from a JSON document.

        Raises:
            ValidationError: If the text is not JSON or does not match the schema
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ValidationError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError("A graph description must be a JSON object")
        return GraphSerializer.from_dict(data)


def _json_default(value: Any) -> Any:
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, tuple):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
