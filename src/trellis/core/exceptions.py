"""
Custom exceptions for the graph theory engine.

This module defines the hierarchy of custom exceptions used throughout the engine
to report failed graph operations in a structured and meaningful way. Each exception
type corresponds to a specific kind of violation detected at the point where an
algorithm or a mutation discovers it.
"""


class ValidationError(Exception):
    """
    Raised when data validation fails.

    This exception is raised when input data fails to meet the required validation
    criteria, such as schema validation of a bulk graph description.

    Examples:
        * Malformed vertex or edge entries
        * Schema validation failures
    """

    def __str__(self) -> str:
        """Format validation error message."""
        return f"Validation Error: {super().__str__()}"


class ConfigurationError(Exception):
    """
    Raised when configuration is invalid.

    Examples:
        * Non-positive spring constant
        * Negative tolerance or iteration cap
    """


class GraphOperationError(Exception):
    """
    Raised when graph operations fail.

    This is the base class of every failure signal produced by the engine.
    A failed operation leaves the graph it was invoked on unmodified.

    Examples:
        * Invalid vertex/edge operations
        * Structural preconditions not met
    """

    def __str__(self) -> str:
        """Format graph operation error message."""
        return f"Graph Operation Error: {super().__str__()}"


class NotAGraphError(GraphOperationError):
    """
    Raised when input does not describe a graph.

    Examples:
        * Edge description that is not a pair of vertices
        * Self-loop in a simple graph
    """


class DirectionMismatchError(GraphOperationError):
    """
    Raised when a directed graph is required but an undirected one was given,
    or vice versa.

    Examples:
        * Strongly connected components of an undirected graph
        * Maximum matching in a digraph
    """


class WeightMismatchError(GraphOperationError):
    """
    Raised when a weighted graph is required but an unweighted one was given,
    or vice versa.

    Examples:
        * Setting an edge weight in an unweighted graph
        * Girth of a weighted graph
    """


class ResourceNotFoundError(GraphOperationError):
    """
    Raised when a requested vertex or edge is not found.
    """


class VertexNotFoundError(ResourceNotFoundError):
    """
    Raised when a requested vertex is not found.

    Examples:
        * Vertex index outside the dense range
        * Label that does not resolve to any vertex
    """


class EdgeNotFoundError(ResourceNotFoundError):
    """
    Raised when a requested edge is not found.

    Examples:
        * Removing an edge that does not exist
        * Reading the weight of a missing edge
    """


class NotATreeError(GraphOperationError):
    """
    Raised when a tree (or forest) is required.

    Examples:
        * Tree drawing of a graph with cycles
    """


class NotConnectedError(GraphOperationError):
    """
    Raised when a connected graph is required.

    Examples:
        * 3D spring drawing of a disconnected graph
        * Circular drawing with an explicit cycle on a disconnected graph
    """


class NotPlanarError(GraphOperationError):
    """
    Raised when a planar graph is required.

    Examples:
        * Planar embedding of K5 or K3,3
    """


class NotAcyclicError(GraphOperationError):
    """
    Raised when an acyclic digraph is required.

    Examples:
        * Topological sort of a digraph with a directed cycle
    """


class InvalidRootError(GraphOperationError):
    """
    Raised when the root specification of a tree drawing is invalid.

    Examples:
        * Number of roots differs from the number of forest components
        * Two roots in the same component
    """


class InvalidDrawingMethodError(GraphOperationError):
    """
    Raised when an unknown or conflicting drawing method is requested.
    """


class DimensionMismatchError(GraphOperationError):
    """
    Raised when a matrix or a list has a size inconsistent with the graph.

    Examples:
        * Non-square adjacency matrix
        * Coordinate list shorter than the vertex list
    """


class NotAGraphicSequenceError(GraphOperationError):
    """
    Raised when a degree sequence cannot be realised by a simple graph.
    """


class ReadFailureError(GraphOperationError):
    """
    Raised when a textual graph description cannot be parsed.

    Examples:
        * Unbalanced braces or brackets
        * Attribute without a value
    """
