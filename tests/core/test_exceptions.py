"""
Tests for custom exceptions and validation.
"""

import pytest

from trellis.core.exceptions import (
    EdgeNotFoundError,
    GraphOperationError,
    NotAGraphError,
    ResourceNotFoundError,
    ValidationError,
    VertexNotFoundError,
)
from trellis.core.graph import Graph


def test_validation_error_message():
    """Test validation error message formatting."""
    error = ValidationError("test message")
    assert str(error) == "Validation Error: test message"


def test_graph_operation_error_message():
    """Test graph operation error message formatting."""
    error = GraphOperationError("test message")
    assert str(error) == "Graph Operation Error: test message"


def test_error_hierarchy():
    """Test that lookup failures share a common base."""
    assert issubclass(VertexNotFoundError, ResourceNotFoundError)
    assert issubclass(EdgeNotFoundError, ResourceNotFoundError)
    assert issubclass(ResourceNotFoundError, GraphOperationError)
    assert issubclass(NotAGraphError, GraphOperationError)


def test_missing_edge_reports_labels():
    """Test that a missing edge error names the offending pair."""
    g = Graph.from_vertices(["a", "b"])
    with pytest.raises(EdgeNotFoundError) as exc_info:
        g.remove_edge(0, 1)
    assert isinstance(exc_info.value, GraphOperationError)
    assert str(exc_info.value).startswith("Graph Operation Error:")


def test_missing_vertex_is_resource_error():
    """Test catching a missing vertex through the base class."""
    g = Graph()
    with pytest.raises(ResourceNotFoundError):
        g.vertex_index("nowhere")
