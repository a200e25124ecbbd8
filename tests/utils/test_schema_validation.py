"""
Tests for schema validation of bulk graph descriptions.
"""

import pytest

from trellis.core.exceptions import ValidationError
from trellis.utils.validation import (
    SchemaValidator,
    ValidationResult,
    validate_graph_description,
)


@pytest.fixture
def validator():
    """Fixture providing a schema validator."""
    return SchemaValidator()


def test_valid_description(validator):
    """Test a description using every supported form."""
    data = {
        "name": "house",
        "directed": False,
        "weighted": True,
        "attributes": {"author": "me"},
        "vertices": [1, [2, "x"], {"label": 3, "attributes": {"color": 1}}],
        "edges": [[1, 3, 5], {"source": 3, "target": [2, "x"], "weight": 1.5}],
    }
    result = validator.validate(data)

    assert isinstance(result, ValidationResult)
    assert result.is_valid
    assert result.errors == []
    assert result.context == {"schema": "graph"}


def test_unknown_keys_are_rejected(validator):
    """Test that additional properties are errors."""
    result = validator.validate({"edges": [[1, 2]], "colour": "red"})
    assert not result.is_valid
    assert any("colour" in e for e in result.errors)


def test_malformed_edges(validator):
    """Test edge lists of the wrong length and objects without a target."""
    result = validator.validate({"edges": [[1], {"source": 1}]})

    assert not result.is_valid
    assert len(result.errors) == 2
    assert result.errors[0].startswith("edges/0")


def test_weight_on_unweighted_graph(validator):
    """Test that weights require the weighted flag."""
    result = validator.validate({"edges": [[1, 2, 4]]})
    assert not result.is_valid
    assert result.errors == ["edges/0: weight given for an unweighted graph"]


def test_empty_description_warns(validator):
    """Test that an empty description is valid but warned about."""
    result = validator.validate({})
    assert result.is_valid
    assert result.warnings == ["Description has no vertices"]


def test_non_object_description(validator):
    """Test that only objects are descriptions."""
    result = validator.validate([1, 2])
    assert not result.is_valid
    assert result.errors[0].startswith("<root>")


def test_validate_graph_description_raises():
    """Test the raising wrapper."""
    validate_graph_description({"vertices": ["a"]})
    with pytest.raises(ValidationError, match="Validation Error"):
        validate_graph_description({"directed": "yes"})
