"""
Schema validation of bulk graph descriptions.

A bulk description is the dictionary accepted by ``Graph.from_dict`` and
produced by ``Graph.to_dict``:

    {
        "name": "house",
        "directed": false,
        "weighted": true,
        "attributes": {"author": "me"},
        "vertices": [1, 2, {"label": 3, "attributes": {"color": 1}}],
        "edges": [[1, 2, 5], {"source": 2, "target": 3, "weight": 1}]
    }

Vertex labels are JSON scalars or arrays of scalars (arrays become tuples).
Edges are ``[u, v]``, ``[u, v, weight]`` or objects with ``source`` and
``target``.
"""

from typing import Any, Dict, List

from jsonschema import Draft7Validator

from ...core.exceptions import ValidationError
from .base import ValidationResult

_SCALAR = {"type": ["string", "integer", "number", "boolean"]}
_LABEL = {"anyOf": [_SCALAR, {"type": "array", "items": _SCALAR}]}

GRAPH_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "directed": {"type": "boolean"},
        "weighted": {"type": "boolean"},
        "attributes": {"type": "object"},
        "vertices": {
            "type": "array",
            "items": {
                "anyOf": [
                    _LABEL,
                    {
                        "type": "object",
                        "properties": {"label": _LABEL, "attributes": {"type": "object"}},
                        "required": ["label"],
                        "additionalProperties": False,
                    },
                ]
            },
        },
        "edges": {
            "type": "array",
            "items": {
                "anyOf": [
                    {
                        "type": "array",
                        "items": [_LABEL, _LABEL, {"type": "number"}],
                        "minItems": 2,
                        "maxItems": 3,
                    },
                    {
                        "type": "object",
                        "properties": {
                            "source": _LABEL,
                            "target": _LABEL,
                            "weight": {"type": "number"},
                            "attributes": {"type": "object"},
                        },
                        "required": ["source", "target"],
                        "additionalProperties": False,
                    },
                ]
            },
        },
    },
    "additionalProperties": False,
}


class SchemaValidator:
    """
    JSON Schema based validator for bulk graph descriptions.

    Attributes:
        schema (Dict[str, Any]): The JSON schema instances are checked against
    """

    def __init__(self, schema: Dict[str, Any] = GRAPH_SCHEMA):
        self.schema = schema
        self._validator = Draft7Validator(schema)

    def validate(self, data: Any) -> ValidationResult:
        """
        Validate a description against the schema.

        Example:
            >>> SchemaValidator().validate({"edges": [[1, 2]]}).is_valid
            True
        """
        errors: List[str] = []
        found = sorted(self._validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
        for error in found:
            location = "/".join(str(p) for p in error.path) or "<root>"
            errors.append(f"{location}: {error.message}")
        warnings = []
        edges = data.get("edges") if isinstance(data, dict) else None
        if isinstance(edges, list) and not data.get("weighted", False):
            for k, edge in enumerate(edges):
                has_weight = (isinstance(edge, list) and len(edge) == 3) or (
                    isinstance(edge, dict) and "weight" in edge
                )
                if has_weight:
                    errors.append(f"edges/{k}: weight given for an unweighted graph")
        if isinstance(data, dict) and not data.get("vertices") and not data.get("edges"):
            warnings.append("Description has no vertices")
        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            context={"schema": "graph"},
        )


def validate_graph_description(data: Any) -> None:
    """
    Check a bulk description, raising on the first report with errors.

    Raises:
        ValidationError: If the description does not match the schema
    """
    result = SchemaValidator().validate(data)
    if not result.is_valid:
        raise ValidationError("; ".join(result.errors))
