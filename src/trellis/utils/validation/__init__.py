"""Validation of bulk graph descriptions."""

from .base import ValidationResult
from .schema import GRAPH_SCHEMA, SchemaValidator, validate_graph_description

__all__ = ["GRAPH_SCHEMA", "SchemaValidator", "ValidationResult", "validate_graph_description"]
