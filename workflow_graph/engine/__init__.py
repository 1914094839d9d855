"""Workflow Engine: connection building, graph validation and shape checks."""

from .connections_builder import (
    ConnectionBuildError,
    ConnectionTarget,
    Connections,
    EdgeDefinition,
    NodeConnections,
    PortConnections,
    UnknownNodeError,
    UnsupportedPortError,
    build_connections_from_edges,
)
from .expressions import (
    deep_find_node_refs,
    find_node_refs_in_string,
    is_expression,
    normalize_expression,
)
from .results import ValidationIssue, ValidationResult
from .schema import validate_workflow_shape, workflow_json_schema
from .validator import validate_nodes_and_connections

__all__ = [
    "ConnectionBuildError",
    "ConnectionTarget",
    "Connections",
    "EdgeDefinition",
    "NodeConnections",
    "PortConnections",
    "UnknownNodeError",
    "UnsupportedPortError",
    "build_connections_from_edges",
    "deep_find_node_refs",
    "find_node_refs_in_string",
    "is_expression",
    "normalize_expression",
    "ValidationIssue",
    "ValidationResult",
    "validate_workflow_shape",
    "workflow_json_schema",
    "validate_nodes_and_connections",
]
