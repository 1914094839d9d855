"""Build and validate n8n workflow graphs before they reach the engine."""

from .engine import (
    ConnectionBuildError,
    EdgeDefinition,
    UnknownNodeError,
    UnsupportedPortError,
    ValidationIssue,
    ValidationResult,
    build_connections_from_edges,
    deep_find_node_refs,
    validate_nodes_and_connections,
    validate_workflow_shape,
)
from .nodes import NodePortCapabilities, get_node_capabilities
from .service import WorkflowValidationError, prepare_workflow, validate_workflow

__all__ = [
    "ConnectionBuildError",
    "EdgeDefinition",
    "UnknownNodeError",
    "UnsupportedPortError",
    "ValidationIssue",
    "ValidationResult",
    "build_connections_from_edges",
    "deep_find_node_refs",
    "validate_nodes_and_connections",
    "validate_workflow_shape",
    "NodePortCapabilities",
    "get_node_capabilities",
    "WorkflowValidationError",
    "prepare_workflow",
    "validate_workflow",
]
