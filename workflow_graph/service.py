"""Workflow preparation: assemble, validate, then persist.

Callers hand in nodes plus either explicit connections or an edge list.
This module resolves the connections, fills in default settings, runs the
shape and graph validators together and only then talks to n8n.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from .config import DEFAULT_EXECUTION_TIMEOUT, DEFAULT_TIMEZONE
from .engine.connections_builder import Connections, EdgeLike, build_connections_from_edges
from .engine.results import ValidationResult
from .engine.schema import validate_workflow_shape
from .engine.validator import validate_nodes_and_connections

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOW_SETTINGS: Dict[str, Any] = {
    "executionOrder": "v1",
    "timezone": DEFAULT_TIMEZONE,
    "saveExecutionProgress": True,
    "saveManualExecutions": True,
    "saveDataErrorExecution": "all",
    "saveDataSuccessExecution": "all",
    "executionTimeout": DEFAULT_EXECUTION_TIMEOUT,
}


class WorkflowValidationError(ValueError):
    """Raised when a workflow fails shape or graph validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = result.messages()
        super().__init__(
            f"Workflow validation failed with {len(messages)} issue(s): " + "; ".join(messages)
        )


class WorkflowEngineClient(Protocol):
    """The subset of the n8n client the service depends on."""

    async def get_workflow(self, workflow_id: str) -> Dict[str, Any]:
        ...

    async def create_workflow(self, workflow: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update_workflow(self, workflow_id: str, workflow: Dict[str, Any]) -> Dict[str, Any]:
        ...


def default_settings() -> Dict[str, Any]:
    return dict(DEFAULT_WORKFLOW_SETTINGS)


def resolve_connections(
    nodes: List[Mapping[str, Any]],
    connections: Optional[Connections] = None,
    edges: Optional[Iterable[EdgeLike]] = None,
) -> Connections:
    """Pick the connections for a workflow.

    Explicit connections win; otherwise edges are built into connections;
    with neither, the workflow has no connections.

    Raises:
        ConnectionBuildError: If the edges cannot be built
    """
    if connections is not None:
        return connections
    if edges is not None:
        return build_connections_from_edges(nodes, edges)
    return {}


def assemble_workflow(
    name: str,
    nodes: List[Mapping[str, Any]],
    connections: Optional[Connections] = None,
    edges: Optional[Iterable[EdgeLike]] = None,
    settings: Optional[Mapping[str, Any]] = None,
    active: Optional[bool] = None,
    tags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build the workflow body sent to n8n.

    ``active`` and ``tags`` are only included when given.
    """
    workflow: Dict[str, Any] = {
        "name": name,
        "nodes": nodes,
        "connections": resolve_connections(nodes, connections, edges),
        "settings": dict(settings) if settings is not None else default_settings(),
    }
    if active is not None:
        workflow["active"] = active
    if tags is not None:
        workflow["tags"] = list(tags)
    return workflow


def validate_workflow(workflow: Mapping[str, Any]) -> ValidationResult:
    """Run the shape and graph validators and merge their issues.

    Both validators always run; shape issues come first.
    """
    shape = validate_workflow_shape(workflow)
    graph = validate_nodes_and_connections(
        workflow.get("nodes", []), workflow.get("connections", {})
    )
    return ValidationResult.merge(shape, graph)


def prepare_workflow(
    name: str,
    nodes: List[Mapping[str, Any]],
    connections: Optional[Connections] = None,
    edges: Optional[Iterable[EdgeLike]] = None,
    settings: Optional[Mapping[str, Any]] = None,
    active: Optional[bool] = None,
    tags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Assemble a workflow and reject it unless it is fully valid.

    Raises:
        ConnectionBuildError: If the edges cannot be built
        WorkflowValidationError: If any shape or graph issue is found
    """
    workflow = assemble_workflow(name, nodes, connections, edges, settings, active, tags)
    result = validate_workflow(workflow)
    if not result.valid:
        raise WorkflowValidationError(result)
    return workflow


def merge_workflow_update(
    current: Mapping[str, Any],
    name: Optional[str] = None,
    nodes: Optional[List[Mapping[str, Any]]] = None,
    connections: Optional[Connections] = None,
    edges: Optional[Iterable[EdgeLike]] = None,
) -> Dict[str, Any]:
    """Build an update body from the stored workflow and the changed fields.

    Omitted fields keep their current value. Edges are built against the
    effective node list (the new nodes if given, otherwise the stored ones).
    ``active`` and ``tags`` are never part of the body; n8n manages them
    through separate endpoints.
    """
    effective_nodes = nodes if nodes is not None else copy.deepcopy(current.get("nodes", []))
    if connections is None and edges is None:
        connections = copy.deepcopy(current.get("connections", {}))

    settings = current.get("settings")
    return assemble_workflow(
        name=name if name is not None else current.get("name"),
        nodes=effective_nodes,
        connections=connections,
        edges=edges,
        settings=settings if isinstance(settings, Mapping) else None,
    )


def describe_changes(
    current: Mapping[str, Any],
    name: Optional[str] = None,
    nodes: Optional[List[Any]] = None,
    connections: Optional[Connections] = None,
    edges: Optional[Iterable[EdgeLike]] = None,
) -> str:
    """Summarise an update for logs and API responses."""
    changes = []
    if name is not None and name != current.get("name"):
        changes.append(f'name: "{current.get("name")}" → "{name}"')
    if nodes is not None:
        changes.append("nodes updated")
    if connections is not None or edges is not None:
        changes.append("connections updated")
    if not changes:
        return "No changes to name, nodes, or connections were specified."
    return "Changes: " + ", ".join(changes)


async def create_validated_workflow(
    client: WorkflowEngineClient,
    name: str,
    nodes: List[Mapping[str, Any]],
    connections: Optional[Connections] = None,
    edges: Optional[Iterable[EdgeLike]] = None,
    settings: Optional[Mapping[str, Any]] = None,
    active: bool = False,
    tags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Validate a new workflow and create it in n8n.

    Nothing is sent to n8n unless validation passes. New workflows are
    inactive unless ``active`` is set.
    """
    workflow = prepare_workflow(name, nodes, connections, edges, settings, active, tags)
    created = await client.create_workflow(workflow)
    logger.info(f"Created workflow {created.get('id')} ({name}) with {len(nodes)} node(s)")
    return created


async def update_validated_workflow(
    client: WorkflowEngineClient,
    workflow_id: str,
    name: Optional[str] = None,
    nodes: Optional[List[Mapping[str, Any]]] = None,
    connections: Optional[Connections] = None,
    edges: Optional[Iterable[EdgeLike]] = None,
) -> Dict[str, Any]:
    """Fetch a workflow, apply the changes, validate and update it in n8n.

    Returns:
        The updated workflow as returned by n8n
    """
    current = await client.get_workflow(workflow_id)
    workflow = merge_workflow_update(current, name, nodes, connections, edges)
    result = validate_workflow(workflow)
    if not result.valid:
        raise WorkflowValidationError(result)

    updated = await client.update_workflow(workflow_id, workflow)
    logger.info(
        f"Updated workflow {workflow_id}: "
        f"{describe_changes(current, name, nodes, connections, edges)}"
    )
    return updated
