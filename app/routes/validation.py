"""Graph validation, edge building and node capability endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from workflow_graph.engine.connections_builder import (
    ConnectionBuildError,
    build_connections_from_edges,
)
from workflow_graph.logging_config import API_LOGGER_NAME
from workflow_graph.nodes.capabilities import (
    DEFAULT_CAPABILITIES,
    get_node_capabilities,
    is_known_node_type,
    list_node_capabilities,
)
from workflow_graph.service import assemble_workflow, validate_workflow

from ..schemas import (
    BuildConnectionsRequest,
    BuildConnectionsResponse,
    NodeCapabilitiesResponse,
    ValidateWorkflowRequest,
    ValidationIssueResponse,
    ValidationResponse,
)

logger = logging.getLogger(API_LOGGER_NAME)

router = APIRouter(tags=["validation"])

# Name used for the fallback entry in the node type listing
DEFAULT_NODE_TYPE = "*"


@router.get("/api/v1/node-types", response_model=List[NodeCapabilitiesResponse])
def list_node_types():
    """List node types with explicit port capabilities, plus the default."""
    entries = [
        NodeCapabilitiesResponse(node_type=node_type, known=True, **caps.to_dict())
        for node_type, caps in sorted(list_node_capabilities().items())
    ]
    entries.append(
        NodeCapabilitiesResponse(node_type=DEFAULT_NODE_TYPE, known=False, **DEFAULT_CAPABILITIES.to_dict())
    )
    return entries


@router.get(
    "/api/v1/node-types/{node_type:path}/capabilities",
    response_model=NodeCapabilitiesResponse,
)
def get_capabilities(node_type: str):
    """Describe the legal ports of a node type (default set if unknown)."""
    caps = get_node_capabilities(node_type)
    return NodeCapabilitiesResponse(
        node_type=node_type,
        known=is_known_node_type(node_type),
        **caps.to_dict(),
    )


@router.post("/api/v1/connections/build", response_model=BuildConnectionsResponse)
def build_connections(payload: BuildConnectionsRequest):
    """Turn an edge list into an n8n connections object."""
    try:
        connections = build_connections_from_edges(
            payload.nodes, [edge.to_edge_dict() for edge in payload.edges]
        )
    except ConnectionBuildError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BuildConnectionsResponse(connections=connections)


@router.post("/api/v1/workflows/validate", response_model=ValidationResponse)
def validate_workflow_inline(payload: ValidateWorkflowRequest):
    """Validate nodes + connections (or edges) without sending to n8n."""
    if not payload.nodes:
        raise HTTPException(status_code=400, detail="Validation requires a non-empty nodes array")

    edges = [edge.to_edge_dict() for edge in payload.edges] if payload.edges is not None else None
    try:
        workflow = assemble_workflow(
            name=payload.name if payload.name is not None else "ValidationOnly",
            nodes=payload.nodes,
            connections=payload.connections,
            edges=edges,
            settings=payload.settings,
        )
    except ConnectionBuildError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = validate_workflow(workflow)
    if not result.valid:
        logger.info(f"Validation failed with {len(result.errors)} issue(s)")

    return ValidationResponse(
        valid=result.valid,
        errors=[ValidationIssueResponse(**issue.to_dict()) for issue in result.errors],
    )
