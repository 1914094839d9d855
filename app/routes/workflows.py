"""Validated workflow create/update endpoints (persisted through n8n)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from workflow_graph.engine.connections_builder import ConnectionBuildError
from workflow_graph.integrations.n8n_client import N8nApiError, N8nClient
from workflow_graph.logging_config import API_LOGGER_NAME
from workflow_graph.service import (
    WorkflowValidationError,
    create_validated_workflow,
    update_validated_workflow,
)

from ..dependencies import get_n8n_client
from ..schemas import (
    CreateWorkflowRequest,
    EdgeRequest,
    UpdateWorkflowRequest,
    WorkflowSummaryResponse,
)

logger = logging.getLogger(API_LOGGER_NAME)

router = APIRouter(tags=["workflows"])


def _edge_dicts(edges: Optional[List[EdgeRequest]]) -> Optional[List[Dict[str, Any]]]:
    if edges is None:
        return None
    return [edge.to_edge_dict() for edge in edges]


def _validation_http_error(error: WorkflowValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "message": str(error),
            "errors": [issue.to_dict() for issue in error.result.errors],
        },
    )


def _n8n_http_error(error: N8nApiError) -> HTTPException:
    if error.status_code == 404:
        return HTTPException(status_code=404, detail=error.message)
    return HTTPException(status_code=502, detail=error.message)


def _summary(workflow: Dict[str, Any], message: str) -> WorkflowSummaryResponse:
    workflow_id = workflow.get("id")
    return WorkflowSummaryResponse(
        id=str(workflow_id) if workflow_id is not None else None,
        name=workflow.get("name"),
        active=workflow.get("active"),
        message=message,
    )


@router.post("/api/v1/workflows", response_model=WorkflowSummaryResponse, status_code=201)
async def create_workflow(
    payload: CreateWorkflowRequest,
    client: N8nClient = Depends(get_n8n_client),
):
    """Validate a workflow and create it in n8n."""
    try:
        created = await create_validated_workflow(
            client,
            name=payload.name,
            nodes=payload.nodes,
            connections=payload.connections,
            edges=_edge_dicts(payload.edges),
            settings=payload.settings,
            active=payload.active,
            tags=payload.tags,
        )
    except ConnectionBuildError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except WorkflowValidationError as e:
        raise _validation_http_error(e)
    except N8nApiError as e:
        logger.error(f"create_workflow: n8n rejected {payload.name!r}: {e.message}")
        raise _n8n_http_error(e)

    return _summary(created, "Workflow created successfully")


@router.put("/api/v1/workflows/{workflow_id}", response_model=WorkflowSummaryResponse)
async def update_workflow(
    workflow_id: str,
    payload: UpdateWorkflowRequest,
    client: N8nClient = Depends(get_n8n_client),
):
    """Apply changes to a stored workflow, validate, and update it in n8n."""
    try:
        updated = await update_validated_workflow(
            client,
            workflow_id,
            name=payload.name,
            nodes=payload.nodes,
            connections=payload.connections,
            edges=_edge_dicts(payload.edges),
        )
    except ConnectionBuildError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except WorkflowValidationError as e:
        raise _validation_http_error(e)
    except N8nApiError as e:
        logger.error(f"update_workflow: n8n call failed for {workflow_id}: {e.message}")
        raise _n8n_http_error(e)

    return _summary(updated, "Workflow updated successfully")
