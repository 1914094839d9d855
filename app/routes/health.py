"""n8n connectivity health check."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from workflow_graph.config import N8N_API_URL
from workflow_graph.integrations.n8n_client import N8nApiError, N8nClient
from workflow_graph.logging_config import API_LOGGER_NAME

from ..dependencies import get_n8n_client
from ..schemas import HealthResponse

logger = logging.getLogger(API_LOGGER_NAME)

router = APIRouter(tags=["health"])


@router.get("/api/v1/health", response_model=HealthResponse)
async def health_check(client: N8nClient = Depends(get_n8n_client)):
    """Verify the n8n API is reachable with the configured key."""
    try:
        await client.check_connectivity()
    except N8nApiError as e:
        logger.warning(f"health_check: n8n unreachable at {N8N_API_URL}: {e.message}")
        raise HTTPException(status_code=502, detail=e.message)
    return HealthResponse(status="ok", api_url=N8N_API_URL)
