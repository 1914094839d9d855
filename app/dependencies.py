"""FastAPI dependencies: the shared n8n client."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException

from workflow_graph.integrations.n8n_client import N8nApiError, N8nClient

# Global client instance, created on first use
_client: Optional[N8nClient] = None


def get_n8n_client() -> N8nClient:
    """Get the process-wide n8n client (503 if no API key is configured)."""
    global _client
    if _client is None:
        try:
            _client = N8nClient()
        except N8nApiError as e:
            raise HTTPException(status_code=503, detail=e.message) from e
    return _client


async def close_n8n_client() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
