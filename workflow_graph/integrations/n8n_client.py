"""n8n REST API client.

Talks to the n8n public API (``/api/v1``) using API-key authentication.
The graph engine never calls this module; the service layer uses it to
persist workflows after they pass validation.

Environment:
    N8N_API_URL: Base URL including /api/v1 (default http://localhost:5678/api/v1)
    N8N_API_KEY: n8n API key (required)

Usage:
    client = N8nClient()
    workflow = await client.get_workflow("42")
    created = await client.create_workflow({"name": ..., "nodes": ..., ...})
    await client.close()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import N8N_API_KEY, N8N_API_URL, N8N_HTTP_MAX_CONNECTIONS, N8N_HTTP_TIMEOUT
from ..logging_config import CLIENT_LOGGER_NAME

logger = logging.getLogger(CLIENT_LOGGER_NAME)


class N8nApiError(Exception):
    """Raised when an n8n API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class N8nClient:
    """Async n8n REST API client.

    Args:
        base_url: API base URL. Falls back to N8N_API_URL.
        api_key: API key. Falls back to N8N_API_KEY.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = N8N_HTTP_TIMEOUT,
    ):
        self._base_url = (base_url or N8N_API_URL).rstrip("/")
        self._api_key = api_key or N8N_API_KEY
        if not self._api_key:
            raise N8nApiError(
                "n8n API key not configured. Set N8N_API_KEY environment variable "
                "or pass api_key= to N8nClient()."
            )
        self._client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "X-N8N-API-KEY": self._api_key,
                    "Accept": "application/json",
                },
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=N8N_HTTP_MAX_CONNECTIONS),
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request to the n8n API and decode the JSON body."""
        client = await self._get_client()
        try:
            resp = await client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as e:
            raise N8nApiError(f"n8n API timeout: {method} {path}") from e
        except httpx.ConnectError as e:
            raise N8nApiError(f"n8n API connection error: {method} {path}") from e

        if resp.status_code in (401, 403):
            raise N8nApiError(
                f"n8n API returned {resp.status_code}. Check that N8N_API_KEY is valid.",
                status_code=resp.status_code,
            )
        if resp.status_code == 404:
            raise N8nApiError(f"n8n resource not found: {path}", status_code=404)
        if resp.status_code >= 400:
            raise N8nApiError(
                f"n8n API error {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return {}
        return resp.json()

    # ------------------------------------------------------------------
    # Workflow API methods
    # ------------------------------------------------------------------

    async def check_connectivity(self) -> None:
        """Raise N8nApiError if the API cannot be reached with this key."""
        await self._request("GET", "/workflows", params={"limit": 1})
        logger.info(f"check_connectivity: ok ({self._base_url})")

    async def get_workflow(self, workflow_id: str) -> Dict[str, Any]:
        """GET /workflows/:id"""
        return await self._request("GET", f"/workflows/{workflow_id}")

    async def create_workflow(self, workflow: Dict[str, Any]) -> Dict[str, Any]:
        """POST /workflows"""
        data = await self._request("POST", "/workflows", json=workflow)
        logger.info(f"create_workflow: id={data.get('id')}, name={data.get('name')}")
        return data

    async def update_workflow(self, workflow_id: str, workflow: Dict[str, Any]) -> Dict[str, Any]:
        """PUT /workflows/:id"""
        data = await self._request("PUT", f"/workflows/{workflow_id}", json=workflow)
        logger.info(f"update_workflow: id={workflow_id}")
        return data
