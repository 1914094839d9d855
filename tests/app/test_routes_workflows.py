"""Tests for workflow create/update API routes (app/routes/workflows.py)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from workflow_graph.integrations.n8n_client import N8nApiError
from tests.conftest import make_node


class TestCreateWorkflow:

    @pytest.mark.asyncio
    async def test_creates(self, client: AsyncClient, mock_n8n_client, linear_nodes):
        resp = await client.post("/api/v1/workflows", json={
            "name": "Sync",
            "nodes": linear_nodes,
            "edges": [{"from": "Trigger", "to": "Fetch"}, {"from": "Fetch", "to": "Store"}],
        })
        assert resp.status_code == 201, resp.text
        assert resp.json() == {
            "id": "wf-1",
            "name": "Sync",
            "active": False,
            "message": "Workflow created successfully",
        }
        sent = mock_n8n_client.create_workflow.call_args.args[0]
        assert sent["connections"]["Fetch"]["main"][0][0]["node"] == "Store"
        assert sent["active"] is False

    @pytest.mark.asyncio
    async def test_active_and_tags_forwarded(self, client: AsyncClient, mock_n8n_client, linear_nodes):
        resp = await client.post("/api/v1/workflows", json={
            "name": "Sync",
            "nodes": linear_nodes,
            "active": True,
            "tags": ["billing"],
        })
        assert resp.status_code == 201, resp.text
        sent = mock_n8n_client.create_workflow.call_args.args[0]
        assert sent["active"] is True
        assert sent["tags"] == ["billing"]

    @pytest.mark.asyncio
    async def test_sparse_output_slot_is_created(self, client: AsyncClient, mock_n8n_client):
        nodes = [make_node("1", "If", "n8n-nodes-base.if"), make_node("2", "Done")]
        resp = await client.post("/api/v1/workflows", json={
            "name": "Branch",
            "nodes": nodes,
            "edges": [{"from": "If", "to": "Done", "fromIndex": 1}],
        })
        assert resp.status_code == 201, resp.text
        sent = mock_n8n_client.create_workflow.call_args.args[0]
        assert sent["connections"]["If"]["main"][0] is None

    @pytest.mark.asyncio
    async def test_invalid_workflow_not_sent(self, client: AsyncClient, mock_n8n_client):
        resp = await client.post("/api/v1/workflows", json={
            "name": "Dup",
            "nodes": [make_node("1", "A"), make_node("2", "A")],
        })
        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert detail["errors"] == [{"message": "Duplicate node name: A"}]
        mock_n8n_client.create_workflow.assert_not_called()

    @pytest.mark.asyncio
    async def test_bad_edge_is_422(self, client: AsyncClient, mock_n8n_client, linear_nodes):
        resp = await client.post("/api/v1/workflows", json={
            "name": "Sync",
            "nodes": linear_nodes,
            "edges": [{"from": "Trigger", "to": "Nowhere"}],
        })
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Edge refers to unknown target node: Nowhere"
        mock_n8n_client.create_workflow.assert_not_called()

    @pytest.mark.asyncio
    async def test_n8n_failure_is_502(self, client: AsyncClient, mock_n8n_client, linear_nodes):
        mock_n8n_client.create_workflow = AsyncMock(side_effect=N8nApiError("n8n API error 500: boom", 500))
        resp = await client.post("/api/v1/workflows", json={"name": "Sync", "nodes": linear_nodes})
        assert resp.status_code == 502
        assert "boom" in resp.json()["detail"]


class TestUpdateWorkflow:

    @pytest.mark.asyncio
    async def test_updates(self, client: AsyncClient, mock_n8n_client, linear_nodes):
        mock_n8n_client.get_workflow = AsyncMock(return_value={
            "id": "42",
            "name": "Old",
            "nodes": linear_nodes,
            "connections": {},
            "settings": {},
        })
        resp = await client.put("/api/v1/workflows/42", json={
            "name": "New",
            "edges": [{"from": "Trigger", "to": "Store"}],
        })
        assert resp.status_code == 200, resp.text
        assert resp.json()["name"] == "New"
        workflow_id, body = mock_n8n_client.update_workflow.call_args.args
        assert workflow_id == "42"
        assert body["connections"] == {"Trigger": {"main": [[{"node": "Store", "type": "main", "index": 0}]]}}

    @pytest.mark.asyncio
    async def test_missing_workflow_is_404(self, client: AsyncClient, mock_n8n_client):
        mock_n8n_client.get_workflow = AsyncMock(
            side_effect=N8nApiError("n8n resource not found: /workflows/7", status_code=404)
        )
        resp = await client.put("/api/v1/workflows/7", json={"name": "New"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_update_is_422(self, client: AsyncClient, mock_n8n_client, linear_nodes):
        mock_n8n_client.get_workflow = AsyncMock(return_value={
            "id": "42",
            "name": "Old",
            "nodes": linear_nodes,
            "connections": {},
            "settings": {},
        })
        resp = await client.put("/api/v1/workflows/42", json={
            "nodes": linear_nodes + [make_node("4", "Trigger")],
        })
        assert resp.status_code == 422
        mock_n8n_client.update_workflow.assert_not_called()


class TestClientDependency:

    @pytest.mark.asyncio
    async def test_missing_api_key_is_503(self, linear_nodes, monkeypatch):
        from httpx import ASGITransport

        import app.dependencies as deps
        from app.main import app

        monkeypatch.setattr(deps, "_client", None)
        monkeypatch.setattr("workflow_graph.integrations.n8n_client.N8N_API_KEY", "")
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/v1/workflows", json={"name": "Sync", "nodes": linear_nodes})
        assert resp.status_code == 503
        assert "N8N_API_KEY" in resp.json()["detail"]
