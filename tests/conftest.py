"""Root conftest for engine, service and API tests.

Provides:
- Sample n8n nodes (plain and LangChain agent setups)
- FastAPI AsyncClient over ASGITransport with the n8n client overridden
"""

from __future__ import annotations

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

AGENT = "@n8n/n8n-nodes-langchain.agent"
CHAT_MODEL = "@n8n/n8n-nodes-langchain.lmChatOpenAi"
OUTPUT_PARSER = "@n8n/n8n-nodes-langchain.outputParserStructured"


def make_node(node_id: str, name: str, node_type: str = "n8n-nodes-base.set", **extra) -> dict:
    """Helper: build a minimal valid n8n node."""
    node = {
        "id": node_id,
        "name": name,
        "type": node_type,
        "typeVersion": 1,
        "position": [0, 0],
        "parameters": {},
    }
    node.update(extra)
    return node


@pytest.fixture
def linear_nodes():
    """Trigger -> Fetch -> Store, all default-capability nodes."""
    return [
        make_node("1", "Trigger", "n8n-nodes-base.manualTrigger"),
        make_node("2", "Fetch", "n8n-nodes-base.httpRequest"),
        make_node("3", "Store", "n8n-nodes-base.set"),
    ]


@pytest.fixture
def agent_nodes():
    """Chat trigger feeding an agent with a chat model and an output parser."""
    return [
        make_node("1", "Chat Trigger", "@n8n/n8n-nodes-langchain.chatTrigger"),
        make_node("2", "Agent", AGENT),
        make_node("3", "OpenAI Chat Model", CHAT_MODEL),
        make_node("4", "Parser", OUTPUT_PARSER),
    ]


@pytest.fixture
def agent_edges():
    return [
        {"from": "Chat Trigger", "to": "Agent"},
        {"from": "OpenAI Chat Model", "to": "Agent", "fromPort": "ai_languageModel"},
        {"from": "Parser", "to": "Agent", "fromPort": "ai_outputParser"},
    ]


# ---------------------------------------------------------------------------
# n8n client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_n8n_client():
    """Mock n8n client for service and route tests."""
    client = AsyncMock()
    client.create_workflow = AsyncMock(
        side_effect=lambda wf: {"id": "wf-1", "name": wf["name"], "active": False}
    )
    client.update_workflow = AsyncMock(
        side_effect=lambda wf_id, wf: {"id": wf_id, "name": wf["name"], "active": True}
    )
    return client


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def client(mock_n8n_client) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI routes.

    The n8n client dependency is replaced with ``mock_n8n_client`` so no
    request ever leaves the process.
    """
    from app.dependencies import get_n8n_client
    from app.main import app

    app.dependency_overrides[get_n8n_client] = lambda: mock_n8n_client
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_n8n_client, None)
