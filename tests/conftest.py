"""pytest configuration and fixtures.

This module provides the HTTP client fixture for API tests and a small
workflow builder plus ready-made workflows for the build-order engine tests.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from flowguide.core.config import get_settings
from flowguide.main import app

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )
    config.addinivalue_line(
        "markers",
        "asyncio: marks tests as async (pytest-asyncio)",
    )


# =============================================================================
# WORKFLOW BUILDER
# =============================================================================


class WorkflowBuilder:
    """Fluent builder for workflow JSON in the n8n export shape.

    Node ids are derived from names (``"Send Email"`` -> ``"id-send-email"``)
    unless given explicitly.

    Example:
        workflow = (
            WorkflowBuilder()
            .add_node("Webhook", "n8n-nodes-base.webhook")
            .add_node("Send Email", "n8n-nodes-base.emailSend")
            .connect("Webhook", "Send Email")
            .build()
        )
    """

    def __init__(self, name: str = "Test workflow") -> None:
        self.name = name
        self.nodes: list[dict[str, Any]] = []
        self.connections: dict[str, dict[str, list[list[dict[str, Any]]]]] = {}

    @staticmethod
    def node_id(name: str) -> str:
        return "id-" + name.lower().replace(" ", "-")

    def add_node(
        self,
        name: str,
        node_type: str = "n8n-nodes-base.set",
        *,
        node_id: str | None = None,
        **fields: Any,
    ) -> "WorkflowBuilder":
        self.nodes.append(
            {
                "id": node_id or self.node_id(name),
                "name": name,
                "type": node_type,
                "parameters": fields.pop("parameters", {}),
                "position": fields.pop("position", [0, 0]),
                **fields,
            }
        )
        return self

    def connect(
        self,
        source: str,
        target: str,
        *,
        kind: str = "main",
        output: int = 0,
        input_index: int = 0,
    ) -> "WorkflowBuilder":
        groups = self.connections.setdefault(source, {}).setdefault(kind, [])
        while len(groups) <= output:
            groups.append([])
        groups[output].append({"node": target, "type": kind, "index": input_index})
        return self

    def build(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "nodes": list(self.nodes),
            "connections": self.connections,
        }


@pytest.fixture
def builder() -> WorkflowBuilder:
    """Fresh workflow builder."""
    return WorkflowBuilder()


# =============================================================================
# SAMPLE WORKFLOWS
# =============================================================================


@pytest.fixture
def linear_workflow() -> dict[str, Any]:
    """Trigger -> A -> B -> C."""
    return (
        WorkflowBuilder("Linear")
        .add_node("Trigger", "n8n-nodes-base.manualTrigger")
        .add_node("A")
        .add_node("B")
        .add_node("C")
        .connect("Trigger", "A")
        .connect("A", "B")
        .connect("B", "C")
        .build()
    )


@pytest.fixture
def if_workflow() -> dict[str, Any]:
    """Webhook -> IF, with X on the true output and Y on the false output."""
    return (
        WorkflowBuilder("Conditional")
        .add_node("Webhook", "n8n-nodes-base.webhook")
        .add_node("IF", "n8n-nodes-base.if")
        .add_node("X")
        .add_node("Y")
        .connect("Webhook", "IF")
        .connect("IF", "X", output=0)
        .connect("IF", "Y", output=1)
        .build()
    )


@pytest.fixture
def merge_workflow() -> dict[str, Any]:
    """Two triggers feeding P1 and P2, which both feed merge node M."""
    return (
        WorkflowBuilder("Merge")
        .add_node("M", "n8n-nodes-base.merge")
        .add_node("Trigger1", "n8n-nodes-base.manualTrigger")
        .add_node("P1")
        .add_node("Trigger2", "n8n-nodes-base.scheduleTrigger")
        .add_node("P2")
        .connect("Trigger1", "P1")
        .connect("P1", "M")
        .connect("Trigger2", "P2")
        .connect("P2", "M", input_index=1)
        .build()
    )


@pytest.fixture
def agent_workflow() -> dict[str, Any]:
    """Chat trigger -> AI Agent -> Reply, with a language model attached to the agent."""
    return (
        WorkflowBuilder("Agent")
        .add_node("Chat Trigger", "@n8n/n8n-nodes-langchain.chatTrigger")
        .add_node("OpenAI Chat Model", "@n8n/n8n-nodes-langchain.lmChatOpenAi")
        .add_node("AI Agent", "@n8n/n8n-nodes-langchain.agent")
        .add_node("Reply", "n8n-nodes-base.respondToWebhook")
        .connect("Chat Trigger", "AI Agent")
        .connect("OpenAI Chat Model", "AI Agent", kind="ai_languageModel")
        .connect("AI Agent", "Reply")
        .build()
    )


@pytest.fixture
def islands_workflow() -> dict[str, Any]:
    """Two disconnected chains without any shared trigger."""
    return (
        WorkflowBuilder("Islands")
        .add_node("A1")
        .add_node("A2")
        .add_node("B1")
        .add_node("B2")
        .add_node("B3")
        .connect("A1", "A2")
        .connect("B1", "B2")
        .connect("B2", "B3")
        .build()
    )


@pytest.fixture
def cyclic_workflow() -> dict[str, Any]:
    """Trigger -> A -> B -> A: A is a merge point fed by its own descendant."""
    return (
        WorkflowBuilder("Cycle")
        .add_node("Trigger", "n8n-nodes-base.manualTrigger")
        .add_node("A")
        .add_node("B")
        .connect("Trigger", "A")
        .connect("A", "B")
        .connect("B", "A")
        .build()
    )


# =============================================================================
# HTTP CLIENT FIXTURES
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing API endpoints.

    Uses ASGI transport to test the FastAPI app without running a server.

    Example:
        async def test_build_order(async_client):
            response = await async_client.post("/api/v1/build-order", json=workflow)
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.pop(get_settings, None)
