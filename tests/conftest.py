"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from kgchat.config import Settings, get_test_settings
from kgchat.conversation import ConversationStore
from kgchat.graph import GraphStore
from kgchat.llm import CompletionClient
from kgchat.models import Message, Node, NodeKind
from kgchat.workspace import Workspace


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return get_test_settings()


@pytest.fixture
def mock_completion_client() -> CompletionClient:
    """Mock completion client for testing without a completion service."""
    client = MagicMock(spec=CompletionClient)
    client.url = "http://completion.test/api/claude"

    async def mock_complete(messages, max_tokens=None):
        last = messages[-1]["content"]
        return f"Answer to: {last}"

    async def mock_generate(prompt, max_tokens=None):
        return f"Explanation for prompt: {prompt}"

    client.complete = AsyncMock(side_effect=mock_complete)
    client.generate = AsyncMock(side_effect=mock_generate)
    client.close = AsyncMock()

    return client


@pytest.fixture
def graph() -> GraphStore:
    """Graph with a root node at the standard origin."""
    store = GraphStore(horizontal_spacing=120, vertical_drop=150)
    store.add_node(
        Node(id="root", label="Start your learning journey", x=100, y=300, kind=NodeKind.ROOT)
    )
    return store


@pytest.fixture
def conversations() -> ConversationStore:
    store = ConversationStore()
    store.create("root")
    return store


@pytest.fixture
def workspace(mock_completion_client, test_settings) -> Workspace:
    """Freshly initialized workspace backed by the mock client."""
    return Workspace(mock_completion_client, settings=test_settings)


@pytest.fixture
def sample_exchange() -> list[Message]:
    """A completed first exchange."""
    return [
        Message.user("Explain entropy"),
        Message.assistant("Entropy measures disorder."),
    ]
