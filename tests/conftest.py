"""Pytest configuration and shared fixtures for quasar-assistant tests.

This module provides common fixtures used across all test modules,
including the scripted decision model, an assistant wired to an in-memory
channel, test app creation and async client setup.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quasar_assistant import create_app
from quasar_assistant.assistant import Assistant
from quasar_assistant.channels import Channel, ChannelMessage
from quasar_assistant.config import AssistantSettings
from quasar_assistant.decision import ScriptedDecisionModel


class RecordingTransport:
    """Collects every message a channel delivers."""

    def __init__(self):
        self.delivered: list[tuple[str, ChannelMessage]] = []

    def __call__(self, message: ChannelMessage, conversation_id: str) -> None:
        self.delivered.append((conversation_id, message))

    def contents(self, conversation_id: str | None = None) -> list[str]:
        return [
            message.content
            for conv_id, message in self.delivered
            if conversation_id is None or conv_id == conversation_id
        ]


@pytest.fixture
def decision_model():
    """A scripted decision model with empty queues.

    Tests append to its decisions/dispatch_lists/modes/replies/plans queues.
    """
    return ScriptedDecisionModel()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def assistant(decision_model):
    """An assistant using the scripted decision model."""
    return Assistant(name="Test", model=decision_model)


@pytest.fixture
def channel(assistant, transport):
    """A channel registered on the test assistant."""
    return assistant.channel_manager.register_channel(
        Channel(name="test-channel", description="A channel for tests.", deliver=transport)
    )


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with an isolated temporary data directory.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        AssistantSettings: Settings instance configured for testing.
    """
    return AssistantSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        assistant_name="Quasar",
        data_dir=str(tmp_path),
        plans_dir="plans",
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings, decision_model):
    """Create a FastAPI test application instance backed by the scripted model.

    Args:
        test_settings: Test settings fixture.
        decision_model: Scripted decision model fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings, decision_model=decision_model)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
