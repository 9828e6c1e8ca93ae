"""Unit tests for the health check endpoint."""

from unittest.mock import AsyncMock, patch

import pytest

from quasar_assistant import __version__


@pytest.mark.asyncio
async def test_health_reports_package_version_and_assistant(async_client):
    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert data["assistant_name"] == "Quasar"
    assert data["ollama_host"] == "http://localhost:11434"


@pytest.mark.asyncio
async def test_health_uses_client_created_at_startup(async_client, test_app):
    """Test that connectivity is checked on the client the lifespan stored."""
    client = test_app.state.ollama_client

    with patch.object(client, "check_connection", AsyncMock(return_value=True)) as check:
        data = (await async_client.get("/api/v1/health")).json()

    check.assert_awaited_once()
    assert data["ollama_connected"] is True


@pytest.mark.asyncio
async def test_failing_connectivity_check_keeps_server_healthy(async_client, test_app):
    client = test_app.state.ollama_client

    with patch.object(
        client, "check_connection", AsyncMock(side_effect=ConnectionError("refused"))
    ):
        data = (await async_client.get("/api/v1/health")).json()

    assert data["status"] == "ok"
    assert data["ollama_connected"] is False
    assert data["assistant_name"] == "Quasar"


@pytest.mark.asyncio
async def test_health_before_startup_objects_exist(async_client, test_app):
    """Test the response when neither the assistant nor the client is on app state."""
    del test_app.state.assistant
    del test_app.state.ollama_client

    data = (await async_client.get("/api/v1/health")).json()

    assert data["status"] == "ok"
    assert data["assistant_name"] is None
    assert data["ollama_connected"] is None
    assert data["ollama_host"] is None
