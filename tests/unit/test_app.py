"""Unit tests for the FastAPI app factory and configuration."""

import pytest
from fastapi import FastAPI

from quasar_assistant import __version__, create_app
from quasar_assistant.assistant import Assistant
from quasar_assistant.config import AssistantSettings
from quasar_assistant.decision import OllamaDecisionModel


def test_create_app_returns_fastapi_instance():
    """Test that create_app returns a FastAPI instance."""
    app = create_app()
    assert isinstance(app, FastAPI)


def test_create_app_with_settings(test_settings):
    """Test that create_app accepts custom settings."""
    app = create_app(settings=test_settings)
    assert isinstance(app, FastAPI)
    assert app.state.settings is test_settings
    assert app.state.decision_model is None


def test_create_app_metadata():
    """Test that app has correct metadata."""
    app = create_app()
    assert app.title == "quasar-assistant"
    assert app.version == "0.1.0"
    assert "Agent-dispatching assistant" in app.description


def test_create_app_includes_routers():
    """Test that every router is registered."""
    app = create_app()

    routes = [route.path for route in app.routes]  # type: ignore[attr-defined]
    assert "/api/v1/health" in routes
    assert "/message" in routes
    assert "/history" in routes
    assert "/events" in routes
    assert "/api/v1/agents" in routes
    assert "/api/v1/agents/{name}" in routes
    assert "/api/v1/agents/{name}/pause" in routes
    assert "/api/v1/agents/{name}/resume" in routes


def test_create_app_has_cors_middleware(test_settings):
    """Test that CORS middleware is configured."""
    app = create_app(settings=test_settings)

    middleware_classes = [m.cls.__name__ for m in app.user_middleware]  # type: ignore[attr-defined]
    assert "CORSMiddleware" in middleware_classes


def test_version_constant():
    """Test that __version__ is defined and matches app version."""
    assert __version__ == "0.1.0"


def test_settings_default_values():
    """Test that settings have correct default values."""
    settings = AssistantSettings()

    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.ollama_host == "http://localhost:11434"
    assert settings.agent_model == "llama3.2:latest"
    assert settings.planning_model is None
    assert settings.pipeline_mode == "dispatch"
    assert settings.verbose is False
    assert settings.export_plans is False
    assert settings.server_channel_name == "server"
    assert settings.data_dir == "."
    assert settings.log_level == "INFO"


def test_settings_env_prefix(monkeypatch):
    """Test that settings respect QUASAR_ environment variable prefix."""
    monkeypatch.setenv("QUASAR_PORT", "9000")
    monkeypatch.setenv("QUASAR_OLLAMA_HOST", "http://custom:11434")
    monkeypatch.setenv("QUASAR_PIPELINE_MODE", "plan")
    monkeypatch.setenv("QUASAR_VERBOSE", "true")

    settings = AssistantSettings()

    assert settings.port == 9000
    assert settings.ollama_host == "http://custom:11434"
    assert settings.pipeline_mode == "plan"
    assert settings.verbose is True


def test_settings_resolved_paths(tmp_path):
    """Test that resolved path properties work correctly."""
    settings = AssistantSettings(data_dir=str(tmp_path), plans_dir="my_plans")

    assert settings.resolved_plans_dir == tmp_path / "my_plans"


@pytest.mark.asyncio
async def test_lifespan_builds_assistant_with_injected_model(test_app, decision_model):
    """Test that startup wires the assistant, transport and server channel."""
    async with test_app.router.lifespan_context(test_app):
        assistant = test_app.state.assistant
        channel = test_app.state.server_channel

        assert isinstance(assistant, Assistant)
        assert assistant.name == "Quasar"
        assert assistant.model is decision_model
        assert assistant.channel_manager.get_channel("server") is channel
        assert test_app.state.transport is not None


@pytest.mark.asyncio
async def test_lifespan_defaults_to_ollama_model(test_settings):
    test_settings.planning_model = "planner"
    app = create_app(settings=test_settings)

    async with app.router.lifespan_context(app):
        model = app.state.assistant.model

        assert isinstance(model, OllamaDecisionModel)
        assert model.agent_model == test_settings.agent_model
        assert model.planning_model == "planner"
        assert model.client is app.state.ollama_client
