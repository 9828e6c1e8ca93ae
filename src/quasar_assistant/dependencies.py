"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject the objects created during application startup.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from quasar_assistant.agents.manager import AgentManager
from quasar_assistant.assistant import Assistant
from quasar_assistant.channels.channel import Channel
from quasar_assistant.channels.transport import ServerChannelTransport
from quasar_assistant.config import AssistantSettings


def _not_initialized(what: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": {
                "code": "not_initialized",
                "message": f"{what} not initialized",
                "details": {},
            }
        },
    )


@lru_cache
def get_settings() -> AssistantSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the QUASAR_ prefix.

    Returns:
        AssistantSettings: The application configuration settings.
    """
    return AssistantSettings()


def get_assistant(request: Request) -> Assistant:
    """Get the assistant created during application startup.

    Raises:
        HTTPException: If the assistant is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "assistant"):
        raise _not_initialized("Assistant")
    return request.app.state.assistant


def get_agent_manager(request: Request) -> AgentManager:
    return get_assistant(request).agent_manager


def get_server_channel(request: Request) -> Channel:
    """Get the channel HTTP clients talk through.

    Raises:
        HTTPException: If the server channel is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "server_channel"):
        raise _not_initialized("Server channel")
    return request.app.state.server_channel


def get_transport(request: Request) -> ServerChannelTransport:
    if not hasattr(request.app.state, "transport"):
        raise _not_initialized("Server transport")
    return request.app.state.transport
