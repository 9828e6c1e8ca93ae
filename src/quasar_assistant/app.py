"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quasar_assistant.assistant import Assistant
from quasar_assistant.channels.channel import Channel
from quasar_assistant.channels.transport import ServerChannelTransport
from quasar_assistant.config import AssistantSettings
from quasar_assistant.decision.base import DecisionModel
from quasar_assistant.decision.ollama_model import OllamaDecisionModel
from quasar_assistant.ollama import OllamaClient
from quasar_assistant.routers import agents, health, messages

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Creates the Ollama client, the decision model, the assistant and the
    server channel once at startup and stores them in app.state.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: AssistantSettings = app.state.settings

    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    model: DecisionModel | None = app.state.decision_model
    if model is None:
        model = OllamaDecisionModel(
            client=app.state.ollama_client,
            agent_model=settings.agent_model,
            planning_model=settings.planning_model,
            description=settings.assistant_description,
        )

    assistant = Assistant.from_settings(settings, model)
    transport = ServerChannelTransport()
    server_channel = assistant.channel_manager.register_channel(
        Channel(
            name=settings.server_channel_name,
            description=settings.server_channel_description,
            deliver=transport.deliver,
        )
    )

    app.state.assistant = assistant
    app.state.transport = transport
    app.state.server_channel = server_channel
    logger.info(
        f"Assistant {assistant.name} started in {settings.pipeline_mode} mode "
        f"on channel {server_channel.name}"
    )

    yield

    # Shutdown: Clean up resources
    if hasattr(app.state, "ollama_client"):
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(
    settings: AssistantSettings | None = None,
    decision_model: DecisionModel | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional AssistantSettings instance. If not provided,
                  settings will be loaded from environment variables.
        decision_model: Optional decision model. If not provided, an
                        Ollama-backed model is created at startup.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    from quasar_assistant import __version__

    if settings is None:
        from quasar_assistant.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="quasar-assistant",
        description="Agent-dispatching assistant served over HTTP, backed by Ollama",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings
    app.state.decision_model = decision_model

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(agents.router)

    return app
