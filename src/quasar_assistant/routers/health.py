"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from quasar_assistant.models.health import HealthResponse
from quasar_assistant.ollama import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of quasar-assistant.
    Also checks connectivity to the Ollama server if the client is initialized.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    from quasar_assistant import __version__

    ollama_connected = None
    ollama_host = None
    assistant_name = None

    if hasattr(request.app.state, "assistant"):
        assistant_name = request.app.state.assistant.name

    if hasattr(request.app.state, "ollama_client"):
        ollama_client: OllamaClient = request.app.state.ollama_client
        ollama_host = ollama_client.host

        try:
            ollama_connected = await ollama_client.check_connection()
            logger.debug(f"Ollama connectivity check: {ollama_connected}")
        except Exception as e:
            logger.warning(f"Ollama connectivity check failed: {e}")
            ollama_connected = False

    return HealthResponse(
        status="ok",
        version=__version__,
        assistant_name=assistant_name,
        ollama_connected=ollama_connected,
        ollama_host=ollama_host,
    )
