"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of quasar-assistant.
        assistant_name: Name of the running assistant, if started.
        ollama_connected: Optional boolean indicating Ollama connectivity.
        ollama_host: Optional string with the Ollama host URL.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of quasar-assistant")
    assistant_name: str | None = Field(
        default=None,
        description="Name of the running assistant",
    )
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
