"""Configuration module for quasar-assistant using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AssistantSettings(BaseSettings):
    """Main configuration settings for quasar-assistant.

    All settings can be overridden via environment variables with the QUASAR_ prefix.
    For example, QUASAR_AGENT_MODEL will override the agent_model setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    agent_model: str = "llama3.2:latest"
    planning_model: str | None = None

    # Assistant
    assistant_name: str = "Quasar"
    assistant_description: str = "A helpful assistant that dispatches agents to get work done."
    pipeline_mode: Literal["dispatch", "plan"] = "dispatch"
    verbose: bool = False

    # Server channel
    server_channel_name: str = "server"
    server_channel_description: str = (
        "The HTTP channel users talk to the assistant through."
    )

    # Data directories (relative to data_dir)
    data_dir: str = "."
    plans_dir: str = "plans"
    export_plans: bool = False

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="QUASAR_")

    @property
    def resolved_plans_dir(self) -> Path:
        """Get the full path to the plans directory."""
        return Path(self.data_dir) / self.plans_dir
