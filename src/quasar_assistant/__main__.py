"""CLI entry point for quasar-assistant.

This module provides the command-line interface for starting the assistant
server. It can be invoked as `quasar-assistant` (via the script entry point)
or `python -m quasar_assistant`.
"""

import argparse
import logging
import sys

import uvicorn

from quasar_assistant import __version__, create_app
from quasar_assistant.config import AssistantSettings


def main() -> None:
    """Main entry point for the quasar-assistant CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="quasar-assistant",
        description="Agent-dispatching assistant served over HTTP, backed by Ollama",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"quasar-assistant {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via QUASAR_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via QUASAR_PORT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via QUASAR_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--agent-model",
        type=str,
        default=None,
        help="Model used by agents (default: llama3.2:latest, can be set via QUASAR_AGENT_MODEL)",
    )

    parser.add_argument(
        "--planning-model",
        type=str,
        default=None,
        help="Model used for dispatch and planning (default: the agent model, "
        "can be set via QUASAR_PLANNING_MODEL)",
    )

    parser.add_argument(
        "--pipeline-mode",
        type=str,
        default=None,
        choices=["dispatch", "plan"],
        help="How inbound messages are handled (default: dispatch, "
        "can be set via QUASAR_PIPELINE_MODE)",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Post agent decisions and outputs as log messages (can be set via QUASAR_VERBOSE)",
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Base directory for all data (default: ., can be set via QUASAR_DATA_DIR)",
    )

    parser.add_argument(
        "--export-plans",
        action="store_true",
        default=None,
        help="Write completed plans to the plans directory (can be set via QUASAR_EXPORT_PLANS)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via QUASAR_LOG_LEVEL)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    overrides = {
        "host": args.host,
        "port": args.port,
        "ollama_host": args.ollama_host,
        "agent_model": args.agent_model,
        "planning_model": args.planning_model,
        "pipeline_mode": args.pipeline_mode,
        "verbose": args.verbose,
        "data_dir": args.data_dir,
        "export_plans": args.export_plans,
        "log_level": args.log_level,
    }
    settings = AssistantSettings(
        **{key: value for key, value in overrides.items() if value is not None}
    )

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
