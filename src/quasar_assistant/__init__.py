"""quasar-assistant: an assistant that dispatches LLM-driven agents over channels.

This package provides the channel message bus, the perceive-decide-act agent
loop, and a FastAPI server exposing the assistant over HTTP and SSE.
"""

__version__ = "0.1.0"

from quasar_assistant.app import create_app  # noqa: E402
from quasar_assistant.assistant import Assistant  # noqa: E402

__all__ = ["Assistant", "create_app", "__version__"]
