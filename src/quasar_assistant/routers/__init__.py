"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, messages, agents).
"""

from quasar_assistant.routers import agents, health, messages

__all__ = [
    "agents",
    "health",
    "messages",
]
