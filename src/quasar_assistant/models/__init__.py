"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from quasar_assistant.models.agents import (
    AgentDetailResponse,
    AgentListResponse,
    AgentResponse,
)
from quasar_assistant.models.health import HealthResponse
from quasar_assistant.models.messages import (
    HistoryResponse,
    MessageItem,
    MessageReceivedResponse,
    SendMessageRequest,
)

__all__ = [
    "AgentDetailResponse",
    "AgentListResponse",
    "AgentResponse",
    "HealthResponse",
    "HistoryResponse",
    "MessageItem",
    "MessageReceivedResponse",
    "SendMessageRequest",
]
