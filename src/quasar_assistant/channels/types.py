"""Data types for channel messages."""

from dataclasses import asdict, dataclass
from typing import Any, Literal

MessageRole = Literal["system", "user", "assistant"]
MessageType = Literal["text", "callout", "log"]

# Conversation used when a caller does not name one
DEFAULT_CONVERSATION_ID = "default"


@dataclass(frozen=True)
class ChannelMessage:
    """A single message recorded in a channel ledger.

    Messages are immutable once created so that the ledger entry and the
    object handed to the transport are always the same value.

    Attributes:
        content: The text of the message
        role: Who produced the message (system, user or assistant)
        agent: Name of the agent the message belongs to, if any
        type: Presentation hint (text, callout or log)
    """

    content: str
    role: MessageRole = "user"
    agent: str | None = None
    type: MessageType = "text"

    def to_dict(self) -> dict[str, Any]:
        """Convert the message to a JSON-serializable dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChannelMessage":
        """Build a message from a dictionary, ignoring unknown keys."""
        return cls(
            content=str(data.get("content", "")),
            role=data.get("role", "user"),
            agent=data.get("agent") or None,
            type=data.get("type") or "text",
        )
