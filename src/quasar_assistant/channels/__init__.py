"""Channels: named conversational endpoints with message ledgers.

This package provides the Channel message bus, the ChannelManager registry and
the in-process transport used by the HTTP server channel.
"""

from quasar_assistant.channels.channel import (
    Channel,
    DeliverFunction,
    MessageListener,
    ReplyFunction,
)
from quasar_assistant.channels.manager import ChannelManager
from quasar_assistant.channels.transport import (
    DeliveredMessage,
    ServerChannelTransport,
    Subscription,
)
from quasar_assistant.channels.types import (
    DEFAULT_CONVERSATION_ID,
    ChannelMessage,
    MessageRole,
    MessageType,
)

__all__ = [
    # Core classes
    "Channel",
    "ChannelManager",
    "ServerChannelTransport",
    # Message types
    "ChannelMessage",
    "DeliveredMessage",
    "MessageRole",
    "MessageType",
    "Subscription",
    "DEFAULT_CONVERSATION_ID",
    # Callback types
    "DeliverFunction",
    "MessageListener",
    "ReplyFunction",
]
