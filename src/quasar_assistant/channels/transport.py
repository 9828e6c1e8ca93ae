"""In-process transport for the HTTP server channel.

Delivered messages are fanned out to subscriber queues. The SSE endpoint
subscribes for the lifetime of a client connection.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from quasar_assistant.channels.types import ChannelMessage

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


@dataclass
class DeliveredMessage:
    """A message delivered on a conversation."""

    conversation_id: str
    message: ChannelMessage


@dataclass
class Subscription:
    """A subscriber queue, optionally filtered to one conversation."""

    conversation_id: str | None = None
    queue: asyncio.Queue = field(
        default_factory=lambda: asyncio.Queue(maxsize=DEFAULT_QUEUE_SIZE)
    )

    def accepts(self, conversation_id: str) -> bool:
        return self.conversation_id is None or self.conversation_id == conversation_id


class ServerChannelTransport:
    """Broadcasts delivered messages to every matching subscriber."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, conversation_id: str | None = None) -> Subscription:
        """Open a subscription.

        Args:
            conversation_id: Only receive messages for this conversation
                             (default: every conversation)
        """
        subscription = Subscription(conversation_id=conversation_id)
        self._subscriptions.append(subscription)
        logger.debug(f"Opened subscription (conversation={conversation_id})")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug("Closed subscription")

    async def deliver(self, message: ChannelMessage, conversation_id: str) -> None:
        """Push a message to every subscriber of its conversation.

        A subscriber whose queue is full misses the message.
        """
        delivered = DeliveredMessage(conversation_id=conversation_id, message=message)
        for subscription in list(self._subscriptions):
            if not subscription.accepts(conversation_id):
                continue
            try:
                subscription.queue.put_nowait(delivered)
            except asyncio.QueueFull:
                logger.warning(
                    f"Dropped message for slow subscriber on conversation {conversation_id}"
                )
