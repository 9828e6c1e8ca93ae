"""Channel class: a named conversational endpoint with its own ledger.

A channel records every message per conversation id, notifies listeners of
inbound messages, delivers assistant messages to its transport, and exposes
itself as a module so agents can read from and write to it.
"""

import asyncio
import inspect
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from quasar_assistant.channels.types import DEFAULT_CONVERSATION_ID, ChannelMessage
from quasar_assistant.modules.types import Module, ModuleMethod, object_schema

if TYPE_CHECKING:
    from quasar_assistant.channels.manager import ChannelManager

logger = logging.getLogger(__name__)

DeliverFunction = Callable[[ChannelMessage, str], None | Awaitable[None]]
ReplyFunction = Callable[[ChannelMessage | dict[str, Any]], Awaitable[ChannelMessage]]
MessageListener = Callable[[ChannelMessage, ReplyFunction], Any]


class Channel:
    """A named endpoint wrapping a message ledger and a transport.

    The ledger maps conversation ids to append-only message lists. Order is
    arrival order and entries are never removed or reordered.

    Listeners cannot be removed once added.
    """

    def __init__(
        self,
        name: str,
        description: str,
        deliver: DeliverFunction | None = None,
    ) -> None:
        """Initialize a Channel.

        Args:
            name: Channel name, unique within its ChannelManager
            description: Description shown to agents choosing a channel
            deliver: Transport callback invoked with (message, conversation_id)
                     after the message is recorded. Sync or async.
        """
        self.name = name
        self.description = description
        self.manager: "ChannelManager | None" = None
        self._deliver = deliver
        self._ledger: dict[str, list[ChannelMessage]] = {}
        self._listeners: list[MessageListener] = []
        self._background_tasks: set[asyncio.Task] = set()

    def register_manager(self, manager: "ChannelManager") -> None:
        """Bind this channel to the manager that owns it."""
        self.manager = manager

    def add_message_listener(self, listener: MessageListener) -> None:
        """Register a callback for every message received on this channel.

        The callback receives the message and a reply coroutine function bound
        to the same conversation.
        """
        self._listeners.append(listener)

    def receive_message(self, message: ChannelMessage, conversation_id: str) -> None:
        """Append a message to a conversation and notify listeners.

        The append happens before any listener runs. A failing listener is
        logged and does not prevent the remaining listeners from running.

        Args:
            message: The message to record
            conversation_id: The conversation the message belongs to
        """
        self._ledger.setdefault(conversation_id, []).append(message)

        async def reply(partial: ChannelMessage | dict[str, Any]) -> ChannelMessage:
            return await self.send_message_as_assistant(partial, conversation_id)

        for listener in list(self._listeners):
            try:
                result = listener(message, reply)
            except Exception as e:
                logger.error(f"Listener on channel {self.name} failed: {e}")
                continue

            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._background_tasks.add(task)
                task.add_done_callback(self._on_listener_settled)

    def _on_listener_settled(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Listener on channel {self.name} failed: {error}")

    async def send_message_as_assistant(
        self,
        message: ChannelMessage | dict[str, Any],
        conversation_id: str,
    ) -> ChannelMessage:
        """Record a message as the assistant and deliver it to the transport.

        The ledger entry and the delivered message are the same object.

        Args:
            message: A ChannelMessage or a partial dict (content, type, agent)
            conversation_id: The conversation to send to

        Returns:
            The finalized message
        """
        if isinstance(message, ChannelMessage):
            final = replace(message, role="assistant")
        else:
            final = ChannelMessage.from_dict({**message, "role": "assistant"})

        self.receive_message(final, conversation_id)

        if self._deliver is not None:
            result = self._deliver(final, conversation_id)
            if inspect.isawaitable(result):
                await result

        return final

    def get_conversation_history(
        self, conversation_id: str, count: int | None = None
    ) -> list[ChannelMessage]:
        """Get the messages of a conversation, oldest first.

        Args:
            conversation_id: The conversation to read
            count: Only return the last `count` messages (default: all)

        Returns:
            A copy of the conversation history
        """
        history = self._ledger.get(conversation_id, [])
        if count is None:
            return list(history)
        if count <= 0:
            return []
        return list(history[-count:])

    def get_full_history(self) -> dict[str, list[ChannelMessage]]:
        """Get a copy of the whole ledger, keyed by conversation id."""
        return {
            conversation_id: list(messages)
            for conversation_id, messages in self._ledger.items()
        }

    def get_agent_history(
        self, agent_name: str, conversation_id: str
    ) -> list[ChannelMessage]:
        """Get the messages of a conversation tagged with an agent name."""
        return [
            message
            for message in self.get_conversation_history(conversation_id)
            if message.agent == agent_name
        ]

    async def start_assistant_response(
        self, message: ChannelMessage, conversation_id: str
    ) -> bool:
        """Record an inbound message and route it through the assistant.

        Args:
            message: The inbound (usually user) message
            conversation_id: The conversation it arrived on

        Returns:
            True if the assistant accepted the message, False otherwise
        """
        try:
            self.receive_message(message, conversation_id)

            assistant = self.manager.assistant if self.manager else None
            if assistant is None:
                logger.warning(f"Channel {self.name} has no assistant to respond")
                return False

            history = self.get_conversation_history(conversation_id)
            return await assistant.start_assistant_response(
                messages=history,
                channel=self,
                conversation_id=conversation_id,
            )
        except Exception as e:
            logger.error(f"Failed to start assistant response on {self.name}: {e}")
            return False

    # --- Module interface ---

    def schema(self) -> list[ModuleMethod]:
        """Describe the methods agents can invoke on this channel."""
        return [
            ModuleMethod(
                name="get_conversation_history",
                description="Returns the conversation history.",
                parameters=object_schema(
                    {
                        "conversation_id": {
                            "type": "string",
                            "description": "The conversation id.",
                        },
                        "count": {
                            "type": "number",
                            "description": "The number of messages to return.",
                        },
                    },
                    required=["conversation_id"],
                ),
                perform_action=self._get_conversation_history_action,
            ),
            ModuleMethod(
                name="getFullHistory",
                description="Returns the full history of the channel.",
                parameters=object_schema(),
                perform_action=self._get_full_history_action,
            ),
            ModuleMethod(
                name="sendMessage",
                description="Sends a message to the channel.",
                parameters=object_schema(
                    {
                        "message": {
                            "type": "object",
                            "description": "The message to send.",
                            "properties": {
                                "content": {
                                    "type": "string",
                                    "description": "The content of the message.",
                                },
                            },
                        },
                        "conversation_id": {
                            "type": "string",
                            "description": "The conversation to send to (optional).",
                        },
                    },
                    required=["message"],
                ),
                perform_action=self._send_message_action,
            ),
        ]

    def as_module(self, description: str | None = None) -> Module:
        """Expose this channel as a module.

        Args:
            description: Optional description override (e.g. to mark the
                         channel as an agent's primary channel)
        """
        return Module(
            name=self.name,
            type="channel",
            description=description if description is not None else self.description,
            methods=self.schema(),
        )

    def _get_conversation_history_action(
        self, params: dict[str, Any]
    ) -> list[dict[str, Any]]:
        conversation_id = params.get("conversation_id") or DEFAULT_CONVERSATION_ID
        count = params.get("count")
        history = self.get_conversation_history(
            str(conversation_id), int(count) if count is not None else None
        )
        return [message.to_dict() for message in history]

    def _get_full_history_action(
        self, params: dict[str, Any]
    ) -> dict[str, list[dict[str, Any]]]:
        return {
            conversation_id: [message.to_dict() for message in messages]
            for conversation_id, messages in self.get_full_history().items()
        }

    async def _send_message_action(self, params: dict[str, Any]) -> str:
        conversation_id = str(params.get("conversation_id") or DEFAULT_CONVERSATION_ID)
        agent = params.get("agent")
        message = params.get("message")

        # Models sometimes pass the content directly instead of an object
        content = message.get("content") if isinstance(message, dict) else message

        if not content:
            await self.send_message_as_assistant(
                {
                    "content": "An error occurred when trying to send a message.",
                    "type": "text",
                    "agent": agent,
                },
                conversation_id,
            )
            return "No message content was provided."

        await self.send_message_as_assistant(
            {"content": str(content), "type": "text", "agent": agent},
            conversation_id,
        )
        return f"Message sent to channel {self.name} (conversation {conversation_id})."
