"""Message endpoints of the HTTP server channel.

Users post messages here and read the conversation back either as a history
snapshot or as a live SSE stream of everything the assistant delivers.
"""

import asyncio
import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sse_starlette.sse import EventSourceResponse

from quasar_assistant.channels.channel import Channel
from quasar_assistant.channels.transport import ServerChannelTransport
from quasar_assistant.channels.types import ChannelMessage
from quasar_assistant.dependencies import get_server_channel, get_transport
from quasar_assistant.models.messages import (
    HistoryResponse,
    MessageItem,
    MessageReceivedResponse,
    SendMessageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])

# Interval between checks for a disconnected SSE client
EVENT_POLL_INTERVAL = 1.0


@router.post("/message", response_model=MessageReceivedResponse)
async def post_message(
    request_body: SendMessageRequest,
    channel: Annotated[Channel, Depends(get_server_channel)],
) -> MessageReceivedResponse:
    """Post a user message to the assistant.

    Args:
        request_body: Message content, conversation id and optional agent name
        channel: Injected server channel

    Returns:
        Acknowledgement once the message has been routed

    Raises:
        HTTPException: 500 if the assistant could not route the message
    """
    message = ChannelMessage(
        content=request_body.message,
        role="user",
        agent=request_body.agent,
    )

    accepted = await channel.start_assistant_response(
        message, request_body.conversation_id
    )
    if not accepted:
        logger.warning(
            f"Message on conversation {request_body.conversation_id} was not routed"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": {
                    "code": "routing_failed",
                    "message": "The assistant could not handle the message.",
                    "details": {"conversation_id": request_body.conversation_id},
                }
            },
        )

    return MessageReceivedResponse(message="Message received.")


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    channel: Annotated[Channel, Depends(get_server_channel)],
    conversation_id: str | None = None,
) -> HistoryResponse:
    """Get the messages of one conversation, or of every conversation.

    Args:
        channel: Injected server channel
        conversation_id: Conversation to read (default: all conversations)
    """
    if conversation_id is not None:
        messages = channel.get_conversation_history(conversation_id)
        return HistoryResponse(
            message="Conversation history retrieved.",
            data=[MessageItem.from_channel_message(m) for m in messages],
        )

    return HistoryResponse(
        message="Full history retrieved.",
        data={
            conv_id: [MessageItem.from_channel_message(m) for m in messages]
            for conv_id, messages in channel.get_full_history().items()
        },
    )


@router.get("/events")
async def stream_events(
    request: Request,
    transport: Annotated[ServerChannelTransport, Depends(get_transport)],
    conversation_id: str | None = None,
) -> EventSourceResponse:
    """Stream messages delivered by the assistant as SSE events.

    Each event is named "message" and carries the conversation id and the
    message as JSON.

    Args:
        request: The FastAPI request object
        transport: Injected server channel transport
        conversation_id: Only stream this conversation (default: all)
    """
    subscription = transport.subscribe(conversation_id)

    async def event_generator():
        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    delivered = await asyncio.wait_for(
                        subscription.queue.get(), timeout=EVENT_POLL_INTERVAL
                    )
                except asyncio.TimeoutError:
                    continue

                yield {
                    "event": "message",
                    "data": json.dumps(
                        {
                            "conversation_id": delivered.conversation_id,
                            "message": delivered.message.to_dict(),
                        }
                    ),
                }
        finally:
            transport.unsubscribe(subscription)

    return EventSourceResponse(event_generator())
