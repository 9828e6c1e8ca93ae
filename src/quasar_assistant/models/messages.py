"""Pydantic models for the message API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field

from quasar_assistant.channels.types import ChannelMessage


class SendMessageRequest(BaseModel):
    """Request body for posting a user message to the server channel."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1, description="The message content")
    conversation_id: str = Field(
        ..., alias="conversationId", description="Conversation the message belongs to"
    )
    agent: str | None = Field(
        None, description="Name of the agent the message is addressed to"
    )


class MessageReceivedResponse(BaseModel):
    """Acknowledgement of a posted message."""

    message: str = Field(..., description="Acknowledgement text")


class MessageItem(BaseModel):
    """A single ledger entry."""

    content: str = Field(..., description="Message content")
    role: str = Field(..., description="Message role: user or assistant")
    agent: str | None = Field(None, description="Agent the message is tagged with")
    type: str = Field("text", description="Message type: text or log")

    @classmethod
    def from_channel_message(cls, message: ChannelMessage) -> "MessageItem":
        return cls(
            content=message.content,
            role=message.role,
            agent=message.agent,
            type=message.type,
        )


class HistoryResponse(BaseModel):
    """Response for a conversation history or the full ledger."""

    message: str = Field(..., description="Status text")
    data: list[MessageItem] | dict[str, list[MessageItem]] = Field(
        ...,
        description="Messages of one conversation, or every conversation keyed by id",
    )
