"""Unit tests for the server channel transport."""

import pytest

from quasar_assistant.channels import Channel, ChannelMessage, ServerChannelTransport
from quasar_assistant.channels.transport import DEFAULT_QUEUE_SIZE


@pytest.mark.asyncio
async def test_deliver_fans_out_to_matching_subscribers():
    transport = ServerChannelTransport()
    everything = transport.subscribe()
    only_c1 = transport.subscribe("c1")
    only_c2 = transport.subscribe("c2")

    await transport.deliver(ChannelMessage(content="hi", role="assistant"), "c1")

    assert everything.queue.qsize() == 1
    assert only_c1.queue.qsize() == 1
    assert only_c2.queue.empty()
    delivered = only_c1.queue.get_nowait()
    assert delivered.conversation_id == "c1"
    assert delivered.message.content == "hi"


@pytest.mark.asyncio
async def test_full_queue_drops_messages():
    transport = ServerChannelTransport()
    subscription = transport.subscribe()

    for index in range(DEFAULT_QUEUE_SIZE + 5):
        await transport.deliver(ChannelMessage(content=str(index)), "c1")

    assert subscription.queue.qsize() == DEFAULT_QUEUE_SIZE


def test_unsubscribe():
    transport = ServerChannelTransport()
    subscription = transport.subscribe()

    transport.unsubscribe(subscription)
    transport.unsubscribe(subscription)

    assert transport.subscriber_count == 0


@pytest.mark.asyncio
async def test_channel_delivers_through_transport():
    transport = ServerChannelTransport()
    subscription = transport.subscribe("c1")
    channel = Channel(name="server", description="d", deliver=transport.deliver)

    sent = await channel.send_message_as_assistant({"content": "hello"}, "c1")

    assert subscription.queue.get_nowait().message is sent
