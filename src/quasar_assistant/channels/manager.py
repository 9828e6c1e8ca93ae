"""ChannelManager: registry of the channels owned by an assistant."""

import logging
from typing import TYPE_CHECKING

from quasar_assistant.channels.channel import Channel
from quasar_assistant.exceptions import DuplicateNameError
from quasar_assistant.modules.types import Module

if TYPE_CHECKING:
    from quasar_assistant.assistant import Assistant

logger = logging.getLogger(__name__)


class ChannelManager:
    """Maps channel names to channels."""

    def __init__(self, assistant: "Assistant | None" = None) -> None:
        self.assistant = assistant
        self._channels: dict[str, Channel] = {}

    def register_channel(self, channel: Channel) -> Channel:
        """Register a channel and bind it to this manager.

        Raises:
            DuplicateNameError: If a channel with the same name is registered
        """
        if channel.name in self._channels:
            raise DuplicateNameError("channel", channel.name)

        channel.register_manager(self)
        self._channels[channel.name] = channel
        logger.info(f"Registered channel {channel.name}")
        return channel

    def get_channel(self, name: str) -> Channel | None:
        """Get a channel by name, or None if it is not registered."""
        return self._channels.get(name)

    def get_channels(self) -> list[Channel]:
        """Get all registered channels in registration order."""
        return list(self._channels.values())

    def get_channel_list(self) -> list[Module]:
        """Get every registered channel as a module."""
        return [channel.as_module() for channel in self._channels.values()]
