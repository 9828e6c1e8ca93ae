"""Inbound message pipeline: turns a user message into agents or a reply.

Two modes are supported:
- dispatch: split the message into independent tasks, one agent each
- plan: classify the message, then either reply directly or draft a plan of
  action and hand it to a single agent
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Literal

from quasar_assistant.agents.agent import Agent
from quasar_assistant.agents.plan import PlanOfAction
from quasar_assistant.agents.types import AgentTask
from quasar_assistant.channels.channel import Channel
from quasar_assistant.channels.types import ChannelMessage, MessageType

if TYPE_CHECKING:
    from quasar_assistant.assistant import Assistant

logger = logging.getLogger(__name__)

PipelineMode = Literal["dispatch", "plan"]


class Pipeline:
    """Routes messages that are not addressed to a running agent."""

    def __init__(
        self,
        assistant: "Assistant",
        mode: PipelineMode = "dispatch",
        verbose: bool = False,
    ) -> None:
        if mode not in ("dispatch", "plan"):
            raise ValueError(f"Unknown pipeline mode: {mode}")
        self.assistant = assistant
        self.mode = mode
        self.verbose = verbose
        self._dispatch_tasks: set[asyncio.Task] = set()

    async def user_message(
        self,
        messages: list[ChannelMessage],
        primary_channel: Channel,
        conversation_id: str,
    ) -> bool:
        """Handle the latest message of a conversation.

        Args:
            messages: Conversation history, latest message last
            primary_channel: Channel the message arrived on
            conversation_id: Conversation the message arrived on

        Returns:
            True if agents were dispatched or a reply was sent
        """
        if not messages:
            logger.warning("Pipeline received an empty conversation")
            return False

        if self.mode == "plan":
            return await self._classify_then_act(messages, primary_channel, conversation_id)
        return await self._dispatch(messages[-1].content, primary_channel, conversation_id)

    async def _dispatch(
        self, prompt: str, primary_channel: Channel, conversation_id: str
    ) -> bool:
        tasks = await self.assistant.model.dispatch_list(prompt)
        if tasks is None:
            await self._send(primary_channel, conversation_id, "No agents to dispatch.")
            return False
        if not tasks:
            logger.info(f"Nothing to dispatch on {primary_channel.name}")
            return True

        logger.info(f"Dispatching {len(tasks)} agent(s) on {primary_channel.name}")
        for task in tasks:
            self._start_dispatch(task, primary_channel, conversation_id)
        return True

    async def _classify_then_act(
        self,
        messages: list[ChannelMessage],
        primary_channel: Channel,
        conversation_id: str,
    ) -> bool:
        model = self.assistant.model

        mode = await model.classify(messages)
        if mode is None:
            await self._send(
                primary_channel, conversation_id, "Could not decide how to respond."
            )
            return False

        if mode == "converse":
            reply = await model.reply(messages)
            if not reply:
                await self._send(primary_channel, conversation_id, "No reply was produced.")
                return False
            await self._send(primary_channel, conversation_id, reply, "text")
            return True

        plan = await model.plan(messages[-1].content)
        if plan is None:
            await self._send(
                primary_channel, conversation_id, "Could not draft a plan of action."
            )
            return False

        logger.info(f"Drafted plan '{plan.title}' with {len(plan.steps)} step(s)")
        self._start_dispatch(plan, primary_channel, conversation_id)
        return True

    def _start_dispatch(
        self,
        task: AgentTask | PlanOfAction,
        primary_channel: Channel,
        conversation_id: str,
    ) -> asyncio.Task:
        dispatch = asyncio.get_running_loop().create_task(
            self._dispatch_one(task, primary_channel, conversation_id)
        )
        self._dispatch_tasks.add(dispatch)
        dispatch.add_done_callback(self._dispatch_tasks.discard)
        return dispatch

    async def _dispatch_one(
        self, task: AgentTask | PlanOfAction, primary_channel: Channel, conversation_id: str
    ) -> Agent | None:
        agent = await self.assistant.agent_manager.dispatch_agent(
            task, primary_channel, conversation_id
        )
        if agent is None:
            await self._send(primary_channel, conversation_id, "Failed to dispatch an agent.")
        elif self.verbose:
            await self._send(
                primary_channel, conversation_id, f"Dispatched {agent.formatted_name}."
            )
        return agent

    async def _send(
        self,
        channel: Channel,
        conversation_id: str,
        content: str,
        type: MessageType = "log",
    ) -> None:
        try:
            await channel.send_message_as_assistant(
                ChannelMessage(content=content, type=type), conversation_id
            )
        except Exception as e:
            logger.error(f"Failed to send pipeline message on {channel.name}: {e}")

    async def wait_until_idle(self) -> None:
        """Wait for pending dispatches and every agent step chain to settle."""
        while self._dispatch_tasks:
            await asyncio.gather(*list(self._dispatch_tasks), return_exceptions=True)
        await self.assistant.agent_manager.wait_until_idle()
