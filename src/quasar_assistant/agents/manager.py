"""AgentManager: registry and lifecycle control for agents."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from quasar_assistant.agents.agent import Agent
from quasar_assistant.agents.plan import PlanOfAction
from quasar_assistant.agents.types import AgentTask
from quasar_assistant.channels.channel import Channel
from quasar_assistant.channels.types import ChannelMessage
from quasar_assistant.exceptions import DuplicateNameError

if TYPE_CHECKING:
    from quasar_assistant.assistant import Assistant

logger = logging.getLogger(__name__)


class AgentManager:
    """Maps agent names to agents and routes user replies to them."""

    def __init__(self, assistant: "Assistant | None" = None) -> None:
        self.assistant = assistant
        self._agents: dict[str, Agent] = {}

    def register_agent(self, agent: Agent) -> Agent:
        """Register an agent and bind it to this manager.

        Raises:
            DuplicateNameError: If an agent with the same name is registered
        """
        if agent.name in self._agents:
            raise DuplicateNameError("agent", agent.name)

        agent.register_manager(self)
        self._agents[agent.name] = agent
        logger.info(f"Registered {agent.formatted_name}")
        return agent

    def register_agents(self, agents: list[Agent]) -> None:
        for agent in agents:
            self.register_agent(agent)

    def get_agent(self, name: str) -> Agent | None:
        return self._agents.get(name)

    def list_agents(self) -> list[Agent]:
        return list(self._agents.values())

    def describe_agents(self) -> list[dict[str, Any]]:
        """Summarize every registered agent for display."""
        return [
            {
                "name": agent.name,
                "state": agent.state.value,
                "task": agent.describe_task(),
                "step_count": agent.step_count,
            }
            for agent in self._agents.values()
        ]

    def message_belongs_to_agent(self, message: ChannelMessage) -> bool:
        """Check whether a message is tagged for a registered agent."""
        return bool(message.agent) and message.agent in self._agents

    def receive_agent_message(self, agent_name: str, conversation_id: str) -> bool:
        """Hand the latest message tagged for an agent to that agent.

        Returns:
            True if a message tagged for the agent was queued
        """
        agent = self._agents.get(agent_name)
        if agent is None:
            logger.warning(f"No agent named {agent_name} to receive a message")
            return False

        return agent.receive_message(conversation_id)

    async def init_and_start_agent(self, agent: Agent, autorun: bool = True) -> Agent:
        """Register an already constructed agent and start it."""
        self.register_agent(agent)
        await agent.start(autorun=autorun)
        return agent

    async def dispatch_agent(
        self,
        task: AgentTask | PlanOfAction | str,
        primary_channel: Channel,
        conversation_id: str,
    ) -> Agent | None:
        """Create, register and start an agent for a task.

        Args:
            task: A task descriptor, free text or a plan of action
            primary_channel: Channel the agent reports on
            conversation_id: Conversation the agent reports on

        Returns:
            The started agent, or None if it could not be dispatched
        """
        if self.assistant is None:
            logger.error("Cannot dispatch an agent without an assistant")
            return None

        if isinstance(task, AgentTask):
            task = task.task

        try:
            agent = Agent(
                name=Agent.get_random_new_name(),
                model=self.assistant.model,
                primary_channel=primary_channel,
                primary_conversation_id=conversation_id,
                task=task,
                verbose=self.assistant.verbose,
            )
            return await self.init_and_start_agent(agent)
        except Exception as e:
            logger.error(f"Failed to dispatch agent: {e}")
            return None

    def pause_agent(self, name: str) -> bool:
        agent = self._agents.get(name)
        return agent.mark_paused() if agent else False

    def resume_agent(self, name: str) -> bool:
        agent = self._agents.get(name)
        return agent.resume() if agent else False

    def remove_agent(self, name: str) -> Agent | None:
        """Unregister an agent. A step already in flight is left to settle.

        Returns:
            The removed agent, or None if it was not registered
        """
        agent = self._agents.pop(name, None)
        if agent is None:
            return None

        plan = agent.plan
        if plan is not None and not plan.finished:
            plan.mark_finished("ABORTED")
        agent.detach()
        logger.info(f"Removed {agent.formatted_name} ({agent.state.value})")
        return agent

    async def wait_until_idle(self) -> None:
        """Wait until no registered agent has a step in flight."""
        while True:
            pending = [agent for agent in self._agents.values() if agent.is_stepping]
            if not pending:
                return
            await asyncio.gather(*(agent.wait_until_idle() for agent in pending))
