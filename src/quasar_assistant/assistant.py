"""Assistant: the root object owning the managers and the inbound pipeline.

The assistant is passed explicitly to every manager it owns. Channels reach it
through their ChannelManager, agents through their AgentManager.
"""

import logging
from pathlib import Path

from quasar_assistant.agents.manager import AgentManager
from quasar_assistant.agents.plan import PlanOfAction
from quasar_assistant.channels.channel import Channel
from quasar_assistant.channels.manager import ChannelManager
from quasar_assistant.channels.types import ChannelMessage
from quasar_assistant.config import AssistantSettings
from quasar_assistant.decision.base import DecisionModel
from quasar_assistant.pipeline import Pipeline, PipelineMode
from quasar_assistant.services.manager import ServiceManager

logger = logging.getLogger(__name__)


class Assistant:
    """Owns channels, services and agents and routes inbound messages.

    Attributes:
        name: Assistant name
        model: Decision model shared by the pipeline and every agent
        description: Free-text description of the assistant
        verbose: Post internal progress as log messages on the channels
        channel_manager: Registry of channels
        service_manager: Registry of services
        agent_manager: Registry of agents
        pipeline: Handler for messages not addressed to an agent
        plans_dir: Directory completed plans are exported to, if any
    """

    def __init__(
        self,
        name: str,
        model: DecisionModel,
        description: str = "",
        verbose: bool = False,
        pipeline_mode: PipelineMode = "dispatch",
        plans_dir: Path | None = None,
    ) -> None:
        self.name = name
        self.model = model
        self.description = description
        self.verbose = verbose
        self.plans_dir = plans_dir

        self.channel_manager = ChannelManager(assistant=self)
        self.service_manager = ServiceManager(assistant=self)
        self.agent_manager = AgentManager(assistant=self)
        self.pipeline = Pipeline(assistant=self, mode=pipeline_mode, verbose=verbose)

    @classmethod
    def from_settings(
        cls, settings: AssistantSettings, model: DecisionModel
    ) -> "Assistant":
        """Build an assistant from application settings."""
        return cls(
            name=settings.assistant_name,
            model=model,
            description=settings.assistant_description,
            verbose=settings.verbose,
            pipeline_mode=settings.pipeline_mode,
            plans_dir=settings.resolved_plans_dir if settings.export_plans else None,
        )

    @property
    def export_plans(self) -> bool:
        return self.plans_dir is not None

    def record_plan(self, agent_name: str, plan: PlanOfAction) -> None:
        """Export a plan as <plans_dir>/<agent_name>.json and .md."""
        if self.plans_dir is None:
            return
        plan.record_json(self.plans_dir / f"{agent_name}.json")
        plan.record_markdown(self.plans_dir / f"{agent_name}.md")
        logger.info(f"Exported plan of Agent {agent_name} to {self.plans_dir}")

    async def start_assistant_response(
        self,
        messages: list[ChannelMessage],
        channel: Channel,
        conversation_id: str,
    ) -> bool:
        """Route the latest message of a conversation.

        A message tagged for a registered agent goes to that agent, anything
        else goes through the pipeline.

        Returns:
            True if the message was accepted, False otherwise
        """
        if not messages:
            return False

        latest = messages[-1]
        try:
            if self.agent_manager.message_belongs_to_agent(latest):
                return self.agent_manager.receive_agent_message(
                    latest.agent, conversation_id
                )
            return await self.pipeline.user_message(messages, channel, conversation_id)
        except Exception as e:
            logger.error(f"Failed to respond on {channel.name}/{conversation_id}: {e}")
            return False

    async def wait_until_idle(self) -> None:
        """Wait until every pending dispatch and agent step has settled."""
        await self.pipeline.wait_until_idle()
