"""Decision model contract.

A decision model turns a task, a perception and a list of tools into an action.
It also drives the pipeline: splitting a message into agent tasks, classifying
a message, replying directly, and drafting a plan of action.

Implementations must never raise. Every failure is reported by returning None.
"""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

from quasar_assistant.channels.types import ChannelMessage
from quasar_assistant.modules.tools import ToolDefinition

if TYPE_CHECKING:
    from quasar_assistant.agents.plan import PlanOfAction
    from quasar_assistant.agents.types import AgentTask

ResponseMode = Literal["converse", "action"]

# Reserved action: send free text to the agent's primary channel
USE_PRIMARY_CHANNEL = "usePrimaryChannel"


@dataclass(frozen=True)
class ActionSelection:
    """A tool chosen by the decision model.

    Attributes:
        tool_name: Name of the selected tool as the model saw it
        module_name: Module that owns the method
        method_name: Method to invoke
        arguments: JSON text of the arguments object
        reason: Optional explanation given by the model
    """

    tool_name: str
    module_name: str
    method_name: str
    arguments: str = "{}"
    reason: str = ""

    @classmethod
    def primary_channel_message(cls, message: str, reason: str = "") -> "ActionSelection":
        """Build the reserved selection that sends text to the primary channel."""
        return cls(
            tool_name=USE_PRIMARY_CHANNEL,
            module_name="",
            method_name=USE_PRIMARY_CHANNEL,
            arguments=json.dumps({"message": message}),
            reason=reason,
        )

    @property
    def uses_primary_channel(self) -> bool:
        return USE_PRIMARY_CHANNEL in (self.tool_name, self.method_name)


# A selection, free text for the primary channel, or None on failure
Decision = ActionSelection | str | None


@runtime_checkable
class DecisionModel(Protocol):
    """Interface every decision backend implements."""

    async def decide(
        self, task: str, tools: list[ToolDefinition], perception: str
    ) -> Decision:
        """Select the next action for a task."""
        ...

    async def dispatch_list(self, prompt: str) -> "list[AgentTask] | None":
        """Split a user message into independent agent tasks."""
        ...

    async def classify(self, messages: list[ChannelMessage]) -> ResponseMode | None:
        """Decide whether the latest message needs a reply or an action."""
        ...

    async def reply(self, messages: list[ChannelMessage]) -> str | None:
        """Produce a direct conversational reply."""
        ...

    async def plan(self, prompt: str) -> "PlanOfAction | None":
        """Draft a plan of action for a user request."""
        ...
