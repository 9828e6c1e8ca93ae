"""Deterministic decision model that replays scripted answers.

Useful for tests and offline demos: every call pops the next queued answer for
that kind of decision and records what it was asked. An exhausted script
answers None, which the engine treats as a decision failure.
"""

import json
from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable

from quasar_assistant.agents.plan import PlanOfAction
from quasar_assistant.agents.types import AgentTask
from quasar_assistant.channels.types import ChannelMessage
from quasar_assistant.decision.base import ActionSelection, Decision, ResponseMode
from quasar_assistant.modules.tools import ToolDefinition, qualified_tool_name


def select(
    module_name: str, method_name: str, reason: str = "", **arguments: Any
) -> ActionSelection:
    """Build a selection of a module method with keyword arguments."""
    return ActionSelection(
        tool_name=qualified_tool_name(module_name, method_name),
        module_name=module_name,
        method_name=method_name,
        arguments=json.dumps(arguments),
        reason=reason,
    )


@dataclass
class DecideCall:
    """Arguments of one decide() call."""

    task: str
    tools: list[ToolDefinition]
    perception: str


class ScriptedDecisionModel:
    """Decision model answering from pre-recorded queues."""

    def __init__(
        self,
        decisions: Iterable[Decision] | None = None,
        dispatch_lists: Iterable[list[AgentTask] | None] | None = None,
        modes: Iterable[ResponseMode | None] | None = None,
        replies: Iterable[str | None] | None = None,
        plans: Iterable[PlanOfAction | None] | None = None,
    ) -> None:
        self.decisions: deque[Decision] = deque(decisions or [])
        self.dispatch_lists: deque[list[AgentTask] | None] = deque(dispatch_lists or [])
        self.modes: deque[ResponseMode | None] = deque(modes or [])
        self.replies: deque[str | None] = deque(replies or [])
        self.plans: deque[PlanOfAction | None] = deque(plans or [])
        self.decide_calls: list[DecideCall] = []
        self.prompts: list[str] = []

    async def decide(
        self, task: str, tools: list[ToolDefinition], perception: str
    ) -> Decision:
        self.decide_calls.append(DecideCall(task=task, tools=tools, perception=perception))
        return self.decisions.popleft() if self.decisions else None

    async def dispatch_list(self, prompt: str) -> list[AgentTask] | None:
        self.prompts.append(prompt)
        return self.dispatch_lists.popleft() if self.dispatch_lists else None

    async def classify(self, messages: list[ChannelMessage]) -> ResponseMode | None:
        return self.modes.popleft() if self.modes else None

    async def reply(self, messages: list[ChannelMessage]) -> str | None:
        return self.replies.popleft() if self.replies else None

    async def plan(self, prompt: str) -> PlanOfAction | None:
        self.prompts.append(prompt)
        return self.plans.popleft() if self.plans else None
