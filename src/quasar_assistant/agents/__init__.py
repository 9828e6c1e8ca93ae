"""Agents: the perceive-decide-act loop and its registry."""

from quasar_assistant.agents.types import ALLOWED_TRANSITIONS, AgentState, AgentTask, StepOutcome
from quasar_assistant.agents.plan import PlanOfAction, PlanStep
from quasar_assistant.agents.agent_service import AGENT_SERVICE_NAME, AgentService
from quasar_assistant.agents.agent import Agent
from quasar_assistant.agents.manager import AgentManager

__all__ = [
    "AGENT_SERVICE_NAME",
    "ALLOWED_TRANSITIONS",
    "Agent",
    "AgentManager",
    "AgentService",
    "AgentState",
    "AgentTask",
    "PlanOfAction",
    "PlanStep",
    "StepOutcome",
]
