"""Data types for agents."""

from dataclasses import dataclass
from enum import Enum


class AgentState(str, Enum):
    """Lifecycle state of an agent.

    Transitions: CREATED -> RUNNING on start, RUNNING <-> PAUSED,
    RUNNING -> AWAITING_USER_INPUT -> RUNNING, any -> COMPLETE (terminal).
    """

    CREATED = "created"
    RUNNING = "running"
    PAUSED = "paused"
    AWAITING_USER_INPUT = "awaiting_user_input"
    COMPLETE = "complete"


ALLOWED_TRANSITIONS: dict[AgentState, set[AgentState]] = {
    AgentState.CREATED: {AgentState.RUNNING, AgentState.COMPLETE},
    AgentState.RUNNING: {
        AgentState.PAUSED,
        AgentState.AWAITING_USER_INPUT,
        AgentState.COMPLETE,
    },
    AgentState.PAUSED: {AgentState.RUNNING, AgentState.COMPLETE},
    AgentState.AWAITING_USER_INPUT: {AgentState.RUNNING, AgentState.COMPLETE},
    AgentState.COMPLETE: set(),
}


class StepOutcome(str, Enum):
    """Result of a single agent step."""

    ADVANCED = "advanced"  # an action ran, the next step may follow
    COMPLETE = "complete"
    PAUSED = "paused"
    AWAITING_USER_INPUT = "awaiting_user_input"
    IDLE = "idle"  # created but not started
    FAILED = "failed"


@dataclass
class AgentTask:
    """A task descriptor handed to the agent manager for dispatch."""

    task: str
