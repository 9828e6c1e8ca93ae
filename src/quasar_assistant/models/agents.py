"""Pydantic models for agent API responses."""

from typing import Any

from pydantic import BaseModel, Field


class AgentResponse(BaseModel):
    """Summary of a registered agent."""

    name: str = Field(..., description="Agent name")
    state: str = Field(..., description="Lifecycle state of the agent")
    task: str = Field(..., description="Task text, or the rendered plan")
    step_count: int = Field(..., description="Number of completed steps")
    conversation_id: str = Field(..., description="Conversation the agent reports on")
    channel: str = Field(..., description="Primary channel of the agent")


class AgentDetailResponse(AgentResponse):
    """Full view of a registered agent."""

    context: dict[str, str] = Field(
        default_factory=dict, description="Key/value memory of the agent"
    )
    action_history: list[str] = Field(
        default_factory=list, description="Actions performed so far, oldest first"
    )
    last_error: str | None = Field(
        None, description="Error that aborted the most recent failed step"
    )
    plan: dict[str, Any] | None = Field(
        None, description="Plan of action state, when the task is a plan"
    )


class AgentListResponse(BaseModel):
    """Response for listing agents."""

    agents: list[AgentResponse] = Field(..., description="Registered agents")
