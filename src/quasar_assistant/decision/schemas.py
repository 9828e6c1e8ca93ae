"""Pydantic schemas for structured decision model outputs.

The JSON schema of each model is sent to the LLM as the requested output
format, and the response is validated back into the model.
"""

from typing import Literal

from pydantic import BaseModel, Field


class AgentToDispatch(BaseModel):
    """A single agent to dispatch."""

    task: str = Field(..., description="The task for this agent to complete.")


class AgentDispatchList(BaseModel):
    """Agents to dispatch for a user message."""

    agents: list[AgentToDispatch] = Field(
        default_factory=list, description="The agents to be delegated."
    )


class ResponseModeDecision(BaseModel):
    """Classification of a user message."""

    decision: Literal["converse", "action"] = Field(
        ..., description="converse to reply directly, action to act on it."
    )
    reason: str = Field("", description="The reason for the decision.")


class PlanStepDefinition(BaseModel):
    """A step of a drafted plan."""

    description: str = Field(..., description="What has to be done in this step.")
    required: bool = Field(True, description="Whether the step is mandatory.")


class PlanDefinition(BaseModel):
    """A drafted plan of action."""

    title: str = Field(..., description="Short title of the plan.")
    steps: list[PlanStepDefinition] = Field(
        ..., min_length=1, description="Ordered steps of the plan."
    )
