"""Agents router for inspecting and controlling running agents."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from quasar_assistant.agents.agent import Agent
from quasar_assistant.agents.manager import AgentManager
from quasar_assistant.dependencies import get_agent_manager
from quasar_assistant.models.agents import (
    AgentDetailResponse,
    AgentListResponse,
    AgentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/agents", tags=["agents"])


def _summary(agent: Agent) -> AgentResponse:
    return AgentResponse(
        name=agent.name,
        state=agent.state.value,
        task=agent.describe_task(),
        step_count=agent.step_count,
        conversation_id=agent.primary_conversation_id,
        channel=agent.primary_channel.name,
    )


def _detail(agent: Agent) -> AgentDetailResponse:
    plan = agent.plan
    return AgentDetailResponse(
        **_summary(agent).model_dump(),
        context=dict(agent.context),
        action_history=list(agent.action_history),
        last_error=str(agent.last_error) if agent.last_error else None,
        plan=plan.to_dict() if plan else None,
    )


def _get_or_404(agent_manager: AgentManager, name: str) -> Agent:
    agent = agent_manager.get_agent(name)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": {
                    "code": "agent_not_found",
                    "message": f"Agent '{name}' not found",
                    "details": {"name": name},
                }
            },
        )
    return agent


def _refused(agent: Agent, action: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": {
                "code": "invalid_transition",
                "message": f"Cannot {action} agent '{agent.name}' in state {agent.state.value}",
                "details": {"name": agent.name, "state": agent.state.value},
            }
        },
    )


@router.get("", response_model=AgentListResponse, summary="List all agents")
async def list_agents(
    agent_manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> AgentListResponse:
    return AgentListResponse(
        agents=[_summary(agent) for agent in agent_manager.list_agents()]
    )


@router.get("/{name}", response_model=AgentDetailResponse, summary="Get an agent")
async def get_agent(
    name: str,
    agent_manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> AgentDetailResponse:
    """Get the state, context and action history of an agent.

    Raises:
        HTTPException: 404 if the agent doesn't exist
    """
    return _detail(_get_or_404(agent_manager, name))


@router.post("/{name}/pause", response_model=AgentResponse, summary="Pause an agent")
async def pause_agent(
    name: str,
    agent_manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> AgentResponse:
    """Pause a running agent. A step already in flight finishes first.

    Raises:
        HTTPException: 404 if the agent doesn't exist
        HTTPException: 409 if the agent cannot be paused from its current state
    """
    agent = _get_or_404(agent_manager, name)
    if not agent_manager.pause_agent(name):
        raise _refused(agent, "pause")
    logger.info(f"Paused {agent.formatted_name} via API")
    return _summary(agent)


@router.post("/{name}/resume", response_model=AgentResponse, summary="Resume an agent")
async def resume_agent(
    name: str,
    agent_manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> AgentResponse:
    """Resume a paused agent.

    Raises:
        HTTPException: 404 if the agent doesn't exist
        HTTPException: 409 if the agent is not paused
    """
    agent = _get_or_404(agent_manager, name)
    if not agent_manager.resume_agent(name):
        raise _refused(agent, "resume")
    logger.info(f"Resumed {agent.formatted_name} via API")
    return _summary(agent)


@router.delete(
    "/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove an agent",
)
async def delete_agent(
    name: str,
    agent_manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> None:
    """Remove an agent. It stops scheduling further steps.

    Raises:
        HTTPException: 404 if the agent doesn't exist
    """
    _get_or_404(agent_manager, name)
    agent_manager.remove_agent(name)
