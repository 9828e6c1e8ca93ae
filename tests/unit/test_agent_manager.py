"""Unit tests for AgentManager."""

import re

import pytest

from quasar_assistant.agents import (
    AGENT_SERVICE_NAME,
    Agent,
    AgentManager,
    AgentState,
    AgentTask,
    PlanOfAction,
)
from quasar_assistant.channels import ChannelMessage
from quasar_assistant.decision import select
from quasar_assistant.exceptions import DuplicateNameError


def _agent(assistant, channel, name="AAAA0001", task="a task") -> Agent:
    return Agent(
        name=name,
        model=assistant.model,
        primary_channel=channel,
        primary_conversation_id="c1",
        task=task,
    )


def test_random_names_are_eight_hex_characters():
    name = Agent.get_random_new_name()

    assert re.fullmatch(r"[0-9A-F]{8}", name)


def test_duplicate_registration_keeps_the_first(assistant, channel):
    manager = assistant.agent_manager
    first = manager.register_agent(_agent(assistant, channel))

    with pytest.raises(DuplicateNameError, match="Agent with name AAAA0001 already exists."):
        manager.register_agent(_agent(assistant, channel, task="another"))

    assert manager.get_agent("AAAA0001") is first
    assert first.manager is manager
    assert len(manager.list_agents()) == 1


def test_register_agents(assistant, channel):
    manager = assistant.agent_manager

    manager.register_agents([_agent(assistant, channel, "ONE"), _agent(assistant, channel, "TWO")])

    assert [a.name for a in manager.list_agents()] == ["ONE", "TWO"]
    assert manager.describe_agents()[0] == {
        "name": "ONE",
        "state": "created",
        "task": "a task",
        "step_count": 0,
    }


def test_message_belongs_to_agent(assistant, channel):
    manager = assistant.agent_manager
    manager.register_agent(_agent(assistant, channel))

    assert manager.message_belongs_to_agent(ChannelMessage(content="x", agent="AAAA0001"))
    assert not manager.message_belongs_to_agent(ChannelMessage(content="x", agent="UNKNOWN"))
    assert not manager.message_belongs_to_agent(ChannelMessage(content="x"))


def test_receive_message_for_unknown_agent(assistant):
    assert assistant.agent_manager.receive_agent_message("UNKNOWN", "c1") is False


def test_receive_message_with_nothing_tagged(assistant, channel):
    manager = assistant.agent_manager
    agent = manager.register_agent(_agent(assistant, channel))
    channel.receive_message(ChannelMessage(content="untagged"), "c1")

    assert manager.receive_agent_message(agent.name, "c1") is False


@pytest.mark.asyncio
async def test_receive_message_queues_without_resuming_running_agent(
    assistant, channel, decision_model
):
    manager = assistant.agent_manager
    agent = manager.register_agent(_agent(assistant, channel))
    await agent.start(autorun=False)
    channel.receive_message(ChannelMessage(content="extra info", agent=agent.name), "c1")

    assert manager.receive_agent_message(agent.name, "c1") is True
    assert agent.is_stepping is False

    decision_model.decisions.append("ok")
    await agent.step()

    assert "extra info" in decision_model.decide_calls[0].perception


@pytest.mark.asyncio
async def test_dispatch_agent_starts_an_agent(assistant, channel, decision_model):
    decision_model.decisions.append(select(AGENT_SERVICE_NAME, "mark_complete", complete=True))

    agent = await assistant.agent_manager.dispatch_agent(
        AgentTask(task="say hello"), channel, "c1"
    )
    await assistant.agent_manager.wait_until_idle()

    assert agent is not None
    assert assistant.agent_manager.get_agent(agent.name) is agent
    assert agent.task == "say hello"
    assert agent.model is decision_model
    assert agent.state is AgentState.COMPLETE
    assert "say hello" in channel.get_conversation_history("c1")[0].content


@pytest.mark.asyncio
async def test_dispatch_agent_accepts_a_plan(assistant, channel):
    plan = PlanOfAction(title="Plan", steps=[{"description": "only step"}])

    agent = await assistant.agent_manager.dispatch_agent(plan, channel, "c1")
    await assistant.agent_manager.wait_until_idle()

    assert agent.plan is plan


@pytest.mark.asyncio
async def test_dispatch_without_assistant(channel):
    manager = AgentManager()

    assert await manager.dispatch_agent("task", channel, "c1") is None
    assert manager.list_agents() == []


@pytest.mark.asyncio
async def test_pause_and_resume_agent(assistant, channel, decision_model):
    manager = assistant.agent_manager
    agent = manager.register_agent(_agent(assistant, channel))
    await agent.start(autorun=False)

    assert manager.pause_agent(agent.name) is True
    assert agent.state is AgentState.PAUSED
    assert manager.pause_agent(agent.name) is False
    assert manager.pause_agent("UNKNOWN") is False

    assert manager.resume_agent(agent.name) is True
    await manager.wait_until_idle()
    assert manager.resume_agent("UNKNOWN") is False


@pytest.mark.asyncio
async def test_remove_agent_stops_scheduling(assistant, channel):
    manager = assistant.agent_manager
    plan = PlanOfAction(title="Plan", steps=[{"description": "step"}])
    agent = manager.register_agent(_agent(assistant, channel, task=plan))
    await agent.start(autorun=False)

    removed = manager.remove_agent(agent.name)

    assert removed is agent
    assert manager.get_agent(agent.name) is None
    assert agent.schedule() is None
    assert plan.finish_reason == "ABORTED"
    assert manager.remove_agent(agent.name) is None
