"""Unit tests for the inbound Pipeline and the assistant router."""

from unittest.mock import AsyncMock

import pytest

from quasar_assistant.agents import AGENT_SERVICE_NAME, AgentState, AgentTask, PlanOfAction
from quasar_assistant.assistant import Assistant
from quasar_assistant.channels import Channel, ChannelMessage
from quasar_assistant.decision import select
from quasar_assistant.pipeline import Pipeline


async def _say(channel: Channel, content: str, conversation_id: str = "c1") -> bool:
    return await channel.start_assistant_response(ChannelMessage(content=content), conversation_id)


def test_unknown_mode_is_rejected(assistant):
    with pytest.raises(ValueError):
        Pipeline(assistant, mode="broadcast")


class TestDispatchMode:
    @pytest.mark.asyncio
    async def test_dispatches_one_agent_per_task(self, assistant, channel, decision_model):
        decision_model.dispatch_lists.append(
            [AgentTask(task="find the weather"), AgentTask(task="book a table")]
        )

        result = await _say(channel, "weather and dinner please")
        await assistant.wait_until_idle()

        assert result is True
        assert decision_model.prompts == ["weather and dinner please"]
        agents = assistant.agent_manager.list_agents()
        assert sorted(a.task for a in agents) == ["book a table", "find the weather"]
        assert all(a.primary_conversation_id == "c1" for a in agents)
        assert all(a.primary_channel is channel for a in agents)

    @pytest.mark.asyncio
    async def test_empty_dispatch_list_is_accepted(self, assistant, channel, decision_model):
        decision_model.dispatch_lists.append([])

        result = await _say(channel, "thanks")

        assert result is True
        assert [m.content for m in channel.get_conversation_history("c1")] == ["thanks"]
        assert assistant.agent_manager.list_agents() == []

    @pytest.mark.asyncio
    async def test_failed_dispatch_list(self, assistant, channel):
        result = await _say(channel, "hmm")

        assert result is False
        last = channel.get_conversation_history("c1")[-1]
        assert last.content == "No agents to dispatch."
        assert last.type == "log"
        assert last.role == "assistant"
        assert assistant.agent_manager.list_agents() == []

    @pytest.mark.asyncio
    async def test_verbose_reports_each_dispatch(self, decision_model, transport):
        assistant = Assistant(name="Test", model=decision_model, verbose=True)
        channel = assistant.channel_manager.register_channel(
            Channel(name="test-channel", description="d", deliver=transport)
        )
        decision_model.dispatch_lists.append([AgentTask(task="one")])

        await _say(channel, "do one thing")
        await assistant.wait_until_idle()

        [agent] = assistant.agent_manager.list_agents()
        assert f"Dispatched Agent {agent.name}." in transport.contents("c1")

    @pytest.mark.asyncio
    async def test_one_failing_dispatch_does_not_affect_others(
        self, assistant, channel, decision_model
    ):
        decision_model.dispatch_lists.append([AgentTask(task="one"), AgentTask(task="two")])
        real_dispatch = assistant.agent_manager.dispatch_agent
        calls = []

        async def flaky_dispatch(task, primary_channel, conversation_id):
            calls.append(task)
            if len(calls) == 1:
                return None
            return await real_dispatch(task, primary_channel, conversation_id)

        assistant.agent_manager.dispatch_agent = flaky_dispatch

        await _say(channel, "two things")
        await assistant.wait_until_idle()

        assert len(calls) == 2
        assert len(assistant.agent_manager.list_agents()) == 1
        contents = [m.content for m in channel.get_conversation_history("c1")]
        assert "Failed to dispatch an agent." in contents


class TestPlanMode:
    @pytest.fixture
    def assistant(self, decision_model):
        return Assistant(name="Test", model=decision_model, pipeline_mode="plan")

    @pytest.mark.asyncio
    async def test_converse_replies_directly(self, assistant, channel, decision_model):
        decision_model.modes.append("converse")
        decision_model.replies.append("Hello there!")

        result = await _say(channel, "hi")

        assert result is True
        last = channel.get_conversation_history("c1")[-1]
        assert last.content == "Hello there!"
        assert last.type == "text"
        assert assistant.agent_manager.list_agents() == []

    @pytest.mark.asyncio
    async def test_action_dispatches_one_planned_agent(self, assistant, channel, decision_model):
        plan = PlanOfAction(title="Greet", steps=[{"description": "say hi"}])
        decision_model.modes.append("action")
        decision_model.plans.append(plan)
        decision_model.decisions.append("hi")

        result = await _say(channel, "greet me")
        await assistant.wait_until_idle()

        assert result is True
        assert decision_model.prompts == ["greet me"]
        [agent] = assistant.agent_manager.list_agents()
        assert agent.plan is plan
        assert agent.state is AgentState.COMPLETE
        assert plan.finish_reason == "COMPLETED"

    @pytest.mark.asyncio
    async def test_classification_failure(self, assistant, channel):
        assert await _say(channel, "hi") is False
        assert channel.get_conversation_history("c1")[-1].type == "log"

    @pytest.mark.asyncio
    async def test_plan_failure(self, assistant, channel, decision_model):
        decision_model.modes.append("action")

        assert await _say(channel, "do it") is False
        assert (
            channel.get_conversation_history("c1")[-1].content
            == "Could not draft a plan of action."
        )

    @pytest.mark.asyncio
    async def test_empty_reply(self, assistant, channel, decision_model):
        decision_model.modes.append("converse")

        assert await _say(channel, "hi") is False


class TestAssistantRouting:
    @pytest.mark.asyncio
    async def test_message_for_agent_bypasses_pipeline(self, assistant, channel, decision_model):
        decision_model.dispatch_lists.append([AgentTask(task="ask a question")])
        decision_model.decisions.append(
            select(AGENT_SERVICE_NAME, "prompt_user", message="Which city?")
        )
        await _say(channel, "plan a trip")
        await assistant.wait_until_idle()
        [agent] = assistant.agent_manager.list_agents()
        assert agent.state is AgentState.AWAITING_USER_INPUT

        decision_model.decisions.append(select(AGENT_SERVICE_NAME, "mark_complete", complete=True))
        result = await channel.start_assistant_response(
            ChannelMessage(content="Paris", agent=agent.name), "c1"
        )
        await assistant.wait_until_idle()

        assert result is True
        assert len(decision_model.prompts) == 1
        assert agent.state is AgentState.COMPLETE

    @pytest.mark.asyncio
    async def test_message_for_unknown_agent_goes_to_pipeline(self, assistant, channel, decision_model):
        decision_model.dispatch_lists.append([])

        await channel.start_assistant_response(
            ChannelMessage(content="hello", agent="UNKNOWN"), "c1"
        )

        assert decision_model.prompts == ["hello"]

    @pytest.mark.asyncio
    async def test_pipeline_errors_are_reported_as_false(self, assistant, channel):
        assistant.pipeline.user_message = AsyncMock(side_effect=RuntimeError("boom"))

        assert await _say(channel, "hi") is False

    @pytest.mark.asyncio
    async def test_empty_history(self, assistant, channel):
        assert await assistant.start_assistant_response([], channel, "c1") is False

    def test_from_settings(self, test_settings, decision_model):
        test_settings.export_plans = True
        test_settings.pipeline_mode = "plan"

        assistant = Assistant.from_settings(test_settings, decision_model)

        assert assistant.name == "Quasar"
        assert assistant.pipeline.mode == "plan"
        assert assistant.export_plans is True
        assert assistant.plans_dir == test_settings.resolved_plans_dir
