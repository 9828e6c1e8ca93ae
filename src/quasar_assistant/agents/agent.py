"""Agent: a perceive-decide-act loop bound to one task and one conversation.

Each step builds a perception from the agent's context, action history,
conversation history and unread messages, asks the decision model for an
action over every available module, and runs it. Steps are chained by
re-submitting the next step as a new asyncio task once the current one has
settled, so at most one step per agent is ever in flight.
"""

import asyncio
import inspect
import json
import logging
import secrets
from typing import TYPE_CHECKING, Any

from quasar_assistant.agents.agent_service import AgentService
from quasar_assistant.agents.plan import PlanOfAction
from quasar_assistant.agents.types import ALLOWED_TRANSITIONS, AgentState, StepOutcome
from quasar_assistant.channels.channel import Channel
from quasar_assistant.channels.types import ChannelMessage, MessageType
from quasar_assistant.decision.base import ActionSelection, DecisionModel
from quasar_assistant.exceptions import (
    ActionExecutionFailure,
    AssistantError,
    ConfigurationError,
    DecisionFailure,
)
from quasar_assistant.modules.tools import modules_to_tools
from quasar_assistant.modules.types import Module

if TYPE_CHECKING:
    from quasar_assistant.agents.manager import AgentManager
    from quasar_assistant.assistant import Assistant

logger = logging.getLogger(__name__)

PRIMARY_CHANNEL_MARKER = "(*PRIMARY CHANNEL)"

_OUTCOME_BY_STATE = {
    AgentState.RUNNING: StepOutcome.ADVANCED,
    AgentState.PAUSED: StepOutcome.PAUSED,
    AgentState.AWAITING_USER_INPUT: StepOutcome.AWAITING_USER_INPUT,
    AgentState.COMPLETE: StepOutcome.COMPLETE,
    AgentState.CREATED: StepOutcome.IDLE,
}


def _stringify(output: Any) -> str:
    """Render an action's return value for the agent context."""
    if isinstance(output, str):
        return output
    try:
        return json.dumps(output, default=str)
    except (TypeError, ValueError):
        return str(output)


class Agent:
    """A stateful agent working on a free-text task or a PlanOfAction.

    Attributes:
        name: Agent name, unique within its AgentManager
        task: Free-text task or structured plan
        state: Current lifecycle state
        context: Key/value memory of past action outputs (last write wins)
        action_history: Append-only log of performed actions
        step_count: Number of completed steps
        last_error: The error that aborted the most recent failed step
    """

    def __init__(
        self,
        name: str,
        model: DecisionModel,
        primary_channel: Channel,
        primary_conversation_id: str,
        task: str | PlanOfAction | None,
        verbose: bool = False,
    ) -> None:
        self.name = name
        self.model = model
        self.primary_channel = primary_channel
        self.primary_conversation_id = primary_conversation_id
        self.task = task
        self.verbose = verbose
        self.manager: "AgentManager | None" = None
        self.state = AgentState.CREATED
        self.context: dict[str, str] = {}
        self.action_history: list[str] = []
        self.step_count = 0
        self.last_error: AssistantError | None = None
        self.agent_service = AgentService(agent=self)
        self._unread_messages: list[ChannelMessage] = []
        self._step_task: asyncio.Task | None = None
        self._detached = False

    @staticmethod
    def get_random_new_name() -> str:
        """Generate a random 8-character agent name."""
        return secrets.token_hex(4).upper()

    @property
    def formatted_name(self) -> str:
        return f"Agent {self.name}"

    @property
    def plan(self) -> PlanOfAction | None:
        return self.task if isinstance(self.task, PlanOfAction) else None

    @property
    def assistant(self) -> "Assistant | None":
        return self.manager.assistant if self.manager else None

    @property
    def is_stepping(self) -> bool:
        """Whether a step is currently in flight."""
        return self._step_task is not None and not self._step_task.done()

    def register_manager(self, manager: "AgentManager") -> None:
        self.manager = manager

    def detach(self) -> None:
        """Stop scheduling further steps; called when the agent is removed."""
        self._detached = True
        self.manager = None

    def describe_task(self) -> str:
        """Render the task as text for the greeting and the decision model."""
        plan = self.plan
        if plan is None:
            return str(self.task or "")

        text = plan.describe()
        current = plan.get_current_step()
        if current is not None:
            text += f"\n\nCurrent step: {current.description}"
        return text

    # --- Modules ---

    def modules_available(self) -> list[Module]:
        """List every module this agent can act through.

        Services and channels come from the assistant; the primary channel is
        marked as such. The agent's own self-service is always last.
        """
        services: list[Module] = []
        channels: list[Module] = []

        assistant = self.assistant
        if assistant is not None:
            services = assistant.service_manager.get_service_list()
            for channel in assistant.channel_manager.get_channels():
                if channel.name == self.primary_channel.name:
                    channels.append(
                        channel.as_module(
                            f"{PRIMARY_CHANNEL_MARKER} {channel.description}"
                        )
                    )
                else:
                    channels.append(channel.as_module())

        return [*services, *channels, self.agent_service.as_module()]

    def modules_map(self) -> dict[str, Module]:
        return {module.name: module for module in self.modules_available()}

    # --- Context and perception ---

    def add_to_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def get_context_as_string(self) -> str:
        return "\n".join(f"{key}: {value}" for key, value in self.context.items())

    def get_agent_conversation_history(self) -> list[ChannelMessage]:
        return self.primary_channel.get_agent_history(
            self.name, self.primary_conversation_id
        )

    def build_perception(self, unread_messages: list[ChannelMessage]) -> str:
        """Build the textual snapshot fed to the decision model."""
        history = "\n".join(
            f"{message.role}: {message.content}"
            for message in self.get_agent_conversation_history()
        )
        latest = "\n".join(message.content for message in unread_messages)
        return (
            "Here is some additional context for your reference:\n"
            f"{self.get_context_as_string()}\n"
            "---\n"
            "Action history:\n"
            f"{chr(10).join(self.action_history)}\n"
            "---\n"
            "Your conversation history:\n"
            f"{history}\n"
            "---\n"
            "Latest messages:\n"
            f"{latest}"
        )

    # --- State ---

    def _transition(self, new_state: AgentState) -> bool:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            logger.warning(
                f"{self.formatted_name}: refused transition "
                f"{self.state.value} -> {new_state.value}"
            )
            return False
        logger.debug(
            f"{self.formatted_name}: {self.state.value} -> {new_state.value}"
        )
        self.state = new_state
        return True

    async def mark_complete(self) -> bool:
        """Mark the task complete. Complete is terminal."""
        if not self._transition(AgentState.COMPLETE):
            return False

        plan = self.plan
        if plan is not None and not plan.finished:
            plan.mark_completed()
        await self.finish()
        return True

    def mark_paused(self) -> bool:
        return self._transition(AgentState.PAUSED)

    def resume(self) -> bool:
        """Resume a paused agent and schedule its next step."""
        if self.state is not AgentState.PAUSED:
            logger.warning(f"{self.formatted_name}: resume ignored, not paused")
            return False
        self._transition(AgentState.RUNNING)
        self.schedule()
        return True

    async def prompt_user(self, message: str) -> str:
        """Ask the user something and wait for a reply addressed to this agent.

        Nothing is sent unless the agent can move to awaiting user input.
        """
        if not self._transition(AgentState.AWAITING_USER_INPUT):
            return f"Cannot prompt the user while {self.state.value}."
        await self.send_primary_channel_message(message)
        return "Prompted user, awaiting a response."

    async def finish(self) -> None:
        """Record the outcome of a completed task."""
        logger.info(f"{self.formatted_name} has finished")

        assistant = self.assistant
        plan = self.plan
        if plan is not None and assistant is not None and assistant.export_plans:
            try:
                assistant.record_plan(self.name, plan)
            except OSError as e:
                logger.error(f"{self.formatted_name}: failed to export plan: {e}")

        if self.verbose:
            await self.send_primary_channel_message(
                f"{self.formatted_name} has finished.", "log"
            )
            await self.send_primary_channel_message(
                "Action history:\n" + "\n".join(self.action_history), "log"
            )

    # --- Messages ---

    async def send_primary_channel_message(
        self, message: str, type: MessageType = "text"
    ) -> bool:
        """Send a message to the primary conversation, prefixed with the agent name."""
        try:
            await self.primary_channel.send_message_as_assistant(
                ChannelMessage(
                    content=f"{self.formatted_name}: {message}",
                    agent=self.name,
                    type=type,
                ),
                self.primary_conversation_id,
            )
            return True
        except Exception as e:
            logger.error(f"{self.formatted_name}: failed to send message: {e}")
            return False

    async def send_greeting_message(self) -> bool:
        return await self.send_primary_channel_message(
            "initialized to complete the following task:\n"
            f'"{self.describe_task()}"',
            "log",
        )

    def receive_message(self, conversation_id: str | None = None) -> bool:
        """Queue the latest message addressed to this agent.

        An agent awaiting user input goes back to running and its loop is
        scheduled again.
        """
        history = self.primary_channel.get_agent_history(
            self.name, conversation_id or self.primary_conversation_id
        )
        if not history:
            return False

        self._unread_messages.append(history[-1])

        if self.state is AgentState.AWAITING_USER_INPUT:
            self._transition(AgentState.RUNNING)
            self.schedule()
        return True

    # --- Loop ---

    async def start(self, autorun: bool = True) -> None:
        """Start the agent: greet on the primary channel, then begin the loop.

        Args:
            autorun: Schedule the step chain immediately. With False, steps
                     are only run by explicit step() calls.
        """
        self._transition(AgentState.RUNNING)
        await self.send_greeting_message()
        if autorun:
            self.schedule()

    def schedule(self) -> asyncio.Task | None:
        """Submit the next step unless one is already in flight.

        Returns:
            The in-flight step task, or None when the agent is not running
        """
        if self.is_stepping:
            return self._step_task
        if self._detached or self.state is not AgentState.RUNNING:
            return None

        self._step_task = asyncio.get_running_loop().create_task(
            self.step(), name=f"agent-{self.name}-step-{self.step_count}"
        )
        self._step_task.add_done_callback(self._on_step_settled)
        return self._step_task

    def _on_step_settled(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"{self.formatted_name}: step crashed: {error}")
            return
        if task.result() is StepOutcome.ADVANCED:
            self.schedule()

    async def wait_until_idle(self) -> None:
        """Wait until no step is in flight and none has been chained."""
        while self.is_stepping:
            await asyncio.wait([self._step_task])

    async def _fail(self, error: AssistantError) -> StepOutcome:
        self.last_error = error
        logger.error(f"{self.formatted_name}: {type(error).__name__}: {error}")
        if self.verbose:
            await self.send_primary_channel_message(
                f"{type(error).__name__}: {error}", "log"
            )
        return StepOutcome.FAILED

    def _advance(self) -> StepOutcome:
        self.step_count += 1
        plan = self.plan
        if plan is not None and not plan.finished:
            plan.complete_current_step()
        return _OUTCOME_BY_STATE[self.state]

    async def step(self) -> StepOutcome:
        """Run one perceive-decide-act iteration.

        Returns:
            ADVANCED when an action ran and the agent is still running,
            otherwise the reason the chain stops here
        """
        if not self.task:
            return await self._fail(
                ConfigurationError(f"{self.formatted_name} has no task.")
            )

        if self.state is not AgentState.RUNNING:
            return _OUTCOME_BY_STATE[self.state]

        plan = self.plan
        if plan is not None and plan.is_exhausted:
            await self.mark_complete()
            return StepOutcome.COMPLETE

        unread_messages, self._unread_messages = self._unread_messages, []

        perception = self.build_perception(unread_messages)
        modules = self.modules_map()
        tools = modules_to_tools(list(modules.values()))

        try:
            decision = await self.model.decide(self.describe_task(), tools, perception)
        except Exception as e:
            return await self._fail(DecisionFailure(f"Decision model raised: {e}"))

        if decision is None:
            return await self._fail(DecisionFailure("No action was selected."))

        if isinstance(decision, str):
            decision = ActionSelection.primary_channel_message(decision)

        try:
            arguments = json.loads(decision.arguments or "{}")
        except json.JSONDecodeError as e:
            return await self._fail(
                DecisionFailure(f"Unparsable arguments for {decision.tool_name}: {e}")
            )
        if not isinstance(arguments, dict):
            return await self._fail(
                DecisionFailure(f"Arguments for {decision.tool_name} are not an object.")
            )

        if self.verbose:
            await self.send_primary_channel_message(
                f"Selected {decision.tool_name}. {decision.reason}".strip(), "log"
            )

        if decision.uses_primary_channel:
            message = arguments.get("message")
            if not message:
                return await self._fail(
                    DecisionFailure("Primary channel message was empty.")
                )
            await self.send_primary_channel_message(str(message))
            return self._advance()

        module = modules.get(decision.module_name)
        method = module.find_method(decision.method_name) if module else None
        if method is None:
            return await self._fail(
                ActionExecutionFailure(
                    f"Missing method {decision.method_name} "
                    f"on module {decision.module_name}."
                )
            )

        try:
            output = method.perform_action({**arguments, "agent": self.name})
            if inspect.isawaitable(output):
                output = await output
        except Exception as e:
            return await self._fail(
                ActionExecutionFailure(
                    f"{decision.module_name}.{decision.method_name} raised: {e}"
                )
            )

        qualified_name = f"{decision.module_name}.{decision.method_name}"
        self.action_history.append(
            f'Step {self.step_count}: performed "{decision.method_name}" on module '
            f'"{decision.module_name}" with arguments: {json.dumps(arguments)}'
        )
        self.add_to_context(f"{self.step_count}_{qualified_name}", _stringify(output))

        if self.verbose:
            await self.send_primary_channel_message(
                f"Performed action {qualified_name} with arguments "
                f"{json.dumps(arguments)} and output: {_stringify(output)}",
                "log",
            )

        return self._advance()
