"""Self-service module bound to a single agent.

Gives the decision model a way to act on the agent itself: remember facts,
finish, pause, or ask the user something.
"""

from typing import TYPE_CHECKING, Any

from quasar_assistant.modules.types import ModuleMethod, object_schema
from quasar_assistant.services.service import Service

if TYPE_CHECKING:
    from quasar_assistant.agents.agent import Agent

AGENT_SERVICE_NAME = "agent-service"


class AgentService(Service):
    """Service exposing record_to_context, mark_complete, mark_paused and prompt_user."""

    def __init__(self, agent: "Agent") -> None:
        self.agent = agent
        super().__init__(
            name=AGENT_SERVICE_NAME,
            description="A generic service for performing common actions such as "
            "recording to memory and others.",
            methods=[
                ModuleMethod(
                    name="record_to_context",
                    description="Record a key/value pair to the context.",
                    parameters=object_schema(
                        {
                            "key": {"type": "string", "description": "The key of the entry."},
                            "value": {
                                "type": "string",
                                "description": "The value of the entry.",
                            },
                        },
                        required=["key", "value"],
                    ),
                    perform_action=self.record_to_context,
                ),
                ModuleMethod(
                    name="mark_complete",
                    description="Considers the task complete if it is complete.",
                    parameters=object_schema(
                        {
                            "complete": {
                                "type": "boolean",
                                "description": "Mark this as true when you call the "
                                "function, otherwise don't call the function.",
                            },
                        },
                        required=["complete"],
                    ),
                    perform_action=self.mark_complete,
                ),
                ModuleMethod(
                    name="mark_paused",
                    description="Pause the process if need be.",
                    parameters=object_schema(
                        {
                            "paused": {
                                "type": "boolean",
                                "description": "Mark this as true when you call the "
                                "function, otherwise don't call the function.",
                            },
                        },
                        required=["paused"],
                    ),
                    perform_action=self.mark_paused,
                ),
                ModuleMethod(
                    name="prompt_user",
                    description="Send a message to the user and await a response, "
                    "which will appear in the next iteration's context.",
                    parameters=object_schema(
                        {
                            "message": {
                                "type": "string",
                                "description": "The message to send the user.",
                            },
                        },
                        required=["message"],
                    ),
                    perform_action=self.prompt_user,
                ),
            ],
        )

    def record_to_context(self, params: dict[str, Any]) -> str:
        key = params.get("key")
        value = params.get("value")
        if not key or value is None:
            return "Both a key and a value are required."
        self.agent.add_to_context(str(key), str(value))
        return f"Recorded {key} to context."

    async def mark_complete(self, params: dict[str, Any]) -> str:
        await self.agent.mark_complete()
        return "Task marked complete."

    def mark_paused(self, params: dict[str, Any]) -> str:
        if self.agent.mark_paused():
            return "Agent paused."
        return "Agent could not be paused."

    async def prompt_user(self, params: dict[str, Any]) -> str:
        message = params.get("message")
        if not message or not isinstance(message, str):
            return "Message sent by agent was invalid."
        return await self.agent.prompt_user(message)
