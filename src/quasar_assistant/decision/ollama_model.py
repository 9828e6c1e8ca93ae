"""Decision model backed by an Ollama LLM.

Tool selection uses Ollama's native function calling. Dispatch lists,
classification and plans use structured outputs: the JSON schema of a pydantic
model is requested as the output format and the reply is validated against it.
"""

import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from quasar_assistant.agents.plan import PlanOfAction
from quasar_assistant.agents.types import AgentTask
from quasar_assistant.channels.types import ChannelMessage
from quasar_assistant.decision import prompts
from quasar_assistant.decision.base import ActionSelection, Decision, ResponseMode
from quasar_assistant.decision.schemas import (
    AgentDispatchList,
    PlanDefinition,
    ResponseModeDecision,
)
from quasar_assistant.modules.tools import TOOL_NAME_SEPARATOR, ToolDefinition, find_tool
from quasar_assistant.ollama.client import OllamaClient

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

DEFAULT_AGENT_MODEL = "llama3.2:latest"


def _convert_messages_to_ollama_format(
    messages: list[ChannelMessage],
) -> list[dict[str, str]]:
    """Strip channel messages down to the role/content pairs Ollama expects."""
    return [{"role": message.role, "content": message.content} for message in messages]


class OllamaDecisionModel:
    """Decision model implementation using an Ollama server.

    Attributes:
        client: The shared OllamaClient
        agent_model: Model used for per-step tool selection and replies
        planning_model: Model used for dispatch, classification and plans
        description: Assistant description used in the reply system prompt
    """

    def __init__(
        self,
        client: OllamaClient,
        agent_model: str = DEFAULT_AGENT_MODEL,
        planning_model: str | None = None,
        description: str = "",
    ) -> None:
        self.client = client
        self.agent_model = agent_model
        self.planning_model = planning_model or agent_model
        self.description = description

    async def decide(
        self, task: str, tools: list[ToolDefinition], perception: str
    ) -> Decision:
        """Ask the model for the next best action.

        Returns:
            An ActionSelection when the model calls a tool, its text when it
            answers without a tool, or None when it produced nothing
        """
        messages = [
            {"role": "system", "content": prompts.NEXT_ACTION_PROMPT},
            {"role": "user", "content": f"The task is as follows:\n---\n{task}\n---"},
            {
                "role": "user",
                "content": "Here is some additional information to help you "
                f"complete the task:\n{perception}",
            },
        ]

        try:
            response = await self.client.chat(
                model=self.agent_model,
                messages=messages,
                tools=[tool.to_ollama() for tool in tools],
            )
        except Exception as e:
            logger.error(f"Next action request failed: {e}")
            return None

        message = response.get("message") or {}
        content = (message.get("content") or "").strip()
        tool_calls = message.get("tool_calls") or []

        if not tool_calls:
            return content or None

        function = tool_calls[0].get("function") or {}
        name = function.get("name")
        if not name:
            logger.warning("Model returned a tool call without a name")
            return None

        arguments = function.get("arguments") or {}
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError:
                logger.warning(f"Model returned unparsable arguments for {name}")
                return None

        tool = find_tool(tools, name)
        if tool is not None:
            module_name, method_name = tool.module_name, tool.method_name
        else:
            # Unknown tool: pass it through so the agent reports the missing method
            module_name, _, method_name = name.rpartition(TOOL_NAME_SEPARATOR)

        logger.debug(f"Model selected tool {name}")
        return ActionSelection(
            tool_name=name,
            module_name=module_name,
            method_name=method_name,
            arguments=json.dumps(arguments),
            reason=content,
        )

    async def dispatch_list(self, prompt: str) -> list[AgentTask] | None:
        result = await self._structured(
            prompts.DISPATCH_PROMPT, prompt, AgentDispatchList
        )
        if result is None:
            return None
        return [AgentTask(task=agent.task) for agent in result.agents if agent.task]

    async def classify(self, messages: list[ChannelMessage]) -> ResponseMode | None:
        if not messages:
            return None
        transcript = "\n".join(f"{m.role}: {m.content}" for m in messages)
        result = await self._structured(
            prompts.CLASSIFY_PROMPT,
            f"Here is the conversation:\n{transcript}",
            ResponseModeDecision,
        )
        if result is None:
            return None
        logger.debug(f"Classified message as {result.decision}: {result.reason}")
        return result.decision

    async def reply(self, messages: list[ChannelMessage]) -> str | None:
        """Collect a conversational reply from the streaming chat API."""
        ollama_messages = [
            {"role": "system", "content": prompts.reply_prompt(self.description)},
            *_convert_messages_to_ollama_format(messages),
        ]
        content_parts: list[str] = []

        try:
            async for chunk in self.client.chat_stream(
                model=self.agent_model,
                messages=ollama_messages,
            ):
                content = (chunk.get("message") or {}).get("content", "")
                if content:
                    content_parts.append(content)
                if chunk.get("done"):
                    break
        except Exception as e:
            logger.error(f"Reply request failed: {e}")
            return None

        return "".join(content_parts).strip() or None

    async def plan(self, prompt: str) -> PlanOfAction | None:
        result = await self._structured(prompts.PLAN_PROMPT, prompt, PlanDefinition)
        if result is None:
            return None
        return PlanOfAction(
            title=result.title,
            steps=[step.model_dump() for step in result.steps],
        )

    async def _structured(
        self, system_prompt: str, user_prompt: str, schema: type[SchemaT]
    ) -> SchemaT | None:
        """Request a JSON reply matching a pydantic schema.

        Returns:
            The validated schema instance, or None if the request failed or the
            reply did not match
        """
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        try:
            response = await self.client.chat(
                model=self.planning_model,
                messages=messages,
                format=schema.model_json_schema(),
            )
        except Exception as e:
            logger.error(f"Structured request for {schema.__name__} failed: {e}")
            return None

        content = (response.get("message") or {}).get("content") or ""
        try:
            return schema.model_validate_json(content)
        except ValidationError as e:
            logger.warning(f"Invalid {schema.__name__} returned by model: {e}")
            return None
