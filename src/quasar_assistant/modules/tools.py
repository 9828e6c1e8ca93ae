"""Conversion of modules into flat tool definitions for the decision model."""

import re
from dataclasses import dataclass
from typing import Any

from quasar_assistant.modules.types import Module

TOOL_NAME_SEPARATOR = "__"

_INVALID_TOOL_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


@dataclass(frozen=True)
class ToolDefinition:
    """A module method flattened into a tool the decision model can select.

    Attributes:
        name: Qualified, sanitized tool name ("<module>__<method>")
        description: Human readable description shown to the model
        parameters: JSON object schema of the arguments
        module_name: Name of the module that owns the method
        method_name: Name of the method inside the module
    """

    name: str
    description: str
    parameters: dict[str, Any]
    module_name: str
    method_name: str

    def to_ollama(self) -> dict[str, Any]:
        """Render the tool in the function-calling format Ollama expects."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


def qualified_tool_name(module_name: str, method_name: str) -> str:
    """Build a tool name unique across modules.

    Two channels both expose "sendMessage", so the module name is part of the
    tool name. Characters outside [A-Za-z0-9_-] are replaced with "_".
    """
    raw = f"{module_name}{TOOL_NAME_SEPARATOR}{method_name}"
    return _INVALID_TOOL_CHARS.sub("_", raw)


def modules_to_tools(modules: list[Module]) -> list[ToolDefinition]:
    """Flatten every method of every module into a list of tools.

    Args:
        modules: Modules currently available to an agent

    Returns:
        One ToolDefinition per module method, in module then method order
    """
    tools: list[ToolDefinition] = []

    for module in modules:
        for method in module.methods:
            tools.append(
                ToolDefinition(
                    name=qualified_tool_name(module.name, method.name),
                    description=f"[{module.name}] {method.description}",
                    parameters=method.parameters,
                    module_name=module.name,
                    method_name=method.name,
                )
            )

    return tools


def find_tool(tools: list[ToolDefinition], name: str) -> ToolDefinition | None:
    """Look up a tool by its qualified name or by its bare method name."""
    for tool in tools:
        if tool.name == name:
            return tool
    # Some models drop the module prefix; accept it if it is unambiguous
    matches = [tool for tool in tools if tool.method_name == name]
    if len(matches) == 1:
        return matches[0]
    return None
