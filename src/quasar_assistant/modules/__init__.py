"""Module capability contract.

This package defines how services, channels and the agent self-service are
described to agents, and how they are flattened into tools for the decision
model.
"""

from quasar_assistant.modules.tools import (
    ToolDefinition,
    find_tool,
    modules_to_tools,
    qualified_tool_name,
)
from quasar_assistant.modules.types import (
    ActionFunction,
    Module,
    ModuleMethod,
    ModuleType,
    object_schema,
)

__all__ = [
    "ActionFunction",
    "Module",
    "ModuleMethod",
    "ModuleType",
    "ToolDefinition",
    "find_tool",
    "modules_to_tools",
    "object_schema",
    "qualified_tool_name",
]
