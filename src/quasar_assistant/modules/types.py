"""Data types for the module capability contract.

A module is anything an agent can act through: a service, a channel, or the
agent's own self-service. Each module exposes methods described by a JSON
object schema and bound to an action function.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal

ModuleType = Literal["service", "channel", "other"]

# An action receives the decoded arguments (plus the injected "agent" name)
ActionFunction = Callable[[dict[str, Any]], Any | Awaitable[Any]]


def object_schema(
    properties: dict[str, dict[str, Any]] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    """Build a JSON object schema for method parameters.

    Args:
        properties: Mapping of parameter name to its JSON schema
        required: Names of required parameters

    Returns:
        A schema dict of the form {"type": "object", "properties", "required"}
    """
    return {
        "type": "object",
        "properties": dict(properties or {}),
        "required": list(required or []),
    }


@dataclass
class ModuleMethod:
    """A single invokable method of a module."""

    name: str
    description: str
    perform_action: ActionFunction
    parameters: dict[str, Any] = field(default_factory=object_schema)


@dataclass
class Module:
    """A named, discoverable capability exposing one or more methods."""

    name: str
    type: ModuleType
    description: str
    methods: list[ModuleMethod] = field(default_factory=list)

    def find_method(self, method_name: str) -> ModuleMethod | None:
        """Return the method with the given name, or None if absent."""
        for method in self.methods:
            if method.name == method_name:
                return method
        return None
