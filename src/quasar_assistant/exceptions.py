"""Error taxonomy for the orchestration engine.

Only DuplicateNameError is raised to callers. The other errors describe why an
agent step was aborted; they are logged and stored on the agent instead of
propagating out of the scheduler.
"""


class AssistantError(Exception):
    """Base class for all quasar-assistant errors."""


class DuplicateNameError(AssistantError):
    """A registry already holds an entry with this name."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} with name {name} already exists.")


class ConfigurationError(AssistantError):
    """An agent was stepped without a task."""


class DecisionFailure(AssistantError):
    """The decision model returned nothing usable."""


class ActionExecutionFailure(AssistantError):
    """The selected method is unknown or raised while running."""
