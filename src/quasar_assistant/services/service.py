"""Service class: a capability provider without a conversational ledger."""

from quasar_assistant.modules.types import Module, ModuleMethod


class Service:
    """A named set of methods that agents can invoke.

    Attributes:
        name: Service name, unique within a ServiceManager
        description: Description shown to agents
        methods: The invokable methods of the service
    """

    def __init__(
        self,
        name: str,
        description: str,
        methods: list[ModuleMethod] | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self.methods: list[ModuleMethod] = list(methods or [])

    def schema(self) -> list[ModuleMethod]:
        """Describe the methods agents can invoke on this service."""
        return list(self.methods)

    def as_module(self) -> Module:
        """Expose this service as a module."""
        return Module(
            name=self.name,
            type="service",
            description=self.description,
            methods=self.schema(),
        )
