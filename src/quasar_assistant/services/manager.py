"""ServiceManager: registry of the services owned by an assistant."""

import logging
from typing import TYPE_CHECKING

from quasar_assistant.exceptions import DuplicateNameError
from quasar_assistant.modules.types import Module
from quasar_assistant.services.service import Service

if TYPE_CHECKING:
    from quasar_assistant.assistant import Assistant

logger = logging.getLogger(__name__)


class ServiceManager:
    """Maps service names to services."""

    def __init__(self, assistant: "Assistant | None" = None) -> None:
        self.assistant = assistant
        self._services: dict[str, Service] = {}

    def register_service(self, service: Service) -> Service:
        """Register a service.

        Raises:
            DuplicateNameError: If a service with the same name is registered
        """
        if service.name in self._services:
            raise DuplicateNameError("service", service.name)

        self._services[service.name] = service
        logger.info(f"Registered service {service.name}")
        return service

    def get_service(self, name: str) -> Service | None:
        return self._services.get(name)

    def get_service_list(self) -> list[Module]:
        """Get every registered service as a module."""
        return [service.as_module() for service in self._services.values()]
