"""Services: capability providers that agents invoke as modules."""

from quasar_assistant.services.manager import ServiceManager
from quasar_assistant.services.service import Service

__all__ = [
    "Service",
    "ServiceManager",
]
