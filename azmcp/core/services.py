"""
Service locator shared by every invocation in a process.

Operations resolve their collaborators (e.g. the PostgreSQL service) by type.
The locator is populated once during startup and frozen before the first
dispatch; afterwards it is read-only and safe to share across concurrent
invocations.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from .exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ServiceLocator:
    """Resolves named service capabilities by type."""

    def __init__(self, services: Optional[Mapping[type, Any]] = None):
        self._services: Dict[type, Any] = dict(services or {})
        self._frozen = False

    def register(self, service_type: Type[T], instance: T) -> "ServiceLocator":
        """
        Register a service instance under its interface type.

        Raises:
            RuntimeError: If the locator has already been frozen
        """
        if self._frozen:
            raise RuntimeError(
                f"Cannot register {service_type.__name__}: service locator is frozen"
            )
        self._services[service_type] = instance
        logger.debug(f"Registered service: {service_type.__name__}")
        return self

    def freeze(self) -> "ServiceLocator":
        """Disallow further registrations."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, service_type: Type[T]) -> Optional[T]:
        """Return the registered service, or None if absent."""
        return self._services.get(service_type)

    def require(self, service_type: Type[T], message: Optional[str] = None) -> T:
        """
        Return the registered service.

        Raises:
            ServiceUnavailableError: If no instance is registered for the type
        """
        service = self._services.get(service_type)
        if service is None:
            raise ServiceUnavailableError(
                message or f"{service_type.__name__} is not available."
            )
        return service

    def __contains__(self, service_type: type) -> bool:
        return service_type in self._services
