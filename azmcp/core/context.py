"""Per-invocation context handed to every operation handler."""

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Type, TypeVar

from ..utils.response import CommandResponse
from .services import ServiceLocator

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation signal owned by the caller of one invocation."""

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


@dataclass
class InvocationContext:
    """
    Context for a single dispatch.

    Attributes:
        services: Process-wide, read-only service locator
        response: Envelope for this invocation (fresh per context)
        cancellation: Signal the caller sets to abandon this invocation
    """
    services: ServiceLocator
    response: CommandResponse = field(default_factory=CommandResponse)
    cancellation: CancellationToken = field(default_factory=CancellationToken)

    def get_service(self, service_type: Type[T]) -> Optional[T]:
        return self.services.get(service_type)

    def require_service(self, service_type: Type[T], message: Optional[str] = None) -> T:
        return self.services.require(service_type, message)
