"""
Core collaborators for operation execution.

Modules:
- context: InvocationContext and CancellationToken
- services: ServiceLocator resolving services by type
- exceptions: OperationError and its subclasses
"""

from .context import CancellationToken, InvocationContext
from .exceptions import OperationCancelled, OperationError, ServiceUnavailableError
from .services import ServiceLocator

__all__ = [
    'CancellationToken',
    'InvocationContext',
    'OperationCancelled',
    'OperationError',
    'ServiceLocator',
    'ServiceUnavailableError',
]
