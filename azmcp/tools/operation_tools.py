"""MCP tool surface for registered operations."""

import logging
from typing import Any, Dict, List, Optional

from mcp.types import Tool, ToolAnnotations

from ..core.context import InvocationContext
from ..core.services import ServiceLocator
from ..registry.arguments import build_input_schema
from ..registry.dispatcher import Dispatcher
from ..registry.operation_registry import Operation, OperationNotFound, OperationRegistry

logger = logging.getLogger(__name__)


def operation_to_tool(path: str, operation: Operation) -> Tool:
    """Describe an operation as an MCP tool named by its flattened path."""
    return Tool(
        name=path,
        description=operation.description,
        inputSchema=build_input_schema(operation.arguments),
        annotations=ToolAnnotations(
            readOnlyHint=operation.read_only,
            destructiveHint=operation.destructive,
        ),
    )


class OperationTools:
    """Exposes every discoverable operation as an MCP tool."""

    def __init__(
        self,
        registry: OperationRegistry,
        services: ServiceLocator,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self.registry = registry
        self.services = services
        self.dispatcher = dispatcher or Dispatcher(registry.index)

    def get_tools(self) -> List[Tool]:
        """Return tools for all discoverable operations, ordered by name."""
        return [operation_to_tool(path, operation) for path, operation in self.registry.list()]

    async def handle_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Dispatch a tool call and return the serialized envelope.

        Hidden operations are not listed but remain callable by exact name.

        Raises:
            OperationNotFound: If no operation is registered under ``name``
        """
        if not self.registry.exists(name):
            raise OperationNotFound(name, f"Unknown tool: {name}")

        context = InvocationContext(self.services)
        response = await self.dispatcher.dispatch(name, arguments or {}, context)
        return response.to_dict()
