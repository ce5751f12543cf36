"""Main MCP server exposing the azmcp command tree as tools."""

import json
import logging
from typing import Any, Dict, Optional

from mcp import Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import TextContent

from .config.settings import SERVER_NAME, SERVER_VERSION
from .core.services import ServiceLocator
from .registry.dispatcher import Dispatcher
from .registry.operation_registry import OperationNotFound, OperationRegistry
from .tools.operation_tools import OperationTools

logger = logging.getLogger(__name__)


class AzureMcpServer:
    """MCP Server routing tool calls through the operation dispatcher."""

    def __init__(
        self,
        registry: OperationRegistry,
        services: ServiceLocator,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self.registry = registry
        self.services = services
        self.operation_tools = OperationTools(registry, services, dispatcher)

        # Create MCP server instance
        self.server = Server(SERVER_NAME)

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List all discoverable operations."""
            return self.operation_tools.get_tools()

        # Arguments are checked by the dispatcher, which names every missing one
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> list[TextContent]:
            """Route tool calls to the dispatcher."""
            try:
                result = await self.operation_tools.handle_tool(name, arguments)
            except OperationNotFound as e:
                logger.error(f"Error executing tool {name}: {e}")
                raise

            return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))]

    async def run(self):
        """Run the MCP server over stdio."""
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )
