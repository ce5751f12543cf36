"""
MCP server operation registrations.

``server start`` is hidden from listings: it hosts the tool surface rather
than being a tool itself, but stays callable from the CLI.
"""

import logging
from typing import Any

from ...config.settings import DEFAULT_PORT, TRANSPORT_STDIO
from ...core.context import InvocationContext
from ...core.exceptions import OperationError
from ..operation_registry import CommandGroup, Operation, OperationRegistry
from .argument_definitions import PORT, TRANSPORT

logger = logging.getLogger(__name__)


async def server_start_handler(context: InvocationContext, args: Any) -> None:
    if args.transport != TRANSPORT_STDIO:
        raise OperationError(
            f"Unsupported transport '{args.transport}'. Supported transports: {TRANSPORT_STDIO}",
            status_code=400,
        )

    from ...server import AzureMcpServer

    registry = context.require_service(OperationRegistry, "Operation registry is not available.")
    server = AzureMcpServer(registry, context.services)

    if args.port != DEFAULT_PORT:
        logger.warning(f"Port {args.port} ignored: the {TRANSPORT_STDIO} transport does not listen on a port")

    logger.info(f"Starting MCP server (transport: {args.transport})")
    await server.run()


SERVER_START = Operation(
    description="Starts Azure MCP Server.",
    handler=server_start_handler,
    arguments=(TRANSPORT, PORT),
    discoverable=False,
)


def register_server_operations(root: CommandGroup) -> CommandGroup:
    server = root.add_sub_group(CommandGroup(
        "server",
        "MCP Server operations - Commands for managing and interacting with the MCP Server.",
    ))
    server.add_operation("start", SERVER_START)
    return server
