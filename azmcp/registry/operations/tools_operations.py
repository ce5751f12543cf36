"""
Tools operation registrations.

``tools list`` enumerates every discoverable operation so that callers can
explore the CLI without reading the source.
"""

import logging
from typing import Any, Dict, List

from ...core.context import InvocationContext
from ..operation_registry import CommandGroup, Operation, OperationRegistry

logger = logging.getLogger(__name__)


async def tools_list_handler(context: InvocationContext, args: Any) -> List[Dict[str, Any]]:
    registry = context.require_service(OperationRegistry, "Operation registry is not available.")

    tools = []
    for path, _ in registry.list():
        docs = registry.get_operation_docs(path)
        tools.append({
            "name": docs["name"],
            "description": docs["description"],
            "command": docs["command"],
            "arguments": [
                {"name": a["name"], "description": a["description"], "required": a["required"]}
                for a in docs["arguments"]
            ],
        })
    return tools


TOOLS_LIST = Operation(
    description="List all available commands and their tools in a hierarchical structure.",
    handler=tools_list_handler,
    read_only=True,
)


def register_tools_operations(root: CommandGroup) -> CommandGroup:
    tools = root.add_sub_group(CommandGroup(
        "tools",
        "CLI tools operations - Commands for discovering and exploring the functionality "
        "available in this CLI tool.",
    ))
    tools.add_operation("list", TOOLS_LIST)
    return tools
