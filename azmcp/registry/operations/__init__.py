"""
Command tree registrations for azmcp.

Builds the full group/operation hierarchy from a fixed registration
sequence. Called once per process by get_operation_registry().
"""

from ..operation_registry import ROOT_DESCRIPTION, ROOT_NAME, CommandGroup
from .postgres_operations import register_postgres_operations
from .server_operations import register_server_operations
from .tools_operations import register_tools_operations


def build_command_tree() -> CommandGroup:
    """Register all command groups under a new root group."""
    root = CommandGroup(ROOT_NAME, ROOT_DESCRIPTION)
    register_postgres_operations(root)
    register_tools_operations(root)
    register_server_operations(root)
    return root


__all__ = [
    'build_command_tree',
    'register_postgres_operations',
    'register_server_operations',
    'register_tools_operations',
]
