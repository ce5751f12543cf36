"""
Operation Registry for azmcp.

Provides the command tree, its flattened lookup index, argument binding and
the dispatcher shared by the CLI and the MCP tool surface.
"""

from .arguments import (
    ArgumentDefinition,
    ArgumentSchema,
    BindResult,
    bind_arguments,
    build_input_schema,
    merge_arguments,
)
from .dispatcher import Dispatcher
from .operation_registry import (
    SEPARATOR,
    CommandGroup,
    Operation,
    OperationIndex,
    OperationRegistry,
    OperationResult,
    add_operation,
    add_sub_group,
    build_index,
    command_words,
    create_group,
    iter_operations,
    list_visible,
    validate_tree,
    # Exceptions
    DuplicateNameError,
    DuplicatePathError,
    InvalidRegistration,
    OperationNotFound,
    OperationRegistryError,
    RegistrationError,
    # Singleton
    get_operation_registry,
    reset_operation_registry,
)

__all__ = [
    'SEPARATOR',
    'ArgumentDefinition',
    'ArgumentSchema',
    'BindResult',
    'CommandGroup',
    'Dispatcher',
    'Operation',
    'OperationIndex',
    'OperationRegistry',
    'OperationResult',
    'add_operation',
    'add_sub_group',
    'bind_arguments',
    'build_index',
    'build_input_schema',
    'command_words',
    'create_group',
    'iter_operations',
    'list_visible',
    'merge_arguments',
    'validate_tree',
    # Exceptions
    'DuplicateNameError',
    'DuplicatePathError',
    'InvalidRegistration',
    'OperationNotFound',
    'OperationRegistryError',
    'RegistrationError',
    # Singleton
    'get_operation_registry',
    'reset_operation_registry',
]
