"""
Operation Registry - command tree, flattened lookup index and visibility.

Operations are registered into a strict tree of CommandGroups rooted at
``azmcp``. The tree is flattened once into an immutable index keyed by the
hyphen-joined path of segment names (root excluded), e.g. ``pg-server-list``.

Provides:
- Operation / CommandGroup data model and the tree-building API
- Explicit duplicate-path validation before the index is published
- OperationIndex for O(1) lookup by flattened path
- list_visible for deterministic, discoverable-only enumeration
- OperationRegistry facade and process-wide singleton
"""

import logging
from dataclasses import dataclass, replace
from functools import cached_property
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Type

from pydantic import BaseModel

from .arguments import ArgumentDefinition, ArgumentSchema, build_arguments_model, merge_arguments

logger = logging.getLogger(__name__)

SEPARATOR = "-"
ROOT_NAME = "azmcp"
ROOT_DESCRIPTION = (
    "Azure MCP Server - A Model Context Protocol (MCP) server that enables AI agents "
    "to interact with Azure services through standardized communication patterns."
)

# handler(context, arguments) -> payload or OperationResult
Handler = Callable[[Any, BaseModel], Awaitable[Any]]


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class OperationResult:
    """Explicit outcome a handler may return instead of a bare payload."""
    results: Any = None
    status: int = 200
    message: Optional[str] = None


@dataclass(frozen=True, eq=False)
class Operation:
    """
    A named unit of work with a typed-argument contract.

    ``name`` is assigned when the operation is added to a group, and
    ``arguments`` then also includes the group-level fragments. Equality is
    identity: two registrations are never the same operation.
    """
    description: str
    handler: Handler
    arguments: ArgumentSchema = ()
    name: str = ""
    discoverable: bool = True   # Listed by tools list / MCP list_tools
    read_only: bool = False     # MCP readOnlyHint
    destructive: bool = False   # MCP destructiveHint

    @cached_property
    def arguments_model(self) -> Type[BaseModel]:
        """Pydantic model the bound arguments are validated into."""
        model_name = "".join(part.capitalize() for part in self.name.split(SEPARATOR)) or "Operation"
        return build_arguments_model(f"{model_name}Arguments", self.arguments)


# ============================================================================
# Exceptions
# ============================================================================

class OperationRegistryError(Exception):
    """Base exception for registry errors."""
    pass


class OperationNotFound(OperationRegistryError):
    """No operation is registered under the requested path."""

    def __init__(self, path: str, message: Optional[str] = None):
        super().__init__(message or f"Operation '{path}' not found")
        self.path = path


class RegistrationError(OperationRegistryError):
    """Build-time registration failure. Fatal: the registry must not start."""
    pass


class DuplicateNameError(RegistrationError):
    """A child name collides with a sibling group or operation."""
    pass


class DuplicatePathError(RegistrationError):
    """Two operations flatten to the same public path."""

    def __init__(self, paths: Sequence[str]):
        self.paths = list(paths)
        super().__init__(
            f"Duplicate operation paths: {', '.join(self.paths)}"
        )


class InvalidRegistration(RegistrationError):
    """Malformed group/operation or an attachment that would break the tree."""
    pass


# ============================================================================
# Command Tree
# ============================================================================

def _validate_name(name: str, kind: str) -> None:
    if not name:
        raise InvalidRegistration(f"{kind} name is required")
    if any(ch.isspace() for ch in name):
        raise InvalidRegistration(f"{kind} name '{name}' must not contain whitespace")


class CommandGroup:
    """
    Structural node of the command tree.

    Groups contribute one path segment and, optionally, an argument
    fragment merged into every operation registered beneath them. A group
    must be attached to its parent before operations are added to it so
    that the parent's fragment is part of those operations' schemas.
    """

    def __init__(self, name: str, description: str, arguments: Sequence[ArgumentDefinition] = ()):
        _validate_name(name, "Group")
        self.name = name
        self.description = description
        self.arguments: ArgumentSchema = tuple(arguments)
        self.parent: Optional["CommandGroup"] = None
        self._sub_groups: Dict[str, "CommandGroup"] = {}
        self._operations: Dict[str, Operation] = {}

    def __repr__(self) -> str:
        return f"CommandGroup({self.name!r})"

    @property
    def sub_groups(self) -> List["CommandGroup"]:
        return list(self._sub_groups.values())

    @property
    def operations(self) -> Mapping[str, Operation]:
        return MappingProxyType(self._operations)

    def ancestors(self) -> Iterator["CommandGroup"]:
        """Yield parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def inherited_arguments(self) -> ArgumentSchema:
        """Argument fragments from the root down to this group."""
        chain = [self, *self.ancestors()]
        return merge_arguments(*(group.arguments for group in reversed(chain)))

    def _check_sibling_name(self, name: str) -> None:
        if name in self._sub_groups or name in self._operations:
            raise DuplicateNameError(
                f"'{name}' is already registered under group '{self.name}'"
            )

    def add_sub_group(self, child: "CommandGroup") -> "CommandGroup":
        """
        Attach a child group.

        Raises:
            DuplicateNameError: If a sibling already uses the child's name
            InvalidRegistration: If the child already has a parent, would
                create a cycle, or already holds operations that would miss
                this group's argument fragments
        """
        if child.parent is not None:
            raise InvalidRegistration(
                f"Group '{child.name}' is already attached to '{child.parent.name}'"
            )
        if child is self or any(ancestor is child for ancestor in self.ancestors()):
            raise InvalidRegistration(
                f"Attaching '{child.name}' under '{self.name}' would create a cycle"
            )
        self._check_sibling_name(child.name)
        if self.inherited_arguments() and any(True for _ in iter_operations(child)):
            raise InvalidRegistration(
                f"Group '{child.name}' already has operations; attach it before registering them"
            )

        child.parent = self
        self._sub_groups[child.name] = child
        return child

    def add_operation(self, name: str, operation: Operation) -> Operation:
        """
        Register an operation under this group.

        Returns:
            The registered Operation: a copy named ``name`` whose arguments
            are this group's inherited fragments merged with its own

        Raises:
            DuplicateNameError: If a sibling already uses ``name``
            InvalidRegistration: If the operation is malformed
        """
        _validate_name(name, "Operation")
        if not operation.description:
            raise InvalidRegistration(f"Operation '{name}' description is required")
        if operation.handler is None:
            raise InvalidRegistration(f"Operation '{name}' handler is required")
        self._check_sibling_name(name)

        registered = replace(
            operation,
            name=name,
            arguments=merge_arguments(self.inherited_arguments(), operation.arguments),
        )
        self._operations[name] = registered

        logger.debug(f"Registered operation '{name}' under group '{self.name}'")
        return registered


def create_group(name: str, description: str, arguments: Sequence[ArgumentDefinition] = ()) -> CommandGroup:
    return CommandGroup(name, description, arguments)


def add_sub_group(parent: CommandGroup, child: CommandGroup) -> CommandGroup:
    return parent.add_sub_group(child)


def add_operation(parent: CommandGroup, name: str, operation: Operation) -> Operation:
    return parent.add_operation(name, operation)


# ============================================================================
# Path Flattening
# ============================================================================

def join_path(prefix: str, segment: str) -> str:
    return f"{prefix}{SEPARATOR}{segment}" if prefix else segment


def _walk(group: CommandGroup, prefix: str) -> Iterator[Tuple[str, Operation]]:
    for name, operation in group.operations.items():
        yield join_path(prefix, name), operation
    for sub_group in group.sub_groups:
        yield from _walk(sub_group, join_path(prefix, sub_group.name))


def iter_operations(root: CommandGroup) -> Iterator[Tuple[str, Operation]]:
    """Depth-first (path, operation) pairs; the root contributes no segment."""
    return _walk(root, "")


def validate_tree(root: CommandGroup) -> Dict[str, Operation]:
    """
    Check that every operation flattens to a unique path.

    Sibling checks cannot catch aliasing across levels: ``a`` holding
    ``b-c`` and ``a-b`` holding ``c`` both flatten to ``a-b-c``.

    Returns:
        Ordered path -> operation mapping

    Raises:
        DuplicatePathError: Naming every aliased path
    """
    entries: Dict[str, Operation] = {}
    duplicates: List[str] = []

    for path, operation in iter_operations(root):
        if path in entries:
            if path not in duplicates:
                duplicates.append(path)
            continue
        entries[path] = operation

    if duplicates:
        raise DuplicatePathError(duplicates)

    return entries


class OperationIndex:
    """Immutable flattened path -> Operation mapping."""

    def __init__(self, entries: Mapping[str, Operation]):
        self._entries = MappingProxyType(dict(entries))

    def get(self, path: str) -> Optional[Operation]:
        return self._entries.get(path)

    def resolve(self, path: str) -> Operation:
        """
        Raises:
            OperationNotFound: If no operation is registered under ``path``
        """
        operation = self._entries.get(path)
        if operation is None:
            raise OperationNotFound(path)
        return operation

    def paths(self) -> List[str]:
        return list(self._entries.keys())

    def items(self):
        return self._entries.items()

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


def build_index(root: CommandGroup) -> OperationIndex:
    """Validate the tree and publish its lookup index."""
    index = OperationIndex(validate_tree(root))
    logger.info(f"Command index built: {len(index)} operations under '{root.name}'")
    return index


def list_visible(index: OperationIndex) -> List[Tuple[str, Operation]]:
    """Discoverable operations ordered lexicographically by path."""
    return sorted(
        ((path, operation) for path, operation in index.items() if operation.discoverable),
        key=lambda item: item[0],
    )


def _find_words(group: CommandGroup, remaining: str) -> Optional[List[str]]:
    if remaining in group.operations:
        return [remaining]
    for sub_group in group.sub_groups:
        prefix = sub_group.name + SEPARATOR
        if remaining.startswith(prefix):
            words = _find_words(sub_group, remaining[len(prefix):])
            if words is not None:
                return [sub_group.name, *words]
    return None


def command_words(path: str, root: CommandGroup) -> List[str]:
    """
    Split a flattened path back into CLI tokens using the tree.

    Segment names may themselves contain the separator (``get-schema``),
    so the split follows the registered names rather than the string.

    Raises:
        OperationNotFound: If the path does not name an operation under root
    """
    words = _find_words(root, path)
    if words is None:
        raise OperationNotFound(path)
    return words


# ============================================================================
# Operation Registry
# ============================================================================

class OperationRegistry:
    """
    Command tree plus its lookup index.

    Built once per process; afterwards both are read-only.
    """

    def __init__(self, root: CommandGroup):
        self.root = root
        self.index = build_index(root)

    def get(self, path: str) -> Operation:
        """
        Raises:
            OperationNotFound: If operation doesn't exist
        """
        return self.index.resolve(path)

    def exists(self, path: str) -> bool:
        return path in self.index

    def list(self, include_hidden: bool = False) -> List[Tuple[str, Operation]]:
        """Operations ordered by path; hidden ones only when asked for."""
        if include_hidden:
            return sorted(self.index.items(), key=lambda item: item[0])
        return list_visible(self.index)

    def get_operation_docs(self, path: str) -> Dict[str, Any]:
        """
        Get documentation for an operation.

        Raises:
            OperationNotFound: If operation doesn't exist
        """
        operation = self.get(path)

        return {
            "name": path,
            "description": operation.description,
            "command": " ".join(command_words(path, self.root)),
            "arguments": [
                {
                    "name": d.name,
                    "description": d.description,
                    "required": d.required,
                    "default": d.default,
                }
                for d in operation.arguments
            ],
            "metadata": {
                "discoverable": operation.discoverable,
                "read_only": operation.read_only,
                "destructive": operation.destructive,
            },
        }


# ============================================================================
# Singleton
# ============================================================================

_registry_instance: Optional[OperationRegistry] = None


def get_operation_registry() -> OperationRegistry:
    """
    Get singleton instance of the operation registry.

    The command tree is built on first use, exactly once per process.
    """
    global _registry_instance

    if _registry_instance is None:
        from .operations import build_command_tree
        _registry_instance = OperationRegistry(build_command_tree())

    return _registry_instance


def reset_operation_registry() -> None:
    """Reset singleton (for testing)."""
    global _registry_instance
    _registry_instance = None
