"""azmcp CLI entry point.

The click command tree mirrors the registered command groups: each group is
a click.Group and each operation a click.Command with one ``--flag`` per
argument definition. Every command prints the JSON response envelope.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, Mapping, Optional

import click

from . import __version__
from .config.settings import get_log_level
from .core.context import InvocationContext
from .core.services import ServiceLocator
from .registry.dispatcher import Dispatcher
from .registry.operation_registry import (
    CommandGroup,
    Operation,
    OperationRegistry,
    get_operation_registry,
    join_path,
)
from .utils.response import STATUS_OK, CommandResponse

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def create_service_locator(
    registry: OperationRegistry,
    services: Optional[Mapping[type, Any]] = None,
) -> ServiceLocator:
    """Process-wide service locator: the registry plus any provided services."""
    locator = ServiceLocator(services)
    locator.register(OperationRegistry, registry)
    return locator.freeze()


async def _dispatch(dispatcher: Dispatcher, services: ServiceLocator, path: str, raw: Dict[str, Any]) -> CommandResponse:
    context = InvocationContext(services)
    return await dispatcher.dispatch(path, raw, context)


def _operation_command(path: str, operation: Operation, dispatcher: Dispatcher, services: ServiceLocator) -> click.Command:
    # Required arguments are checked by the binder so that every missing
    # flag is reported in one response instead of click's first-error exit.
    params = [
        click.Option(
            [f"--{definition.name}", definition.attribute_name],
            default=None,
            help=definition.description + (" [required]" if definition.required else ""),
        )
        for definition in operation.arguments
    ]

    def callback(**kwargs: Any) -> None:
        raw = {
            definition.name: kwargs[definition.attribute_name]
            for definition in operation.arguments
            if kwargs.get(definition.attribute_name) is not None
        }
        response = asyncio.run(_dispatch(dispatcher, services, path, raw))
        click.echo(response.to_json())
        click.get_current_context().exit(0 if response.status == STATUS_OK else 1)

    return click.Command(
        name=operation.name,
        callback=callback,
        params=params,
        help=operation.description,
        hidden=not operation.discoverable,
    )


def _add_children(
    parent: click.Group,
    group: CommandGroup,
    prefix: str,
    dispatcher: Dispatcher,
    services: ServiceLocator,
) -> None:
    for name, operation in group.operations.items():
        parent.add_command(_operation_command(join_path(prefix, name), operation, dispatcher, services))

    for sub_group in group.sub_groups:
        click_group = click.Group(name=sub_group.name, help=sub_group.description)
        _add_children(click_group, sub_group, join_path(prefix, sub_group.name), dispatcher, services)
        parent.add_command(click_group)


def build_cli(
    registry: Optional[OperationRegistry] = None,
    services: Optional[ServiceLocator] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> click.Group:
    """
    Build the click command tree for a registry.

    Args:
        registry: Operation registry (defaults to the process singleton)
        services: Service locator handed to every invocation
        dispatcher: Dispatcher (defaults to one over the registry's index)
    """
    registry = registry or get_operation_registry()
    services = services or create_service_locator(registry)
    dispatcher = dispatcher or Dispatcher(registry.index)

    @click.group(name=registry.root.name, help=registry.root.description)
    @click.version_option(__version__, prog_name=registry.root.name)
    @click.option(
        "--log-level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        default=get_log_level(),
        show_default=True,
        help="Logging level (logs go to stderr).",
    )
    def cli(log_level: str) -> None:
        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    _add_children(cli, registry.root, "", dispatcher, services)
    return cli


def main() -> None:
    """Console script entry point."""
    build_cli()(prog_name="azmcp")


if __name__ == "__main__":
    main()
