"""
PostgreSQL operation registrations.

Registers the ``pg`` group: databases, tables and flexible servers. Every
operation inherits the subscription scope and ``user`` from the group
fragment; each handler resolves PostgresService from the invocation context.
"""

import logging
from typing import Any

from ...core.context import InvocationContext
from ...services.postgres import PostgresService
from ..operation_registry import CommandGroup, Operation
from .argument_definitions import (
    PG_DATABASE,
    PG_PARAM,
    PG_QUERY,
    PG_SERVER,
    PG_TABLE,
    POSTGRES_ARGUMENTS,
)

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE = "PostgreSQL service is not available."


def _service(context: InvocationContext) -> PostgresService:
    return context.require_service(PostgresService, SERVICE_UNAVAILABLE)


# ============================================================================
# Operation Handlers
# ============================================================================

async def database_list_handler(context: InvocationContext, args: Any) -> Any:
    databases = await _service(context).list_databases(
        args.subscription, args.resource_group, args.server, args.user
    )
    return databases or None


async def database_query_handler(context: InvocationContext, args: Any) -> Any:
    result = await _service(context).execute_query(
        args.subscription, args.resource_group, args.server, args.user, args.database, args.query
    )
    return {"QueryResult": result}


async def table_list_handler(context: InvocationContext, args: Any) -> Any:
    tables = await _service(context).list_tables(
        args.subscription, args.resource_group, args.server, args.user, args.database
    )
    return tables or None


async def table_schema_handler(context: InvocationContext, args: Any) -> Any:
    schema = await _service(context).get_table_schema(
        args.subscription, args.resource_group, args.server, args.user, args.database, args.table
    )
    if not schema:
        return {"message": "No schema found."}
    return schema


async def server_list_handler(context: InvocationContext, args: Any) -> Any:
    servers = await _service(context).list_servers(args.subscription, args.resource_group, args.user)
    if not servers:
        return {"message": "No servers found."}
    return servers


async def server_config_handler(context: InvocationContext, args: Any) -> Any:
    config = await _service(context).get_server_config(
        args.subscription, args.resource_group, args.user, args.server
    )
    if not config:
        return {"message": "No configuration found."}
    return config


async def server_param_handler(context: InvocationContext, args: Any) -> Any:
    value = await _service(context).get_server_parameter(
        args.subscription, args.resource_group, args.user, args.server, args.param
    )
    if not value:
        return {"message": f"Parameter '{args.param}' not found."}
    return value


# ============================================================================
# Operation Definitions
# ============================================================================

DATABASE_LIST = Operation(
    description="Lists all databases in the PostgreSQL server.",
    handler=database_list_handler,
    arguments=(PG_SERVER.as_required(),),
    read_only=True,
)

DATABASE_QUERY = Operation(
    description="Executes a query on the PostgreSQL database.",
    handler=database_query_handler,
    arguments=(PG_SERVER.as_required(), PG_DATABASE.as_required(), PG_QUERY.as_required()),
    read_only=True,
)

TABLE_LIST = Operation(
    description="Lists all tables in the PostgreSQL database.",
    handler=table_list_handler,
    arguments=(PG_SERVER.as_required(), PG_DATABASE.as_required()),
    read_only=True,
)

TABLE_GET_SCHEMA = Operation(
    description="Retrieves the schema of a specified table in a PostgreSQL database.",
    handler=table_schema_handler,
    arguments=(PG_SERVER.as_required(), PG_DATABASE.as_required(), PG_TABLE.as_required()),
    read_only=True,
)

SERVER_LIST = Operation(
    description="Lists all PostgreSQL servers in the specified subscription.",
    handler=server_list_handler,
    read_only=True,
)

SERVER_GET_CONFIG = Operation(
    description="Retrieve the configuration of a PostgreSQL server.",
    handler=server_config_handler,
    arguments=(PG_SERVER.as_required(),),
    read_only=True,
)

SERVER_GET_PARAM = Operation(
    description="Retrieves a specific parameter of a PostgreSQL server.",
    handler=server_param_handler,
    arguments=(PG_SERVER.as_required(), PG_PARAM.as_required()),
    read_only=True,
)


def register_postgres_operations(root: CommandGroup) -> CommandGroup:
    """Register the ``pg`` group and its operations under ``root``."""
    pg = root.add_sub_group(CommandGroup(
        "pg",
        "PostgreSQL operations - Commands for listing and managing Azure Database "
        "for PostgreSQL - Flexible server.",
        arguments=POSTGRES_ARGUMENTS,
    ))

    database = pg.add_sub_group(CommandGroup("database", "PostgreSQL database operations"))
    database.add_operation("list", DATABASE_LIST)
    database.add_operation("query", DATABASE_QUERY)

    table = pg.add_sub_group(CommandGroup("table", "PostgreSQL table operations"))
    table.add_operation("list", TABLE_LIST)
    table.add_operation("get-schema", TABLE_GET_SCHEMA)

    server = pg.add_sub_group(CommandGroup("server", "PostgreSQL server operations"))
    server.add_operation("list", SERVER_LIST)
    server.add_operation("get-config", SERVER_GET_CONFIG)
    server.add_operation("get-param", SERVER_GET_PARAM)

    return pg
