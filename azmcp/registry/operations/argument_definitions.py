"""Shared argument definitions and the fragments groups are built from."""

from ..arguments import ArgumentDefinition, ArgumentSchema
from ...config.settings import DEFAULT_PORT, DEFAULT_TRANSPORT

# ============================================================================
# Common (subscription scope)
# ============================================================================

TENANT = ArgumentDefinition(
    "tenant",
    "The Azure Active Directory tenant ID or name. This can be either the GUID "
    "identifier or the display name of your Azure AD tenant.",
)

SUBSCRIPTION = ArgumentDefinition(
    "subscription",
    "The Azure subscription ID or name. This can be either the GUID identifier "
    "or the display name of the Azure subscription to use.",
    required=True,
)

AUTH_METHOD = ArgumentDefinition(
    "auth-method",
    "Authentication method to use. Options: 'credential' (Azure CLI/managed identity), "
    "'key' (access key), or 'connectionString'.",
    default="credential",
)

RESOURCE_GROUP = ArgumentDefinition(
    "resource-group",
    "The name of the Azure resource group. This is a logical container for Azure resources.",
    required=True,
)

SUBSCRIPTION_ARGUMENTS: ArgumentSchema = (SUBSCRIPTION, TENANT, AUTH_METHOD, RESOURCE_GROUP)


# ============================================================================
# PostgreSQL
# ============================================================================

PG_USER = ArgumentDefinition(
    "user",
    "The user name for access PostgreSQL server.",
    required=True,
)

PG_SERVER = ArgumentDefinition(
    "server",
    "The PostgreSQL server to be accessed.",
)

PG_DATABASE = ArgumentDefinition(
    "database",
    "The PostgreSQL database to be access.",
)

PG_TABLE = ArgumentDefinition(
    "table",
    "The PostgreSQL table to be access.",
)

PG_QUERY = ArgumentDefinition(
    "query",
    "Query to be executed against a PostgreSQL database.",
)

PG_PARAM = ArgumentDefinition(
    "param",
    "The PostgreSQL parameter to be accessed.",
)

POSTGRES_ARGUMENTS: ArgumentSchema = (*SUBSCRIPTION_ARGUMENTS, PG_USER)


# ============================================================================
# MCP server
# ============================================================================

TRANSPORT = ArgumentDefinition(
    "transport",
    "Transport mechanism to use for Azure MCP Server.",
    default=DEFAULT_TRANSPORT,
)

PORT = ArgumentDefinition(
    "port",
    "Port to use for Azure MCP Server. Ignored by the stdio transport.",
    default=DEFAULT_PORT,
    value_type=int,
)
