"""Shared fixtures: stub collaborators and a controllable clock."""

from typing import Any, Dict, List, Tuple

import pytest

from azmcp.cli import create_service_locator
from azmcp.registry.operation_registry import OperationRegistry
from azmcp.registry.operations import build_command_tree
from azmcp.services.postgres import PostgresService


class StubPostgresService(PostgresService):
    """Returns canned values and records every call."""

    def __init__(self, **returns: Any):
        self.returns = returns
        self.calls: List[Tuple[Any, ...]] = []

    def _answer(self, method: str, *args: Any) -> Any:
        self.calls.append((method, *args))
        value = self.returns.get(method)
        if isinstance(value, Exception):
            raise value
        return value

    async def list_databases(self, subscription, resource_group, server, user):
        return self._answer("list_databases", subscription, resource_group, server, user)

    async def execute_query(self, subscription, resource_group, server, user, database, query):
        return self._answer("execute_query", subscription, resource_group, server, user, database, query)

    async def list_tables(self, subscription, resource_group, server, user, database):
        return self._answer("list_tables", subscription, resource_group, server, user, database)

    async def get_table_schema(self, subscription, resource_group, server, user, database, table):
        return self._answer("get_table_schema", subscription, resource_group, server, user, database, table)

    async def list_servers(self, subscription, resource_group, user):
        return self._answer("list_servers", subscription, resource_group, user)

    async def get_server_config(self, subscription, resource_group, user, server):
        return self._answer("get_server_config", subscription, resource_group, user, server)

    async def get_server_parameter(self, subscription, resource_group, user, server, param):
        return self._answer("get_server_parameter", subscription, resource_group, user, server, param)


class FakeClock:
    """Clock advancing by a fixed step on every read."""

    def __init__(self, start: float = 100.0, step: float = 0.25):
        self.now = start
        self.step = step
        self.reads = 0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        self.reads += 1
        return value


PG_SCOPE: Dict[str, str] = {
    "subscription": "sub123",
    "resource-group": "rg1",
    "user": "user1",
}


@pytest.fixture
def registry():
    """Registry over a freshly built production command tree."""
    return OperationRegistry(build_command_tree())


@pytest.fixture
def postgres_service():
    return StubPostgresService()


@pytest.fixture
def services(registry, postgres_service):
    return create_service_locator(registry, {PostgresService: postgres_service})
