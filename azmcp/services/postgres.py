"""PostgreSQL service interface used by the ``pg`` operations."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class PostgresService(ABC):
    """Azure Database for PostgreSQL - Flexible Server operations."""

    @abstractmethod
    async def list_databases(self, subscription: str, resource_group: str, server: str, user: str) -> List[str]:
        """Names of the non-template databases on a server."""

    @abstractmethod
    async def execute_query(
        self, subscription: str, resource_group: str, server: str, user: str, database: str, query: str
    ) -> Dict[str, Any]:
        """Run a query; returns ``{"columnNames": [...], "rows": [[...], ...]}``."""

    @abstractmethod
    async def list_tables(
        self, subscription: str, resource_group: str, server: str, user: str, database: str
    ) -> List[str]:
        """Names of the tables in the ``public`` schema."""

    @abstractmethod
    async def get_table_schema(
        self, subscription: str, resource_group: str, server: str, user: str, database: str, table: str
    ) -> List[str]:
        """Columns of a table as ``"name: data_type"`` strings."""

    @abstractmethod
    async def list_servers(self, subscription: str, resource_group: str, user: str) -> List[str]:
        """Names of the flexible servers in a resource group."""

    @abstractmethod
    async def get_server_config(
        self, subscription: str, resource_group: str, user: str, server: str
    ) -> Dict[str, Any]:
        """Server name, location, version, SKU and storage/backup profile."""

    @abstractmethod
    async def get_server_parameter(
        self, subscription: str, resource_group: str, user: str, server: str, param: str
    ) -> str:
        """Value of a server configuration parameter."""
