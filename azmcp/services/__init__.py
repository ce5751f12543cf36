"""Service interfaces resolved by operations through the ServiceLocator."""

from .postgres import PostgresService

__all__ = ['PostgresService']
