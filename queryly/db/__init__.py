"""Database providers, connections and query execution."""

from queryly.db.base import BaseProvider
from queryly.db.connection import DatabaseConnection
from queryly.db.executor import QueryExecutor
from queryly.db.models import (
    Cell,
    CellKind,
    ColumnDescriptor,
    QueryResult,
    TableDescriptor,
)
from queryly.db.registry import ProviderRegistry, default_registry
from queryly.db.adapters import (
    SQLiteProvider,
    PostgreSQLProvider,
    MySQLProvider,
    SQLServerProvider,
)

__all__ = [
    # Base classes
    "BaseProvider",
    "DatabaseConnection",
    "QueryExecutor",
    # Data model
    "Cell",
    "CellKind",
    "ColumnDescriptor",
    "QueryResult",
    "TableDescriptor",
    # Provider resolution
    "ProviderRegistry",
    "default_registry",
    # Providers
    "SQLiteProvider",
    "PostgreSQLProvider",
    "MySQLProvider",
    "SQLServerProvider",
]
