"""Database providers for the supported engines."""

from queryly.db.adapters.sqlite import SQLiteProvider
from queryly.db.adapters.postgresql import PostgreSQLProvider
from queryly.db.adapters.mysql import MySQLProvider
from queryly.db.adapters.sqlserver import SQLServerProvider

__all__ = [
    "SQLiteProvider",
    "PostgreSQLProvider",
    "MySQLProvider",
    "SQLServerProvider",
]
