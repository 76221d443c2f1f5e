"""Queryly: a terminal companion for relational databases.

Queryly provides:
- Saved connection profiles for SQLite, PostgreSQL, MySQL and SQL Server
- Schema exploration (tables, columns, schema tree)
- Interactive paginated table browsing
- An interactive SQL prompt
- CSV and JSON export
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports
from queryly.exceptions import (
    QuerylyError,
    ConfigurationError,
    DatabaseConnectionError,
    ProviderNotSupportedError,
    SchemaError,
)

__all__ = [
    "__version__",
    "QuerylyError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "ProviderNotSupportedError",
    "SchemaError",
]
