"""SQLite database provider."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from queryly.config.models import DatabaseType
from queryly.db.base import BaseProvider, parse_key_value_string
from queryly.db.connection import DatabaseConnection
from queryly.exceptions import DatabaseConnectionError

MEMORY_DATABASE = ":memory:"
PATH_KEYS = ("data source", "datasource", "filename", "database")


class SQLiteProvider(BaseProvider):
    """SQLite database provider.

    Connection strings may be a file path, ``:memory:``, a ``sqlite:///``
    URL or ``Data Source=path``. Files must already exist.
    """

    db_type = DatabaseType.SQLITE
    backend_names = frozenset({"sqlite"})
    default_drivername = "sqlite"
    default_database = "main"
    supports_schemas = False

    def build_url(self, connection_string: str) -> URL:
        """Build a SQLite URL from a path, URL or ``Data Source=`` string.

        Raises:
            DatabaseConnectionError: If the string is malformed or the file is missing.
        """
        if "://" in connection_string:
            try:
                url = make_url(connection_string)
            except ArgumentError as e:
                raise DatabaseConnectionError(f"Malformed SQLite URL: {e}", db_type=self.db_type.value) from e
            if url.get_backend_name() != "sqlite":
                raise DatabaseConnectionError(
                    f"URL targets '{url.get_backend_name()}', expected SQLite", db_type=self.db_type.value
                )
            path = url.database or MEMORY_DATABASE
        elif "=" in connection_string:
            options = parse_key_value_string(connection_string)
            path = next((options[key] for key in PATH_KEYS if options.get(key)), None)
            if not path:
                raise DatabaseConnectionError(
                    "SQLite connection string requires 'Data Source'", db_type=self.db_type.value
                )
        else:
            path = connection_string

        if path != MEMORY_DATABASE:
            db_path = Path(path).expanduser()
            if not db_path.is_file():
                raise DatabaseConnectionError(
                    f"SQLite database file not found: {db_path}", db_type=self.db_type.value
                )
            path = str(db_path.resolve())

        return URL.create("sqlite", database=path)

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get SQLite-specific engine options."""
        return {
            'connect_args': {
                'timeout': 30,
            }
        }

    def _database_name(self, url: URL) -> str:
        if not url.database or url.database == MEMORY_DATABASE:
            return self.default_database
        return Path(url.database).stem

    def _get_tables_query(self) -> str:
        return """
        SELECT NULL AS table_schema, name AS table_name
        FROM sqlite_master
        WHERE type = 'table' AND name NOT LIKE 'sqlite_%'
        ORDER BY name
        """

    def _fetch_column_rows(
        self,
        connection: DatabaseConnection,
        schema: Optional[str],
        name: str,
    ) -> List[Tuple[Any, ...]]:
        """Read columns from ``PRAGMA table_info``.

        The pragma reports ``pk`` as the column's position within the primary
        key (0 when not part of it), which covers composite keys.
        """
        pragma = f"PRAGMA table_info({self.quote_identifier(name)})"
        rows = connection.connection.exec_driver_sql(pragma).mappings().fetchall()
        return [
            (
                row['name'],
                row['type'] or "",
                "NO" if row['notnull'] else "YES",
                row['dflt_value'],
                row['pk'] > 0,
            )
            for row in sorted(rows, key=lambda r: r['cid'])
        ]
