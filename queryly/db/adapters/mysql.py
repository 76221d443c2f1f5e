"""MySQL database provider."""

from typing import Any, Dict

from queryly.config.models import DatabaseType
from queryly.db.base import BaseProvider


class MySQLProvider(BaseProvider):
    """MySQL database provider.

    Tables are listed from the database selected by the connection
    (``DATABASE()``), which is reported as their schema.
    """

    db_type = DatabaseType.MYSQL
    backend_names = frozenset({"mysql", "mariadb"})
    default_drivername = "mysql+pymysql"
    default_port = 3306
    default_database = "mysql"
    identifier_quotes = ("`", "`")

    def _build_query_options(self, options: Dict[str, str]) -> Dict[str, str]:
        query = super()._build_query_options(options)
        # Set default charset if not specified
        query.setdefault('charset', 'utf8mb4')
        return query

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get MySQL-specific engine options."""
        return {
            'connect_args': {
                'connect_timeout': 10,
            }
        }

    def _get_tables_query(self) -> str:
        return """
        SELECT table_schema, table_name
        FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
          AND table_schema = DATABASE()
        ORDER BY table_name
        """

    columns_query = """
        SELECT
            c.column_name,
            c.data_type,
            c.is_nullable,
            c.column_default,
            CASE WHEN k.column_name IS NOT NULL THEN 1 ELSE 0 END AS is_primary_key
        FROM information_schema.columns c
        LEFT JOIN information_schema.key_column_usage k
            ON c.table_schema = k.table_schema
           AND c.table_name = k.table_name
           AND c.column_name = k.column_name
           AND k.constraint_name = 'PRIMARY'
        WHERE c.table_schema = COALESCE(:schema_name, DATABASE())
          AND c.table_name = :table_name
        ORDER BY c.ordinal_position
    """
