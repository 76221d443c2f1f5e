"""PostgreSQL database provider."""

from typing import Any, Dict

from queryly.config.models import DatabaseType
from queryly.db.base import BaseProvider


class PostgreSQLProvider(BaseProvider):
    """PostgreSQL database provider.

    Only the ``public`` schema is listed; other schemas are reachable by
    passing ``schema.table`` names.
    """

    db_type = DatabaseType.POSTGRESQL
    backend_names = frozenset({"postgresql"})
    default_drivername = "postgresql+psycopg2"
    default_port = 5432
    default_database = "postgres"
    default_schema = "public"

    # ADO.NET (Npgsql) option names that differ from libpq's.
    OPTION_ALIASES = {
        "ssl mode": "sslmode",
        "sslmode": "sslmode",
        "timeout": "connect_timeout",
        "application name": "application_name",
    }

    def _normalize_url_text(self, connection_string: str) -> str:
        # libpq accepts postgres://, SQLAlchemy only postgresql://
        if connection_string.startswith("postgres://"):
            return "postgresql://" + connection_string[len("postgres://"):]
        return connection_string

    def _build_query_options(self, options: Dict[str, str]) -> Dict[str, str]:
        query = {}
        for key, value in options.items():
            name = self.OPTION_ALIASES.get(key, key.replace(" ", "_"))
            query[name] = value.lower() if name == "sslmode" else value
        return query

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get PostgreSQL-specific engine options."""
        return {
            'connect_args': {
                'connect_timeout': 10,
                'application_name': 'queryly',
            }
        }

    def _get_tables_query(self) -> str:
        return """
        SELECT table_schema, table_name
        FROM information_schema.tables
        WHERE table_schema = 'public'
          AND table_type = 'BASE TABLE'
        ORDER BY table_name
        """

    columns_query = """
        SELECT
            c.column_name,
            c.data_type,
            c.is_nullable,
            c.column_default,
            CASE WHEN pk.column_name IS NOT NULL THEN 1 ELSE 0 END AS is_primary_key
        FROM information_schema.columns c
        LEFT JOIN (
            SELECT ku.column_name
            FROM information_schema.table_constraints tc
            JOIN information_schema.key_column_usage ku
                ON tc.constraint_name = ku.constraint_name
               AND tc.table_schema = ku.table_schema
               AND tc.table_name = ku.table_name
            WHERE tc.constraint_type = 'PRIMARY KEY'
              AND tc.table_name = :table_name
              AND tc.table_schema = :schema_name
        ) pk ON c.column_name = pk.column_name
        WHERE c.table_name = :table_name
          AND c.table_schema = :schema_name
        ORDER BY c.ordinal_position
    """
