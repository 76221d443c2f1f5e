"""SQL Server database provider."""

from typing import Any, Dict

from sqlalchemy.engine import URL

from queryly.config.models import DatabaseType
from queryly.db.base import BaseProvider

DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"


class SQLServerProvider(BaseProvider):
    """SQL Server database provider.

    SQL Server has no LIMIT clause; pages use ``OFFSET ... FETCH``, which
    requires an ORDER BY, so page queries order by a constant.
    """

    db_type = DatabaseType.SQLSERVER
    backend_names = frozenset({"mssql"})
    default_drivername = "mssql+pyodbc"
    default_port = 1433
    default_database = "master"
    identifier_quotes = ("[", "]")
    default_schema = "dbo"

    def build_url(self, connection_string: str) -> URL:
        url = super().build_url(connection_string)
        if url.drivername == "mssql+pyodbc" and not ({"driver", "odbc_connect"} & set(url.query)):
            url = url.update_query_dict({"driver": DEFAULT_ODBC_DRIVER})
        return url

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get SQL Server-specific engine options."""
        return {
            'connect_args': {
                'timeout': 10,
            }
        }

    def paginate(self, sql: str, limit: int, offset: int) -> str:
        return f"{sql} ORDER BY (SELECT NULL) OFFSET {int(offset)} ROWS FETCH NEXT {int(limit)} ROWS ONLY"

    def _get_tables_query(self) -> str:
        return """
        SELECT TABLE_SCHEMA, TABLE_NAME
        FROM INFORMATION_SCHEMA.TABLES
        WHERE TABLE_TYPE = 'BASE TABLE'
        ORDER BY TABLE_SCHEMA, TABLE_NAME
        """

    columns_query = """
        SELECT
            c.COLUMN_NAME,
            c.DATA_TYPE,
            c.IS_NULLABLE,
            c.COLUMN_DEFAULT,
            CASE WHEN pk.COLUMN_NAME IS NOT NULL THEN 1 ELSE 0 END AS IS_PRIMARY_KEY
        FROM INFORMATION_SCHEMA.COLUMNS c
        LEFT JOIN (
            SELECT ku.TABLE_SCHEMA, ku.TABLE_NAME, ku.COLUMN_NAME
            FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
            JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE ku
                ON tc.CONSTRAINT_NAME = ku.CONSTRAINT_NAME
               AND tc.TABLE_SCHEMA = ku.TABLE_SCHEMA
            WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY'
        ) pk
            ON c.TABLE_SCHEMA = pk.TABLE_SCHEMA
           AND c.TABLE_NAME = pk.TABLE_NAME
           AND c.COLUMN_NAME = pk.COLUMN_NAME
        WHERE c.TABLE_NAME = :table_name
          AND c.TABLE_SCHEMA = :schema_name
        ORDER BY c.ORDINAL_POSITION
    """
