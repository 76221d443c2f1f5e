"""Base provider: the uniform contract over every SQL dialect."""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from queryly.config.models import DatabaseType
from queryly.db.connection import DatabaseConnection
from queryly.db.executor import QueryExecutor, engine_message
from queryly.db.models import ColumnDescriptor, TableDescriptor
from queryly.exceptions import DatabaseConnectionError, QuerylyError, SchemaError

logger = logging.getLogger(__name__)

# ADO.NET-style keys recognised in "Key=Value;Key=Value" connection strings.
HOST_KEYS = frozenset({"host", "server", "data source", "datasource", "address", "addr"})
PORT_KEYS = frozenset({"port"})
DATABASE_KEYS = frozenset({"database", "initial catalog", "dbname"})
USER_KEYS = frozenset({"username", "user id", "userid", "user", "uid"})
PASSWORD_KEYS = frozenset({"password", "pwd"})


def parse_key_value_string(connection_string: str) -> Dict[str, str]:
    """Split ``Key=Value;Key=Value`` into a dict with lower-cased keys.

    Raises:
        DatabaseConnectionError: If a segment has no ``=``.
    """
    options: Dict[str, str] = {}
    for segment in connection_string.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        if "=" not in segment:
            raise DatabaseConnectionError(f"Malformed connection string segment: '{segment}'")
        key, value = segment.split("=", 1)
        options[" ".join(key.lower().split())] = value.strip()
    return options


def _pop_first(options: Dict[str, str], keys: FrozenSet[str]) -> Optional[str]:
    value = None
    for key in list(options):
        if key in keys:
            value = options.pop(key)
    return value


class BaseProvider(ABC):
    """Base class for database providers.

    A provider knows how to open connections for one engine kind and owns
    that engine's dialect: identifier quoting, catalog queries and the
    pagination clause.
    """

    db_type: ClassVar[DatabaseType]
    backend_names: ClassVar[FrozenSet[str]] = frozenset()
    default_drivername: ClassVar[str] = ""
    default_port: ClassVar[Optional[int]] = None
    default_database: ClassVar[str] = ""
    identifier_quotes: ClassVar[Tuple[str, str]] = ('"', '"')
    supports_schemas: ClassVar[bool] = True
    default_schema: ClassVar[Optional[str]] = None

    # Catalog query returning (name, type, nullable, default, is_pk) rows.
    # Bound parameters: ``:table_name`` and ``:schema_name``.
    columns_query: ClassVar[str] = ""

    @property
    def display_name(self) -> str:
        return self.db_type.display_name

    # Connections

    def build_url(self, connection_string: str) -> URL:
        """Turn a connection string into a SQLAlchemy URL.

        Accepts a SQLAlchemy URL for this dialect or an ADO.NET-style
        ``Key=Value;...`` string.

        Raises:
            DatabaseConnectionError: If the string is malformed or targets another engine.
        """
        if "://" in connection_string:
            try:
                url = make_url(self._normalize_url_text(connection_string))
            except ArgumentError as e:
                raise DatabaseConnectionError(
                    f"Malformed {self.display_name} URL: {e}", db_type=self.db_type.value
                ) from e
            if url.get_backend_name() not in self.backend_names:
                raise DatabaseConnectionError(
                    f"URL targets '{url.get_backend_name()}', expected {self.display_name}",
                    db_type=self.db_type.value,
                )
            if "+" not in url.drivername and self.default_drivername:
                url = url.set(drivername=self.default_drivername)
            return url

        options = parse_key_value_string(connection_string)
        host = _pop_first(options, HOST_KEYS)
        port = _pop_first(options, PORT_KEYS)
        if host and "," in host and port is None:
            host, port = (part.strip() for part in host.split(",", 1))
        if not host:
            raise DatabaseConnectionError(
                f"{self.display_name} connection string requires a host", db_type=self.db_type.value
            )
        try:
            port_number = int(port) if port else self.default_port
        except ValueError:
            raise DatabaseConnectionError(f"Invalid port: '{port}'", db_type=self.db_type.value) from None

        return URL.create(
            self.default_drivername,
            username=_pop_first(options, USER_KEYS),
            password=_pop_first(options, PASSWORD_KEYS),
            host=host,
            port=port_number,
            database=_pop_first(options, DATABASE_KEYS) or None,
            query=self._build_query_options(options),
        )

    def _normalize_url_text(self, connection_string: str) -> str:
        return connection_string

    def _build_query_options(self, options: Dict[str, str]) -> Dict[str, str]:
        """Map leftover connection string keys to driver URL options."""
        return {key.replace(" ", ""): value for key, value in options.items()}

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get database-specific engine options."""
        return {}

    def _database_name(self, url: URL) -> str:
        return url.database or self.default_database

    def open_connection(self, connection_string: str) -> DatabaseConnection:
        """Open a live connection.

        Args:
            connection_string: URL or ``Key=Value`` string for this engine.

        Returns:
            An open DatabaseConnection; use it as a context manager.

        Raises:
            DatabaseConnectionError: If the string is empty or malformed, or the
                engine rejects the handshake.
        """
        if connection_string is None or not connection_string.strip():
            raise DatabaseConnectionError(
                "Connection string cannot be null or empty.", db_type=self.db_type.value
            )

        url = self.build_url(connection_string.strip())
        engine = None
        try:
            engine = create_engine(
                url,
                poolclass=NullPool,
                isolation_level="AUTOCOMMIT",
                **self._get_engine_options(),
            )
            connection = engine.connect()
        except Exception as e:  # missing drivers surface as ImportError, not SQLAlchemyError
            if engine is not None:
                engine.dispose()
            raise DatabaseConnectionError(
                f"Failed to open {self.display_name} connection: {engine_message(e)}",
                db_type=self.db_type.value,
            ) from e

        database = self._database_name(url)
        logger.debug("Opened %s connection to '%s'", self.display_name, database)
        return DatabaseConnection(engine, connection, self.db_type, database)

    def test_connection(self, connection_string: str) -> bool:
        """Check that a connection can be opened and queried.

        Never raises: every failure is reported as False.
        """
        try:
            with self.open_connection(connection_string) as connection:
                connection.connection.exec_driver_sql("SELECT 1").fetchone()
            return True
        except Exception as e:
            logger.debug("%s connection test failed: %s", self.display_name, e)
            return False

    # Introspection

    def list_databases(self, connection: DatabaseConnection) -> List[str]:
        """The database this connection targets (never the whole server)."""
        return [connection.database or self.default_database]

    @abstractmethod
    def _get_tables_query(self) -> str:
        """Catalog query returning (schema, table name) for base tables."""
        pass

    def _fetch_column_rows(
        self,
        connection: DatabaseConnection,
        schema: Optional[str],
        name: str,
    ) -> List[Tuple[Any, ...]]:
        """Rows of (name, type, nullable, default, is_pk) in ordinal order."""
        params = {"table_name": name, "schema_name": schema or self.default_schema}
        return connection.connection.execute(text(self.columns_query), params).fetchall()

    def list_tables(self, connection: DatabaseConnection, database: str) -> List[TableDescriptor]:
        """List base tables with exact row counts.

        Issues one ``COUNT(*)`` per table, so cost grows with the number and
        size of tables.

        Raises:
            SchemaError: If a catalog or count query fails.
        """
        try:
            names = connection.connection.execute(text(self._get_tables_query())).fetchall()
        except SQLAlchemyError as e:
            raise SchemaError(f"Failed to retrieve tables: {engine_message(e)}") from e

        executor = QueryExecutor(connection)
        tables = []
        for schema, name in names:
            try:
                row_count = executor.execute_scalar(self.count_query(name, schema))
            except QuerylyError as e:
                raise SchemaError(f"Failed to count rows in '{name}': {e.message}", table=name) from e
            tables.append(TableDescriptor(name=name, row_count=row_count, schema=schema or None))

        logger.debug("Listed %d table(s) in '%s'", len(tables), database)
        return tables

    def list_columns(
        self,
        connection: DatabaseConnection,
        database: str,
        table: str,
    ) -> List[ColumnDescriptor]:
        """List a table's columns in ordinal order with primary-key flags.

        Raises:
            SchemaError: If the table name is blank or the catalog query fails.
        """
        if table is None or not table.strip():
            raise SchemaError("Table name cannot be empty.")

        schema, name = self.split_table_name(table)
        try:
            rows = self._fetch_column_rows(connection, schema, name)
        except SQLAlchemyError as e:
            raise SchemaError(
                f"Failed to retrieve columns for table '{table}': {engine_message(e)}", table=table
            ) from e

        return [
            ColumnDescriptor(
                name=row[0],
                data_type=str(row[1]),
                is_nullable=str(row[2]).upper() in {"YES", "1", "TRUE"},
                is_primary_key=bool(row[4]),
                default_value=None if row[3] is None else str(row[3]),
            )
            for row in rows
        ]

    # Dialect

    def quote_identifier(self, identifier: str) -> str:
        """Quote one identifier, doubling any embedded closing quote."""
        if not identifier:
            raise SchemaError("Identifier cannot be empty")
        opening, closing = self.identifier_quotes
        return f"{opening}{identifier.replace(closing, closing * 2)}{closing}"

    def split_table_name(self, table: str) -> Tuple[Optional[str], str]:
        """Split ``schema.table`` for engines with schemas."""
        table = table.strip()
        if self.supports_schemas and "." in table:
            schema, name = table.split(".", 1)
            return schema or None, name
        return None, table

    def quote_table(self, table: str, schema: Optional[str] = None) -> str:
        """Build a quoted table reference, qualifying it when a schema is given."""
        if schema is None:
            schema, table = self.split_table_name(table)
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table)

    def paginate(self, sql: str, limit: int, offset: int) -> str:
        """Append this dialect's page clause to a SELECT."""
        return f"{sql} LIMIT {int(limit)} OFFSET {int(offset)}"

    def select_all_query(self, table: str, schema: Optional[str] = None) -> str:
        return f"SELECT * FROM {self.quote_table(table, schema)}"

    def select_page_query(self, table: str, limit: int, offset: int, schema: Optional[str] = None) -> str:
        return self.paginate(self.select_all_query(table, schema), limit, offset)

    def count_query(self, table: str, schema: Optional[str] = None) -> str:
        return f"SELECT COUNT(*) FROM {self.quote_table(table, schema)}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.db_type.value}>"
