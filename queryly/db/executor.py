"""Statement execution against an open connection."""

import logging
import time
from typing import Any

from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from queryly.db.connection import DatabaseConnection
from queryly.db.models import QueryResult
from queryly.exceptions import QueryExecutionError

logger = logging.getLogger(__name__)


def engine_message(error: BaseException) -> str:
    """Extract the engine's own error text from a driver/SQLAlchemy exception."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        message = str(error.orig)
    else:
        message = str(error)
    message = message.strip()
    return message or type(error).__name__


class QueryExecutor:
    """Runs SQL text verbatim and normalizes the outcome.

    ``execute_query`` never raises for engine errors: a rejected statement
    comes back as a failed :class:`QueryResult`, so interactive loops can
    report it and keep going. ``execute_scalar`` is for trusted, internally
    built statements and raises instead.
    """

    def __init__(self, connection: DatabaseConnection) -> None:
        self.connection = connection

    def execute_query(self, sql: str) -> QueryResult:
        """Execute one statement and materialize every row.

        Args:
            sql: Statement text, sent to the driver unchanged.

        Returns:
            QueryResult; ``succeeded`` is False when the engine rejected it.
        """
        start_time = time.perf_counter()

        try:
            result = self._run(sql)
            if result.returns_rows:
                columns = list(result.keys())
                rows = result.fetchall()
            else:
                columns, rows = [], []
                result.close()
            execution_time = time.perf_counter() - start_time

        except Exception as e:  # drivers do not always raise through SQLAlchemy
            execution_time = time.perf_counter() - start_time
            message = engine_message(e)
            logger.warning("Query failed after %.2fms: %s", execution_time * 1000, message)
            self._recover()
            return QueryResult.failure(message, execution_time)

        logger.debug("Query returned %d row(s) in %.2fms: %s", len(rows), execution_time * 1000, sql)
        return QueryResult.success(columns, [tuple(row) for row in rows], execution_time)

    def execute_scalar(self, sql: str) -> int:
        """Execute a statement and return its first value as an integer.

        Returns:
            The first column of the first row, or 0 when there is none.

        Raises:
            QueryExecutionError: If the engine rejects the statement.
        """
        try:
            row = self._run(sql).first()
        except Exception as e:  # pyformat drivers raise ValueError outside SQLAlchemy
            self._recover()
            raise QueryExecutionError(f"Scalar query failed: {engine_message(e)}", sql=sql) from e

        value: Any = row[0] if row is not None else None
        try:
            return int(value or 0)
        except (TypeError, ValueError) as e:
            raise QueryExecutionError(f"Scalar query returned a non-numeric value: {value!r}", sql=sql) from e

    def _run(self, sql: str) -> CursorResult:
        # No parameter collection reaches the driver, so pyformat drivers
        # (psycopg2, pymysql) leave literal % signs alone.
        return self.connection.connection.exec_driver_sql(sql, execution_options={"no_parameters": True})

    def _recover(self) -> None:
        """Discard the failed transaction so the next statement can run."""
        connection = self.connection.connection
        try:
            if connection.in_transaction():
                connection.rollback()
        except SQLAlchemyError as e:
            logger.debug("Rollback after failed statement raised: %s", e)
