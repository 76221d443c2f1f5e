"""Tests for statement execution."""

import pytest

from queryly.db.executor import QueryExecutor
from queryly.db.models import CellKind
from queryly.exceptions import QueryExecutionError


class TestExecuteQuery:
    """Test execute_query result normalization."""

    def test_select_returns_columns_and_cells(self, sqlite_connection):
        result = QueryExecutor(sqlite_connection).execute_query(
            "SELECT id, name, email FROM users ORDER BY id"
        )

        assert result.succeeded
        assert result.error_message is None
        assert result.columns == ["id", "name", "email"]
        assert result.row_count == 3
        assert result.rows[0][0].kind is CellKind.INTEGER
        assert result.rows[1][2].is_null
        assert result.execution_time >= 0

    def test_invalid_sql_is_a_failed_result(self, sqlite_connection):
        result = QueryExecutor(sqlite_connection).execute_query("SELECT * FROM missing_table")

        assert not result.succeeded
        assert "no such table: missing_table" in result.error_message
        assert result.columns == []
        assert result.rows == []

    def test_connection_usable_after_failure(self, sqlite_connection):
        executor = QueryExecutor(sqlite_connection)
        executor.execute_query("NOT SQL AT ALL")

        result = executor.execute_query("SELECT 1 AS one")

        assert result.succeeded
        assert result.values() == [[1]]

    def test_statement_without_rows(self, sqlite_connection):
        result = QueryExecutor(sqlite_connection).execute_query(
            "UPDATE users SET email = 'new@example.com' WHERE id = 1"
        )

        assert result.succeeded
        assert result.columns == []
        assert result.is_empty

    def test_duplicate_column_names_are_kept(self, sqlite_connection):
        result = QueryExecutor(sqlite_connection).execute_query("SELECT 1 AS a, 2 AS a")

        assert result.columns == ["a", "a"]
        assert result.values() == [[1, 2]]

    def test_sql_is_sent_verbatim(self, sqlite_connection):
        # A colon would be a bind parameter under text(); here it is literal.
        result = QueryExecutor(sqlite_connection).execute_query("SELECT 'a:b' AS v")

        assert result.succeeded
        assert result.values() == [["a:b"]]


class TestExecuteScalar:
    """Test execute_scalar."""

    def test_count(self, sqlite_connection):
        assert QueryExecutor(sqlite_connection).execute_scalar("SELECT COUNT(*) FROM items") == 120

    def test_null_is_zero(self, sqlite_connection):
        assert QueryExecutor(sqlite_connection).execute_scalar("SELECT NULL") == 0

    def test_no_rows_is_zero(self, sqlite_connection):
        assert QueryExecutor(sqlite_connection).execute_scalar("SELECT id FROM users WHERE id = 99") == 0

    def test_failure_raises(self, sqlite_connection):
        with pytest.raises(QueryExecutionError) as exc_info:
            QueryExecutor(sqlite_connection).execute_scalar("SELECT COUNT(*) FROM nope")
        assert "no such table" in exc_info.value.message
        assert exc_info.value.sql == "SELECT COUNT(*) FROM nope"

    def test_non_numeric_raises(self, sqlite_connection):
        with pytest.raises(QueryExecutionError):
            QueryExecutor(sqlite_connection).execute_scalar("SELECT 'abc'")


@pytest.fixture
def driver_calls(sqlite_connection, monkeypatch):
    """Record what reaches ``cursor.execute`` on the test connection."""
    calls = []
    dialect = sqlite_connection.engine.dialect

    def execute_no_params(cursor, statement, context=None):
        calls.append((statement,))
        cursor.execute(statement)

    def execute(cursor, statement, parameters, context=None):
        calls.append((statement, parameters))
        cursor.execute(statement, parameters)

    monkeypatch.setattr(dialect, "do_execute_no_params", execute_no_params)
    monkeypatch.setattr(dialect, "do_execute", execute)
    return calls


class TestDriverCalls:
    """Test that statements reach the driver without a parameter collection."""

    def test_query_with_percent_sign(self, sqlite_connection, driver_calls):
        result = QueryExecutor(sqlite_connection).execute_query("SELECT 'A%' LIKE 'A%' AS matched, 7 % 3 AS rem")

        assert result.succeeded
        assert result.values() == [[1, 1]]
        assert driver_calls == [("SELECT 'A%' LIKE 'A%' AS matched, 7 % 3 AS rem",)]

    def test_scalar_with_percent_sign(self, sqlite_connection, driver_calls):
        count = QueryExecutor(sqlite_connection).execute_scalar(
            "SELECT COUNT(*) FROM users WHERE name LIKE 'S%'"
        )

        assert count == 1
        assert driver_calls == [("SELECT COUNT(*) FROM users WHERE name LIKE 'S%'",)]

    def test_driver_formatting_error_is_wrapped(self, sqlite_connection, monkeypatch):
        def execute_no_params(cursor, statement, context=None):
            raise ValueError("unsupported format character")

        monkeypatch.setattr(sqlite_connection.engine.dialect, "do_execute_no_params", execute_no_params)
        executor = QueryExecutor(sqlite_connection)

        with pytest.raises(QueryExecutionError, match="unsupported format character"):
            executor.execute_scalar("SELECT COUNT(*) FROM items")
        result = executor.execute_query("SELECT 1")
        assert not result.succeeded
        assert "unsupported format character" in result.error_message
