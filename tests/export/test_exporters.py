"""Tests for CSV and JSON export."""

import csv
import json
from datetime import datetime
from decimal import Decimal

import pytest

from queryly.db.models import QueryResult
from queryly.exceptions import ExportError
from queryly.export import (
    CSVExporter,
    ExportFormat,
    JSONExporter,
    export_filename,
    export_table,
    get_exporter,
)


def reject_constant(name):
    raise ValueError(f"non-standard JSON constant: {name}")


@pytest.fixture
def tricky_result():
    return QueryResult.success(
        ["id", "name", "note"],
        [
            (1, "plain", None),
            (2, 'Smith, "Bob"', "line\nbreak"),
        ],
        0.01,
    )


class TestExportFilename:
    """Test export file naming."""

    def test_format(self):
        now = datetime(2024, 3, 5, 14, 7, 9)
        assert export_filename("users", ExportFormat.CSV, now) == "users_20240305_140709.csv"
        assert export_filename("users", ExportFormat.JSON, now) == "users_20240305_140709.json"

    def test_unsafe_characters_replaced(self):
        now = datetime(2024, 3, 5, 14, 7, 9)
        assert export_filename("sales/orders", "csv", now) == "sales_orders_20240305_140709.csv"


class TestCSVExporter:
    """Test CSV output."""

    def test_supported_format(self):
        assert CSVExporter().supported_format == ExportFormat.CSV

    def test_quoting_round_trip(self, tricky_result, tmp_path):
        output_path = tmp_path / "out.csv"

        result = CSVExporter().export(tricky_result, output_path)

        assert result.success
        assert result.row_count == 2
        assert result.file_size == output_path.stat().st_size
        with open(output_path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows == [
            ["id", "name", "note"],
            ["1", "plain", ""],
            ["2", 'Smith, "Bob"', "line\nbreak"],
        ]

    def test_raw_quoting(self, tricky_result, tmp_path):
        output_path = tmp_path / "out.csv"
        CSVExporter().export(tricky_result, output_path)

        content = output_path.read_text(encoding="utf-8")
        assert '"Smith, ""Bob"""' in content
        assert content.startswith("id,name,note\n")

    def test_creates_parent_directories(self, tricky_result, tmp_path):
        output_path = tmp_path / "nested" / "dir" / "out.csv"
        assert CSVExporter().export(tricky_result, output_path).success
        assert output_path.exists()

    def test_failed_result_is_not_written(self, tmp_path):
        output_path = tmp_path / "out.csv"

        result = CSVExporter().export(QueryResult.failure("boom", 0), output_path)

        assert not result.success
        assert result.error_message == "boom"
        assert not output_path.exists()


class TestJSONExporter:
    """Test JSON output."""

    def test_supported_format(self):
        assert JSONExporter().supported_format == ExportFormat.JSON

    def test_records_with_null(self, tricky_result, tmp_path):
        output_path = tmp_path / "out.json"

        result = JSONExporter().export(tricky_result, output_path)

        assert result.success
        data = json.loads(output_path.read_text(encoding="utf-8"))
        assert data == [
            {"id": 1, "name": "plain", "note": None},
            {"id": 2, "name": 'Smith, "Bob"', "note": "line\nbreak"},
        ]
        assert "null" in output_path.read_text(encoding="utf-8")

    def test_special_numbers_are_valid_json(self, tmp_path):
        output_path = tmp_path / "out.json"
        result = QueryResult.success(
            ["v"],
            [(Decimal("Infinity"),), (Decimal("NaN"),), (float("-inf"),), (Decimal("12345678901234567.89"),)],
            0.0,
        )

        export_result = JSONExporter().export(result, output_path)

        assert export_result.success
        data = json.loads(output_path.read_text(encoding="utf-8"), parse_constant=reject_constant)
        assert [row["v"] for row in data] == ["Infinity", "NaN", "-Infinity", "12345678901234567.89"]

    def test_empty_result_is_empty_array(self, tmp_path):
        output_path = tmp_path / "out.json"
        JSONExporter().export(QueryResult.success(["id"], [], 0), output_path)
        assert json.loads(output_path.read_text(encoding="utf-8")) == []


class TestExportTable:
    """Test whole-table export against SQLite."""

    def test_get_exporter(self):
        assert isinstance(get_exporter("CSV"), CSVExporter)
        assert isinstance(get_exporter(ExportFormat.JSON), JSONExporter)

    def test_unsupported_format(self):
        with pytest.raises(ExportError):
            get_exporter("xml")

    def test_export_users_csv(self, sqlite_provider, sqlite_connection, tmp_path):
        now = datetime(2024, 1, 1, 0, 0, 0)

        result = export_table(sqlite_provider, sqlite_connection, "users", "csv", tmp_path, now=now)

        assert result.success
        assert result.output_path == tmp_path / "users_20240101_000000.csv"
        assert result.row_count == 3
        with open(result.output_path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [row["name"] for row in rows] == ["Ada", 'Smith, "Bob"', "Line\nBreak"]
        assert rows[1]["email"] == ""

    def test_export_items_json_is_not_paginated(self, sqlite_provider, sqlite_connection, tmp_path):
        result = export_table(sqlite_provider, sqlite_connection, "items", ExportFormat.JSON, tmp_path)

        assert result.success
        data = json.loads(result.output_path.read_text(encoding="utf-8"))
        assert len(data) == 120
        assert data[0] == {"id": 1, "label": "item 1", "price": 1.5}

    def test_export_missing_table(self, sqlite_provider, sqlite_connection, tmp_path):
        result = export_table(sqlite_provider, sqlite_connection, "nope", "csv", tmp_path / "out")

        assert not result.success
        assert "no such table" in result.error_message
        assert not (tmp_path / "out").exists()
