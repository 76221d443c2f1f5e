"""Tests for configuration models."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from queryly.config.models import ConnectionProfile, DatabaseType, Settings


class TestDatabaseType:
    """Test engine name parsing."""

    @pytest.mark.parametrize("value, expected", [
        ("SQLite", DatabaseType.SQLITE),
        ("sqlite3", DatabaseType.SQLITE),
        ("PostgreSQL", DatabaseType.POSTGRESQL),
        ("postgres", DatabaseType.POSTGRESQL),
        ("MySQL", DatabaseType.MYSQL),
        ("mariadb", DatabaseType.MYSQL),
        ("SQLServer", DatabaseType.SQLSERVER),
        ("SQL Server", DatabaseType.SQLSERVER),
        ("mssql", DatabaseType.SQLSERVER),
        (DatabaseType.MYSQL, DatabaseType.MYSQL),
    ])
    def test_parse(self, value, expected):
        assert DatabaseType.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown database type 'oracle'"):
            DatabaseType.parse("oracle")

    def test_display_name(self):
        assert DatabaseType.POSTGRESQL.display_name == "PostgreSQL"


class TestConnectionProfile:
    """Test connection profile validation."""

    def test_defaults(self):
        profile = ConnectionProfile(name="local", db_type="sqlite", connection_string="app.db")

        assert profile.db_type is DatabaseType.SQLITE
        assert len(profile.id) == 32
        assert profile.is_favorite is False
        assert profile.last_used.tzinfo is not None

    def test_whitespace_is_stripped(self):
        profile = ConnectionProfile(name="  local ", db_type="sqlite", connection_string=" app.db ")
        assert profile.name == "local"
        assert profile.connection_string == "app.db"

    @pytest.mark.parametrize("field", ["name", "connection_string"])
    def test_blank_values_rejected(self, field):
        values = {"name": "local", "db_type": "sqlite", "connection_string": "app.db"}
        values[field] = "   "
        with pytest.raises(ValidationError):
            ConnectionProfile(**values)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            ConnectionProfile(name="x", db_type="oracle", connection_string="x")

    def test_naive_timestamp_is_utc(self):
        profile = ConnectionProfile(
            name="x", db_type="sqlite", connection_string="x", last_used=datetime(2024, 1, 1, 12, 0)
        )
        assert profile.last_used == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_touch_updates_last_used(self):
        profile = ConnectionProfile(
            name="x", db_type="sqlite", connection_string="x", last_used=datetime(2000, 1, 1)
        )
        profile.touch()
        assert profile.last_used.year >= 2024


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for var in ("QUERYLY_LOG_LEVEL", "QUERYLY_PAGE_SIZE", "QUERYLY_CONNECTIONS_FILE"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings()

        assert settings.log_level == "WARNING"
        assert settings.page_size == 50
        assert settings.max_display_rows == 50
        assert settings.max_cell_width == 50
        assert settings.connections_file == Path.home() / ".queryly" / "connections.yaml"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("QUERYLY_PAGE_SIZE", "25")
        monkeypatch.setenv("QUERYLY_LOG_LEVEL", "debug")
        monkeypatch.setenv("QUERYLY_CONNECTIONS_FILE", str(tmp_path / "c.yaml"))

        settings = Settings()

        assert settings.page_size == 25
        assert settings.log_level == "DEBUG"
        assert settings.connections_file == tmp_path / "c.yaml"

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setenv("QUERYLY_PAGE_SIZE", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("QUERYLY_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings()
