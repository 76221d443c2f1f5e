"""Pydantic models for Queryly profiles and settings."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseType(str, Enum):
    """Supported database engines."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLSERVER = "sqlserver"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: Any) -> "DatabaseType":
        """Resolve a display name, alias or enum value to a database type.

        Raises:
            ValueError: If the value does not name a supported engine.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace(" ", "")
        try:
            return _ALIASES[key]
        except KeyError:
            supported = ", ".join(t.display_name for t in cls)
            raise ValueError(f"Unknown database type '{value}'. Supported types: {supported}") from None


_DISPLAY_NAMES = {
    DatabaseType.SQLITE: "SQLite",
    DatabaseType.POSTGRESQL: "PostgreSQL",
    DatabaseType.MYSQL: "MySQL",
    DatabaseType.SQLSERVER: "SQLServer",
}

_ALIASES = {
    "sqlite": DatabaseType.SQLITE,
    "sqlite3": DatabaseType.SQLITE,
    "postgresql": DatabaseType.POSTGRESQL,
    "postgres": DatabaseType.POSTGRESQL,
    "pg": DatabaseType.POSTGRESQL,
    "mysql": DatabaseType.MYSQL,
    "mariadb": DatabaseType.MYSQL,
    "sqlserver": DatabaseType.SQLSERVER,
    "mssql": DatabaseType.SQLSERVER,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionProfile(BaseModel):
    """A saved, named database connection."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, frozen=True)
    name: str = Field(min_length=1)
    db_type: DatabaseType
    connection_string: str = Field(min_length=1)
    last_used: datetime = Field(default_factory=_utcnow)
    is_favorite: bool = False

    @field_validator('name', 'connection_string')
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Reject values that are only whitespace."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    @field_validator('db_type', mode='before')
    @classmethod
    def parse_db_type(cls, v: Any) -> DatabaseType:
        return DatabaseType.parse(v)

    @field_validator('last_used')
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps from older files as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def touch(self) -> None:
        """Record that the profile was just used."""
        self.last_used = _utcnow()


class Settings(BaseSettings):
    """Environment-driven settings (``QUERYLY_*`` variables)."""

    model_config = SettingsConfigDict(env_prefix="QUERYLY_", case_sensitive=False)

    log_level: str = Field(default="WARNING")
    connections_file: Path = Field(default_factory=lambda: Path.home() / ".queryly" / "connections.yaml")
    page_size: int = Field(default=50, ge=1, le=1000, description="Rows fetched per browse page")
    max_display_rows: int = Field(default=50, ge=1, description="Rows rendered per result table")
    max_cell_width: int = Field(default=50, ge=4, description="Characters rendered per cell")
    export_dir: Path = Field(default=Path("."))

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Invalid log level: {v}")
        return level
