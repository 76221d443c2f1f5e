"""Core exceptions for Queryly."""

from typing import Any, Dict, Optional


class QuerylyError(Exception):
    """Base exception for all Queryly errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(QuerylyError):
    """Raised when settings or the connections file cannot be loaded."""
    pass


class ProfileError(QuerylyError):
    """Raised when a connection profile is missing or conflicts with another."""

    def __init__(
        self,
        message: str,
        profile_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.profile_name = profile_name


class DatabaseConnectionError(QuerylyError):
    """Raised when a connection cannot be opened (bad string, auth, network)."""

    def __init__(
        self,
        message: str,
        db_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.db_type = db_type


class SchemaError(QuerylyError):
    """Raised when a catalog query fails."""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.table = table


class QueryExecutionError(QuerylyError):
    """Raised by scalar execution when the engine rejects the statement."""

    def __init__(
        self,
        message: str,
        sql: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.sql = sql


class ProviderNotSupportedError(QuerylyError):
    """Raised when no provider is registered for an engine kind."""
    pass


class ExportError(QuerylyError):
    """Raised when an export format is not supported."""
    pass
