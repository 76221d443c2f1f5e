"""Live database connection handle."""

import logging
from typing import Optional

from sqlalchemy.engine import Connection, Engine

from queryly.config.models import DatabaseType

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """One open connection plus the engine that created it.

    Instances are context managers; leaving the ``with`` block closes the
    connection and disposes the engine, whether or not an error occurred.
    """

    def __init__(
        self,
        engine: Engine,
        connection: Connection,
        db_type: DatabaseType,
        database: str,
    ) -> None:
        self.engine = engine
        self.connection = connection
        self.db_type = db_type
        self.database = database
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the connection and release the engine. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self.connection.close()
        finally:
            self.engine.dispose()
            logger.debug("Closed %s connection to '%s'", self.db_type.display_name, self.database)

    def __enter__(self) -> "DatabaseConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<DatabaseConnection {self.db_type.value}:{self.database} ({state})>"
