"""Registry mapping engine kinds to provider implementations."""

from typing import Dict, List, Optional, Type

from queryly.config.models import DatabaseType
from queryly.db.adapters.mysql import MySQLProvider
from queryly.db.adapters.postgresql import PostgreSQLProvider
from queryly.db.adapters.sqlite import SQLiteProvider
from queryly.db.adapters.sqlserver import SQLServerProvider
from queryly.db.base import BaseProvider
from queryly.exceptions import ProviderNotSupportedError


class ProviderRegistry:
    """Resolves a provider for an engine kind.

    One registry is built per CLI invocation and handed to whatever needs a
    provider; adding an engine means registering a class here.
    """

    def __init__(self, providers: Optional[Dict[DatabaseType, Type[BaseProvider]]] = None) -> None:
        self._providers: Dict[DatabaseType, Type[BaseProvider]] = dict(providers or {})

    def register(self, db_type: DatabaseType, provider_class: Type[BaseProvider]) -> None:
        """Register (or replace) the provider for an engine kind.

        Args:
            db_type: Engine kind.
            provider_class: Provider class to instantiate for it.
        """
        self._providers[DatabaseType.parse(db_type)] = provider_class

    def get(self, db_type: DatabaseType) -> BaseProvider:
        """Create the provider for an engine kind.

        Raises:
            ProviderNotSupportedError: If no provider is registered for it.
        """
        provider_class = self._providers.get(db_type)
        if provider_class is None:
            supported = ", ".join(t.display_name for t in self.supported_types())
            name = getattr(db_type, "display_name", db_type)
            raise ProviderNotSupportedError(
                f"Database type {name} is not supported. Supported types: {supported}"
            )
        return provider_class()

    def supported_types(self) -> List[DatabaseType]:
        """Get list of registered engine kinds."""
        return list(self._providers.keys())


def default_registry() -> ProviderRegistry:
    """A registry with every built-in provider."""
    return ProviderRegistry({
        DatabaseType.SQLITE: SQLiteProvider,
        DatabaseType.POSTGRESQL: PostgreSQLProvider,
        DatabaseType.MYSQL: MySQLProvider,
        DatabaseType.SQLSERVER: SQLServerProvider,
    })
