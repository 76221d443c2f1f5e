"""Connection profiles and settings for Queryly."""

from queryly.config.models import (
    DatabaseType,
    ConnectionProfile,
    Settings,
)
from queryly.config.store import ProfileStore

__all__ = [
    # Models
    "DatabaseType",
    "ConnectionProfile",
    "Settings",
    # Persistence
    "ProfileStore",
]
