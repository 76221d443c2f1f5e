"""YAML-backed persistence for connection profiles."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from queryly.config.models import ConnectionProfile, Settings
from queryly.exceptions import ConfigurationError, ProfileError

logger = logging.getLogger(__name__)


class ProfileStore:
    """Connection profile store with environment variable interpolation.

    Profiles live in a YAML file under a top-level ``connections`` list. The
    file is read on every call and rewritten on every change, so two
    commands never share in-memory state.
    """

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        """Initialize the store.

        Args:
            path: Path to the connections file. Defaults to the configured
                ``connections_file`` setting.
        """
        self.path = Path(path) if path else Settings().connections_file

    def list_profiles(self) -> List[ConnectionProfile]:
        """Return all profiles, favorites first, then most recently used."""
        profiles = self._load()
        return sorted(profiles, key=lambda p: (not p.is_favorite, -p.last_used.timestamp()))

    def get(self, name: str) -> Optional[ConnectionProfile]:
        """Find a profile by name (case-insensitive).

        Connection strings of the returned profile have ``${VAR}`` references
        expanded.
        """
        profile = self._find(self._load(), name)
        if profile is None:
            return None
        expanded = self.expand_env_vars(profile.connection_string)
        return profile.model_copy(update={'connection_string': expanded})

    def require(self, name: str) -> ConnectionProfile:
        """Like :meth:`get` but raises when the profile does not exist.

        Raises:
            ProfileError: If no profile has this name.
        """
        profile = self.get(name)
        if profile is None:
            raise ProfileError(f"Connection '{name}' not found.", profile_name=name)
        return profile

    def add(self, profile: ConnectionProfile) -> ConnectionProfile:
        """Persist a new profile.

        Raises:
            ProfileError: If a profile with the same name already exists.
        """
        profiles = self._load()
        if self._find(profiles, profile.name) is not None:
            raise ProfileError(f"Connection '{profile.name}' already exists.", profile_name=profile.name)
        profiles.append(profile)
        self._save(profiles)
        logger.info("Saved connection profile '%s'", profile.name)
        return profile

    def remove(self, name: str) -> bool:
        """Delete a profile by name. Returns False if it did not exist."""
        profiles = self._load()
        target = self._find(profiles, name)
        if target is None:
            return False
        self._save([p for p in profiles if p.id != target.id])
        logger.info("Removed connection profile '%s'", target.name)
        return True

    def touch(self, name: str) -> None:
        """Update the last-used timestamp of a profile."""
        profiles = self._load()
        target = self._find(profiles, name)
        if target is None:
            raise ProfileError(f"Connection '{name}' not found.", profile_name=name)
        target.touch()
        self._save(profiles)

    def set_favorite(self, name: str, favorite: bool = True) -> ConnectionProfile:
        """Mark or unmark a profile as favorite."""
        profiles = self._load()
        target = self._find(profiles, name)
        if target is None:
            raise ProfileError(f"Connection '{name}' not found.", profile_name=name)
        target.is_favorite = favorite
        self._save(profiles)
        return target

    @staticmethod
    def _find(profiles: List[ConnectionProfile], name: str) -> Optional[ConnectionProfile]:
        wanted = name.strip().lower()
        for profile in profiles:
            if profile.name.lower() == wanted:
                return profile
        return None

    def _load(self) -> List[ConnectionProfile]:
        """Read and validate every profile in the file.

        Raises:
            ConfigurationError: If the file is not valid YAML or a profile is invalid.
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as file:
                raw = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in '{self.path}': {e}") from e

        if not raw:
            return []
        if not isinstance(raw, dict) or not isinstance(raw.get('connections', []), list):
            raise ConfigurationError(f"'{self.path}' must contain a 'connections' list")

        try:
            return [ConnectionProfile(**entry) for entry in raw.get('connections') or []]
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(f"Invalid connection profile in '{self.path}': {e}") from e

    def _save(self, profiles: List[ConnectionProfile]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data: Dict[str, Any] = {
            'connections': [p.model_dump(mode='json', exclude_none=True) for p in profiles],
        }
        with open(self.path, 'w', encoding='utf-8') as file:
            yaml.safe_dump(data, file, default_flow_style=False, sort_keys=False)

    def expand_env_vars(self, value: str) -> str:
        """Substitute ``${VAR}`` and ``${VAR:-default}`` references.

        Raises:
            ConfigurationError: If a required environment variable is not set.
        """
        def replace_var(match):
            var_expr = match.group(1)

            if ':-' in var_expr:
                var_name, default = var_expr.split(':-', 1)
                return os.getenv(var_name.strip(), default.strip())

            var_name = var_expr.strip()
            env_value = os.getenv(var_name)
            if env_value is None:
                raise ConfigurationError(f"Required environment variable '{var_name}' is not set")
            return env_value

        return self.ENV_VAR_PATTERN.sub(replace_var, value)
