"""Guild settings store backed by a flat JSON document."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..models import GuildSettings
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import StorageError, ErrorCode


def read_json_mapping(path: Path, logger) -> Dict[str, Any]:
    """Read a JSON object from disk, returning an empty mapping when unusable."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read {path}, starting empty: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: top-level JSON value is not an object")
        return {}
    return data


def write_json_mapping(path: Path, data: Dict[str, Any]) -> None:
    """Rewrite the whole mapping atomically (temp file + replace)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class GuildSettingsStore:
    """Per-guild settings with an explicit load/get/set/flush lifecycle.

    The store keeps an in-memory mirror of the JSON file. Every ``set`` writes
    the complete mapping back synchronously. With ``path=None`` the store is
    memory-only.
    """

    def __init__(self, path: Optional[str] = None):
        """Initialize the store.

        Args:
            path: JSON file path, or None for an in-memory store
        """
        self.path = Path(path) if path else None
        self.logger = get_logger_for_component('settings_store')
        self._data: Dict[str, Dict[str, Any]] = {}
        self._loaded = False

    def load(self) -> "GuildSettingsStore":
        """Load the mapping from disk (missing or corrupt files start empty)."""
        if self.path:
            self._data = read_json_mapping(self.path, self.logger)
        self._loaded = True
        self.logger.debug(f"Loaded settings for {len(self._data)} guilds")
        return self

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def get(self, guild_id: str) -> GuildSettings:
        """Return defaults merged with any stored overrides. Never raises."""
        self._ensure_loaded()
        stored = self._data.get(str(guild_id)) or {}
        if not isinstance(stored, dict):
            stored = {}

        merged = {**GuildSettings().to_storage(), **stored}
        try:
            return GuildSettings.model_validate(merged)
        except PydanticValidationError as e:
            invalid = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
            self.logger.warning(
                f"Invalid stored settings for guild {guild_id}, "
                f"using defaults for {sorted(invalid)}: {e}"
            )

        # Keep the valid overrides; only the rejected keys fall back to defaults
        cleaned = {k: v for k, v in merged.items() if k not in invalid}
        try:
            return GuildSettings.model_validate(cleaned)
        except PydanticValidationError:
            return GuildSettings()

    def set(self, guild_id: str, settings: GuildSettings) -> None:
        """Replace the guild's record and persist the full mapping.

        Raises:
            StorageError: If the file cannot be written
        """
        self._ensure_loaded()
        self._data[str(guild_id)] = settings.to_storage()
        self.flush()

    def flush(self) -> None:
        """Write the entire mapping to disk."""
        if not self.path:
            return
        try:
            write_json_mapping(self.path, self._data)
        except OSError as e:
            self.logger.critical(f"Failed to save guild settings to {self.path}: {e}")
            raise StorageError(
                f"Failed to save guild settings: {e}",
                path=str(self.path),
                error_code=ErrorCode.STORAGE_WRITE_ERROR,
            ) from e

    def guild_ids(self) -> List[str]:
        """Guild IDs that have stored settings."""
        self._ensure_loaded()
        return list(self._data.keys())

    def __contains__(self, guild_id: object) -> bool:
        self._ensure_loaded()
        return str(guild_id) in self._data

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._data)
