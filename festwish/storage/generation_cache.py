"""
Generation Cache
===============

Per-day memo of generated wish text and image URLs, shared across guilds so
each festival costs one AI call and one image search per day.

Keys follow ``"<isoDate>|<kind>:<eventName>"``. Entries older than the
retention window are dropped by ``prune``.
"""

from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Optional, Union

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import StorageError, ErrorCode
from .settings_store import read_json_mapping, write_json_mapping

KIND_WISH = "wish"
KIND_WISH_FALLBACK = "wish-fallback"
KIND_IMAGE = "img"


def cache_key(iso_date: str, kind: str, name: str) -> str:
    return f"{iso_date}|{kind}:{name}"


def _key_date(key: str) -> Optional[date]:
    prefix = key.split("|", 1)[0]
    try:
        return date.fromisoformat(prefix)
    except ValueError:
        return None


def _key_kind(key: str) -> str:
    if "|" not in key:
        return "unknown"
    rest = key.split("|", 1)[1]
    return rest.split(":", 1)[0] if ":" in rest else "unknown"


class GenerationCache:
    """File-backed cache of generated festival content."""

    def __init__(self, path: Optional[str] = None, retention_days: int = 7):
        """Initialize cache.

        Args:
            path: JSON file path, or None for an in-memory cache
            retention_days: Days of entries kept by ``prune`` (0 keeps everything)
        """
        self.path = Path(path) if path else None
        self.retention_days = retention_days
        self.logger = get_logger_for_component('generation_cache')
        self._data: Dict[str, str] = {}
        self._loaded = False

    def load(self) -> "GenerationCache":
        if self.path:
            raw = read_json_mapping(self.path, self.logger)
            self._data = {k: v for k, v in raw.items() if isinstance(v, str)}
        self._loaded = True
        self.logger.debug(f"Loaded {len(self._data)} cache entries")
        return self

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def get(self, iso_date: str, kind: str, name: str) -> Optional[str]:
        self._ensure_loaded()
        return self._data.get(cache_key(iso_date, kind, name)) or None

    def set(self, iso_date: str, kind: str, name: str, value: str) -> None:
        """Store a value and persist the whole cache."""
        self._ensure_loaded()
        self._data[cache_key(iso_date, kind, name)] = value
        self.flush()

    def delete(self, iso_date: str, kind: str, name: str) -> bool:
        self._ensure_loaded()
        removed = self._data.pop(cache_key(iso_date, kind, name), None) is not None
        if removed:
            self.flush()
        return removed

    def prune(self, today: Union[date, str]) -> int:
        """Drop entries older than the retention window.

        Args:
            today: Current local date

        Returns:
            Number of entries removed
        """
        self._ensure_loaded()
        if self.retention_days <= 0:
            return 0

        if isinstance(today, str):
            today = date.fromisoformat(today)
        cutoff = today - timedelta(days=self.retention_days)

        stale = [
            key for key in self._data
            if (key_date := _key_date(key)) is None or key_date < cutoff
        ]
        for key in stale:
            del self._data[key]

        if stale:
            self.flush()
            self.logger.info(f"Pruned {len(stale)} cache entries older than {cutoff.isoformat()}")
        return len(stale)

    def flush(self) -> None:
        if not self.path:
            return
        try:
            write_json_mapping(self.path, self._data)
        except OSError as e:
            self.logger.critical(f"Failed to save generation cache to {self.path}: {e}")
            raise StorageError(
                f"Failed to save generation cache: {e}",
                path=str(self.path),
                error_code=ErrorCode.STORAGE_WRITE_ERROR,
            ) from e

    def stats(self) -> Dict[str, int]:
        """Entry counts by kind, plus the total."""
        self._ensure_loaded()
        counts: Dict[str, int] = {}
        for key in self._data:
            kind = _key_kind(key)
            counts[kind] = counts.get(kind, 0) + 1
        counts["total"] = len(self._data)
        return counts

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._data)
